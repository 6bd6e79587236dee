"""Candidate roster: the in-progress team a user assembles for one match.

Each toggle re-checks the single-step rules (size, budget, per-side cap,
role maximum) and rejects only that mutation.  Role minimums and captaincy
are checked at submission time, see :mod:`fantasy_cricket.roster.validator`.
"""

from __future__ import annotations

import re

from fantasy_cricket.config import roster_cfg
from fantasy_cricket.roster.errors import (
    CreditExceeded,
    PlayerNotSelected,
    RoleLimitExceeded,
    RosterFull,
    RosterLocked,
    SideImbalance,
    SubmissionInvalid,
)
from fantasy_cricket.roster.validator import validate_for_submission
from fantasy_cricket.schemas.player import Player, PlayerRole
from fantasy_cricket.schemas.roster_rules import DEFAULT_RULES, RosterRules, Violation

_TEAM_SUFFIXES = re.compile(r" Cricket| National Team| Masters| Women", re.IGNORECASE)


def normalize_team_name(name: str | None) -> str:
    if not name:
        return ""
    return _TEAM_SUFFIXES.sub("", name).strip().lower()


def teams_match(team1: str | None, team2: str | None) -> bool:
    """Loose side-name comparison ("India Women" matches "India")."""
    a, b = normalize_team_name(team1), normalize_team_name(team2)
    if not a or not b:
        return False
    return a == b or a in b or b in a


class CandidateRoster:
    """Mutable roster with derived aggregates.

    Parameters
    ----------
    match_id:
        Match the roster is built for.
    sides:
        The two match side names.  When given, a player from neither side is
        rejected and both sides appear in ``side_counts`` from the start.
    rules:
        Rule set; defaults to the standard 11-player / 100-credit rules.
    """

    def __init__(
        self,
        match_id: str | None = None,
        sides: tuple[str, str] | list[str] | None = None,
        rules: RosterRules | None = None,
    ):
        self.match_id = match_id
        self.sides: tuple[str, ...] = tuple(sides) if sides else ()
        self.rules = rules or DEFAULT_RULES
        self.captain_id: str | None = None
        self.vice_captain_id: str | None = None
        self.name: str | None = None
        self.locked = False
        self._players: dict[str, Player] = {}
        self.total_credits = 0.0
        self.role_counts: dict[PlayerRole, int] = {}
        self.side_counts: dict[str, int] = {}
        self._recompute()

    # ── Read access ────────────────────────────────────────────────────

    @property
    def players(self) -> list[Player]:
        return list(self._players.values())

    @property
    def player_ids(self) -> list[str]:
        return list(self._players)

    @property
    def remaining_credits(self) -> float:
        return self.rules.max_credits - self.total_credits

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: object) -> bool:
        if isinstance(player_id, Player):
            player_id = player_id.player_id
        return player_id in self._players

    def get(self, player_id: str) -> Player | None:
        return self._players.get(player_id)

    def side_of(self, player: Player) -> str | None:
        """Match side *player* belongs to, or ``None`` if it fits neither."""
        if not self.sides:
            return player.team
        for side in self.sides:
            if player.team == side:
                return side
        for side in self.sides:
            if teams_match(player.team, side):
                return side
        return None

    # ── Mutations ──────────────────────────────────────────────────────

    def toggle(self, player: Player, rules: RosterRules | None = None) -> bool:
        """Add *player* if absent, remove it if present.

        *rules* overrides the roster's own rule set for this one check only.

        Returns ``True`` when the player was added, ``False`` when removed.
        Raises a :class:`RosterError` subclass when the add is illegal.
        """
        self._ensure_unlocked()
        if player.player_id in self._players:
            self._remove(player.player_id)
            return False
        self._check_add(player, rules or self.rules)
        self._players[player.player_id] = player
        self._recompute()
        return True

    def set_captain(self, player_id: str) -> None:
        self._ensure_unlocked()
        self._ensure_selected(player_id, "captain")
        self.captain_id = player_id
        if self.vice_captain_id == player_id:
            self.vice_captain_id = None

    def set_vice_captain(self, player_id: str) -> None:
        self._ensure_unlocked()
        self._ensure_selected(player_id, "vice-captain")
        self.vice_captain_id = player_id
        if self.captain_id == player_id:
            self.captain_id = None

    def validate(self) -> list[Violation]:
        return validate_for_submission(self)

    def lock(self, name: str) -> None:
        """Finalize the roster under *name*; no mutation is allowed afterwards."""
        self._ensure_unlocked()
        violations = validate_for_submission(self, team_name=name)
        if violations:
            raise SubmissionInvalid(violations)
        self.name = name.strip()
        self.locked = True

    def summary(self) -> dict:
        return {
            "match_id": self.match_id,
            "player_ids": self.player_ids,
            "player_count": len(self),
            "total_credits": round(self.total_credits, 2),
            "remaining_credits": round(self.remaining_credits, 2),
            "role_counts": {r.value: n for r, n in self.role_counts.items()},
            "side_counts": dict(self.side_counts),
            "captain_id": self.captain_id,
            "vice_captain_id": self.vice_captain_id,
            "locked": self.locked,
        }

    # ── Internals ──────────────────────────────────────────────────────

    def _remove(self, player_id: str) -> None:
        del self._players[player_id]
        if self.captain_id == player_id:
            self.captain_id = None
        if self.vice_captain_id == player_id:
            self.vice_captain_id = None
        self._recompute()

    def _check_add(self, player: Player, rules: RosterRules) -> None:
        remaining = rules.max_credits - self.total_credits

        if len(self._players) >= rules.max_players:
            raise RosterFull(
                f"You can select maximum {rules.max_players} players",
                max_players=rules.max_players,
            )

        new_total = self.total_credits + player.credits
        if new_total > rules.max_credits + roster_cfg.credit_tolerance:
            raise CreditExceeded(
                f"Not enough credits left ({remaining:.1f})",
                remaining_credits=round(remaining, 2),
                player_credits=player.credits,
            )

        side = self.side_of(player)
        if side is None:
            raise SideImbalance(
                f"{player.name} ({player.team}) does not play in this match",
                side=player.team,
            )
        if self.side_counts.get(side, 0) + 1 > rules.max_per_side:
            raise SideImbalance(
                f"Maximum {rules.max_per_side} players allowed from one team",
                side=side,
                max_per_side=rules.max_per_side,
            )

        role_max = rules.role_limits.maximum(player.role)
        if self.role_counts.get(player.role, 0) + 1 > role_max:
            raise RoleLimitExceeded(
                f"You've reached the maximum limit for {player.role.value}s ({role_max})",
                role=player.role.value,
                max_count=role_max,
            )

    def _ensure_selected(self, player_id: str, slot: str) -> None:
        if player_id not in self._players:
            raise PlayerNotSelected(
                f"Player {player_id} must be selected before being made {slot}",
                player_id=player_id,
            )

    def _ensure_unlocked(self) -> None:
        if self.locked:
            raise RosterLocked("Team is locked and can no longer be changed")

    def _recompute(self) -> None:
        self.total_credits = sum(p.credits for p in self._players.values())
        self.role_counts = {role: 0 for role in PlayerRole}
        self.side_counts = {side: 0 for side in self.sides}
        for p in self._players.values():
            self.role_counts[p.role] += 1
            side = self.side_of(p) or p.team
            self.side_counts[side] = self.side_counts.get(side, 0) + 1


# ---------------------------------------------------------------------------
# Functional API
# ---------------------------------------------------------------------------

def toggle_select(
    roster: CandidateRoster,
    player: Player,
    rules: RosterRules | None = None,
) -> bool:
    """Toggle *player* in *roster*, optionally checked against a different rule set.

    *rules* applies to this toggle only; the roster keeps its own rules.
    """
    return roster.toggle(player, rules=rules)


def set_captain(roster: CandidateRoster, player_id: str) -> None:
    roster.set_captain(player_id)


def set_vice_captain(roster: CandidateRoster, player_id: str) -> None:
    roster.set_vice_captain(player_id)


def lock(roster: CandidateRoster, name: str) -> None:
    roster.lock(name)
