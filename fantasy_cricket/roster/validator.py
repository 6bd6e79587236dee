"""Submission-time roster validation.

Collects every broken rule instead of stopping at the first one, so the
caller can show the full gap between the current roster and a valid team.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fantasy_cricket.config import roster_cfg
from fantasy_cricket.schemas.player import PlayerRole
from fantasy_cricket.schemas.roster_rules import RosterRule, RosterRules, Violation

if TYPE_CHECKING:
    from fantasy_cricket.roster.roster import CandidateRoster


def validate_for_submission(
    roster: "CandidateRoster",
    rules: RosterRules | None = None,
    team_name: str | None = None,
) -> list[Violation]:
    """Validate *roster* against *rules* (default: the roster's own rules).

    Returns an empty list if the roster can be submitted, or one
    :class:`Violation` per broken rule.  *team_name* is only checked when
    given (the lock step passes it).
    """
    rules = rules or roster.rules
    violations: list[Violation] = []
    players = roster.players

    # --- Roster size ---
    if len(players) != rules.max_players:
        violations.append(Violation(
            rule=RosterRule.ROSTER_SIZE,
            message=f"Select exactly {rules.max_players} players, got {len(players)}",
        ))

    # --- Budget ---
    total = sum(p.credits for p in players)
    if total > rules.max_credits + roster_cfg.credit_tolerance:
        violations.append(Violation(
            rule=RosterRule.CREDIT_BUDGET,
            message=f"Over budget: {total:.1f} > {rules.max_credits:.1f} credits",
        ))

    # --- Role quotas ---
    role_counts: dict[PlayerRole, int] = {role: 0 for role in PlayerRole}
    for p in players:
        role_counts[p.role] += 1
    for role in PlayerRole:
        lo, hi = rules.role_limits.limits[role]
        actual = role_counts[role]
        if actual < lo or actual > hi:
            bounds = str(lo) if lo == hi else f"{lo}-{hi}"
            violations.append(Violation(
                rule=RosterRule.ROLE_COUNT,
                role=role,
                message=f"{role.value}: need {bounds}, got {actual}",
            ))

    # --- Per-side cap ---
    side_counts: dict[str, int] = {}
    for p in players:
        side = roster.side_of(p) or p.team
        side_counts[side] = side_counts.get(side, 0) + 1
    for side, count in side_counts.items():
        if count > rules.max_per_side:
            violations.append(Violation(
                rule=RosterRule.SIDE_CAP,
                side=side,
                message=f"{side}: {count} players (max {rules.max_per_side})",
            ))

    # --- Captaincy ---
    selected = {p.player_id for p in players}
    captain_id, vice_id = roster.captain_id, roster.vice_captain_id
    if captain_id is None or captain_id not in selected:
        violations.append(Violation(
            rule=RosterRule.CAPTAIN_MISSING,
            message="Choose a captain from your selected players",
        ))
    if vice_id is None or vice_id not in selected:
        violations.append(Violation(
            rule=RosterRule.VICE_CAPTAIN_MISSING,
            message="Choose a vice-captain from your selected players",
        ))
    if captain_id is not None and captain_id == vice_id:
        violations.append(Violation(
            rule=RosterRule.CAPTAIN_CONFLICT,
            message="Captain and vice-captain must be different players",
        ))

    # --- Team name (lock step only) ---
    if team_name is not None and not team_name.strip():
        violations.append(Violation(
            rule=RosterRule.TEAM_NAME,
            message="Please give your team a name",
        ))

    return violations


def is_submittable(roster: "CandidateRoster", rules: RosterRules | None = None) -> bool:
    return not validate_for_submission(roster, rules)
