"""Replay a client selection into a roster, and persist a finished team."""

from __future__ import annotations

from typing import Iterable

from fantasy_cricket.db.repositories import TeamRepository
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.roster.errors import RosterError, UnknownPlayer
from fantasy_cricket.roster.roster import CandidateRoster
from fantasy_cricket.schemas.player import FantasyTeam, Player
from fantasy_cricket.schemas.roster_rules import RosterRules

logger = get_logger(__name__)


def build_roster(
    players: dict[str, Player] | Iterable[Player],
    selection_ids: Iterable[str],
    captain_id: str | None = None,
    vice_captain_id: str | None = None,
    sides: tuple[str, str] | list[str] | None = None,
    rules: RosterRules | None = None,
    match_id: str | None = None,
) -> tuple[CandidateRoster, list[tuple[str, RosterError]]]:
    """Toggle each selected id into a fresh roster, in order.

    Returns the roster and one ``(player_id, error)`` pair per rejected
    step.  Rejections do not stop the replay.
    """
    pool = players if isinstance(players, dict) else {p.player_id: p for p in players}
    roster = CandidateRoster(match_id=match_id, sides=sides, rules=rules)
    rejected: list[tuple[str, RosterError]] = []

    for pid in selection_ids:
        player = pool.get(pid)
        if player is None:
            rejected.append((pid, UnknownPlayer(f"Unknown player {pid}", player_id=pid)))
            continue
        if pid in roster:
            # Duplicate ids in a selection would toggle the player back out
            continue
        try:
            roster.toggle(player)
        except RosterError as e:
            rejected.append((pid, e))

    for pid, setter in ((captain_id, roster.set_captain), (vice_captain_id, roster.set_vice_captain)):
        if pid is None:
            continue
        try:
            setter(pid)
        except RosterError as e:
            rejected.append((pid, e))

    return roster, rejected


def submit_team(
    roster: CandidateRoster,
    *,
    name: str,
    user_id: str,
    match_id: str | None = None,
    repo: TeamRepository,
) -> int:
    """Lock *roster* under *name* and save it.  Returns the new team id.

    Raises :class:`SubmissionInvalid` when the roster breaks any rule.  The
    team row and its player rows are written in one transaction; if the
    write fails the roster is unlocked again so the user can resubmit.
    """
    match_id = match_id or roster.match_id
    if not match_id:
        raise ValueError("match_id is required to save a team")

    roster.lock(name)
    team = FantasyTeam(
        user_id=user_id,
        name=roster.name,
        match_id=match_id,
        captain_id=roster.captain_id,
        vice_captain_id=roster.vice_captain_id,
        players=roster.players,
        total_credits=round(roster.total_credits, 2),
        is_locked=True,
    )
    try:
        team_id = repo.create_team_with_players(team)
    except Exception:
        logger.exception("Failed to save team %r for user %s", name, user_id)
        roster.locked = False
        raise
    return team_id
