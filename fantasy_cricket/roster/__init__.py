"""Team composition: candidate roster and submission checks."""

from fantasy_cricket.roster.errors import (
    CreditExceeded,
    PlayerNotSelected,
    RoleLimitExceeded,
    RosterError,
    RosterFull,
    RosterLocked,
    SideImbalance,
    SubmissionInvalid,
    UnknownPlayer,
)
from fantasy_cricket.roster.roster import (
    CandidateRoster,
    lock,
    normalize_team_name,
    set_captain,
    set_vice_captain,
    teams_match,
    toggle_select,
)
from fantasy_cricket.roster.submission import build_roster, submit_team
from fantasy_cricket.roster.validator import is_submittable, validate_for_submission

__all__ = [
    "CandidateRoster",
    "toggle_select",
    "set_captain",
    "set_vice_captain",
    "lock",
    "validate_for_submission",
    "is_submittable",
    "build_roster",
    "submit_team",
    "normalize_team_name",
    "teams_match",
    # Errors
    "RosterError",
    "RosterFull",
    "CreditExceeded",
    "SideImbalance",
    "RoleLimitExceeded",
    "PlayerNotSelected",
    "RosterLocked",
    "SubmissionInvalid",
    "UnknownPlayer",
]
