"""Roster mutation and submission errors.

Every error is recoverable: the mutation is rejected and the roster is left
exactly as it was.  ``code`` is the stable identifier the HTTP layer returns.
"""

from __future__ import annotations

from fantasy_cricket.schemas.roster_rules import Violation


class RosterError(Exception):
    code = "roster_error"

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code, **self.context}


class RosterFull(RosterError):
    code = "roster_full"


class CreditExceeded(RosterError):
    code = "credit_exceeded"


class SideImbalance(RosterError):
    code = "side_imbalance"


class RoleLimitExceeded(RosterError):
    code = "role_limit_exceeded"


class PlayerNotSelected(RosterError):
    code = "player_not_selected"


class RosterLocked(RosterError):
    code = "roster_locked"


class SubmissionInvalid(RosterError):
    code = "submission_invalid"

    def __init__(self, violations: list[Violation]):
        super().__init__(
            f"Team is not ready: {len(violations)} rule(s) broken",
        )
        self.violations = violations

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["violations"] = [v.model_dump(mode="json") for v in self.violations]
        return data


class UnknownPlayer(RosterError):
    code = "unknown_player"
