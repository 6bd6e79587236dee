"""Fantasy roster rule constants and Pydantic models.

Encodes the team-building rules (roster size, credit budget, role quotas,
per-side cap, captaincy) as configuration, used by the roster validator,
the submission path, and the HTTP layer.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fantasy_cricket.config import roster_cfg
from fantasy_cricket.schemas.player import PlayerRole


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

class RosterRule(str, Enum):
    ROSTER_SIZE = "roster_size"
    CREDIT_BUDGET = "credit_budget"
    ROLE_COUNT = "role_count"
    SIDE_CAP = "side_cap"
    CAPTAIN_MISSING = "captain_missing"
    VICE_CAPTAIN_MISSING = "vice_captain_missing"
    CAPTAIN_CONFLICT = "captain_conflict"
    TEAM_NAME = "team_name"


class Violation(BaseModel):
    """One broken submission rule."""

    model_config = ConfigDict(frozen=True)

    rule: RosterRule
    message: str
    role: PlayerRole | None = None
    side: str | None = None


class RoleLimits(BaseModel):
    """Inclusive ``(min, max)`` count per role."""

    limits: dict[PlayerRole, tuple[int, int]]

    @model_validator(mode="after")
    def validate_bounds(self) -> "RoleLimits":
        errors: list[str] = []
        for role in PlayerRole:
            if role not in self.limits:
                errors.append(f"Missing limits for {role.value}")
                continue
            lo, hi = self.limits[role]
            if lo < 0 or hi < lo:
                errors.append(f"{role.value}: invalid bounds ({lo}, {hi})")
        if errors:
            raise ValueError("; ".join(errors))
        return self

    def minimum(self, role: PlayerRole) -> int:
        return self.limits[role][0]

    def maximum(self, role: PlayerRole) -> int:
        return self.limits[role][1]

    @classmethod
    def default(cls) -> "RoleLimits":
        return cls(limits={PlayerRole(r): bounds for r, bounds in roster_cfg.role_limits.items()})


class RosterRules(BaseModel):
    """Full rule set for one product variant."""

    model_config = ConfigDict(frozen=True)

    max_players: int = Field(default=roster_cfg.max_players, ge=1)
    max_credits: float = Field(default=roster_cfg.max_credits, gt=0)
    max_per_side: int = Field(default=roster_cfg.max_per_side, ge=1)
    role_limits: RoleLimits = Field(default_factory=RoleLimits.default)

    @model_validator(mode="after")
    def validate_consistency(self) -> "RosterRules":
        min_total = sum(lo for lo, _ in self.role_limits.limits.values())
        max_total = sum(hi for _, hi in self.role_limits.limits.values())
        if not min_total <= self.max_players <= max_total:
            raise ValueError(
                f"Role limits ({min_total}-{max_total}) cannot form a "
                f"{self.max_players}-player roster"
            )
        return self


DEFAULT_RULES = RosterRules()


def _extract_errors(exc: Exception) -> list[str]:
    """Extract human-readable error messages from a Pydantic ValidationError."""
    from pydantic import ValidationError

    if isinstance(exc, ValidationError):
        errors = []
        for err in exc.errors():
            msg = err.get("msg", "")
            # Pydantic prefixes with "Value error, "
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            loc = ".".join(str(part) for part in err.get("loc", ()))
            errors.extend(f"{loc}: {m}" if loc else m for m in msg.split("; "))
        return errors
    return [str(exc)]


def parse_rules(payload: dict | None) -> tuple[RosterRules | None, list[str]]:
    """Build a :class:`RosterRules` from a request payload.

    Returns ``(rules, [])`` or ``(None, errors)``.  ``None``/empty payloads
    give the default rule set.
    """
    if not payload:
        return DEFAULT_RULES, []
    data = dict(payload)
    limits = data.pop("role_limits", None)
    try:
        if limits is not None:
            data["role_limits"] = RoleLimits(
                limits={PlayerRole(k): tuple(v) for k, v in limits.items()}
            )
        return RosterRules(**data), []
    except Exception as e:
        return None, _extract_errors(e)
