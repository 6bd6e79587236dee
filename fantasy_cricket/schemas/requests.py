"""Request bodies accepted by the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from fantasy_cricket.config import wallet_cfg


class TeamRequest(BaseModel):
    """Selection sent by the team builder (validate and save)."""

    player_ids: list[str] = Field(default_factory=list)
    captain_id: str | None = None
    vice_captain_id: str | None = None
    match_id: str | None = None
    sides: list[str] | None = None
    name: str | None = None
    user_id: str | None = None
    rules: dict | None = None

    @field_validator("sides")
    @classmethod
    def two_sides(cls, value):
        if value is not None and len(value) != 2:
            raise ValueError("sides must name exactly two teams")
        return value


class ContestCreate(BaseModel):
    name: str = Field(..., min_length=1)
    match_id: str = Field(..., min_length=1)
    total_spots: int = Field(..., gt=0)
    entry_fee: float = Field(default=0.0, ge=0)
    prize_pool: float = Field(default=0.0, ge=0)
    first_prize: float = Field(default=0.0, ge=0)
    max_entries_per_user: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def validate_prizes(self) -> "ContestCreate":
        if self.first_prize > self.prize_pool:
            raise ValueError("first_prize cannot exceed prize_pool")
        return self


class JoinContestRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    team_id: int


class DepositRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    amount: float = Field(..., ge=wallet_cfg.min_deposit, le=wallet_cfg.max_deposit)


class WithdrawRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)


class SettleEntryRequest(BaseModel):
    points: float
    rank: int | None = Field(None, ge=1)
    winning_amount: float = Field(0.0, ge=0)
