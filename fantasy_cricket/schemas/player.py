"""Pydantic schemas for cricket players and saved fantasy teams."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PlayerRole(str, Enum):
    BATSMAN = "batsman"
    BOWLER = "bowler"
    ALLROUNDER = "allrounder"
    WICKETKEEPER = "wicketkeeper"


class PlayerStats(BaseModel):
    """Role-dependent career numbers; every field is optional."""

    matches: int | None = None
    runs: int | None = None
    wickets: int | None = None
    economy: float | None = None
    average: float | None = None
    strike_rate: float | None = None


class Player(BaseModel):
    """A real player eligible for a match roster.

    Frozen: the catalog entry does not change while a roster is built.
    """

    model_config = ConfigDict(frozen=True)

    player_id: str
    name: str
    team: str  # Match side the player turns out for
    role: PlayerRole
    credits: float = Field(..., gt=0)
    image_url: str | None = None
    stats: PlayerStats | None = None

    def headline_stat(self) -> str:
        """Short stat line shown next to the player in the team builder."""
        stats = self.stats or PlayerStats()
        if self.role is PlayerRole.BATSMAN:
            return f"{stats.average if stats.average is not None else '-'} Avg"
        if self.role is PlayerRole.BOWLER:
            return f"{stats.wickets if stats.wickets is not None else '-'} Wkts"
        return f"{stats.runs if stats.runs is not None else '-'} Runs"


class FantasyTeam(BaseModel):
    """A submitted (locked) fantasy team."""

    team_id: int | None = None
    user_id: str
    name: str = Field(..., min_length=1)
    match_id: str
    captain_id: str
    vice_captain_id: str
    players: list[Player] = Field(default_factory=list)
    total_credits: float = 0.0
    is_locked: bool = True

    @property
    def player_ids(self) -> list[str]:
        return [p.player_id for p in self.players]
