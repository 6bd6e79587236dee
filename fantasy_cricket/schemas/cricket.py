"""Pydantic schemas for cricket data API payloads (cricapi.com v1).

Upstream keys are camelCase; models accept both the wire name and the
snake_case field name and ignore anything they do not know about.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fantasy_cricket.config import cricket_api_cfg


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TeamInfo(_Wire):
    name: str
    shortname: str | None = None
    img: str | None = None


class Score(_Wire):
    r: int | None = None
    w: int | None = None
    o: float | None = None
    inning: str | None = None

    def line(self) -> str:
        """``"India Inning 1: 245/6 (45.2 ov)"``"""
        runs = "-" if self.r is None else self.r
        wkts = "-" if self.w is None else self.w
        overs = f" ({self.o} ov)" if self.o is not None else ""
        return f"{self.inning or 'Innings'}: {runs}/{wkts}{overs}"


class Match(_Wire):
    id: str
    name: str = ""
    status: str = ""
    venue: str | None = None
    date: str | None = None
    date_time_gmt: str | None = Field(default=None, alias="dateTimeGMT")
    match_type: str | None = Field(default=None, alias="matchType")
    teams: list[str] = Field(default_factory=list)
    team_info: list[TeamInfo] = Field(default_factory=list, alias="teamInfo")
    score: list[Score] = Field(default_factory=list)
    match_started: bool = Field(default=False, alias="matchStarted")
    match_ended: bool = Field(default=False, alias="matchEnded")

    @field_validator("teams", "team_info", "score", mode="before")
    @classmethod
    def none_to_list(cls, value):
        return value or []

    @property
    def is_live(self) -> bool:
        if self.match_started and not self.match_ended:
            return True
        return "live" in self.status.lower()

    @property
    def is_upcoming(self) -> bool:
        return not self.match_started and not self.match_ended

    @property
    def title(self) -> str:
        """``"India vs Australia"`` or the upstream match name."""
        if self.teams:
            return " vs ".join(self.teams)
        return self.name or "Teams TBD"

    def ensure_team_info(self) -> "Match":
        """Return a copy with ``team_info`` synthesized from ``teams`` when missing."""
        if self.team_info or not self.teams:
            return self
        info = [
            TeamInfo(
                name=team,
                shortname=team[:3].upper(),
                img=cricket_api_cfg.placeholder_logo,
            )
            for team in self.teams
        ]
        return self.model_copy(update={"team_info": info})


class PersonRef(_Wire):
    id: str | None = None
    name: str = ""


def _coerce_person(value):
    if isinstance(value, str):
        return {"name": value}
    return value


class BattingEntry(_Wire):
    batsman: PersonRef
    dismissal: str | None = Field(default=None, alias="dismissal-text")
    r: int = 0
    b: int = 0
    fours: int = Field(default=0, alias="4s")
    sixes: int = Field(default=0, alias="6s")
    sr: float | None = None

    @field_validator("batsman", mode="before")
    @classmethod
    def coerce_batsman(cls, value):
        return _coerce_person(value)


class BowlingEntry(_Wire):
    bowler: PersonRef
    o: float = 0.0
    m: int = 0
    r: int = 0
    w: int = 0
    eco: float | None = None

    @field_validator("bowler", mode="before")
    @classmethod
    def coerce_bowler(cls, value):
        return _coerce_person(value)


class Innings(_Wire):
    inning: str = ""
    batting: list[BattingEntry] = Field(default_factory=list)
    bowling: list[BowlingEntry] = Field(default_factory=list)

    def top_batter(self) -> BattingEntry | None:
        return max(self.batting, key=lambda e: (e.r, -e.b), default=None)

    def top_bowler(self) -> BowlingEntry | None:
        return max(self.bowling, key=lambda e: (e.w, -e.r), default=None)


class Scorecard(_Wire):
    match_id: str | None = Field(default=None, alias="id")
    name: str = ""
    status: str = ""
    venue: str | None = None
    score: list[Score] = Field(default_factory=list)
    innings: list[Innings] = Field(default_factory=list, alias="scorecard")

    @property
    def is_empty(self) -> bool:
        return not self.innings and not self.score


class SquadPlayer(_Wire):
    id: str | None = None
    name: str
    role: str | None = None
    batting_style: str | None = Field(default=None, alias="battingStyle")
    bowling_style: str | None = Field(default=None, alias="bowlingStyle")
    country: str | None = None


class SquadTeam(_Wire):
    team_name: str = Field(..., alias="teamName")
    shortname: str | None = None
    players: list[SquadPlayer] = Field(default_factory=list)


class CatalogPlayer(_Wire):
    id: str | None = None
    name: str
    country: str | None = None
