"""Pydantic schemas for the cricket assistant: intents, data bundles, I/O."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fantasy_cricket.schemas.cricket import (
    CatalogPlayer,
    Match,
    Scorecard,
    SquadTeam,
)


class QueryType(str, Enum):
    SQUAD_SEARCH = "squad_search"
    CURRENT_MATCHES = "current_matches"
    FANTASY_TEAM = "fantasy_team"
    PLAYER_STATS = "player_stats"
    SQUAD_INFO = "squad_info"
    FANTASY_SCORES = "fantasy_scores"
    GENERAL = "general"


class Endpoint(str, Enum):
    PLAYERS = "players"
    CURRENT_MATCHES = "currentMatches"
    MATCH_SQUAD = "match_squad"
    MATCH_SCORECARD = "match_scorecard"
    PLAYERS_INFO = "players_info"


# Endpoints that need a primary match id before they can be called.
MATCH_SCOPED_ENDPOINTS = frozenset({Endpoint.MATCH_SQUAD, Endpoint.MATCH_SCORECARD})

# Endpoints that return the player catalog.
CATALOG_ENDPOINTS = frozenset({Endpoint.PLAYERS, Endpoint.PLAYERS_INFO})


class QueryIntent(BaseModel):
    """Classification of one free-text query (stateless, never persisted)."""

    model_config = ConfigDict(frozen=True)

    query_type: QueryType
    endpoints: tuple[Endpoint, ...]
    intent: str
    requires_chaining: bool = False

    def needs(self, endpoint: Endpoint) -> bool:
        return endpoint in self.endpoints

    @property
    def needs_match_context(self) -> bool:
        return any(e in MATCH_SCOPED_ENDPOINTS for e in self.endpoints)

    def to_plan(self) -> dict:
        """Wire form echoed back to clients as ``apiPlan``."""
        return {
            "endpoints": [e.value for e in self.endpoints],
            "queryType": self.query_type.value,
            "intent": self.intent,
            "requiresChaining": self.requires_chaining,
        }


class CricketDataBundle(BaseModel):
    """Everything fetched for one query.

    Failed fetches leave their field empty; the bundle itself is always
    valid.
    """

    current_matches: list[Match] = Field(default_factory=list)
    primary_match: Match | None = None
    squad: list[SquadTeam] = Field(default_factory=list)
    scorecard: Scorecard | None = None
    players: list[CatalogPlayer] = Field(default_factory=list)
    search_name: str | None = None
    search_results: list[CatalogPlayer] = Field(default_factory=list)

    @property
    def live_matches(self) -> list[Match]:
        return [m for m in self.current_matches if m.is_live]

    @property
    def has_data(self) -> bool:
        return bool(
            self.current_matches
            or self.squad
            or (self.scorecard is not None and not self.scorecard.is_empty)
            or self.players
        )


class PlayerSuggestion(BaseModel):
    name: str
    role: str
    details: str = ""


class AssistantRequest(BaseModel):
    query: str = Field(..., min_length=1)
    request_type: str = Field(default="general", alias="requestType")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("query")
    @classmethod
    def strip_query(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("query must not be blank")
        return value


class AssistantResponse(BaseModel):
    message: str
    cricket_data: list[dict] = Field(default_factory=list, serialization_alias="cricketData")
    player_stats: list[PlayerSuggestion] | None = Field(default=None, serialization_alias="playerStats")
    has_data: bool = Field(default=False, serialization_alias="hasData")
    api_plan: dict | None = Field(default=None, serialization_alias="apiPlan")
    request_type: str = Field(default="general", serialization_alias="requestType")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
