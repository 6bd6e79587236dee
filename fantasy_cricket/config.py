"""Central configuration: every magic number in one place."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Roster rules
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class RosterConfig:
    max_players: int = 11
    max_credits: float = 100.0
    max_per_side: int = 7
    credit_tolerance: float = 1e-6  # Float slack when comparing against the budget
    role_limits: dict[str, tuple[int, int]] = field(default_factory=lambda: {
        "wicketkeeper": (1, 1),
        "batsman": (3, 5),
        "bowler": (3, 5),
        "allrounder": (1, 3),
    })


# ---------------------------------------------------------------------------
# Cricket data API (cricapi.com v1)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CricketApiConfig:
    base_url: str = "https://api.cricapi.com/v1"
    timeout: int = 15               # seconds
    fetch_workers: int = 3          # Concurrent independent fetches per query
    matches_per_page: int = 5
    placeholder_logo: str = "https://h.cricapi.com/img/icon512.png"


# ---------------------------------------------------------------------------
# LLM
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class LLMConfig:
    model: str = "gpt-3.5-turbo"
    max_tokens: int = 300
    temperature: float = 0.7
    prompt_max_matches: int = 3
    prompt_max_squad: int = 10
    prompt_max_search_results: int = 5


# ---------------------------------------------------------------------------
# Query intent keywords
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AssistantConfig:
    known_players: tuple[str, ...] = (
        "rohit", "virat", "kohli", "bumrah", "dhoni", "gill", "pant",
        "hardik", "jadeja", "babar", "stokes", "buttler", "warner",
        "cummins", "starc", "williamson", "rashid", "de kock", "boult",
    )
    squad_phrases: tuple[str, ...] = ("in the squad", "in squad", "selected", "playing")
    live_words: tuple[str, ...] = ("today", "now", "live", "happening", "matches", "current")
    team_building_words: tuple[str, ...] = (
        "suggest", "fantasy team", "captain", "vice captain", "pick", "recommend",
    )
    performance_words: tuple[str, ...] = ("perform", "stats", "points", "last match")
    squad_listing_words: tuple[str, ...] = ("squad", "team players", "who are", "players in")
    recent_result_words: tuple[str, ...] = (
        "fantasy score", "points breakdown", "yesterday", "last game",
    )
    max_response_matches: int = 10  # Matches echoed back in the HTTP response
    max_search_names: int = 5


# ---------------------------------------------------------------------------
# Wallet / contests
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class WalletConfig:
    currency_symbol: str = "₹"
    min_deposit: float = 1.0
    max_deposit: float = 100_000.0


# ---------------------------------------------------------------------------
# Runtime secrets (injected, never read at import time)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AssistantSettings:
    """Keys and model selection passed into :class:`QueryRouter`."""

    cricket_api_key: str | None = None
    llm_api_key: str | None = None
    llm_model: str = "gpt-3.5-turbo"

    @property
    def llm_enabled(self) -> bool:
        return bool(self.llm_api_key)

    @classmethod
    def from_env(cls) -> "AssistantSettings":
        return cls(
            cricket_api_key=os.environ.get("CRICAPI_KEY") or None,
            llm_api_key=os.environ.get("OPENAI_API_KEY") or None,
            llm_model=os.environ.get("OPENAI_MODEL", "gpt-3.5-turbo"),
        )


# ---------------------------------------------------------------------------
# Singleton instances (importable as `from fantasy_cricket.config import roster_cfg, ...`)
# ---------------------------------------------------------------------------
roster_cfg = RosterConfig()
cricket_api_cfg = CricketApiConfig()
llm_cfg = LLMConfig()
assistant_cfg = AssistantConfig()
wallet_cfg = WalletConfig()
