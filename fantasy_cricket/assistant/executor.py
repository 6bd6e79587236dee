"""Execute a query plan against the cricket data API.

Every upstream call is wrapped on its own: a failure leaves that part of
the bundle empty, logs a warning, and the rest of the plan carries on.
Independent fetches run concurrently on a small thread pool; fetches
that need the primary match id run after the match list, one by one.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Protocol, TypeVar

from fantasy_cricket.config import assistant_cfg, cricket_api_cfg
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.schemas.assistant import (
    CATALOG_ENDPOINTS,
    CricketDataBundle,
    Endpoint,
    QueryIntent,
    QueryType,
)
from fantasy_cricket.schemas.cricket import CatalogPlayer, Match, Scorecard, SquadTeam

logger = get_logger(__name__)

T = TypeVar("T")


class CricketDataSource(Protocol):
    def get_current_matches(self) -> list[Match]: ...
    def get_match_squad(self, match_id: str) -> list[SquadTeam]: ...
    def get_match_scorecard(self, match_id: str) -> Scorecard: ...
    def search_players(self, search: str | None = None) -> list[CatalogPlayer]: ...


def safe_fetch(label: str, fn: Callable[[], T], default: T) -> T:
    """Run *fn*; if it raises, log a warning and return *default*."""
    try:
        return fn()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Could not fetch %s: %s", label, exc)
        return default


# ── Player name extraction ─────────────────────────────────────────────

_TOKEN_RE = re.compile(r"[a-z][a-z'\-]*")


def extract_player_name(query_text: str) -> str | None:
    """Best guess at the player a squad question is about.

    First known name present in the text, else the word after "is", else
    the word before "in".
    """
    text = (query_text or "").lower()
    for name in assistant_cfg.known_players:
        if re.search(r"(?<![a-z])" + re.escape(name), text):
            return name

    tokens = _TOKEN_RE.findall(text)
    if "is" in tokens:
        i = tokens.index("is")
        if i + 1 < len(tokens):
            return tokens[i + 1]
    if "in" in tokens:
        i = tokens.index("in")
        if i > 0:
            return tokens[i - 1]
    return None


def filter_players(players: list[CatalogPlayer], name: str | None) -> list[CatalogPlayer]:
    if not name:
        return []
    needle = name.lower()
    return [p for p in players if needle in p.name.lower()]


def pick_primary_match(matches: list[Match]) -> Match | None:
    """First live/started match, else the first match listed."""
    for m in matches:
        if m.is_live or m.match_started:
            return m
    return matches[0] if matches else None


# ── Execute ─────────────────────────────────────────────────────────────

def execute(
    intent: QueryIntent,
    query_text: str,
    client: CricketDataSource,
    on_chain: Callable[[], None] | None = None,
) -> CricketDataBundle:
    """Fetch everything *intent* asks for.  Never raises on upstream failure.

    For chained intents, *on_chain* is called once before the match-scoped
    fetches start, so the caller can track the phase.
    """
    bundle = CricketDataBundle()

    if intent.query_type == QueryType.SQUAD_SEARCH:
        bundle.players = safe_fetch("player catalog", client.search_players, [])
        bundle.search_name = extract_player_name(query_text)
        bundle.search_results = filter_players(bundle.players, bundle.search_name)
        return bundle

    need_matches = intent.needs(Endpoint.CURRENT_MATCHES) or intent.needs_match_context
    need_catalog = any(intent.needs(e) for e in CATALOG_ENDPOINTS)

    # Independent fetches
    if need_matches and need_catalog:
        with ThreadPoolExecutor(max_workers=cricket_api_cfg.fetch_workers) as pool:
            matches_future = pool.submit(safe_fetch, "current matches", client.get_current_matches, [])
            players_future = pool.submit(safe_fetch, "player catalog", client.search_players, [])
            bundle.current_matches = matches_future.result()
            bundle.players = players_future.result()
    elif need_matches:
        bundle.current_matches = safe_fetch("current matches", client.get_current_matches, [])
    elif need_catalog:
        bundle.players = safe_fetch("player catalog", client.search_players, [])

    if not intent.needs_match_context:
        return bundle

    # Chained fetches
    primary = pick_primary_match(bundle.current_matches)
    bundle.primary_match = primary
    if primary is None:
        logger.info("No primary match available; skipping match-scoped fetches")
        return bundle

    if on_chain is not None and intent.requires_chaining:
        on_chain()
    if intent.needs(Endpoint.MATCH_SQUAD):
        bundle.squad = safe_fetch(
            f"squad for {primary.id}", lambda: client.get_match_squad(primary.id), [],
        )
    if intent.needs(Endpoint.MATCH_SCORECARD):
        bundle.scorecard = safe_fetch(
            f"scorecard for {primary.id}", lambda: client.get_match_scorecard(primary.id), None,
        )
    return bundle
