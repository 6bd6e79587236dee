"""Keyword-priority query classification.

Each rule pairs a predicate over the lower-cased query with the intent it
produces.  Rules are tried in order and the first match wins, so queries
that mention several topics ("Is Rohit playing today?") resolve to the
earliest rule.  Reordering or adding a rule is a change to ``INTENT_RULES``
only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from fantasy_cricket.config import assistant_cfg
from fantasy_cricket.schemas.assistant import Endpoint, QueryIntent, QueryType


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern:
    # Anchored at the start of a word: "perform" matches "performed", "now" does not match "know"
    return re.compile(r"(?<![a-z])" + re.escape(keyword))


def contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(_keyword_pattern(k).search(text) for k in keywords)


def mentions_known_player(text: str) -> bool:
    return contains_any(text, assistant_cfg.known_players)


@dataclass(frozen=True)
class IntentRule:
    """One classification rule.

    Fires when the query contains any of ``keywords`` (or, with
    ``match_players``, a known player name) and none of ``unless``.
    """

    query_type: QueryType
    endpoints: tuple[Endpoint, ...]
    intent: str
    keywords: tuple[str, ...] = ()
    requires_chaining: bool = False
    match_players: bool = False
    unless: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        hit = contains_any(text, self.keywords) or (self.match_players and mentions_known_player(text))
        return hit and not contains_any(text, self.unless)

    def build(self) -> QueryIntent:
        return QueryIntent(
            query_type=self.query_type,
            endpoints=self.endpoints,
            intent=self.intent,
            requires_chaining=self.requires_chaining,
        )


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        query_type=QueryType.SQUAD_SEARCH,
        endpoints=(Endpoint.PLAYERS,),
        intent="Search for a specific player in the player database",
        keywords=assistant_cfg.squad_phrases,
        match_players=True,
    ),
    IntentRule(
        query_type=QueryType.CURRENT_MATCHES,
        endpoints=(Endpoint.CURRENT_MATCHES,),
        intent="Get current and live matches",
        keywords=assistant_cfg.live_words,
        # "fantasy team for today's match" is a team-building request
        unless=assistant_cfg.team_building_words,
    ),
    IntentRule(
        query_type=QueryType.FANTASY_TEAM,
        endpoints=(Endpoint.CURRENT_MATCHES, Endpoint.MATCH_SQUAD, Endpoint.MATCH_SCORECARD),
        intent="Suggest a fantasy team with captain and vice-captain picks",
        keywords=assistant_cfg.team_building_words,
        requires_chaining=True,
    ),
    IntentRule(
        query_type=QueryType.PLAYER_STATS,
        endpoints=(Endpoint.MATCH_SCORECARD, Endpoint.PLAYERS_INFO),
        intent="Get player performance statistics",
        keywords=assistant_cfg.performance_words,
        requires_chaining=True,
        match_players=True,
    ),
    IntentRule(
        query_type=QueryType.SQUAD_INFO,
        endpoints=(Endpoint.MATCH_SQUAD, Endpoint.PLAYERS_INFO),
        intent="List the squads for a match",
        keywords=assistant_cfg.squad_listing_words,
    ),
    IntentRule(
        query_type=QueryType.FANTASY_SCORES,
        endpoints=(Endpoint.CURRENT_MATCHES, Endpoint.MATCH_SCORECARD),
        intent="Summarize fantasy-relevant scores from a completed match",
        keywords=assistant_cfg.recent_result_words,
        requires_chaining=True,
    ),
)

GENERAL_RULE = IntentRule(
    query_type=QueryType.GENERAL,
    endpoints=(Endpoint.CURRENT_MATCHES,),
    intent="General cricket information",
)


def classify(query_text: str, rules: tuple[IntentRule, ...] = INTENT_RULES) -> QueryIntent:
    """Map a free-text query to the first matching :class:`QueryIntent`."""
    text = (query_text or "").lower()
    for rule in rules:
        if rule.matches(text):
            return rule.build()
    return GENERAL_RULE.build()
