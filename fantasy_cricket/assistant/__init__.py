"""Cricket assistant: query classification and answers."""

from fantasy_cricket.assistant.cricket_api import (
    CricketApiClient,
    UpstreamDataError,
    summarize_match,
    summarize_matches,
)
from fantasy_cricket.assistant.executor import execute, extract_player_name
from fantasy_cricket.assistant.intents import INTENT_RULES, IntentRule, classify
from fantasy_cricket.assistant.llm import ChatClient, LLMError, OpenAIChatClient
from fantasy_cricket.assistant.responder import (
    LLMResponder,
    RegexSuggestionExtractor,
    SuggestionExtractor,
    TemplateResponder,
    summarize_bundle,
)
from fantasy_cricket.assistant.router import QueryRouter, RouterPhase

__all__ = [
    "QueryRouter",
    "RouterPhase",
    "classify",
    "INTENT_RULES",
    "IntentRule",
    "execute",
    "extract_player_name",
    "TemplateResponder",
    "LLMResponder",
    "SuggestionExtractor",
    "RegexSuggestionExtractor",
    "summarize_bundle",
    "CricketApiClient",
    "UpstreamDataError",
    "summarize_match",
    "summarize_matches",
    "ChatClient",
    "OpenAIChatClient",
    "LLMError",
]
