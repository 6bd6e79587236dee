"""Query router: classify → fetch → (chain) → respond.

Phases per query:
    IDLE → CLASSIFYING → FETCHING → (CHAINING) → RESPONDING → IDLE

A router is shared between request threads, so phase state lives in a
per-query :class:`PhaseTracker`, never on the router itself.
"""

from __future__ import annotations

from enum import Enum

from fantasy_cricket.assistant.cricket_api import CricketApiClient
from fantasy_cricket.assistant.executor import CricketDataSource, execute
from fantasy_cricket.assistant.intents import classify
from fantasy_cricket.assistant.llm import ChatClient, OpenAIChatClient
from fantasy_cricket.assistant.responder import LLMResponder, Responder, TemplateResponder
from fantasy_cricket.config import AssistantSettings, assistant_cfg
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.schemas.assistant import AssistantResponse

logger = get_logger(__name__)

APOLOGY = "I encountered an issue processing your request. Please try again."


class RouterPhase(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    FETCHING = "fetching"
    CHAINING = "chaining"
    RESPONDING = "responding"


# Valid (from -> {to, ...}) transitions.  Any phase may drop back to IDLE on error.
_TRANSITIONS: dict[RouterPhase, set[RouterPhase]] = {
    RouterPhase.IDLE: {RouterPhase.CLASSIFYING},
    RouterPhase.CLASSIFYING: {RouterPhase.FETCHING, RouterPhase.IDLE},
    RouterPhase.FETCHING: {RouterPhase.CHAINING, RouterPhase.RESPONDING, RouterPhase.IDLE},
    RouterPhase.CHAINING: {RouterPhase.CHAINING, RouterPhase.RESPONDING, RouterPhase.IDLE},
    RouterPhase.RESPONDING: {RouterPhase.IDLE},
}


def can_transition(from_phase: RouterPhase, to_phase: RouterPhase) -> bool:
    """Return True if *from_phase* → *to_phase* is a valid transition."""
    return to_phase in _TRANSITIONS.get(from_phase, set())


class PhaseTracker:
    """Phase of one query, with its history."""

    def __init__(self, query: str):
        self.query = query
        self.phase = RouterPhase.IDLE
        self.history: list[RouterPhase] = [RouterPhase.IDLE]

    def advance(self, to_phase: RouterPhase) -> None:
        if not can_transition(self.phase, to_phase):
            raise RuntimeError(f"Invalid router transition {self.phase.value} -> {to_phase.value}")
        logger.debug("Query %r: %s -> %s", self.query[:40], self.phase.value, to_phase.value)
        self.phase = to_phase
        self.history.append(to_phase)


class QueryRouter:
    """Answers free-text cricket questions.

    Parameters
    ----------
    settings:
        API keys and model name.  Nothing is read from the environment here.
    client:
        Cricket data source; defaults to a :class:`CricketApiClient` built
        from ``settings.cricket_api_key``.
    chat_client:
        LLM client; defaults to OpenAI when ``settings.llm_api_key`` is set,
        otherwise answers come from templates only.
    """

    def __init__(
        self,
        settings: AssistantSettings | None = None,
        client: CricketDataSource | None = None,
        chat_client: ChatClient | None = None,
    ):
        self.settings = settings or AssistantSettings()
        self.client = client or CricketApiClient(self.settings.cricket_api_key)
        if chat_client is None and self.settings.llm_enabled:
            chat_client = OpenAIChatClient(self.settings.llm_api_key, model=self.settings.llm_model)
        self.responder: Responder = LLMResponder(chat_client) if chat_client else TemplateResponder()

    def answer(self, query: str, request_type: str = "general") -> AssistantResponse:
        response, _ = self.answer_with_trace(query, request_type)
        return response

    def answer_with_trace(
        self, query: str, request_type: str = "general",
    ) -> tuple[AssistantResponse, list[RouterPhase]]:
        """Like :meth:`answer`, also returning the phases the query went through."""
        tracker = PhaseTracker(query)
        logger.info("Processing %s query: %s", request_type, query)
        try:
            tracker.advance(RouterPhase.CLASSIFYING)
            intent = classify(query)
            logger.info("Query classified as %s (%s)", intent.query_type.value, intent.intent)

            tracker.advance(RouterPhase.FETCHING)
            bundle = execute(
                intent, query, self.client,
                on_chain=lambda: tracker.advance(RouterPhase.CHAINING),
            )

            tracker.advance(RouterPhase.RESPONDING)
            reply = self.responder.respond(intent, bundle, query)
        except Exception:
            logger.exception("Failed to answer query %r", query)
            if tracker.phase is not RouterPhase.IDLE:
                tracker.advance(RouterPhase.IDLE)
            return AssistantResponse(message=APOLOGY, request_type=request_type), tracker.history

        tracker.advance(RouterPhase.IDLE)
        matches = bundle.current_matches[: assistant_cfg.max_response_matches]
        response = AssistantResponse(
            message=reply.message,
            cricket_data=[m.model_dump(by_alias=True, exclude_none=True) for m in matches],
            player_stats=reply.suggestions,
            has_data=bundle.has_data,
            api_plan=intent.to_plan(),
            request_type=request_type,
        )
        return response, tracker.history
