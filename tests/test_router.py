"""End-to-end query routing with injected collaborators."""

import pytest

from conftest import FakeChatClient, FakeCricketClient
from fantasy_cricket.assistant.executor import execute
from fantasy_cricket.assistant.intents import classify
from fantasy_cricket.assistant.responder import LLMResponder, TemplateResponder
from fantasy_cricket.assistant.router import (
    APOLOGY,
    PhaseTracker,
    QueryRouter,
    RouterPhase,
    can_transition,
)
from fantasy_cricket.config import AssistantSettings


class TestPhases:

    def test_valid_transitions(self):
        assert can_transition(RouterPhase.IDLE, RouterPhase.CLASSIFYING)
        assert can_transition(RouterPhase.FETCHING, RouterPhase.CHAINING)
        assert can_transition(RouterPhase.FETCHING, RouterPhase.RESPONDING)
        assert can_transition(RouterPhase.RESPONDING, RouterPhase.IDLE)

    def test_invalid_transitions(self):
        assert not can_transition(RouterPhase.IDLE, RouterPhase.RESPONDING)
        assert not can_transition(RouterPhase.RESPONDING, RouterPhase.FETCHING)

    def test_tracker_rejects_skips(self):
        tracker = PhaseTracker("q")
        with pytest.raises(RuntimeError):
            tracker.advance(RouterPhase.FETCHING)

    def test_unchained_query_phases(self, fake_client):
        router = QueryRouter(AssistantSettings(), client=fake_client)
        _, phases = router.answer_with_trace("what matches are live today")
        assert phases == [
            RouterPhase.IDLE, RouterPhase.CLASSIFYING, RouterPhase.FETCHING,
            RouterPhase.RESPONDING, RouterPhase.IDLE,
        ]

    def test_chained_query_phases(self, fake_client):
        router = QueryRouter(AssistantSettings(), client=fake_client)
        _, phases = router.answer_with_trace("suggest a fantasy team for today's match")
        assert RouterPhase.CHAINING in phases
        assert phases[-1] == RouterPhase.IDLE


class TestQueryRouter:

    def test_template_mode_without_llm_key(self, fake_client):
        router = QueryRouter(AssistantSettings(cricket_api_key="k"), client=fake_client)
        assert isinstance(router.responder, TemplateResponder)

    def test_llm_mode_with_chat_client(self, fake_client):
        router = QueryRouter(AssistantSettings(), client=fake_client, chat_client=FakeChatClient())
        assert isinstance(router.responder, LLMResponder)

    def test_response_shape(self, fake_client):
        router = QueryRouter(AssistantSettings(), client=fake_client)
        wire = router.answer("what matches are live today", "chat").to_wire()
        assert wire["requestType"] == "chat"
        assert wire["hasData"] is True
        assert wire["apiPlan"]["queryType"] == "current_matches"
        assert [m["id"] for m in wire["cricketData"]] == ["m1", "m2"]
        assert wire["cricketData"][0]["teamInfo"][0]["shortname"] == "IND"
        assert "Wankhede Stadium, Mumbai" in wire["message"]
        assert "playerStats" not in wire

    def test_cricket_data_capped_at_ten(self, live_match_data):
        matches = [{**live_match_data, "id": f"m{i}"} for i in range(14)]
        router = QueryRouter(AssistantSettings(), client=FakeCricketClient(matches=matches))
        wire = router.answer("live").to_wire()
        assert len(wire["cricketData"]) == 10

    def test_round_trip_with_every_upstream_failing(self, failing_client):
        router = QueryRouter(AssistantSettings(), client=failing_client)
        response = router.answer("what matches are live today")
        assert response.message.strip()
        assert response.has_data is False
        assert response.cricket_data == []

    @pytest.mark.parametrize("query", [
        "Is Rohit Sharma in the squad for today's match?",
        "suggest a fantasy team for today's match",
        "how did Bumrah perform",
        "who are the players in the squad list",
        "fantasy score from yesterday",
        "hello there",
    ])
    def test_every_intent_answers_when_upstream_is_down(self, failing_client, query):
        router = QueryRouter(AssistantSettings(), client=failing_client, chat_client=FakeChatClient(error=RuntimeError("down")))
        response = router.answer(query)
        assert response.message.strip()

    def test_fantasy_team_player_stats(self, fake_client):
        chat = FakeChatClient(reply="Captain: Virat Kohli - form\nVice-Captain: Jasprit Bumrah - pace")
        router = QueryRouter(AssistantSettings(), client=fake_client, chat_client=chat)
        wire = router.answer("suggest a fantasy team").to_wire()
        assert wire["playerStats"] == [
            {"name": "Virat Kohli", "role": "Captain", "details": "form"},
            {"name": "Jasprit Bumrah", "role": "Vice-Captain", "details": "pace"},
        ]

    @pytest.mark.parametrize("error", [RuntimeError("boom"), KeyError("r"), OSError("io"), TypeError("bad")])
    def test_crashing_fetch_keeps_other_data(self, live_match_data, squad_data, error):
        client = FakeCricketClient(
            matches=[live_match_data], squad=squad_data,
            crash={"get_match_scorecard"}, crash_error=error,
        )
        router = QueryRouter(AssistantSettings(), client=client)
        response = router.answer("suggest a fantasy team")
        assert response.message != APOLOGY
        assert response.has_data is True
        assert [m["id"] for m in response.cricket_data] == ["m1"]

    def test_crashing_fetch_in_executor(self, live_match_data, squad_data):
        client = FakeCricketClient(matches=[live_match_data], squad=squad_data, crash={"get_match_scorecard"})
        bundle = execute(classify("suggest a fantasy team"), "suggest a fantasy team", client)
        assert bundle.scorecard is None
        assert [t.team_name for t in bundle.squad] == ["India", "Australia"]

    def test_unexpected_error_gives_apology(self, fake_client):
        class _BrokenResponder:
            def respond(self, intent, bundle, query):
                raise RuntimeError("template bug")

        router = QueryRouter(AssistantSettings(), client=fake_client)
        router.responder = _BrokenResponder()
        response, phases = router.answer_with_trace("live matches", "chat")
        assert response.message == APOLOGY
        assert response.has_data is False
        assert response.request_type == "chat"
        assert phases[-1] == RouterPhase.IDLE

    def test_no_key_client_degrades(self):
        # Real client with no key: every fetch raises UpstreamDataError before any HTTP
        router = QueryRouter(AssistantSettings())
        response = router.answer("what matches are live today")
        assert "No current matches" in response.message
