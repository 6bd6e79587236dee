"""Turn a classified query and its fetched data into an answer.

:class:`TemplateResponder` formats a fixed message per query type and never
fails.  :class:`LLMResponder` asks a chat model instead and drops back to
the template on any error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Protocol

from fantasy_cricket.assistant.llm import ChatClient
from fantasy_cricket.config import assistant_cfg, llm_cfg
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.schemas.assistant import (
    CricketDataBundle,
    PlayerSuggestion,
    QueryIntent,
    QueryType,
)
from fantasy_cricket.schemas.cricket import Match, Scorecard

logger = get_logger(__name__)

CAPABILITIES = (
    "I'm here to help with cricket information! Ask me about current matches, "
    "player statistics, squads, or fantasy team suggestions."
)


@dataclass
class Reply:
    message: str
    suggestions: list[PlayerSuggestion] | None = None
    used_llm: bool = False


class Responder(Protocol):
    def respond(self, intent: QueryIntent, bundle: CricketDataBundle, query: str) -> Reply: ...


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _match_block(match: Match, heading: str) -> str:
    lines = [f"**{heading}: {match.title}**"]
    if match.venue:
        lines.append(f"Venue: {match.venue}")
    if match.status:
        lines.append(f"Status: {match.status}")
    lines.extend(s.line() for s in match.score)
    return "\n".join(lines)


def _innings_highlights(card: Scorecard, limit: int = 1) -> list[str]:
    lines = []
    for innings in card.innings[:limit]:
        bat = innings.top_batter()
        bowl = innings.top_bowler()
        if innings.inning:
            lines.append(f"*{innings.inning}*")
        if bat is not None:
            lines.append(
                f"Top batting: {bat.batsman.name} {bat.r} ({bat.b}), "
                f"{bat.fours}x4, {bat.sixes}x6"
            )
        if bowl is not None:
            lines.append(f"Top bowling: {bowl.bowler.name} {bowl.w}/{bowl.r} ({bowl.o} ov)")
    return lines


# ---------------------------------------------------------------------------
# Template responder
# ---------------------------------------------------------------------------

class TemplateResponder:
    """Deterministic per-intent answers built straight from the bundle."""

    def respond(self, intent: QueryIntent, bundle: CricketDataBundle, query: str) -> Reply:
        handler = getattr(self, f"_{intent.query_type.value}", self._general)
        return Reply(message=handler(bundle) or CAPABILITIES)

    def _current_matches(self, bundle: CricketDataBundle) -> str:
        live = bundle.live_matches
        if live:
            text = _match_block(live[0], "Live now")
            if len(live) > 1:
                others = ", ".join(m.title for m in live[1:3])
                text += f"\n\nAlso live: {others}"
            return text
        upcoming = [m for m in bundle.current_matches if m.is_upcoming]
        if upcoming:
            return _match_block(upcoming[0], "Up next")
        if bundle.current_matches:
            return _match_block(bundle.current_matches[0], "Latest")
        return "No current matches available right now. Please check back when matches are live."

    def _squad_search(self, bundle: CricketDataBundle) -> str:
        if not bundle.players:
            return "I couldn't fetch the player database at the moment. Please try again later."
        if not bundle.search_name:
            return (
                f"Found {len(bundle.players)} players in the database. "
                "Tell me which player you're looking for."
            )
        results = bundle.search_results
        if not results:
            return f'No players matching "{bundle.search_name.title()}" found in the current database.'
        limit = assistant_cfg.max_search_names
        names = ", ".join(p.name for p in results[:limit])
        more = f" and {len(results) - limit} more" if len(results) > limit else ""
        return (
            f'Yes! Found {len(results)} player(s) matching "{bundle.search_name.title()}": '
            f"{names}{more}"
        )

    def _fantasy_team(self, bundle: CricketDataBundle) -> str:
        match = bundle.primary_match
        heading = f"**Fantasy tips for {match.title}**" if match else "**Fantasy team tips**"
        return "\n".join([
            heading,
            "Captain: pick an in-form top-order batter or a genuine all-rounder (2x points).",
            "Vice-Captain: pick a strike bowler or a second all-rounder (1.5x points).",
            "Team balance: 1 wicketkeeper, 3-5 batters, 1-3 all-rounders, 3-5 bowlers, "
            "no more than 7 players from one side, within 100 credits.",
            "Check the toss and the pitch report before the deadline.",
        ])

    def _player_stats(self, bundle: CricketDataBundle) -> str:
        card = bundle.scorecard
        if card is None or not card.innings:
            return "Scorecard data isn't available for the current match yet."
        title = bundle.primary_match.title if bundle.primary_match else card.name
        return "\n".join([f"**{title}**", *_innings_highlights(card, limit=1)])

    def _squad_info(self, bundle: CricketDataBundle) -> str:
        if not bundle.squad:
            return "Squad information isn't available for the current match yet."
        blocks = []
        for team in bundle.squad:
            names = [p.name for p in team.players[: llm_cfg.prompt_max_squad]]
            blocks.append(f"**{team.team_name}** ({len(team.players)} players)\n" + ", ".join(names))
        return "\n\n".join(blocks)

    def _fantasy_scores(self, bundle: CricketDataBundle) -> str:
        card = bundle.scorecard
        if card is None or card.is_empty:
            return "Scores for the last match aren't available yet."
        lines = [f"**{card.name or 'Match summary'}**"]
        if card.status:
            lines.append(card.status)
        lines.extend(s.line() for s in card.score)
        lines.extend(_innings_highlights(card, limit=len(card.innings)))
        return "\n".join(lines)

    def _general(self, bundle: CricketDataBundle) -> str:
        if bundle.current_matches:
            first = bundle.current_matches[0]
            return (
                f"{CAPABILITIES}\n\nThere are {len(bundle.current_matches)} matches on the "
                f"schedule right now, including {first.title}."
            )
        return CAPABILITIES


# ---------------------------------------------------------------------------
# Suggestion extraction
# ---------------------------------------------------------------------------

class SuggestionExtractor(Protocol):
    def extract(self, text: str) -> list[PlayerSuggestion]: ...


class RegexSuggestionExtractor:
    """Pull "Captain:" / "Vice-Captain:" lines out of free text.

    Best effort: a missing line yields no entry.
    """

    _PATTERNS = (
        ("Captain", re.compile(r"^[\s*#>•\-]*captain\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE)),
        ("Vice-Captain", re.compile(r"^[\s*#>•\-]*vice[\s\-]?captain\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE)),
    )

    def extract(self, text: str) -> list[PlayerSuggestion]:
        suggestions = []
        for role, pattern in self._PATTERNS:
            m = pattern.search(text or "")
            if not m:
                continue
            value = m.group(1).strip().strip("*").strip()
            # "Virat Kohli - in form" / "Virat Kohli (in form)"
            parts = re.split(r"\s+[-–:(]\s*", value, maxsplit=1)
            details = parts[1].rstrip(")").strip() if len(parts) > 1 else ""
            suggestions.append(PlayerSuggestion(name=parts[0].strip(), role=role, details=details))
        return suggestions


# ---------------------------------------------------------------------------
# LLM responder
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = (
    "You are a helpful cricket fantasy assistant. Use the provided cricket data to "
    "answer questions accurately. Be concise and helpful. If the data does not cover "
    "the question, say so instead of guessing."
)

FANTASY_FORMAT = (
    " When suggesting a fantasy team, put your picks on their own lines as "
    "'Captain: <name> - <reason>' and 'Vice-Captain: <name> - <reason>'."
)


def summarize_bundle(bundle: CricketDataBundle) -> str:
    """Compact text view of *bundle* for the user prompt."""
    parts: list[str] = []

    if bundle.current_matches:
        lines = [
            f"- {m.name or m.title}: {m.title} - {m.status}"
            for m in bundle.current_matches[: llm_cfg.prompt_max_matches]
        ]
        parts.append("Current matches:\n" + "\n".join(lines))

    if bundle.primary_match is not None:
        parts.append(f"Focus match: {bundle.primary_match.title} ({bundle.primary_match.status})")

    if bundle.squad:
        entries = [
            f"- {p.name} ({team.team_name}{', ' + p.role if p.role else ''})"
            for team in bundle.squad
            for p in team.players
        ][: llm_cfg.prompt_max_squad]
        parts.append("Squad:\n" + "\n".join(entries))

    if bundle.scorecard is not None and not bundle.scorecard.is_empty:
        lines = [s.line() for s in bundle.scorecard.score]
        lines.extend(_innings_highlights(bundle.scorecard, limit=len(bundle.scorecard.innings)))
        parts.append("Scorecard:\n" + "\n".join(lines))

    if bundle.search_name is not None:
        found = bundle.search_results[: llm_cfg.prompt_max_search_results]
        if found:
            parts.append(
                f'Players matching "{bundle.search_name}": ' + ", ".join(p.name for p in found)
            )
        else:
            parts.append(f'No players matching "{bundle.search_name}" in the database.')
    elif bundle.players:
        parts.append(f"Player database: {len(bundle.players)} players available.")

    return "\n\n".join(parts) or "No cricket data is available right now."


@dataclass
class LLMResponder:
    chat_client: ChatClient
    fallback: TemplateResponder = field(default_factory=TemplateResponder)
    extractor: SuggestionExtractor = field(default_factory=RegexSuggestionExtractor)

    def build_prompts(self, intent: QueryIntent, bundle: CricketDataBundle, query: str) -> tuple[str, str]:
        system = SYSTEM_PROMPT
        if intent.query_type == QueryType.FANTASY_TEAM:
            system += FANTASY_FORMAT
        user = (
            f'Query: "{query}"\n\n'
            f"Cricket Data Context:\n{summarize_bundle(bundle)}\n\n"
            "Please respond naturally and helpfully based on this information."
        )
        return system, user

    def respond(self, intent: QueryIntent, bundle: CricketDataBundle, query: str) -> Reply:
        system, user = self.build_prompts(intent, bundle, query)
        try:
            text = self.chat_client.complete(system, user)
        except Exception as exc:
            logger.warning("LLM call failed, using template answer: %s", exc)
            return self.fallback.respond(intent, bundle, query)

        suggestions = None
        if intent.query_type == QueryType.FANTASY_TEAM:
            suggestions = self.extractor.extract(text) or None
        return Reply(message=text, suggestions=suggestions, used_llm=True)
