"""Cricket data API client (cricapi.com v1).

Every endpoint answers with a ``{"status": ..., "data": ...}`` envelope.
Anything other than ``status == "success"`` with list/dict data raises
:class:`UpstreamDataError`; transport failures surface as
``requests.RequestException``.  Callers decide how to degrade.
"""

from __future__ import annotations

from datetime import datetime

import requests
from pydantic import ValidationError

from fantasy_cricket.config import cricket_api_cfg
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.schemas.cricket import CatalogPlayer, Match, Scorecard, SquadTeam

logger = get_logger(__name__)


class UpstreamDataError(Exception):
    """The API answered, but not with usable data."""


class CricketApiClient:
    """Session-backed client; one instance per router."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = cricket_api_cfg.base_url,
        timeout: int = cricket_api_cfg.timeout,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ── Low-level HTTP ──────────────────────────────────────────────────

    def _get(self, endpoint: str, **params) -> list | dict:
        """GET *endpoint* and unwrap the envelope's ``data``."""
        if not self.api_key:
            raise UpstreamDataError("No cricket API key configured")
        query = {"apikey": self.api_key, "offset": 0}
        query.update({k: v for k, v in params.items() if v is not None})

        url = f"{self.base_url}/{endpoint}"
        logger.info("Fetching %s", url)
        resp = self.session.get(url, params=query, timeout=self.timeout)
        resp.raise_for_status()
        try:
            payload = resp.json()
        except ValueError as exc:
            raise UpstreamDataError(f"{endpoint}: response is not JSON") from exc

        status = payload.get("status") if isinstance(payload, dict) else None
        if status != "success":
            raise UpstreamDataError(f"{endpoint}: status {status!r}")
        data = payload.get("data")
        if not isinstance(data, (list, dict)):
            raise UpstreamDataError(f"{endpoint}: missing data")
        return data

    def _get_list(self, endpoint: str, **params) -> list:
        data = self._get(endpoint, **params)
        if not isinstance(data, list):
            raise UpstreamDataError(f"{endpoint}: expected a list")
        return data

    # ── Endpoints ───────────────────────────────────────────────────────

    def get_current_matches(self) -> list[Match]:
        """Live and recent matches, each with ``team_info`` filled in."""
        return [m.ensure_team_info() for m in _parse_matches(self._get_list("currentMatches"))]

    def get_matches(self, per_page: int = cricket_api_cfg.matches_per_page) -> list[Match]:
        return _parse_matches(self._get_list("matches", per_page=per_page))

    def get_match_squad(self, match_id: str) -> list[SquadTeam]:
        return [SquadTeam.model_validate(t) for t in self._get_list("match_squad", id=match_id)]

    def get_match_scorecard(self, match_id: str) -> Scorecard:
        data = self._get("match_scorecard", id=match_id)
        if not isinstance(data, dict):
            raise UpstreamDataError("match_scorecard: expected an object")
        return Scorecard.model_validate(data)

    def search_players(self, search: str | None = None) -> list[CatalogPlayer]:
        return [CatalogPlayer.model_validate(p) for p in self._get_list("players", search=search)]

    def get_live_scores(self) -> list[dict]:
        """Raw ``cricScore`` feed, passed through untouched."""
        return self._get_list("cricScore")


def _parse_matches(rows: list) -> list[Match]:
    matches = []
    for row in rows:
        try:
            matches.append(Match.model_validate(row))
        except ValidationError as exc:
            logger.warning("Skipping malformed match entry: %s", exc.errors()[0].get("msg", exc))
    return matches


# ── Match cards ────────────────────────────────────────────────────────

def summarize_match(match: Match) -> dict | None:
    """Flatten *match* into the card shape the match list UI renders.

    Returns ``None`` for matches with no teams or team info.
    """
    if not match.teams or not match.team_info:
        return None

    def _info(team_name: str):
        return next((t for t in match.team_info if t.name == team_name), None)

    def _score(team_name: str | None):
        if not team_name:
            return None
        return next((s for s in match.score if s.inning and team_name in s.inning), None)

    team1 = _info(match.teams[0])
    team2 = _info(match.teams[1]) if len(match.teams) > 1 else None
    score1 = _score(team1.name if team1 else None)
    score2 = _score(team2.name if team2 else None)
    upcoming = match.status == "Match not started"

    time = None
    if upcoming and match.date_time_gmt:
        try:
            time = datetime.fromisoformat(match.date_time_gmt).strftime("%d %b %Y, %H:%M GMT")
        except ValueError:
            time = match.date_time_gmt

    return {
        "match_id": match.id,
        "team1_name": team1.name if team1 else "Unknown",
        "team1_logo": (team1.img or "") if team1 else "",
        "team2_name": team2.name if team2 else "Unknown",
        "team2_logo": (team2.img or "") if team2 else "",
        "score1": f"{score1.r}/{score1.w}" if score1 and score1.r else None,
        "score2": f"{score2.r}/{score2.w}" if score2 and score2.r else None,
        "overs": score1.o if score1 and score1.o else None,
        "status": "UPCOMING" if upcoming else "LIVE",
        "time": time,
    }


def summarize_matches(matches: list[Match]) -> list[dict]:
    cards = (summarize_match(m) for m in matches)
    return [c for c in cards if c is not None]
