"""Matches blueprint: match cards and raw live data."""

from datetime import datetime, timezone

import requests
from flask import Blueprint, jsonify

from fantasy_cricket.api.helpers import get_router
from fantasy_cricket.assistant.cricket_api import UpstreamDataError, summarize_matches
from fantasy_cricket.logging_config import get_logger

log = get_logger(__name__)

matches_bp = Blueprint("matches", __name__)


@matches_bp.route("/api/matches")
def api_matches():
    """Flat match cards for the match list."""
    client = get_router().client
    try:
        matches = client.get_matches()
    except (requests.RequestException, UpstreamDataError) as exc:
        log.warning("Match list unavailable: %s", exc)
        return jsonify({"error": f"Match data unavailable: {exc}"}), 502
    return jsonify(summarize_matches(matches))


@matches_bp.route("/api/cricket-data")
def api_cricket_data():
    """Current matches plus the live score feed, each best-effort."""
    client = get_router().client
    payload = {"currentMatches": [], "liveScores": []}
    try:
        payload["currentMatches"] = [
            m.model_dump(by_alias=True, exclude_none=True) for m in client.get_current_matches()
        ]
    except (requests.RequestException, UpstreamDataError) as exc:
        log.warning("Current matches unavailable: %s", exc)
    try:
        payload["liveScores"] = client.get_live_scores()
    except (requests.RequestException, UpstreamDataError) as exc:
        log.warning("Live scores unavailable: %s", exc)
    payload["timestamp"] = datetime.now(timezone.utc).isoformat()
    return jsonify(payload)
