"""Players blueprint: catalog listing and CSV import."""

import io

from flask import Blueprint, jsonify, request

from fantasy_cricket.api.helpers import players_repo
from fantasy_cricket.data.player_catalog import import_player_catalog, parse_role
from fantasy_cricket.logging_config import get_logger

log = get_logger(__name__)

players_bp = Blueprint("players", __name__)


@players_bp.route("/api/players")
def api_players():
    role = request.args.get("role")
    parsed_role = None
    if role:
        parsed_role = parse_role(role)
        if parsed_role is None:
            return jsonify({"error": f"Unknown role: {role}"}), 400

    players = players_repo().list_players(
        role=parsed_role.value if parsed_role else None,
        team=request.args.get("team") or None,
        search=request.args.get("search") or None,
    )
    return jsonify({
        "players": [
            {**p.model_dump(mode="json"), "headline_stat": p.headline_stat()}
            for p in players
        ],
    })


@players_bp.route("/api/players/import", methods=["POST"])
def api_players_import():
    """Upsert a CSV catalog sent as a ``file`` upload or as the raw body."""
    upload = request.files.get("file")
    if upload:
        source = upload.stream
    else:
        text = request.get_data(as_text=True)
        if not text.strip():
            return jsonify({"error": "CSV file or body is required."}), 400
        source = io.StringIO(text)
    try:
        result = import_player_catalog(source, players_repo())
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    return jsonify(result)
