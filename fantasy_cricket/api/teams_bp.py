"""Teams blueprint: roster validation and saved teams."""

from flask import Blueprint, jsonify, request

from fantasy_cricket.api.helpers import parse_body, players_repo, require_user_id, teams_repo
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.roster.submission import build_roster, submit_team
from fantasy_cricket.roster.validator import validate_for_submission
from fantasy_cricket.schemas.requests import TeamRequest
from fantasy_cricket.schemas.roster_rules import parse_rules

log = get_logger(__name__)

teams_bp = Blueprint("teams", __name__)


def _replay(req: TeamRequest):
    """Rebuild the client's roster. Returns ((roster, rejected), None) or (None, error_tuple)."""
    rules, errors = parse_rules(req.rules)
    if rules is None:
        return None, ({"error": "Invalid rules.", "details": errors}, 400)
    pool = players_repo().get_players(req.player_ids)
    roster, rejected = build_roster(
        pool,
        req.player_ids,
        captain_id=req.captain_id,
        vice_captain_id=req.vice_captain_id,
        sides=req.sides,
        rules=rules,
        match_id=req.match_id,
    )
    return (roster, rejected), None


def _rejected_json(rejected) -> list[dict]:
    return [{"player_id": pid, **err.to_dict()} for pid, err in rejected]


@teams_bp.route("/api/teams/validate", methods=["POST"])
def api_teams_validate():
    """Report totals, rejected picks, and every broken rule for a selection."""
    req, err = parse_body(TeamRequest, request.get_json(silent=True))
    if err:
        return jsonify(err[0]), err[1]
    built, err = _replay(req)
    if err:
        return jsonify(err[0]), err[1]
    roster, rejected = built

    violations = validate_for_submission(roster, team_name=req.name)
    return jsonify({
        **roster.summary(),
        "rejected": _rejected_json(rejected),
        "violations": [v.model_dump(mode="json") for v in violations],
        "valid": not violations and not rejected,
    })


@teams_bp.route("/api/teams", methods=["POST"])
def api_teams_create():
    body = request.get_json(silent=True) or {}
    user_id, err = require_user_id(body)
    if err:
        return jsonify(err[0]), err[1]
    req, err = parse_body(TeamRequest, body)
    if err:
        return jsonify(err[0]), err[1]
    if not req.match_id:
        return jsonify({"error": "match_id is required."}), 400

    built, err = _replay(req)
    if err:
        return jsonify(err[0]), err[1]
    roster, rejected = built
    if rejected:
        return jsonify({
            "error": "Some selections were rejected.",
            "code": "selection_rejected",
            "rejected": _rejected_json(rejected),
            "violations": [v.model_dump(mode="json") for v in validate_for_submission(roster)],
        }), 400

    # SubmissionInvalid is turned into a 400 by the middleware
    team_id = submit_team(
        roster, name=req.name or "", user_id=user_id, match_id=req.match_id, repo=teams_repo(),
    )
    return jsonify({"team_id": team_id, **roster.summary(), "name": roster.name}), 201


@teams_bp.route("/api/teams")
def api_teams_list():
    user_id, err = require_user_id(request.args)
    if err:
        return jsonify(err[0]), err[1]
    return jsonify({"teams": teams_repo().list_teams(user_id)})


@teams_bp.route("/api/teams/<int:team_id>")
def api_team_detail(team_id: int):
    team = teams_repo().get_team(team_id)
    if team is None:
        return jsonify({"error": "Team not found."}), 404
    return jsonify(team.model_dump(mode="json"))
