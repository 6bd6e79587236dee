"""Contests blueprint: listing and joining contests."""

from flask import Blueprint, jsonify, request

from fantasy_cricket.api.helpers import contests_repo, parse_body
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.schemas.requests import ContestCreate, JoinContestRequest

log = get_logger(__name__)

contests_bp = Blueprint("contests", __name__)


@contests_bp.route("/api/contests")
def api_contests():
    match_id = request.args.get("match_id") or None
    return jsonify({"contests": contests_repo().list_contests(match_id)})


@contests_bp.route("/api/contests", methods=["POST"])
def api_contests_create():
    req, err = parse_body(ContestCreate, request.get_json(silent=True))
    if err:
        return jsonify(err[0]), err[1]
    repo = contests_repo()
    contest_id = repo.create_contest(**req.model_dump())
    return jsonify(repo.get_contest(contest_id)), 201


@contests_bp.route("/api/contests/<int:contest_id>")
def api_contest_detail(contest_id: int):
    repo = contests_repo()
    contest = repo.get_contest(contest_id)
    if contest is None:
        return jsonify({"error": "Contest not found."}), 404
    return jsonify({**contest, "entries": repo.list_entries(contest_id)})


@contests_bp.route("/api/contests/<int:contest_id>/join", methods=["POST"])
def api_contest_join(contest_id: int):
    req, err = parse_body(JoinContestRequest, request.get_json(silent=True))
    if err:
        return jsonify(err[0]), err[1]
    # ContestError subclasses are mapped to status codes by the middleware
    entry_id = contests_repo().join_contest(contest_id, req.team_id, req.user_id)
    return jsonify({"entry_id": entry_id, "contest_id": contest_id, "team_id": req.team_id}), 201
