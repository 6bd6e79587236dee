"""Leaderboard, admin dashboard totals and entry settlement."""

from flask import Blueprint, jsonify, request

from fantasy_cricket.api.helpers import contests_repo, leaderboard_repo, parse_body
from fantasy_cricket.schemas.requests import SettleEntryRequest

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/api/leaderboard")
def api_leaderboard():
    try:
        limit = int(request.args.get("limit", 50))
    except (TypeError, ValueError):
        return jsonify({"error": "limit must be an integer."}), 400
    return jsonify({"leaderboard": leaderboard_repo().get_leaderboard(limit)})


@admin_bp.route("/api/admin/stats")
def api_admin_stats():
    return jsonify(leaderboard_repo().get_admin_stats())


@admin_bp.route("/api/admin/entries/<int:entry_id>/settle", methods=["POST"])
def api_settle_entry(entry_id: int):
    """Record points, rank and winnings for one contest entry."""
    req, err = parse_body(SettleEntryRequest, request.get_json(silent=True))
    if err:
        return jsonify(err[0]), err[1]
    # Unknown entry -> ContestNotFound -> 404 via middleware
    contests_repo().settle_entry(
        entry_id, req.points, rank=req.rank, winning_amount=req.winning_amount,
    )
    return jsonify({
        "entry_id": entry_id,
        "points": req.points,
        "rank": req.rank,
        "winning_amount": req.winning_amount,
    })
