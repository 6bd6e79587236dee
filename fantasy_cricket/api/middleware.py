"""Flask middleware: no-cache headers and JSON error handlers."""

from flask import Flask, jsonify, request

from fantasy_cricket.db.repositories import (
    ContestError,
    ContestFull,
    ContestNotFound,
    DuplicateEntry,
    InsufficientFunds,
)
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.roster.errors import RosterError

log = get_logger(__name__)

_CONTEST_STATUS: dict[type, int] = {
    ContestNotFound: 404,
    ContestFull: 409,
    DuplicateEntry: 409,
    InsufficientFunds: 402,
}


def register_middleware(app: Flask) -> None:
    """Register middleware on the Flask app."""

    @app.after_request
    def add_no_cache_headers(response):
        if request.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"
        return response

    @app.errorhandler(RosterError)
    def roster_error(exc: RosterError):
        return jsonify(exc.to_dict()), 400

    @app.errorhandler(ContestError)
    def contest_error(exc: ContestError):
        status = _CONTEST_STATUS.get(type(exc), 400)
        return jsonify({"error": str(exc), "code": exc.code}), status

    @app.errorhandler(404)
    def not_found(_):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(_):
        return jsonify({"error": "Internal server error"}), 500
