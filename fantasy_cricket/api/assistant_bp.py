"""Assistant blueprint: free-text cricket questions."""

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from fantasy_cricket.api.helpers import get_router
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.schemas.assistant import AssistantRequest

log = get_logger(__name__)

assistant_bp = Blueprint("assistant", __name__)


@assistant_bp.route("/api/assistant", methods=["POST"])
def api_assistant():
    """Answer ``{query, requestType?}``; never fails once the query is valid."""
    body = request.get_json(silent=True) or {}
    try:
        req = AssistantRequest.model_validate(body)
    except ValidationError:
        return jsonify({"error": "query is required."}), 400

    response = get_router().answer(req.query, req.request_type)
    return jsonify(response.to_wire())
