"""Shared helpers for API blueprints."""

from pydantic import BaseModel, ValidationError
from flask import current_app

from fantasy_cricket.db.repositories import (
    ContestRepository,
    LeaderboardRepository,
    PlayerRepository,
    TeamRepository,
    WalletRepository,
)
from fantasy_cricket.schemas.roster_rules import _extract_errors


def get_db_path():
    return current_app.config["DB_PATH"]


def get_router():
    """The app's shared :class:`QueryRouter`."""
    return current_app.config["QUERY_ROUTER"]


def players_repo() -> PlayerRepository:
    return PlayerRepository(get_db_path())


def teams_repo() -> TeamRepository:
    return TeamRepository(get_db_path())


def contests_repo() -> ContestRepository:
    return ContestRepository(get_db_path())


def wallet_repo() -> WalletRepository:
    return WalletRepository(get_db_path())


def leaderboard_repo() -> LeaderboardRepository:
    return LeaderboardRepository(get_db_path())


def require_user_id(args_or_body):
    """Extract user_id. Returns (str, None) or (None, error_tuple)."""
    user_id = args_or_body.get("user_id")
    if not user_id or not str(user_id).strip():
        return None, ({"error": "user_id is required."}, 400)
    return str(user_id).strip(), None


def parse_body(model: type[BaseModel], body):
    """Validate *body* against *model*. Returns (obj, None) or (None, error_tuple)."""
    try:
        return model.model_validate(body or {}), None
    except ValidationError as exc:
        errors = _extract_errors(exc)
        return None, ({"error": "Invalid request.", "details": errors}, 400)
