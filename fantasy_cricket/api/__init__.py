"""Flask application factory."""

from flask import Flask

from fantasy_cricket.logging_config import get_logger

log = get_logger(__name__)


def create_app(config: dict | None = None) -> Flask:
    """Create and configure the Flask application.

    ``config`` may set ``DB_PATH`` and ``QUERY_ROUTER`` (tests inject a
    router wired to fakes).  Without a router, one is built from the
    ``CRICAPI_KEY`` / ``OPENAI_API_KEY`` environment variables.
    """
    app = Flask(__name__)

    from fantasy_cricket.paths import DB_PATH
    app.config["DB_PATH"] = DB_PATH
    app.config.update(config or {})

    if app.config.get("QUERY_ROUTER") is None:
        from fantasy_cricket.assistant.router import QueryRouter
        from fantasy_cricket.config import AssistantSettings

        settings = AssistantSettings.from_env()
        if not settings.cricket_api_key:
            log.warning("CRICAPI_KEY is not set; match data will be unavailable")
        app.config["QUERY_ROUTER"] = QueryRouter(settings)

    from fantasy_cricket.api.middleware import register_middleware
    register_middleware(app)

    from fantasy_cricket.api.admin_bp import admin_bp
    from fantasy_cricket.api.assistant_bp import assistant_bp
    from fantasy_cricket.api.contests_bp import contests_bp
    from fantasy_cricket.api.matches_bp import matches_bp
    from fantasy_cricket.api.players_bp import players_bp
    from fantasy_cricket.api.teams_bp import teams_bp
    from fantasy_cricket.api.wallet_bp import wallet_bp

    app.register_blueprint(assistant_bp)
    app.register_blueprint(matches_bp)
    app.register_blueprint(players_bp)
    app.register_blueprint(teams_bp)
    app.register_blueprint(contests_bp)
    app.register_blueprint(wallet_bp)
    app.register_blueprint(admin_bp)

    return app
