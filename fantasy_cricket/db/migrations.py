"""Versioned database migration system.

Keeps a ``schema_version`` table and numbered migration functions; each
migration brings the database from ``version - 1`` to ``version``.
"""

from __future__ import annotations

import sqlite3

from fantasy_cricket.db.schema import init_schema
from fantasy_cricket.logging_config import get_logger

logger = get_logger(__name__)

# ── Version tracking table ─────────────────────────────────────────────

_VERSION_DDL = """\
CREATE TABLE IF NOT EXISTS schema_version (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    version INTEGER NOT NULL DEFAULT 0
);
"""


def _ensure_version_table(conn: sqlite3.Connection) -> None:
    """Create the ``schema_version`` table if it does not exist."""
    conn.executescript(_VERSION_DDL)
    # Seed row if empty
    row = conn.execute("SELECT version FROM schema_version WHERE id = 1").fetchone()
    if row is None:
        conn.execute("INSERT INTO schema_version (id, version) VALUES (1, 0)")
        conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Return the current schema version (0 means brand-new database)."""
    _ensure_version_table(conn)
    row = conn.execute("SELECT version FROM schema_version WHERE id = 1").fetchone()
    return row[0] if row else 0


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Update the stored schema version."""
    conn.execute(
        "UPDATE schema_version SET version = ? WHERE id = 1", (version,)
    )
    conn.commit()


# ── Migrations ─────────────────────────────────────────────────────────

def _migration_001_initial_schema(conn: sqlite3.Connection) -> None:
    """Migration 1: create all tables (players, teams, team_players,
    contests, contest_entries, wallets, transactions).
    """
    init_schema(conn)


def _migration_002_leaderboard_view(conn: sqlite3.Connection) -> None:
    """Add the per-user leaderboard view."""
    conn.executescript("""
        CREATE VIEW IF NOT EXISTS leaderboard AS
        WITH users AS (
            SELECT user_id FROM teams
            UNION
            SELECT user_id FROM wallets
        )
        SELECT
            users.user_id AS user_id,
            (SELECT COUNT(*) FROM teams t WHERE t.user_id = users.user_id) AS teams_created,
            (SELECT COUNT(*) FROM contest_entries e WHERE e.user_id = users.user_id) AS contests_joined,
            (SELECT COALESCE(SUM(e.points), 0) FROM contest_entries e
              WHERE e.user_id = users.user_id) AS total_points,
            (SELECT COALESCE(SUM(e.winning_amount), 0) FROM contest_entries e
              WHERE e.user_id = users.user_id) AS total_winnings
        FROM users;
    """)


def _migration_003_admin_stats_view(conn: sqlite3.Connection) -> None:
    """Add the admin dashboard totals view."""
    conn.executescript("""
        CREATE VIEW IF NOT EXISTS admin_stats AS
        SELECT
            (SELECT COUNT(*) FROM (SELECT user_id FROM teams
                                   UNION SELECT user_id FROM wallets)) AS total_users,
            (SELECT COUNT(*) FROM teams) AS total_teams,
            (SELECT COUNT(*) FROM contests) AS total_contests,
            (SELECT COUNT(*) FROM contests WHERE is_active = 1) AS active_contests,
            (SELECT COUNT(*) FROM contest_entries) AS total_entries,
            (SELECT COALESCE(SUM(amount), 0) FROM transactions
              WHERE type = 'contest_join' AND status = 'completed') AS total_revenue;
    """)


# Registry: version number -> migration function.
_MIGRATIONS: dict[int, callable] = {
    1: _migration_001_initial_schema,
    2: _migration_002_leaderboard_view,
    3: _migration_003_admin_stats_view,
}

LATEST_VERSION: int = max(_MIGRATIONS)


# ── Public API ─────────────────────────────────────────────────────────

def apply_migrations(conn: sqlite3.Connection) -> None:
    """Apply any pending migrations to bring the database up to date.

    Safe to call on every startup; already-applied migrations are
    skipped.
    """
    current = get_schema_version(conn)

    if current >= LATEST_VERSION:
        return

    for version in range(current + 1, LATEST_VERSION + 1):
        migration_fn = _MIGRATIONS.get(version)
        if migration_fn is None:
            raise RuntimeError(
                f"Missing migration function for version {version}"
            )
        logger.info("Applying migration %d: %s", version, migration_fn.__doc__.strip().split('\n')[0])
        migration_fn(conn)
        _set_schema_version(conn, version)

    logger.info("Database schema is now at version %d", LATEST_VERSION)
