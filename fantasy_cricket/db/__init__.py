"""Database layer: SQLite connection and repositories."""

from fantasy_cricket.db.connection import connect, get_connection, transaction
from fantasy_cricket.db.migrations import apply_migrations, get_schema_version
from fantasy_cricket.db.repositories import (
    ContestClosed,
    ContestError,
    ContestFull,
    ContestNotFound,
    ContestRepository,
    DuplicateEntry,
    InsufficientFunds,
    LeaderboardRepository,
    PlayerRepository,
    TeamMismatch,
    TeamRepository,
    WalletRepository,
)
from fantasy_cricket.db.schema import SCHEMA_SQL, init_schema

__all__ = [
    "connect",
    "get_connection",
    "transaction",
    "apply_migrations",
    "get_schema_version",
    "init_schema",
    "SCHEMA_SQL",
    "PlayerRepository",
    "TeamRepository",
    "ContestRepository",
    "WalletRepository",
    "LeaderboardRepository",
    # Errors
    "ContestError",
    "ContestNotFound",
    "ContestClosed",
    "ContestFull",
    "DuplicateEntry",
    "InsufficientFunds",
    "TeamMismatch",
]
