"""Database schema: all CREATE TABLE statements.

Mirrors the logical entities of the hosted backend: player catalog, teams
and their members, contests and entries, wallets and transactions.
"""

from __future__ import annotations

import sqlite3

SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS players (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    team TEXT NOT NULL,
    role TEXT NOT NULL CHECK (role IN ('batsman', 'bowler', 'allrounder', 'wicketkeeper')),
    credits REAL NOT NULL CHECK (credits > 0),
    image_url TEXT,
    stats_json TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS teams (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    name TEXT NOT NULL,
    match_id TEXT NOT NULL,
    captain_id TEXT REFERENCES players(id),
    vice_captain_id TEXT REFERENCES players(id),
    total_credits REAL NOT NULL DEFAULT 0,
    total_points REAL NOT NULL DEFAULT 0,
    is_locked INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS team_players (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    team_id INTEGER NOT NULL REFERENCES teams(id) ON DELETE CASCADE,
    player_id TEXT NOT NULL REFERENCES players(id),
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    UNIQUE(team_id, player_id)
);

CREATE TABLE IF NOT EXISTS contests (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    match_id TEXT NOT NULL,
    entry_fee REAL NOT NULL DEFAULT 0 CHECK (entry_fee >= 0),
    prize_pool REAL NOT NULL DEFAULT 0,
    total_spots INTEGER NOT NULL CHECK (total_spots > 0),
    filled_spots INTEGER NOT NULL DEFAULT 0,
    first_prize REAL NOT NULL DEFAULT 0,
    max_entries_per_user INTEGER NOT NULL DEFAULT 1,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS contest_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    contest_id INTEGER NOT NULL REFERENCES contests(id) ON DELETE CASCADE,
    team_id INTEGER NOT NULL REFERENCES teams(id) ON DELETE CASCADE,
    user_id TEXT NOT NULL,
    points REAL,
    rank INTEGER,
    winning_amount REAL,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    UNIQUE(contest_id, team_id)
);

CREATE TABLE IF NOT EXISTS wallets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL UNIQUE,
    balance REAL NOT NULL DEFAULT 0 CHECK (balance >= 0),
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    amount REAL NOT NULL,
    type TEXT NOT NULL CHECK (type IN ('deposit', 'withdrawal', 'contest_join', 'contest_win')),
    status TEXT NOT NULL CHECK (status IN ('pending', 'completed', 'failed')),
    description TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_teams_user ON teams(user_id);
CREATE INDEX IF NOT EXISTS idx_contests_match ON contests(match_id);
CREATE INDEX IF NOT EXISTS idx_transactions_user ON transactions(user_id, created_at);
"""


def init_schema(conn: sqlite3.Connection) -> None:
    """Execute the full schema DDL on *conn*."""
    conn.executescript(SCHEMA_SQL)
