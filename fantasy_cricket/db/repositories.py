"""Repository classes: one per aggregate.

Each repository takes a ``db_path`` in ``__init__`` and uses
:func:`fantasy_cricket.db.connection.connect` for every operation.
Multi-row writes go through :func:`fantasy_cricket.db.connection.transaction`
so they either land completely or not at all.
"""

from __future__ import annotations

import json
from pathlib import Path

from fantasy_cricket.config import wallet_cfg
from fantasy_cricket.db.connection import connect, transaction
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.paths import DB_PATH
from fantasy_cricket.schemas.player import FantasyTeam, Player, PlayerStats

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ContestError(Exception):
    code = "contest_error"


class ContestNotFound(ContestError):
    code = "contest_not_found"


class ContestClosed(ContestError):
    code = "contest_closed"


class ContestFull(ContestError):
    code = "contest_full"


class DuplicateEntry(ContestError):
    code = "duplicate_entry"


class InsufficientFunds(ContestError):
    code = "insufficient_funds"


class TeamMismatch(ContestError):
    code = "team_mismatch"


# ---------------------------------------------------------------------------
# Row helpers
# ---------------------------------------------------------------------------

def _row_to_player(row) -> Player:
    stats = None
    if row["stats_json"]:
        try:
            stats = PlayerStats(**json.loads(row["stats_json"]))
        except (json.JSONDecodeError, TypeError, ValueError):
            stats = None
    return Player(
        player_id=row["id"],
        name=row["name"],
        team=row["team"],
        role=row["role"],
        credits=row["credits"],
        image_url=row["image_url"],
        stats=stats,
    )


# ---------------------------------------------------------------------------
# PlayerRepository
# ---------------------------------------------------------------------------

class PlayerRepository:
    """Player catalog (``players`` table)."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def upsert_players(self, players: list[Player]) -> int:
        rows = [
            (
                p.player_id, p.name, p.team, p.role.value, p.credits, p.image_url,
                p.stats.model_dump_json(exclude_none=True) if p.stats else None,
            )
            for p in players
        ]
        with connect(self.db_path) as conn:
            with transaction(conn):
                conn.executemany(
                    """INSERT INTO players (id, name, team, role, credits, image_url, stats_json)
                       VALUES (?, ?, ?, ?, ?, ?, ?)
                       ON CONFLICT(id) DO UPDATE SET
                         name=excluded.name,
                         team=excluded.team,
                         role=excluded.role,
                         credits=excluded.credits,
                         image_url=excluded.image_url,
                         stats_json=excluded.stats_json,
                         updated_at=datetime('now')""",
                    rows,
                )
        return len(rows)

    def list_players(
        self,
        role: str | None = None,
        team: str | None = None,
        search: str | None = None,
    ) -> list[Player]:
        sql = "SELECT * FROM players WHERE 1=1"
        params: list = []
        if role:
            sql += " AND role=?"
            params.append(role)
        if team:
            sql += " AND team=?"
            params.append(team)
        if search:
            sql += " AND LOWER(name) LIKE ?"
            params.append(f"%{search.lower()}%")
        sql += " ORDER BY credits DESC, name"
        with connect(self.db_path) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_player(r) for r in rows]

    def get_players(self, player_ids: list[str]) -> dict[str, Player]:
        if not player_ids:
            return {}
        placeholders = ",".join("?" for _ in player_ids)
        with connect(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT * FROM players WHERE id IN ({placeholders})",
                list(player_ids),
            ).fetchall()
        return {r["id"]: _row_to_player(r) for r in rows}


# ---------------------------------------------------------------------------
# TeamRepository
# ---------------------------------------------------------------------------

class TeamRepository:
    """Fantasy teams (``teams`` + ``team_players``)."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def create_team_with_players(self, team: FantasyTeam) -> int:
        """Insert the team row and every membership row in one transaction."""
        with connect(self.db_path) as conn:
            with transaction(conn):
                cur = conn.execute(
                    """INSERT INTO teams
                       (user_id, name, match_id, captain_id, vice_captain_id,
                        total_credits, is_locked)
                       VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (
                        team.user_id, team.name, team.match_id,
                        team.captain_id, team.vice_captain_id,
                        team.total_credits, int(team.is_locked),
                    ),
                )
                team_id = cur.lastrowid
                conn.executemany(
                    "INSERT INTO team_players (team_id, player_id) VALUES (?, ?)",
                    [(team_id, pid) for pid in team.player_ids],
                )
        logger.info("Saved team %d (%s) with %d players", team_id, team.name, len(team.players))
        return team_id

    def get_team(self, team_id: int) -> FantasyTeam | None:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM teams WHERE id=?", (team_id,)).fetchone()
            if row is None:
                return None
            player_rows = conn.execute(
                """SELECT p.* FROM team_players tp
                   JOIN players p ON p.id = tp.player_id
                   WHERE tp.team_id=? ORDER BY tp.id""",
                (team_id,),
            ).fetchall()
        return FantasyTeam(
            team_id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            match_id=row["match_id"],
            captain_id=row["captain_id"],
            vice_captain_id=row["vice_captain_id"],
            players=[_row_to_player(r) for r in player_rows],
            total_credits=row["total_credits"],
            is_locked=bool(row["is_locked"]),
        )

    def list_teams(self, user_id: str) -> list[dict]:
        with connect(self.db_path) as conn:
            rows = conn.execute(
                """SELECT t.*,
                          (SELECT COUNT(*) FROM team_players tp WHERE tp.team_id = t.id) AS player_count,
                          (SELECT COUNT(*) FROM contest_entries e WHERE e.team_id = t.id) AS contests
                   FROM teams t WHERE t.user_id=? ORDER BY t.created_at DESC, t.id DESC""",
                (user_id,),
            ).fetchall()
        return [dict(r) for r in rows]


# ---------------------------------------------------------------------------
# WalletRepository
# ---------------------------------------------------------------------------

def _debit(conn, user_id: str, amount: float, tx_type: str, description: str) -> None:
    row = conn.execute("SELECT balance FROM wallets WHERE user_id=?", (user_id,)).fetchone()
    balance = row["balance"] if row else 0.0
    if balance + 1e-9 < amount:
        raise InsufficientFunds(
            f"Insufficient balance: {wallet_cfg.currency_symbol}{balance:.2f} "
            f"< {wallet_cfg.currency_symbol}{amount:.2f}"
        )
    conn.execute(
        "UPDATE wallets SET balance = balance - ?, updated_at=datetime('now') WHERE user_id=?",
        (amount, user_id),
    )
    conn.execute(
        """INSERT INTO transactions (user_id, amount, type, status, description)
           VALUES (?, ?, ?, 'completed', ?)""",
        (user_id, amount, tx_type, description),
    )


def _credit(conn, user_id: str, amount: float, tx_type: str, description: str) -> None:
    conn.execute(
        """INSERT INTO wallets (user_id, balance) VALUES (?, ?)
           ON CONFLICT(user_id) DO UPDATE SET
             balance = balance + excluded.balance,
             updated_at = datetime('now')""",
        (user_id, amount),
    )
    conn.execute(
        """INSERT INTO transactions (user_id, amount, type, status, description)
           VALUES (?, ?, ?, 'completed', ?)""",
        (user_id, amount, tx_type, description),
    )


class WalletRepository:
    """Wallet balances and the transaction ledger."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def get_balance(self, user_id: str) -> float:
        with connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT balance FROM wallets WHERE user_id=?", (user_id,),
            ).fetchone()
        return float(row["balance"]) if row else 0.0

    def get_transactions(self, user_id: str, limit: int | None = None) -> list[dict]:
        sql = "SELECT * FROM transactions WHERE user_id=? ORDER BY created_at DESC, id DESC"
        params: list = [user_id]
        if limit:
            sql += " LIMIT ?"
            params.append(limit)
        with connect(self.db_path) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [dict(r) for r in rows]

    def get_wallet_details(self, user_id: str) -> dict:
        return {
            "balance": self.get_balance(user_id),
            "transactions": self.get_transactions(user_id),
        }

    def add_money(self, user_id: str, amount: float) -> float:
        """Deposit *amount*; creates the wallet on first use.  Returns the new balance."""
        if not wallet_cfg.min_deposit <= amount <= wallet_cfg.max_deposit:
            raise ValueError(
                f"Deposit must be between {wallet_cfg.min_deposit} and {wallet_cfg.max_deposit}"
            )
        description = f"Added {wallet_cfg.currency_symbol}{amount:g} to wallet"
        with connect(self.db_path) as conn:
            with transaction(conn):
                _credit(conn, user_id, amount, "deposit", description)
        return self.get_balance(user_id)

    def withdraw_money(self, user_id: str, amount: float) -> float:
        """Withdraw *amount* from the wallet.  Returns the new balance.

        Raises :class:`InsufficientFunds` when the balance does not cover it;
        nothing is written in that case.
        """
        if amount <= 0:
            raise ValueError("Withdrawal amount must be positive")
        description = f"Withdrew {wallet_cfg.currency_symbol}{amount:g} from wallet"
        with connect(self.db_path) as conn:
            with transaction(conn):
                _debit(conn, user_id, amount, "withdrawal", description)
        return self.get_balance(user_id)


# ---------------------------------------------------------------------------
# ContestRepository
# ---------------------------------------------------------------------------

class ContestRepository:
    """Contests and contest entries."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def create_contest(
        self,
        name: str,
        match_id: str,
        total_spots: int,
        entry_fee: float = 0.0,
        prize_pool: float = 0.0,
        first_prize: float = 0.0,
        max_entries_per_user: int = 1,
    ) -> int:
        with connect(self.db_path) as conn:
            cur = conn.execute(
                """INSERT INTO contests
                   (name, match_id, entry_fee, prize_pool, total_spots,
                    first_prize, max_entries_per_user)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (name, match_id, entry_fee, prize_pool, total_spots,
                 first_prize, max_entries_per_user),
            )
            conn.commit()
        return cur.lastrowid

    def get_contest(self, contest_id: int) -> dict | None:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM contests WHERE id=?", (contest_id,)).fetchone()
        return dict(row) if row else None

    def list_contests(self, match_id: str | None = None, active_only: bool = True) -> list[dict]:
        sql = "SELECT * FROM contests WHERE 1=1"
        params: list = []
        if match_id:
            sql += " AND match_id=?"
            params.append(match_id)
        if active_only:
            sql += " AND is_active=1"
        sql += " ORDER BY created_at DESC, id DESC"
        with connect(self.db_path) as conn:
            rows = conn.execute(sql, params).fetchall()
        return [dict(r) for r in rows]

    def set_active(self, contest_id: int, active: bool) -> None:
        with connect(self.db_path) as conn:
            conn.execute(
                "UPDATE contests SET is_active=?, updated_at=datetime('now') WHERE id=?",
                (int(active), contest_id),
            )
            conn.commit()

    def join_contest(self, contest_id: int, team_id: int, user_id: str) -> int:
        """Enter *team_id* into *contest_id*, paying the entry fee from the wallet.

        All checks and writes happen in one transaction.  Returns the entry id.
        """
        with connect(self.db_path) as conn:
            with transaction(conn):
                contest = conn.execute(
                    "SELECT * FROM contests WHERE id=?", (contest_id,),
                ).fetchone()
                if contest is None:
                    raise ContestNotFound(f"Contest {contest_id} not found")
                if not contest["is_active"]:
                    raise ContestClosed(f"Contest {contest['name']} is closed")
                if contest["filled_spots"] >= contest["total_spots"]:
                    raise ContestFull(f"Contest {contest['name']} is full")

                team = conn.execute("SELECT * FROM teams WHERE id=?", (team_id,)).fetchone()
                if team is None or team["user_id"] != user_id:
                    raise TeamMismatch(f"Team {team_id} not found for this user")
                if team["match_id"] != contest["match_id"]:
                    raise TeamMismatch("Team was built for a different match")

                dup = conn.execute(
                    "SELECT 1 FROM contest_entries WHERE contest_id=? AND team_id=?",
                    (contest_id, team_id),
                ).fetchone()
                if dup is not None:
                    raise DuplicateEntry("This team has already joined the contest")
                (entries,) = conn.execute(
                    "SELECT COUNT(*) FROM contest_entries WHERE contest_id=? AND user_id=?",
                    (contest_id, user_id),
                ).fetchone()
                if entries >= contest["max_entries_per_user"]:
                    raise DuplicateEntry(
                        f"Entry limit reached ({contest['max_entries_per_user']} per user)"
                    )

                fee = float(contest["entry_fee"])
                if fee > 0:
                    _debit(conn, user_id, fee, "contest_join", f"Joined {contest['name']}")

                cur = conn.execute(
                    "INSERT INTO contest_entries (contest_id, team_id, user_id) VALUES (?, ?, ?)",
                    (contest_id, team_id, user_id),
                )
                conn.execute(
                    """UPDATE contests SET filled_spots = filled_spots + 1,
                         updated_at = datetime('now') WHERE id=?""",
                    (contest_id,),
                )
                entry_id = cur.lastrowid
        logger.info("User %s joined contest %d with team %d", user_id, contest_id, team_id)
        return entry_id

    def settle_entry(
        self,
        entry_id: int,
        points: float,
        rank: int | None = None,
        winning_amount: float = 0.0,
    ) -> None:
        """Record the result of an entry and pay out any winnings."""
        with connect(self.db_path) as conn:
            with transaction(conn):
                entry = conn.execute(
                    """SELECT e.*, c.name AS contest_name FROM contest_entries e
                       JOIN contests c ON c.id = e.contest_id WHERE e.id=?""",
                    (entry_id,),
                ).fetchone()
                if entry is None:
                    raise ContestNotFound(f"Entry {entry_id} not found")
                conn.execute(
                    """UPDATE contest_entries SET points=?, rank=?, winning_amount=?,
                         updated_at=datetime('now') WHERE id=?""",
                    (points, rank, winning_amount, entry_id),
                )
                conn.execute(
                    "UPDATE teams SET total_points=?, updated_at=datetime('now') WHERE id=?",
                    (points, entry["team_id"]),
                )
                if winning_amount > 0:
                    _credit(
                        conn, entry["user_id"], winning_amount, "contest_win",
                        f"Won {wallet_cfg.currency_symbol}{winning_amount:g} in {entry['contest_name']}",
                    )

    def list_entries(self, contest_id: int) -> list[dict]:
        with connect(self.db_path) as conn:
            rows = conn.execute(
                """SELECT e.*, t.name AS team_name FROM contest_entries e
                   JOIN teams t ON t.id = e.team_id
                   WHERE e.contest_id=? ORDER BY COALESCE(e.points, 0) DESC, e.id""",
                (contest_id,),
            ).fetchall()
        return [dict(r) for r in rows]


# ---------------------------------------------------------------------------
# LeaderboardRepository
# ---------------------------------------------------------------------------

class LeaderboardRepository:
    """Read-only views: leaderboard and admin totals."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DB_PATH

    def get_leaderboard(self, limit: int = 50) -> list[dict]:
        with connect(self.db_path) as conn:
            rows = conn.execute(
                """SELECT * FROM leaderboard
                   ORDER BY total_points DESC, total_winnings DESC, user_id
                   LIMIT ?""",
                (limit,),
            ).fetchall()
        board = [dict(r) for r in rows]
        # Competition ranking: equal points and winnings share a rank
        prev_key, rank = None, 0
        for i, row in enumerate(board, start=1):
            key = (row["total_points"], row["total_winnings"])
            if key != prev_key:
                rank, prev_key = i, key
            row["rank"] = rank
        return board

    def get_admin_stats(self) -> dict:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM admin_stats").fetchone()
        return dict(row) if row else {}
