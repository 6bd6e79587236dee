"""Player catalog import from CSV.

Expected columns: ``id, name, team, role, credits``; optional
``image_url`` and stat columns (``matches, runs, wickets, economy,
average, strike_rate``).  Rows with an unknown role, a non-positive or
missing credit value, or a missing id/name/team are dropped with a
warning.
"""

from __future__ import annotations

import io
from pathlib import Path

import pandas as pd

from fantasy_cricket.db.repositories import PlayerRepository
from fantasy_cricket.logging_config import get_logger
from fantasy_cricket.schemas.player import Player, PlayerRole, PlayerStats

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("id", "name", "team", "role", "credits")
STAT_COLUMNS = ("matches", "runs", "wickets", "economy", "average", "strike_rate")
_COUNT_STATS = {"matches", "runs", "wickets"}

_ROLE_ALIASES: dict[str, PlayerRole] = {
    "wk": PlayerRole.WICKETKEEPER,
    "wicket-keeper": PlayerRole.WICKETKEEPER,
    "wicket keeper": PlayerRole.WICKETKEEPER,
    "keeper": PlayerRole.WICKETKEEPER,
    "bat": PlayerRole.BATSMAN,
    "batter": PlayerRole.BATSMAN,
    "bowl": PlayerRole.BOWLER,
    "ar": PlayerRole.ALLROUNDER,
    "all-rounder": PlayerRole.ALLROUNDER,
    "all rounder": PlayerRole.ALLROUNDER,
}


def parse_role(value) -> PlayerRole | None:
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    try:
        return PlayerRole(key)
    except ValueError:
        return _ROLE_ALIASES.get(key)


def read_catalog_csv(source: str | Path | io.IOBase) -> pd.DataFrame:
    """Read *source* (path, file object, or raw CSV text) into a DataFrame."""
    if isinstance(source, str) and "\n" in source:
        source = io.StringIO(source)
    df = pd.read_csv(source, dtype={"id": str, "name": str, "team": str})
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Player catalog is missing columns: {', '.join(missing)}")
    return df


def catalog_to_players(df: pd.DataFrame) -> tuple[list[Player], int]:
    """Convert catalog rows to :class:`Player` objects.

    Returns ``(players, skipped_count)``.
    """
    df = df.copy()
    df["credits"] = pd.to_numeric(df["credits"], errors="coerce")
    df["role_parsed"] = df["role"].map(parse_role)

    valid = (
        df["id"].notna() & df["name"].notna() & df["team"].notna()
        & df["role_parsed"].notna() & (df["credits"] > 0)
    )
    skipped = int((~valid).sum())
    if skipped:
        logger.warning("Dropping %d catalog rows with unknown roles or invalid credits", skipped)

    stat_cols = [c for c in STAT_COLUMNS if c in df.columns]
    for c in stat_cols:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    players = []
    for _, row in df[valid].iterrows():
        stats = {
            c: int(row[c]) if c in _COUNT_STATS else float(row[c])
            for c in stat_cols if pd.notna(row[c])
        }
        image_url = row.get("image_url")
        players.append(Player(
            player_id=str(row["id"]).strip(),
            name=str(row["name"]).strip(),
            team=str(row["team"]).strip(),
            role=row["role_parsed"],
            credits=float(row["credits"]),
            image_url=image_url if isinstance(image_url, str) and image_url else None,
            stats=PlayerStats(**stats) if stats else None,
        ))
    return players, skipped


def import_player_catalog(
    source: str | Path | io.IOBase,
    repo: PlayerRepository | None = None,
) -> dict:
    """Load a CSV catalog and upsert it into the ``players`` table."""
    repo = repo or PlayerRepository()
    players, skipped = catalog_to_players(read_catalog_csv(source))
    imported = repo.upsert_players(players) if players else 0
    logger.info("Imported %d players (%d skipped)", imported, skipped)
    return {"imported": imported, "skipped": skipped}
