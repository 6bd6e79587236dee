#!/usr/bin/env python3
"""Load a player catalog CSV into the local database.

Columns: id, name, team, role, credits [, image_url, matches, runs,
wickets, economy, average, strike_rate].

Usage:
    .venv/bin/python scripts/import_players.py players.csv [--db output/fantasy.db]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fantasy_cricket.data.player_catalog import import_player_catalog
from fantasy_cricket.db.repositories import PlayerRepository
from fantasy_cricket.logging_config import get_logger, setup_logging

log = get_logger(__name__)


def main() -> None:
    setup_logging()
    parser = argparse.ArgumentParser(description="Import a player catalog CSV")
    parser.add_argument("csv", type=Path, help="Path to the catalog CSV")
    parser.add_argument("--db", type=Path, default=None,
                        help="SQLite database path (default: FANTASY_CRICKET_DB or output/fantasy.db)")
    args = parser.parse_args()

    if not args.csv.exists():
        log.error("No such file: %s", args.csv)
        sys.exit(1)

    result = import_player_catalog(args.csv, PlayerRepository(args.db))
    log.info("Done: %d imported, %d skipped", result["imported"], result["skipped"])


if __name__ == "__main__":
    main()
