from __future__ import annotations

import logging
import os
import sqlite3
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from .board import BLACK, WHITE
from .state import DRAW, SOLO, MODES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stats:
    """Win/loss/draw tally of the human player in solo mode, plus the last mode played."""
    wins: int = 0
    losses: int = 0
    draws: int = 0
    last_mode: str = SOLO


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except PermissionError:
        pass
    candidates = [
        os.getenv('OTHELLO_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        '/tmp',
    ]
    base = os.path.basename(db_path) or 'othello.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
            return os.path.join(d, base)
        except OSError:
            continue
    return base


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the single-row stats table and the finished-games ledger exist."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS stats (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            wins INTEGER NOT NULL,
            losses INTEGER NOT NULL,
            draws INTEGER NOT NULL,
            last_mode TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS finished_games (
            game_id TEXT PRIMARY KEY,
            winner INTEGER NOT NULL,
            mode TEXT NOT NULL,
            finished_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def load_stats(db_path: Optional[str]) -> Stats:
    """Loads the stored stats, falling back to defaults when nothing is stored or the store is unavailable."""
    if not db_path:
        return Stats()
    try:
        resolved = _resolve_db_path(db_path)
        conn = sqlite3.connect(resolved)
        try:
            _ensure_db(conn)
            row = conn.execute("SELECT wins, losses, draws, last_mode FROM stats WHERE id = 1").fetchone()
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.warning("Could not load stats from %s, using defaults: %s", db_path, e)
        return Stats()
    if not row:
        return Stats()
    wins, losses, draws, last_mode = row
    if last_mode not in MODES:
        last_mode = SOLO
    return Stats(wins=int(wins), losses=int(losses), draws=int(draws), last_mode=last_mode)


def save_stats(db_path: Optional[str], stats: Stats) -> bool:
    """Stores the stats record. Returns False when running in-memory only or the store failed."""
    if not db_path:
        return False
    try:
        resolved = _resolve_db_path(db_path)
        conn = sqlite3.connect(resolved)
        try:
            _ensure_db(conn)
            conn.execute(
                """
                INSERT OR REPLACE INTO stats (id, wins, losses, draws, last_mode, updated_at)
                VALUES (1, ?, ?, ?, ?, ?)
                """,
                (
                    stats.wins,
                    stats.losses,
                    stats.draws,
                    stats.last_mode,
                    datetime.now(timezone.utc).isoformat(timespec='seconds'),
                ),
            )
            conn.commit()
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.warning("Could not save stats to %s, keeping them in memory: %s", db_path, e)
        return False
    return True


def record_result(stats: Stats, winner: int, mode: str) -> Stats:
    """
    Returns the stats after a finished game, seen from the human (Black) side.
    Only solo games are counted.
    """
    if mode != SOLO:
        return stats
    if winner == BLACK:
        return replace(stats, wins=stats.wins + 1)
    if winner == WHITE:
        return replace(stats, losses=stats.losses + 1)
    if winner == DRAW:
        return replace(stats, draws=stats.draws + 1)
    raise ValueError(f"Unknown winner: {winner!r}")


def claim_game(db_path: Optional[str], game_id: str, winner: int, mode: str) -> bool:
    """
    Marks a finished game as counted. Returns True only for the first claim of `game_id`,
    so a result replayed against the same game is tallied once.
    """
    if not db_path or not game_id:
        return False
    try:
        resolved = _resolve_db_path(db_path)
        conn = sqlite3.connect(resolved)
        try:
            _ensure_db(conn)
            cur = conn.execute(
                "INSERT OR IGNORE INTO finished_games (game_id, winner, mode, finished_at) VALUES (?, ?, ?, ?)",
                (game_id, int(winner), mode, datetime.now(timezone.utc).isoformat(timespec='seconds')),
            )
            conn.commit()
            claimed = cur.rowcount == 1
        finally:
            conn.close()
    except (sqlite3.Error, OSError) as e:
        logger.warning("Could not record finished game %s in %s: %s", game_id, db_path, e)
        return False
    if not claimed:
        logger.info("Game %s was already counted, ignoring replayed result", game_id)
    return claimed
