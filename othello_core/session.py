from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from .ai import ai_pick_move
from .board import Board, Coord, BLACK, WHITE
from .db import Stats, load_stats, save_stats, record_result
from .moves import legal_moves
from .state import GameState, Phase, SOLO, check_mode
from .turns import new_game, play_move, settle

logger = logging.getLogger(__name__)

THINK_DELAY = float(os.getenv("OTHELLO_THINK_MS", "1200")) / 1000.0

# A scheduler runs `callback` once after `delay` seconds and returns a handle with cancel().
Scheduler = Callable[[float, Callable[[], None]], Any]


def timer_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    state: GameState
    flips: List[Coord] = field(default_factory=list)
    reason: Optional[str] = None


class GameSession:
    """
    Owns one game and its stats and exposes the command interface used by front ends:
    submit_move, set_mode and reset.

    In solo mode the computer plays White. When it gets the turn the session enters
    the thinking phase and schedules the computer's move after `think_delay`.
    Every pending move is tagged with the state generation. reset and set_mode
    bump the generation, so a move scheduled for an earlier game is dropped.
    """

    def __init__(
        self,
        mode: Optional[str] = None,
        db_path: Optional[str] = None,
        think_delay: float = THINK_DELAY,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._idle = threading.Condition(self._lock)
        self._schedule = scheduler or timer_scheduler
        self._pending: Any = None
        self.db_path = db_path
        self.think_delay = think_delay
        self.stats: Stats = load_stats(db_path)
        self.last_cpu_move: Optional[Coord] = None
        self.state: GameState = new_game(check_mode(mode or self.stats.last_mode))

    # ---------- Queries ----------

    def legal_moves(self) -> List[Coord]:
        """Legal moves of the side to move; empty once the game is over."""
        with self._lock:
            if self.state.over:
                return []
            return legal_moves(self.state.board, self.state.turn)

    def view(self) -> Dict[str, Any]:
        """Snapshot of everything a renderer needs after a state change."""
        with self._lock:
            s = self.state
            black, white, _ = s.board.counts()
            # Hints are hidden while the computer is thinking.
            hints = [] if s.thinking else self.legal_moves()
            return {
                "board": s.board.rows(),
                "hints": [list(m) for m in hints],
                "turn": int(s.turn),
                "mode": s.mode,
                "phase": s.phase.value,
                "thinking": s.thinking,
                "winner": None if s.winner is None else int(s.winner),
                "passed": None if s.passed is None else int(s.passed),
                "counts": {"black": black, "white": white},
                "stats": {
                    "wins": self.stats.wins,
                    "losses": self.stats.losses,
                    "draws": self.stats.draws,
                    "lastMode": self.stats.last_mode,
                },
            }

    # ---------- Commands ----------

    def submit_move(self, position: Coord, color: Optional[int] = None) -> MoveResult:
        """
        Plays a human move. Rejections leave the game untouched and carry a reason:
        'game_over', 'thinking', 'not_your_turn', 'off_board' or 'illegal'.
        """
        with self._lock:
            state = self.state
            reason: Optional[str] = None
            if state.over:
                reason = "game_over"
            elif state.thinking:
                reason = "thinking"
            elif color is not None and color != state.turn:
                reason = "not_your_turn"
            elif not Board.in_bounds(*position):
                reason = "off_board"
            if reason is None:
                next_state, flips = play_move(state, position)
                if flips:
                    self._enter(next_state)
                    return MoveResult(True, self.state, flips)
                reason = "illegal"
            logger.debug("Rejected move %s for %s: %s", position, state.turn, reason)
            return MoveResult(False, state, [], reason)

    def reset(self) -> GameState:
        """Returns to the opening position in the current mode, dropping any pending computer move."""
        with self._lock:
            return self._restart(self.state.mode)

    def set_mode(self, mode: str) -> GameState:
        """Switches between solo and duo, remembers the choice and restarts the game."""
        check_mode(mode)
        with self._lock:
            self.stats = replace(self.stats, last_mode=mode)
            save_stats(self.db_path, self.stats)
            logger.info("Mode set to %s", mode)
            return self._restart(mode)

    def start_from(self, state: GameState) -> GameState:
        """Replaces the current game with `state`, e.g. a position restored by a front end."""
        with self._lock:
            self._cancel_pending()
            self.last_cpu_move = None
            fresh = replace(state, phase=Phase.AWAITING, winner=None, passed=None,
                            generation=self.state.generation + 1)
            self._enter(settle(fresh))
            return self.state

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Blocks until no computer move is pending. Returns False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: not self.state.thinking, timeout)

    # ---------- Internals ----------

    def _restart(self, mode: str) -> GameState:
        self._cancel_pending()
        self.last_cpu_move = None
        self.state = new_game(mode, generation=self.state.generation + 1)
        self._idle.notify_all()
        return self.state

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _enter(self, state: GameState) -> None:
        self.state = state
        if state.over:
            self._finish(state)
        elif state.thinking:
            token = state.generation
            self._pending = self._schedule(self.think_delay, lambda: self._cpu_turn(token))
        self._idle.notify_all()

    def _cpu_turn(self, token: int) -> None:
        with self._lock:
            if token != self.state.generation or not self.state.thinking:
                logger.debug("Dropping stale computer move for generation %d", token)
                return
            self._pending = None
            move = ai_pick_move(self.state)
            if move is None:
                self._enter(settle(self.state))
                return
            next_state, _ = play_move(self.state, move)
            self.last_cpu_move = move
            logger.debug("Computer plays %s", move)
            self._enter(next_state)

    def _finish(self, state: GameState) -> None:
        if state.winner is None:
            return
        self.stats = record_result(self.stats, state.winner, state.mode)
        if state.mode == SOLO:
            save_stats(self.db_path, self.stats)
        winner = {BLACK: "black", WHITE: "white"}.get(state.winner, "draw")
        logger.info("Game finished in %s mode, winner: %s", state.mode, winner)
