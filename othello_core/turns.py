from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Tuple

from .board import Board, Coord, BLACK, WHITE
from .moves import apply_move, has_legal_move, opponent
from .state import GameState, Phase, DRAW, SOLO, check_mode

logger = logging.getLogger(__name__)


def new_game(mode: str = SOLO, generation: int = 0) -> GameState:
    """Creates a game on the opening board with Black to move."""
    return GameState(board=Board.opening(), turn=BLACK, mode=check_mode(mode), generation=generation)


def final_outcome(board: Board) -> int:
    """Higher piece count wins; equal counts are a draw."""
    black, white, _ = board.counts()
    if black > white:
        return BLACK
    if white > black:
        return WHITE
    return DRAW


def _ready(state: GameState) -> GameState:
    # Solo mode blocks human input while the computer holds the turn.
    return state.with_phase(Phase.THINKING if state.is_cpu_turn() else Phase.AWAITING)


def advance_turn(state: GameState, board: Board, mover: int) -> GameState:
    """
    Resolves whose turn follows an accepted move by `mover` on `board`.
    The opponent moves next if it can; otherwise it passes back to the mover;
    if neither side can move the game is over.
    """
    opp = opponent(mover)
    if has_legal_move(board, opp):
        return _ready(replace(state, board=board, turn=opp, passed=None))
    if has_legal_move(board, mover):
        logger.debug("%s has no legal move and passes", opp.name)
        return _ready(replace(state, board=board, turn=mover, passed=opp))
    winner = final_outcome(board)
    black, white, _ = board.counts()
    logger.info("Game over: black=%d white=%d winner=%s", black, white, winner)
    return replace(state, board=board, phase=Phase.GAME_OVER, winner=winner, passed=None)


def settle(state: GameState) -> GameState:
    """
    Normalises a state whose side to move may be stuck, e.g. one rebuilt from
    an arbitrary position: applies a pass or ends the game without touching the board.
    """
    if state.over:
        return state
    if has_legal_move(state.board, state.turn):
        return _ready(state)
    # Treat the stuck side as the opponent of a hypothetical mover.
    return advance_turn(state, state.board, opponent(state.turn))


def play_move(state: GameState, position: Coord) -> Tuple[GameState, List[Coord]]:
    """
    Plays `position` for the side to move on a copy of the board.
    Returns the next state and the flipped discs; an illegal move returns the
    unchanged state and an empty list.
    """
    if state.over:
        return state, []
    board = state.board.copy()
    flips = apply_move(board, position, state.turn)
    if not flips:
        return state, []
    return advance_turn(state, board, state.turn), flips
