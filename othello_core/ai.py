from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .board import Board, Coord
from .moves import legal_moves
from .state import GameState

# Positional desirability per cell: corners can never be flipped back, while
# the cells touching an empty corner hand it to the opponent.
WEIGHTS: Tuple[Tuple[int, ...], ...] = (
    (100, -20, 10, 5, 5, 10, -20, 100),
    (-20, -50, -2, -2, -2, -2, -50, -20),
    (10, -2, 5, 1, 1, 5, -2, 10),
    (5, -2, 1, 0, 0, 1, -2, 5),
    (5, -2, 1, 0, 0, 1, -2, 5),
    (10, -2, 5, 1, 1, 5, -2, 10),
    (-20, -50, -2, -2, -2, -2, -50, -20),
    (100, -20, 10, 5, 5, 10, -20, 100),
)


def weight(position: Coord) -> int:
    r, c = position
    return WEIGHTS[r][c]


def choose_move(board: Board, color: int, moves: Sequence[Coord]) -> Coord:
    """
    Picks the legal move with the highest static weight.
    Ties keep the earliest move in `moves`, so the choice is deterministic.
    """
    if not moves:
        raise ValueError("choose_move requires at least one legal move")
    best = moves[0]
    best_score = weight(best)
    for move in moves[1:]:
        score = weight(move)
        if score > best_score:
            best, best_score = move, score
    return best


def ai_pick_move(state: GameState) -> Optional[Coord]:
    """Picks the computer's move for the side to move, or None if it has nothing to play."""
    moves = legal_moves(state.board, state.turn)
    if not moves:
        return None
    return choose_move(state.board, state.turn, moves)
