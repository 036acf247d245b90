from __future__ import annotations

from typing import List, Tuple

from .board import Board, Cell, Coord, EMPTY, BLACK, WHITE, PLAYERS

# N, NE, E, SE, S, SW, W, NW
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, 0), (-1, 1), (0, 1), (1, 1),
    (1, 0), (1, -1), (0, -1), (-1, -1),
)


def opponent(color: int) -> Cell:
    """Returns the other player's color."""
    _check_color(color)
    return WHITE if color == BLACK else BLACK


def _check_color(color: int) -> None:
    if color not in PLAYERS:
        raise ValueError(f"Not a player color: {color!r}")


def _check_position(position: Coord) -> None:
    r, c = position
    if not Board.in_bounds(r, c):
        raise ValueError(f"Position off the board: {position!r}")


def _line_flips(board: Board, r: int, c: int, dr: int, dc: int, color: int, opp: int) -> List[Coord]:
    """Opponent cells bracketed along one ray from (r, c), or [] when the run is not closed."""
    run: List[Coord] = []
    rr, cc = r + dr, c + dc
    while Board.in_bounds(rr, cc):
        cell = board.at(rr, cc)
        if cell == opp:
            run.append((rr, cc))
        elif cell == color:
            return run
        else:
            return []
        rr += dr
        cc += dc
    return []


def compute_flips(board: Board, position: Coord, color: int) -> List[Coord]:
    """
    Finds every opponent disc captured by placing `color` at `position`.
    An occupied target captures nothing. Order follows DIRECTIONS, then distance.
    """
    _check_position(position)
    opp = opponent(color)
    r, c = position
    if board.at(r, c) != EMPTY:
        return []
    flips: List[Coord] = []
    for dr, dc in DIRECTIONS:
        flips.extend(_line_flips(board, r, c, dr, dc, color, opp))
    return flips


def is_legal(board: Board, position: Coord, color: int) -> bool:
    return len(compute_flips(board, position, color)) > 0


def legal_moves(board: Board, color: int) -> List[Coord]:
    """Calculates all legal placements for `color` in row-major order."""
    _check_color(color)
    return [pos for pos in board.coords() if compute_flips(board, pos, color)]


def has_legal_move(board: Board, color: int) -> bool:
    _check_color(color)
    return any(compute_flips(board, pos, color) for pos in board.coords())


def apply_move(board: Board, position: Coord, color: int) -> List[Coord]:
    """
    Places `color` at `position` and flips the captured discs, mutating `board`.
    Returns the flipped positions; an empty list means the move was illegal and
    the board was left untouched.
    """
    flips = compute_flips(board, position, color)
    if not flips:
        return []
    board.set(position[0], position[1], color)
    for rr, cc in flips:
        board.set(rr, cc, color)
    return flips
