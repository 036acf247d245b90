from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence, Set, Tuple

Coord = Tuple[int, int]

SIZE = 8


class Cell(IntEnum):
    EMPTY = 0
    BLACK = 1
    WHITE = 2


EMPTY = Cell.EMPTY
BLACK = Cell.BLACK
WHITE = Cell.WHITE

PLAYERS = (BLACK, WHITE)

_SYMBOLS = {EMPTY: ".", BLACK: "X", WHITE: "O"}


@dataclass
class Board:
    """Represents the 8x8 Othello grid. Cells are stored row-major and mutated in place by moves."""
    cells: List[int] = field(default_factory=lambda: [EMPTY] * (SIZE * SIZE))

    def __post_init__(self) -> None:
        if len(self.cells) != SIZE * SIZE:
            raise ValueError(f"Board must have {SIZE * SIZE} cells, got {len(self.cells)}")
        for v in self.cells:
            if v not in (EMPTY, BLACK, WHITE):
                raise ValueError(f"Invalid cell value: {v!r}")
        self.cells = [Cell(v) for v in self.cells]

    @classmethod
    def opening(cls) -> 'Board':
        """Builds the standard four-piece starting position."""
        board = cls()
        board.set(3, 3, WHITE)
        board.set(3, 4, BLACK)
        board.set(4, 3, BLACK)
        board.set(4, 4, WHITE)
        return board

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> 'Board':
        if len(rows) != SIZE or any(len(r) != SIZE for r in rows):
            raise ValueError(f"Board must be {SIZE}x{SIZE}")
        flat: List[int] = []
        for r in rows:
            flat.extend(int(v) for v in r)
        return cls(cells=flat)

    @staticmethod
    def in_bounds(r: int, c: int) -> bool:
        return 0 <= r < SIZE and 0 <= c < SIZE

    def index(self, r: int, c: int) -> int:
        """Calculates the 1D index for a given row and column."""
        return r * SIZE + c

    def at(self, r: int, c: int) -> Cell:
        return self.cells[self.index(r, c)]

    def set(self, r: int, c: int, value: int) -> None:
        self.cells[self.index(r, c)] = Cell(value)

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates on the board, top-left to bottom-right."""
        for r in range(SIZE):
            for c in range(SIZE):
                yield (r, c)

    def count(self, color: int) -> int:
        return sum(1 for v in self.cells if v == color)

    def counts(self) -> Tuple[int, int, int]:
        """Returns (black, white, empty)."""
        return self.count(BLACK), self.count(WHITE), self.count(EMPTY)

    def is_full(self) -> bool:
        return EMPTY not in self.cells

    def copy(self) -> 'Board':
        return Board(cells=list(self.cells))

    def rows(self) -> List[List[int]]:
        return [[int(v) for v in self.cells[r * SIZE:(r + 1) * SIZE]] for r in range(SIZE)]

    def pretty(self, hints: Optional[Iterable[Coord]] = None) -> str:
        """Generates a human-readable grid; hinted empty cells are drawn as '*'."""
        hint_set: Set[Coord] = set(hints or ())
        lines: List[str] = ["  " + " ".join(str(c) for c in range(SIZE))]
        for r in range(SIZE):
            row: List[str] = []
            for c in range(SIZE):
                cell = self.at(r, c)
                if cell == EMPTY and (r, c) in hint_set:
                    row.append("*")
                else:
                    row.append(_SYMBOLS[cell])
            lines.append(f"{r} " + " ".join(row))
        return "\n".join(lines)
