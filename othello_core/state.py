from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .board import Board, BLACK, WHITE

SOLO = "solo"
DUO = "duo"
MODES = (SOLO, DUO)

# The computer always plays White in solo mode; the human opens as Black.
HUMAN_COLOR = BLACK
CPU_COLOR = WHITE

DRAW = 0


class Phase(str, Enum):
    AWAITING = "awaiting"
    THINKING = "thinking"
    GAME_OVER = "game_over"


def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode!r} (expected one of {MODES})")
    return mode


@dataclass(frozen=True)
class GameState:
    """Represents one snapshot of a game: the board, whose turn it is, and how play stands."""
    board: Board
    turn: int = BLACK
    mode: str = SOLO
    phase: Phase = Phase.AWAITING
    winner: Optional[int] = None  # BLACK, WHITE, DRAW, or None while running
    passed: Optional[int] = None  # color whose turn was skipped by the last transition
    generation: int = 0

    @property
    def over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    @property
    def thinking(self) -> bool:
        return self.phase == Phase.THINKING

    def is_cpu_turn(self) -> bool:
        return self.mode == SOLO and self.turn == CPU_COLOR and not self.over

    def other_player(self) -> int:
        return WHITE if self.turn == BLACK else BLACK

    def with_phase(self, phase: Phase) -> 'GameState':
        return replace(self, phase=phase)

    def with_turn(self, next_turn: int) -> 'GameState':
        return replace(self, turn=next_turn)
