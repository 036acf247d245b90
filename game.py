from __future__ import annotations

# Facade module that re-exports Othello core functionality.
# Kept for the Flask app and tests; single-responsibility modules live under othello_core/*.

try:
    from .othello_core.board import Board, Cell, Coord, EMPTY, BLACK, WHITE, SIZE  # type: ignore
    from .othello_core.moves import (  # type: ignore
        DIRECTIONS,
        opponent,
        compute_flips,
        is_legal,
        legal_moves,
        has_legal_move,
        apply_move,
    )
    from .othello_core.state import GameState, Phase, SOLO, DUO, MODES, DRAW, HUMAN_COLOR, CPU_COLOR  # type: ignore
    from .othello_core.turns import new_game, advance_turn, settle, play_move, final_outcome  # type: ignore
    from .othello_core.ai import WEIGHTS, weight, choose_move, ai_pick_move  # type: ignore
    from .othello_core.db import (  # type: ignore
        Stats,
        _ensure_db_dir,
        _resolve_db_path,
        load_stats,
        save_stats,
        record_result,
        claim_game,
    )
    from .othello_core.session import GameSession, MoveResult, THINK_DELAY, timer_scheduler  # type: ignore
except ImportError:
    from othello_core.board import Board, Cell, Coord, EMPTY, BLACK, WHITE, SIZE  # type: ignore
    from othello_core.moves import (  # type: ignore
        DIRECTIONS,
        opponent,
        compute_flips,
        is_legal,
        legal_moves,
        has_legal_move,
        apply_move,
    )
    from othello_core.state import GameState, Phase, SOLO, DUO, MODES, DRAW, HUMAN_COLOR, CPU_COLOR  # type: ignore
    from othello_core.turns import new_game, advance_turn, settle, play_move, final_outcome  # type: ignore
    from othello_core.ai import WEIGHTS, weight, choose_move, ai_pick_move  # type: ignore
    from othello_core.db import (  # type: ignore
        Stats,
        _ensure_db_dir,
        _resolve_db_path,
        load_stats,
        save_stats,
        record_result,
        claim_game,
    )
    from othello_core.session import GameSession, MoveResult, THINK_DELAY, timer_scheduler  # type: ignore


def main() -> None:
    # CLI driver delegated to othello_core.cli
    try:
        from .othello_core.cli import main as _main  # type: ignore
    except ImportError:
        from othello_core.cli import main as _main  # type: ignore
    _main()


if __name__ == '__main__':
    main()
