from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from .board import Coord, BLACK, WHITE
from .session import GameSession, THINK_DELAY
from .state import MODES

_NAMES = {BLACK: "Black (X)", WHITE: "White (O)"}


def _parse_move(text: str) -> Optional[Coord]:
    sep = ',' if ',' in text else ' '
    try:
        r_s, c_s = [t for t in text.split(sep) if t != '']
        return (int(r_s), int(c_s))
    except ValueError:
        return None


def _show(session: GameSession) -> None:
    s = session.state
    print()
    print(s.board.pretty([] if s.thinking else session.legal_moves()))
    black, white, _ = s.board.counts()
    print(f"Black: {black}  White: {white}")
    if s.passed is not None:
        print(f"{_NAMES[s.passed]} has no legal move and passes.")


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description='Play Othello in the terminal')
    parser.add_argument('--mode', choices=list(MODES), default=None,
                        help='solo (vs computer) or duo (two humans); defaults to the last mode played')
    parser.add_argument('--db', default=os.getenv('OTHELLO_DB', 'data/othello.db'), help='SQLite stats file path')
    parser.add_argument('--no-db', action='store_true', help='Keep stats in memory only')
    parser.add_argument('--think-ms', type=int, default=int(THINK_DELAY * 1000), help='Computer thinking delay')
    parser.add_argument('--log-level', default=os.getenv('OTHELLO_LOG_LEVEL', 'INFO'), help='Logging level')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    session = GameSession(
        db_path=None if args.no_db else args.db,
        think_delay=max(0, args.think_ms) / 1000.0,
    )
    if args.mode:
        session.set_mode(args.mode)
    stats = session.stats
    print(f"Mode: {session.state.mode}. Record: {stats.wins}W {stats.losses}L {stats.draws}D")
    print("Enter moves as r,c or r c. Commands: reset, solo, duo, quit.")

    while True:
        _show(session)
        state = session.state
        if state.over:
            black, white, _ = state.board.counts()
            if state.winner in _NAMES:
                print(f"{_NAMES[state.winner]} wins {black} vs {white}.")
            else:
                print(f"Draw {black} vs {white}.")
            stats = session.stats
            print(f"Record: {stats.wins}W {stats.losses}L {stats.draws}D")
            answer = input('Play again? [y/N] ').strip().lower()
            if answer not in ('y', 'yes'):
                return
            session.reset()
            continue
        if state.thinking:
            print("Computer is thinking...")
            session.wait_idle()
            if session.last_cpu_move is not None:
                print(f"Computer plays {session.last_cpu_move}")
            continue

        text = input(f"{_NAMES[state.turn]} to move: ").strip().lower()
        if text in ('q', 'quit', 'exit'):
            return
        if text == 'reset':
            session.reset()
            continue
        if text in MODES:
            session.set_mode(text)
            continue
        move = _parse_move(text)
        if move is None:
            print('Could not parse. Try again.')
            continue
        result = session.submit_move(move)
        if not result.accepted:
            print(f'Move rejected ({result.reason}). Try again.')


if __name__ == '__main__':
    main()
