"""
Othello core Python package.

Pure game logic shared by the Flask app, the terminal front end and the tests.
Modules:
- board.py: Board, Cell, Coord
- moves.py: flip detection, legal moves, move application
- state.py: GameState, Phase, modes
- turns.py: turn, pass and game-over transitions
- ai.py: static weight-table opponent
- db.py: SQLite stats persistence
- session.py: GameSession command interface with the computer's thinking delay
"""
