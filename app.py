from __future__ import annotations

import logging
import os
import sys
import uuid
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request
from itsdangerous import BadData, URLSafeSerializer

# Ensure package imports work when executed directly from repo root or as module
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

try:
    from .game import (  # type: ignore
        Board,
        GameState,
        Stats,
        SOLO,
        MODES,
        THINK_DELAY,
        legal_moves,
        new_game,
        play_move,
        settle,
        ai_pick_move,
        load_stats,
        save_stats,
        record_result,
        claim_game,
    )
except ImportError:
    from game import (  # type: ignore
        Board,
        GameState,
        Stats,
        SOLO,
        MODES,
        THINK_DELAY,
        legal_moves,
        new_game,
        play_move,
        settle,
        ai_pick_move,
        load_stats,
        save_stats,
        record_result,
        claim_game,
    )

logger = logging.getLogger(__name__)

DEFAULT_DB = os.getenv("OTHELLO_DB", "data/othello.db")

app = Flask(__name__)
# Signs the state tokens handed to clients; set it to keep tokens valid across restarts
app.secret_key = os.getenv("OTHELLO_SECRET_KEY") or uuid.uuid4().hex


# ---------- JSON helpers ----------

def board_to_json(b: Board) -> List[List[int]]:
    return b.rows()


def board_from_json(rows: Any) -> Board:
    return Board.from_rows([[int(v) for v in row] for row in rows])


def state_to_json(s: GameState) -> Dict[str, Any]:
    return {
        "board": board_to_json(s.board),
        "turn": int(s.turn),
        "mode": s.mode,
        "phase": s.phase.value,
        "winner": None if s.winner is None else int(s.winner),
        "passed": None if s.passed is None else int(s.passed),
    }


def json_to_state(obj: Dict[str, Any]) -> GameState:
    """Rebuilds a state from JSON. Phase and winner are recomputed from the board, never trusted."""
    board = board_from_json(obj["board"])
    turn = int(obj.get("turn", 1))
    if turn not in (1, 2):
        raise ValueError(f"turn must be 1 or 2, got {turn}")
    mode = str(obj.get("mode", SOLO))
    if mode not in MODES:
        raise ValueError(f"unknown mode {mode!r}")
    return settle(GameState(board=board, turn=turn, mode=mode))


def stats_to_json(stats: Stats) -> Dict[str, Any]:
    return {"wins": stats.wins, "losses": stats.losses, "draws": stats.draws, "lastMode": stats.last_mode}


def _moves_json(moves: List[Tuple[int, int]]) -> List[List[int]]:
    return [[int(r), int(c)] for r, c in moves]


def _legal_for(state: GameState) -> List[List[int]]:
    if state.over:
        return []
    return _moves_json(legal_moves(state.board, state.turn))


def _serializer() -> URLSafeSerializer:
    return URLSafeSerializer(app.secret_key, salt="othello-state")


def sign_state(state: GameState, game_id: str) -> str:
    """Signs a state together with the id of the game it belongs to."""
    return _serializer().dumps({"game": game_id, "state": state_to_json(state)})


def _parse_state(body: Dict[str, Any]) -> Tuple[Optional[GameState], Optional[str], Any]:
    """
    Reads the incoming state. A signed "token" takes precedence and also yields the game id;
    a bare "state" is playable but belongs to no game, so its results are never tallied.
    """
    token = body.get("token")
    if token is not None:
        try:
            payload = _serializer().loads(token)
            return json_to_state(payload["state"]), str(payload["game"]), None
        except BadData:
            return None, None, (jsonify({"ok": False, "error": "bad token"}), 400)
        except (KeyError, TypeError, ValueError) as e:
            return None, None, (jsonify({"ok": False, "error": f"bad state: {e}"}), 400)
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        return None, None, (jsonify({"ok": False, "error": "state required"}), 400)
    try:
        return json_to_state(s_in), None, None
    except (KeyError, TypeError, ValueError) as e:
        return None, None, (jsonify({"ok": False, "error": f"bad state: {e}"}), 400)


def _state_out(state: GameState, game_id: Optional[str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {"state": state_to_json(state), "legalMoves": _legal_for(state)}
    if game_id is not None:
        out["gameId"] = game_id
        out["token"] = sign_state(state, game_id)
    return out


def _after_move(
    state: GameState,
    game_id: Optional[str],
    move: Tuple[int, int],
    flips: List[Tuple[int, int]],
) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "ok": True,
        "move": [int(move[0]), int(move[1])],
        "flips": _moves_json(flips),
    }
    out.update(_state_out(state, game_id))
    if state.over and state.winner is not None:
        stats = load_stats(DEFAULT_DB)
        # Each signed game is counted once, however often its last move is replayed
        if state.mode == SOLO and game_id is not None and claim_game(DEFAULT_DB, game_id, state.winner, state.mode):
            stats = record_result(stats, state.winner, state.mode)
            save_stats(DEFAULT_DB, stats)
        out["stats"] = stats_to_json(stats)
    return out


# ---------- Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    stats = load_stats(DEFAULT_DB)
    mode = body.get("mode") or stats.last_mode
    if mode not in MODES:
        return jsonify({"ok": False, "error": f"unknown mode: {mode}"}), 400
    if mode != stats.last_mode:
        stats = replace(stats, last_mode=mode)
        save_stats(DEFAULT_DB, stats)
        logger.info("Mode set to %s", mode)
    state = new_game(mode)
    out: Dict[str, Any] = {"ok": True, "stats": stats_to_json(stats)}
    out.update(_state_out(state, uuid.uuid4().hex))
    return jsonify(out)


@app.post("/api/legal")
def api_legal() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    state, game_id, err = _parse_state(body)
    if err:
        return err
    out: Dict[str, Any] = {"ok": True}
    out.update(_state_out(state, game_id))
    return jsonify(out)


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    state, game_id, err = _parse_state(body)
    if err:
        return err
    if state.over:
        return jsonify({"ok": False, "error": "Game over", "state": state_to_json(state)}), 409
    if state.thinking:
        return jsonify({"ok": False, "error": "Computer is thinking", "state": state_to_json(state)}), 409
    try:
        r, c = body["move"]
        move = (int(r), int(c))
    except (KeyError, TypeError, ValueError):
        return jsonify({"ok": False, "error": "move must be [row, col]"}), 400
    next_state, flips = play_move(state, move) if Board.in_bounds(*move) else (state, [])
    if not flips:
        logger.debug("Rejected illegal move %s", move)
        return jsonify({"ok": False, "error": "Illegal move", "legalMoves": _legal_for(state)}), 400
    return jsonify(_after_move(next_state, game_id, move, flips))


@app.post("/api/ai")
def api_ai() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    state, game_id, err = _parse_state(body)
    if err:
        return err
    move = None if state.over else ai_pick_move(state)
    if move is None:
        return jsonify({"ok": False, "error": "No AI move available", "state": state_to_json(state)}), 409
    next_state, flips = play_move(state, move)
    return jsonify(_after_move(next_state, game_id, move, flips))


@app.get("/api/stats")
def api_stats() -> Any:
    return jsonify({"ok": True, "stats": stats_to_json(load_stats(DEFAULT_DB))})


@app.get("/api/config")
def api_config() -> Any:
    return jsonify({"ok": True, "thinkMs": int(THINK_DELAY * 1000), "modes": list(MODES)})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, os.getenv("OTHELLO_LOG_LEVEL", "INFO").upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
