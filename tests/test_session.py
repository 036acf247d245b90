import os
import tempfile
import unittest

from game import (
    Board,
    GameState,
    GameSession,
    Phase,
    EMPTY,
    BLACK,
    WHITE,
    SOLO,
    DUO,
    load_stats,
)

_CHARS = {'.': EMPTY, 'X': BLACK, 'O': WHITE}


def make_board(rows):
    return Board.from_rows([[_CHARS[ch] for ch in row] for row in rows])


class _Task:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Collects scheduled callbacks so tests decide when the computer's delay expires."""

    def __init__(self):
        self.tasks = []

    def __call__(self, delay, callback):
        task = _Task(delay, callback)
        self.tasks.append(task)
        return task

    def pending(self):
        return [t for t in self.tasks if not t.cancelled]

    def run_pending(self):
        tasks, self.tasks = self.tasks, []
        for t in tasks:
            if not t.cancelled:
                t.callback()


class TestGameSession(unittest.TestCase):
    def setUp(self):
        self.td = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.td.name, "othello.db")
        self.sched = ManualScheduler()

    def tearDown(self):
        self.td.cleanup()

    def _session(self, mode=SOLO, db_path=None):
        return GameSession(mode=mode, db_path=db_path, think_delay=0.5, scheduler=self.sched)

    def test_given_solo_when_human_moves_then_computer_thinks_and_replies_after_delay(self):
        s = self._session()
        res = s.submit_move((2, 3))
        self.assertTrue(res.accepted)
        self.assertEqual(res.flips, [(3, 3)])
        self.assertTrue(s.state.thinking)
        self.assertEqual(len(self.sched.pending()), 1)
        self.assertEqual(self.sched.pending()[0].delay, 0.5)
        self.assertEqual(s.view()["hints"], [])

        self.sched.run_pending()
        self.assertEqual(s.last_cpu_move, (2, 2))
        self.assertEqual(s.state.turn, BLACK)
        self.assertEqual(s.state.phase, Phase.AWAITING)
        self.assertEqual(s.state.board.at(2, 2), WHITE)

    def test_given_thinking_when_human_clicks_then_rejected_without_change(self):
        s = self._session()
        s.submit_move((2, 3))
        before = s.state
        res = s.submit_move((2, 2))
        self.assertFalse(res.accepted)
        self.assertEqual(res.reason, "thinking")
        self.assertIs(s.state, before)

    def test_given_bad_clicks_when_submitted_then_rejected_with_reason(self):
        s = self._session(mode=DUO)
        opening = s.state
        self.assertEqual(s.submit_move((3, 3)).reason, "illegal")
        self.assertEqual(s.submit_move((0, 0)).reason, "illegal")
        self.assertEqual(s.submit_move((8, 1)).reason, "off_board")
        self.assertEqual(s.submit_move((2, 3), color=WHITE).reason, "not_your_turn")
        self.assertIs(s.state, opening)

    def test_given_duo_when_moves_alternate_then_no_computer_is_scheduled(self):
        s = self._session(mode=DUO)
        self.assertTrue(s.submit_move((2, 3), color=BLACK).accepted)
        self.assertEqual(s.state.turn, WHITE)
        self.assertFalse(s.state.thinking)
        self.assertEqual(self.sched.pending(), [])
        self.assertTrue(s.submit_move((2, 2), color=WHITE).accepted)
        self.assertEqual(s.state.turn, BLACK)

    def test_given_pending_computer_move_when_reset_then_stale_move_never_applied(self):
        s = self._session()
        s.submit_move((2, 3))
        task = self.sched.pending()[0]
        gen_before = s.state.generation

        fresh = s.reset()
        self.assertTrue(task.cancelled)
        self.assertEqual(fresh.generation, gen_before + 1)
        self.assertEqual(fresh.board.counts(), (2, 2, 60))
        self.assertEqual(fresh.turn, BLACK)
        self.assertFalse(fresh.thinking)

        # Even if the timer fires anyway, the old generation is ignored
        task.callback()
        self.assertIs(s.state, fresh)
        self.assertIsNone(s.last_cpu_move)

    def test_given_pending_computer_move_when_mode_changes_then_cancelled_and_mode_persisted(self):
        s = self._session(db_path=self.db_path)
        s.submit_move((2, 3))
        task = self.sched.pending()[0]
        state = s.set_mode(DUO)
        self.assertTrue(task.cancelled)
        self.assertEqual(state.mode, DUO)
        self.assertEqual(state.board.counts(), (2, 2, 60))
        self.assertEqual(load_stats(self.db_path).last_mode, DUO)

        # A new session resumes the stored mode
        s2 = GameSession(db_path=self.db_path, scheduler=self.sched)
        self.assertEqual(s2.state.mode, DUO)
        with self.assertRaises(ValueError):
            s2.set_mode("trio")

    def test_given_solo_win_when_game_ends_then_win_recorded_and_persisted(self):
        s = self._session(db_path=self.db_path)
        s.start_from(GameState(board=make_board([
            "XO......",
            "........",
            "........",
            "........",
            "........",
            "........",
            "........",
            "......OX",
        ]), turn=BLACK, mode=SOLO))
        res = s.submit_move((0, 2))
        self.assertTrue(res.accepted)
        self.assertEqual(s.state.passed, WHITE)
        self.assertEqual(s.state.turn, BLACK)
        self.assertEqual(self.sched.pending(), [])

        s.submit_move((7, 5))
        self.assertTrue(s.state.over)
        self.assertEqual(s.state.winner, BLACK)
        self.assertEqual(s.stats.wins, 1)
        self.assertEqual(load_stats(self.db_path).wins, 1)
        self.assertEqual(s.submit_move((5, 5)).reason, "game_over")
        self.assertEqual(s.legal_moves(), [])

    def test_given_computer_keeps_turn_after_pass_when_it_wins_then_loss_recorded(self):
        s = self._session(db_path=self.db_path)
        state = s.start_from(GameState(board=make_board([
            "OX......",
            "........",
            "........",
            "........",
            "........",
            "........",
            "........",
            "......XO",
        ]), turn=WHITE, mode=SOLO))
        self.assertTrue(state.thinking)

        self.sched.run_pending()
        # Edge cells (0,2) and (7,5) tie at weight 10; the first in row-major order is taken
        self.assertEqual(s.last_cpu_move, (0, 2))
        self.assertEqual(s.state.passed, BLACK)
        self.assertTrue(s.state.thinking)
        self.assertEqual(len(self.sched.pending()), 1)

        self.sched.run_pending()
        self.assertEqual(s.last_cpu_move, (7, 5))
        self.assertTrue(s.state.over)
        self.assertEqual(s.state.winner, WHITE)
        self.assertEqual(s.stats.losses, 1)
        self.assertEqual(load_stats(self.db_path).losses, 1)

    def test_given_duo_game_over_when_finished_then_stats_untouched(self):
        s = self._session(mode=DUO, db_path=self.db_path)
        s.start_from(GameState(board=make_board([
            "XO......",
            "........",
            "........",
            "........",
            "........",
            "........",
            "........",
            "......OX",
        ]), turn=BLACK, mode=DUO))
        s.submit_move((0, 2))
        s.submit_move((7, 5))
        self.assertTrue(s.state.over)
        self.assertEqual((s.stats.wins, s.stats.losses, s.stats.draws), (0, 0, 0))

    def test_given_full_even_board_when_resumed_in_solo_then_draw_recorded_and_persisted(self):
        s = self._session(db_path=self.db_path)
        state = s.start_from(GameState(board=make_board(["XXXXXXXX"] * 4 + ["OOOOOOOO"] * 4), turn=BLACK, mode=SOLO))
        self.assertTrue(state.over)
        self.assertEqual(state.winner, 0)
        self.assertEqual(self.sched.pending(), [])
        self.assertEqual((s.stats.wins, s.stats.losses, s.stats.draws), (0, 0, 1))
        self.assertEqual(load_stats(self.db_path).draws, 1)
        self.assertEqual(s.submit_move((0, 0)).reason, "game_over")

    def test_given_session_when_viewed_then_renderer_snapshot_complete(self):
        s = self._session(mode=DUO)
        v = s.view()
        self.assertEqual(len(v["board"]), 8)
        self.assertEqual(v["hints"], [[2, 3], [3, 2], [4, 5], [5, 4]])
        self.assertEqual(v["turn"], BLACK)
        self.assertEqual(v["counts"], {"black": 2, "white": 2})
        self.assertFalse(v["thinking"])
        self.assertEqual(v["phase"], "awaiting")
        self.assertEqual(v["stats"]["lastMode"], SOLO)

    def test_given_real_timer_when_waiting_idle_then_computer_move_lands(self):
        s = GameSession(mode=SOLO, think_delay=0.01)
        s.submit_move((2, 3))
        self.assertTrue(s.wait_idle(timeout=5))
        self.assertEqual(s.state.turn, BLACK)
        self.assertEqual(s.last_cpu_move, (2, 2))


if __name__ == '__main__':
    unittest.main(verbosity=2)
