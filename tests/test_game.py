'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Play session: scramble, throttled input, timer and win flow.

'''
import os
import tempfile
import unittest

from cubeplay.config import GameConfig
from cubeplay.cube import Move
from cubeplay.game import GameSession, RESET_DISPLAY
from cubeplay.ranking import Ranking
from tests.test_functions import FakeClock, FixedCamera


class TestGameSession(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.clock = FakeClock()
        self.config = GameConfig(verbose=False, ranking_path=os.path.join(self.tmp.name, "rank.csv"))
        self.session = GameSession(self.config, clock=self.clock)
        self.camera = FixedCamera()
        self.wins = []
        self.session.on_win = self.wins.append

    def tearDown(self):
        self.tmp.cleanup()

    def scramble_and_settle(self, seed=0):
        moves = self.session.scramble(seed=seed)
        self.session.scheduler.drain()
        return moves

    def solve(self, moves):
        for m in reversed(moves):
            self.session.scheduler.enqueue(m.inverse())

    def test_new_session(self):
        self.assertEqual(self.session.size, 3)
        self.assertTrue(self.session.puzzle.is_solved())
        self.assertFalse(self.session.is_running)
        self.assertEqual(self.session.display_time(), RESET_DISPLAY)

    def test_scramble_starts_timer_after_it_plays(self):
        moves = self.session.scramble(seed=1)
        self.assertEqual(len(moves), 35)
        self.assertTrue(all(m.duration == 0.05 for m in moves))
        self.assertFalse(self.session.is_scrambled)
        self.assertFalse(self.session.is_running)

        self.session.scheduler.drain()
        self.assertTrue(self.session.is_scrambled)
        self.assertTrue(self.session.is_running)
        self.assertEqual(self.session.puzzle.moves_since_scramble(), 0)

    def test_scramble_refused_while_animating(self):
        self.session.press_key("w", self.camera)
        self.assertEqual(self.session.scramble(), [])
        self.assertFalse(self.session._scrambling)

    def test_input_refused_until_scramble_settles(self):
        scrambled = []
        self.session.on_scrambled = lambda: scrambled.append(True)
        moves = self.session.scramble(seed=3)
        while self.session.scheduler.pending > 1:
            self.session.tick(0.05)

        self.assertFalse(self.session.accepts_input())
        self.assertIsNone(self.session.press_key("w", self.camera))
        self.assertIsNone(self.session.drag((1, 0, 0), 40, 0, self.camera))

        self.session.scheduler.drain()
        self.assertEqual(scrambled, [True])
        hist = self.session.puzzle.get_history()
        self.assertEqual(len(hist), len(moves))
        self.assertEqual(set(hist["phase"]), {"scramble"})

        self.assertEqual(self.session.press_key("w", self.camera), Move("x", 0, 1))
        self.session.scheduler.drain()
        self.assertEqual(self.session.puzzle.moves_since_scramble(), 1)

    def test_rapid_input_is_throttled(self):
        accepted = [self.session.press_key("w", self.camera) for _ in range(5)]
        self.assertEqual(sum(m is not None for m in accepted), 4)
        self.assertIsNone(accepted[-1])
        self.assertEqual(self.session.scheduler.pending, 3)

    def test_key_and_drag_follow_view(self):
        self.assertEqual(self.session.press_key("q", self.camera), Move("x", -1, 1))
        self.session.scheduler.drain()
        self.assertIsNone(self.session.press_key("p", self.camera))
        self.assertIsNone(self.session.drag((1, 0, 0), 4, 4, self.camera))
        self.assertEqual(self.session.drag((1, 0, 0), 40, 4, self.camera), Move("x", 1, 1))

    def test_move_start_hook(self):
        started = []
        self.session.on_move_start = started.append
        self.session.press_key("e", self.camera)
        self.assertEqual(started, [Move("x", 1, 1)])

    def test_win_flow(self):
        moves = self.scramble_and_settle(seed=4)
        self.clock.advance(5.0)
        self.solve(moves)
        self.session.scheduler.drain()

        self.assertEqual(self.wins, ["00:05.00"])
        self.assertEqual(self.session.final_time, "00:05.00")
        self.assertFalse(self.session.is_running)
        self.assertFalse(self.session.is_scrambled)
        self.assertEqual(self.session.display_time(), "00:05.00")

        rank = self.session.save_score("ana")
        self.assertEqual(rank, [{"name": "ana", "time": "00:05.00"}])
        self.assertEqual(Ranking(self.config.ranking_path).load(), rank)

        # one entry per solve
        with self.assertRaises(ValueError):
            self.session.save_score("ana")
        self.assertEqual(len(Ranking(self.config.ranking_path).load()), 1)

    def test_no_win_inside_grace_period(self):
        moves = self.scramble_and_settle(seed=2)
        self.clock.advance(0.5)
        self.solve(moves)
        self.session.scheduler.drain()
        self.assertEqual(self.wins, [])
        self.assertTrue(self.session.is_running)
        self.assertTrue(self.session.puzzle.is_solved())

    def test_no_win_without_scramble(self):
        self.clock.advance(10.0)
        self.session.press_key("w", self.camera)
        self.session.press_key("w", self.camera)
        self.session.scheduler.drain()
        self.session.scheduler.enqueue(Move("x", 0, -1))
        self.session.scheduler.enqueue(Move("x", 0, -1))
        self.session.scheduler.drain()
        self.assertTrue(self.session.puzzle.is_solved())
        self.assertEqual(self.wins, [])

    def test_save_score_needs_a_win(self):
        with self.assertRaises(ValueError):
            self.session.save_score("ana")

    def test_reset_stops_everything(self):
        self.scramble_and_settle()
        self.clock.advance(3.0)
        self.session.press_key("w", self.camera)
        self.session.reset()
        self.assertFalse(self.session.is_running)
        self.assertFalse(self.session.is_scrambled)
        self.assertFalse(self.session.scheduler.is_animating)
        self.assertTrue(self.session.puzzle.is_solved())
        self.assertEqual(self.session.display_time(), RESET_DISPLAY)

    def test_change_size(self):
        old = self.session.puzzle
        self.session.change_size(2)
        self.assertEqual(self.session.size, 2)
        self.assertEqual(old.cubies, [])
        self.assertEqual(len(self.session.puzzle.cubies), 8)
        self.assertEqual(self.session.press_key("e", self.camera), Move("x", 0.5, 1))
        self.assertIsNone(self.session.press_key("w", self.camera))

        with self.assertRaises(ValueError):
            self.session.change_size(5)
        self.assertEqual(self.session.size, 2)


if __name__ == "__main__":
    unittest.main()
