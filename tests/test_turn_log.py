import random
import unittest
from generalized_dice.agents.random_agent import RandomAgent
from generalized_dice.core.config import GameConfig, load_dice
from generalized_dice.core.engine import GameEngine

from dice_fixtures import EXAMPLE


class TestTurnLog(unittest.TestCase):
    """
    Tests for the per-action `turn_log` snapshots and emitted events recorded by `GameEngine`.
    These tests verify:
      - An initial snapshot is recorded when the session starts.
      - Each accepted action appends a snapshot; rejected input and help do not.
      - Snapshots never expose a committed value, only its digest.
    """

    def setUp(self):
        cfg = GameConfig(rng_seed=3)
        self.engine = GameEngine(cfg, load_dice(EXAMPLE, cfg), agent=RandomAgent(rng=random.Random(3)))
        self.engine.start()

    def test_initial_and_action_snapshots(self):
        self.assertEqual(len(self.engine.turn_log), 1)
        initial = self.engine.turn_log[0]
        self.assertIsNone(initial['action'])
        self.assertEqual(initial['phase'], 'awaiting_first_player_guess')
        self.assertIsNotNone(initial['commitment'])

        self.engine.handle_line("0")
        self.assertEqual(len(self.engine.turn_log), 2)
        second = self.engine.turn_log[-1]
        self.assertEqual(second['action'], {'type': 'GuessAction', 'value': 0})
        self.assertEqual(second['phase'], 'awaiting_die_selection')
        self.assertIn(second['turn_owner'], ('user', 'peer'))
        self.assertNotIn('value', {k for k in second if k != 'action'})

    def test_rejected_and_help_lines_are_not_logged(self):
        self.engine.handle_line("7")
        self.engine.handle_line("?")
        self.assertEqual(len(self.engine.turn_log), 1)

    def test_events_cover_a_round(self):
        self.engine.handle_line("1")
        free = next(i for i in range(3) if i not in self.engine.state.used_dice)
        self.engine.handle_line(str(free))
        self.engine.handle_line("2")
        types = [e['type'] for e in self.engine.pop_events()]
        self.assertEqual(types[:3], ['CommitmentIssued', 'CommitmentRevealed', 'FirstPlayerDecided'])
        self.assertEqual(types.count('DieSelected') >= 2, True)
        self.assertIn('RoundResolved', types)
        self.assertEqual(self.engine.get_events(), [])

    def test_exit_snapshot(self):
        self.engine.handle_line("X")
        last = self.engine.turn_log[-1]
        self.assertEqual(last['action']['type'], 'ExitAction')
        self.assertEqual(last['phase'], 'idle')
        self.assertIsNone(last['commitment'])


if __name__ == '__main__':
    unittest.main()
