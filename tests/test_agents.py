import random
import unittest
from generalized_dice.agents import AGENT_MAP, create_agent
from generalized_dice.agents.counter_agent import CounterAgent
from generalized_dice.agents.random_agent import RandomAgent
from generalized_dice.core.config import load_dice
from generalized_dice.core.errors import InvariantViolation

from dice_fixtures import EXAMPLE


class TestAgents(unittest.TestCase):
    """
    Tests for the computer's die-picking strategies:
      - picks never land on a used die,
      - the counter strategy answers with the die that beats the user's,
      - an exhausted die set fails fast instead of looping.
    """

    def setUp(self):
        self.dice = load_dice(EXAMPLE)

    def test_registry_contains_strategies(self):
        self.assertIn("random", AGENT_MAP)
        self.assertIn("counter", AGENT_MAP)
        self.assertIsInstance(create_agent("RANDOM"), RandomAgent)
        with self.assertRaises(ValueError):
            create_agent("nope")

    def test_random_agent_avoids_used_dice(self):
        agent = RandomAgent(rng=random.Random(0))
        view = {"dice": self.dice, "used_dice": frozenset({0, 2}), "user_die": 0}
        for _ in range(50):
            self.assertEqual(agent.choose_die(view), 1)

    def test_random_agent_covers_free_dice(self):
        agent = RandomAgent(rng=random.Random(1))
        view = {"dice": self.dice, "used_dice": frozenset({1}), "user_die": None}
        picks = {agent.choose_die(view) for _ in range(100)}
        self.assertEqual(picks, {0, 2})

    def test_counter_agent_exploits_cycle(self):
        agent = CounterAgent(rng=random.Random(0))
        # 0 is beaten by 2, 1 by 0, 2 by 1
        for user_die, expected in ((0, 2), (1, 0), (2, 1)):
            view = {"dice": self.dice, "used_dice": frozenset({user_die}), "user_die": user_die}
            self.assertEqual(agent.choose_die(view), expected)

    def test_counter_agent_counts_duplicate_dice(self):
        # die 1 copies the user's die 0 and wins 15/36; die 2 wins only 13/36
        dice = load_dice(["1,2,3,4,5,6", "1,2,3,4,5,6", "0,0,0,6,6,4"])
        view = {"dice": dice, "used_dice": frozenset({0}), "user_die": 0}
        self.assertEqual(CounterAgent(rng=random.Random(0)).choose_die(view), 1)

    def test_no_free_die_is_invariant_violation(self):
        view = {"dice": self.dice, "used_dice": frozenset({0, 1, 2}), "user_die": None}
        with self.assertRaises(InvariantViolation):
            RandomAgent().choose_die(view)


if __name__ == '__main__':
    unittest.main()
