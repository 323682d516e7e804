import random

from .base import Agent
from . import register_agent


@register_agent("random")
class RandomAgent(Agent):
    """
    Picks an unused die uniformly at random by rejection sampling over the used set.
    Uses a plain random.Random: the pick carries no fairness guarantee, so no secure source is needed.
    """
    def __init__(self, rng=None):
        """
        Args:
            rng: Optional random number generator (seed it for reproducible games).
        """
        self.rng = rng or random.Random()

    def choose_die(self, view):
        # fail fast instead of looping forever when nothing is left
        self.available_dice(view)
        count = len(view["dice"])
        while True:
            choice = self.rng.randrange(count)
            if choice not in view["used_dice"]:
                return choice
