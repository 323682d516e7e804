"""
Shared dice sets and a deterministic commitment source for the test modules.
"""

from generalized_dice.core.fairness import FairValueGenerator

# The classic non-transitive set: 0 beats 1, 1 beats 2, 2 beats 0.
EXAMPLE = ["2,2,4,4,9,9", "6,8,1,1,8,6", "7,5,3,7,5,3"]


class ScriptedGenerator(FairValueGenerator):
    """Commits to predetermined values (keys stay random)."""
    def __init__(self, values):
        super().__init__()
        self.values = list(values)

    def _draw_value(self, value_range):
        value = self.values.pop(0)
        assert 0 <= value < value_range
        return value
