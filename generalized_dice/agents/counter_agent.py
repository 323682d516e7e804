from .random_agent import RandomAgent
from . import register_agent
from ..core.probability import strict_win_fraction


@register_agent("counter")
class CounterAgent(RandomAgent):
    """
    Exploits non-transitive dice: when the user has already picked, choose the unused die
    with the best chance of beating it. Falls back to a random pick when moving first.
    Ties between equally strong dice are broken by the lowest index.
    """

    def choose_die(self, view):
        user_die = view.get("user_die")
        if user_die is None:
            return super().choose_die(view)
        dice = view["dice"]
        target = dice.die(user_die)
        return max(
            self.available_dice(view),
            key=lambda i: (strict_win_fraction(dice.die(i), target), -i),
        )
