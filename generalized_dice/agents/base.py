from abc import ABC, abstractmethod
from typing import Any, List

from ..core.errors import InvariantViolation


class Agent(ABC):
    """
    Abstract base class for the computer's die-picking strategies.
    Agents must implement choose_die(view), which receives the engine's selection view and returns a die index.
    Picks are autonomous decisions, not commitments: they are announced as soon as they are made.
    """

    @abstractmethod
    def choose_die(self, view: Any) -> int:
        """
        Given the selection view, return the index of an unused die.
        Args:
            view (dict): Keys 'dice' (DieSet), 'used_dice' (frozenset[int]) and 'user_die' (int|None).
        Returns:
            int: Index of the chosen die.
        """
        raise NotImplementedError

    def available_dice(self, view) -> List[int]:
        """
        Indexes of dice not yet claimed this round.
        Raises:
            InvariantViolation: If every die is already used.
        """
        free = [i for i in range(len(view["dice"])) if i not in view["used_dice"]]
        if not free:
            raise InvariantViolation("no unused die left to choose from")
        return free
