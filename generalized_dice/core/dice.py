"""
dice.py
Defines the Die and DieSet models: immutable face sequences loaded once at startup.
Related modules:
- config.py: load_dice builds a DieSet from command-line die specs.
- engine.py: Looks up faces when resolving a round.
- probability.py: Compares dice face by face.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from .errors import InvariantViolation


@dataclass(frozen=True)
class Die:
    """
    An ordered, immutable sequence of non-negative integer faces.
    Args:
        faces (tuple[int, ...]): Face values in roll order.
    """
    faces: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.faces)

    def face_at(self, face_index: int) -> int:
        """
        Return the face at the given position.
        Raises:
            InvariantViolation: If face_index is outside the die.
        """
        if not 0 <= face_index < len(self.faces):
            raise InvariantViolation(
                f"face index {face_index} out of range for die with {len(self.faces)} faces"
            )
        return self.faces[face_index]

    def describe(self) -> str:
        return "[" + ",".join(str(f) for f in self.faces) + "]"


class DieSet:
    """
    The read-only set of dice shared by both players for the whole session.
    Dice are identified by their position in the set.
    """
    def __init__(self, dice: Sequence[Die]):
        self._dice: Tuple[Die, ...] = tuple(dice)

    def __len__(self) -> int:
        return len(self._dice)

    def __iter__(self) -> Iterator[Die]:
        return iter(self._dice)

    def die(self, die_index: int) -> Die:
        if not 0 <= die_index < len(self._dice):
            raise InvariantViolation(f"die index {die_index} out of range for {len(self._dice)} dice")
        return self._dice[die_index]

    def face_at(self, die_index: int, face_index: int) -> int:
        """
        Bounds-checked face lookup.
        Args:
            die_index (int): Position of the die in the set.
            face_index (int): Position of the face on that die.
        Returns:
            int: The face value.
        Raises:
            InvariantViolation: If either index is out of range.
        """
        return self.die(die_index).face_at(face_index)

    def all_dice(self) -> Tuple[Die, ...]:
        return self._dice

    def describe(self, die_index: int) -> str:
        """Render a die as shown in prompts, e.g. "[2,2,4,4,9,9]"."""
        return self.die(die_index).describe()
