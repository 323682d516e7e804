"""
config.py
Defines the GameConfig dataclass, which centralizes the numeric constants of a generalized dice session,
and load_dice, which turns command-line die specs into a DieSet.
Related modules:
- dice.py: Die and DieSet built by load_dice.
- engine.py: Uses GameConfig for commitment ranges and key size.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .dice import Die, DieSet
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_FACE_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class GameConfig:
    """
    Centralizes all rule options and numeric constraints for a session.
    Fields:
        roll_range (int): Range of each modulo contribution; results index die faces (default 6).
        first_move_range (int): Range of the value guessed to decide who moves first (default 2).
        key_bytes (int): Size of each HMAC key in bytes (32 -> 256 bits).
        min_dice (int): Minimum number of dice needed to play.
        require_full_dice (bool): Reject dice with fewer than roll_range faces at load time (default off;
            a roll landing past the last face then fails as an InvariantViolation).
        peer_agent (str): Registry name of the computer's die-picking strategy.
        rng_seed (int|None): Seed for the computer's non-committed choices only.
    """
    roll_range: int = 6
    first_move_range: int = 2
    key_bytes: int = 32
    min_dice: int = 3
    require_full_dice: bool = False
    peer_agent: str = "random"
    rng_seed: Optional[int] = None


def parse_die(spec: str, position: int) -> Die:
    """
    Parse one comma-separated die spec such as "2,2,4,4,9,9".
    Args:
        spec (str): The raw argument.
        position (int): Zero-based position of the argument, used in error messages.
    Returns:
        Die: The parsed die.
    Raises:
        ConfigurationError: If the spec is empty or contains a non-numeric face.
    """
    text = spec.strip()
    if not text:
        raise ConfigurationError(f"Die {position} is empty.")
    faces = []
    for raw in text.split(","):
        raw = raw.strip()
        if not _FACE_RE.match(raw):
            raise ConfigurationError(
                f"Die {position} has an invalid face {raw!r}: faces must be non-negative integers."
            )
        faces.append(int(raw))
    return Die(tuple(faces))


def load_dice(specs: Iterable[str], config: Optional[GameConfig] = None) -> DieSet:
    """
    Build the session's DieSet from startup arguments.
    Dice shorter than `roll_range` are only rejected when config.require_full_dice is set.
    Raises:
        ConfigurationError: On too few dice, an empty die or a non-numeric face.
    """
    config = config or GameConfig()
    dice = [parse_die(spec, i) for i, spec in enumerate(specs)]
    if len(dice) < config.min_dice:
        raise ConfigurationError(
            f"At least {config.min_dice} dice must be provided as input (got {len(dice)})."
        )
    if config.require_full_dice:
        for i, die in enumerate(dice):
            if len(die) < config.roll_range:
                raise ConfigurationError(
                    f"Die {i} has {len(die)} faces; at least {config.roll_range} are required."
                )
    logger.debug("loaded %d dice: %s", len(dice), [d.faces for d in dice])
    return DieSet(dice)
