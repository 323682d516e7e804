"""
actions.py
Defines the base Action type, the concrete actions a line of input can express,
and parse_action, which turns a raw line into an action valid for the current phase.
Related modules:
- state.py: Phase decides which tokens are accepted.
- engine.py: Consumes Action objects to update state.
"""

import re
from dataclasses import dataclass

from .errors import InputValidationError
from .state import Phase

EXIT_TOKEN = "X"
HELP_TOKEN = "?"

_INDEX_RE = re.compile(r"^[0-9]+$")


class Action:
    """
    Base class for all input actions.
    """
    pass


@dataclass(frozen=True)
class ExitAction(Action):
    pass


@dataclass(frozen=True)
class HelpAction(Action):
    pass


@dataclass(frozen=True)
class GuessAction(Action):
    """The user's guess of the value committed for the first move."""
    value: int


@dataclass(frozen=True)
class SelectDieAction(Action):
    """The user's die choice; range and availability are checked by the engine."""
    die_index: int


@dataclass(frozen=True)
class ModuloAction(Action):
    """The user's modulo contribution."""
    value: int


def parse_action(line: str, phase: Phase, roll_range: int = 6, first_move_range: int = 2) -> Action:
    """
    Parse one stripped line of input for the given phase.
    Args:
        line (str): Raw input (surrounding whitespace is ignored).
        phase (Phase): The active phase.
        roll_range (int): Accepted modulo values are single digits below this.
        first_move_range (int): Accepted guesses are single digits below this.
    Returns:
        Action: The parsed action.
    Raises:
        InputValidationError: If the token is not valid in this phase.
    """
    token = line.strip()
    if token == EXIT_TOKEN:
        return ExitAction()
    if token == HELP_TOKEN:
        return HelpAction()

    if phase is Phase.AWAITING_FIRST_PLAYER_GUESS:
        if _is_single_digit_below(token, first_move_range):
            return GuessAction(int(token))
        options = ", ".join(str(v) for v in range(first_move_range))
        raise InputValidationError(f"Invalid input. Please select {options}, X, or ?. Try again.")

    if phase is Phase.AWAITING_DIE_SELECTION:
        if _INDEX_RE.match(token):
            return SelectDieAction(int(token))
        raise InputValidationError("Invalid input. Please select a valid option.")

    if phase is Phase.AWAITING_MODULO_INPUT:
        if _is_single_digit_below(token, roll_range):
            return ModuloAction(int(token))
        raise InputValidationError(f"Invalid input. Please select a number between 0 and {roll_range - 1}.")

    raise InputValidationError("The game is over.")


def _is_single_digit_below(token: str, upper: int) -> bool:
    return len(token) == 1 and "0" <= token <= "9" and int(token) < upper
