"""
errors.py
Exception types shared by the generalized dice engine.
Related modules:
- config.py: raises ConfigurationError while loading dice.
- engine.py: raises and handles InputValidationError, raises InvariantViolation.
"""


class ConfigurationError(ValueError):
    """
    Raised at startup when the dice configuration is unusable
    (too few dice, an empty die, a non-numeric face).
    """
    pass


class InputValidationError(Exception):
    """
    Raised when a line of user input cannot be applied in the current phase.
    Always recoverable: the engine reports it and re-prompts without changing state.
    """
    pass


class InvariantViolation(RuntimeError):
    """
    Raised when an internal invariant is broken (missing commitment, face index out of range).
    Indicates a programming error, never bad user input.
    """
    pass
