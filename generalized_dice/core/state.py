"""
state.py
Defines the session state for a generalized dice game: Player, Phase, RoundResult, SessionState.
Related modules:
- engine.py: The only module that mutates SessionState.
- fairness.py: Commitment is held here while awaiting reveal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from .fairness import Commitment


class Player(Enum):
    USER = "user"
    PEER = "peer"

    @property
    def other(self) -> "Player":
        return Player.PEER if self is Player.USER else Player.USER


class Phase(Enum):
    """Exactly one phase is active at a time."""
    AWAITING_FIRST_PLAYER_GUESS = "awaiting_first_player_guess"
    AWAITING_DIE_SELECTION = "awaiting_die_selection"
    AWAITING_MODULO_INPUT = "awaiting_modulo_input"
    IDLE = "idle"


@dataclass(frozen=True)
class RoundResult:
    """
    Outcome of one resolved round.
    Fields:
        round_index (int): 1-based round number.
        user_die (int), peer_die (int): Die indexes used by each side.
        user_value (int), peer_value (int): Modulo contributions.
        result (int): (user_value + peer_value) mod roll_range.
        user_face (int), peer_face (int): Faces thrown.
        winner (Player|None): None on a tie.
    """
    round_index: int
    user_die: int
    peer_die: int
    user_value: int
    peer_value: int
    result: int
    user_face: int
    peer_face: int
    winner: Optional[Player]


@dataclass
class SessionState:
    """
    All mutable state of a session.
    Fields:
        phase (Phase): The active phase.
        turn_owner (Player|None): Who picks a die first this round; None until the first guess is resolved.
        selected_dice (dict): Player -> die index, cleared every round.
        used_dice (set): Die indexes claimed in the current selection phase.
        commitment (Commitment|None): The pending commitment, consumed on reveal.
        round_index (int): Number of the round being played (1-based).
        results (list[RoundResult]): Resolved rounds, kept for the score tally.
    """
    phase: Phase = Phase.AWAITING_FIRST_PLAYER_GUESS
    turn_owner: Optional[Player] = None
    selected_dice: Dict[Player, int] = field(default_factory=dict)
    used_dice: Set[int] = field(default_factory=set)
    commitment: Optional[Commitment] = None
    round_index: int = 1
    results: List[RoundResult] = field(default_factory=list)
