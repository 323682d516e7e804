"""
engine.py
Implements the GameEngine class, the turn state machine of a generalized dice session.
One line of input is processed per call to handle_line, fully synchronously, and the text to show is returned in a Reply.
Related modules:
- config.py: GameConfig is used to configure the engine.
- state.py: SessionState, Phase and Player hold all mutable data.
- actions.py: Lines are parsed into actions, then applied here.
- fairness.py: Commitments for the first-move guess and for each modulo roll.
- probability.py: Help table shown during die selection.
- agents: The computer's die-picking strategy.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .actions import (
    Action,
    ExitAction,
    GuessAction,
    HelpAction,
    ModuloAction,
    SelectDieAction,
    parse_action,
)
from .config import GameConfig
from .dice import DieSet
from .errors import ConfigurationError, InputValidationError, InvariantViolation
from .fairness import Commitment, FairValueGenerator
from .probability import format_probability_table
from .state import Phase, Player, RoundResult, SessionState

__all__ = [
    "ConfigurationError",
    "GameEngine",
    "InputValidationError",
    "InvariantViolation",
    "Reply",
]

logger = logging.getLogger(__name__)

FAREWELL = "Thanks for playing. Bye!"


@dataclass
class Reply:
    """
    Text produced by one transition.
    Fields:
        output (list[str]): Lines for standard output.
        errors (list[str]): Lines for the error stream.
        terminated (bool): True once the user asked to exit; no more input is accepted.
    """
    output: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    terminated: bool = False


class GameEngine:
    """
    State machine for a generalized dice session:
    first-player guess -> die selection -> modulo roll -> round resolution -> die selection ...
    The engine never reads or writes streams itself; drivers feed lines and print replies.
    """
    def __init__(self, config: GameConfig, dice: DieSet, generator: Optional[FairValueGenerator] = None,
                 agent=None, rng: Optional[random.Random] = None):
        """
        Args:
            config (GameConfig): Game configuration.
            dice (DieSet): The dice loaded at startup (read-only).
            generator (FairValueGenerator|None): Commitment source; a secure default is created if omitted.
            agent (Agent|None): Computer strategy; defaults to the registry entry named by config.peer_agent.
            rng (random.Random|None): RNG for the default agent; seeded from config.rng_seed if omitted.
        """
        if len(dice) < config.min_dice:
            raise ConfigurationError(f"At least {config.min_dice} dice are required (got {len(dice)}).")
        self.config = config
        self.dice = dice
        self.generator = generator or FairValueGenerator(config.key_bytes)
        if agent is None:
            from ..agents import create_agent

            agent = create_agent(config.peer_agent, rng=rng or random.Random(config.rng_seed))
        self.agent = agent
        self.state = SessionState()
        self._events: List[Dict] = []
        # turn_log holds a snapshot after every accepted action
        self.turn_log: List[Dict] = []

    # Events are simple dicts
    def _emit(self, event: Dict):
        self._events.append(event)

    def pop_events(self) -> List[Dict]:
        """
        Return and clear all emitted events since last call.
        """
        ev = list(self._events)
        self._events.clear()
        return ev

    def get_events(self) -> List[Dict]:
        """Return all events emitted so far (does not clear)."""
        return list(self._events)

    def _snapshot(self, action: Optional[Dict] = None) -> Dict:
        s = self.state
        snap = {
            "action": action,
            "phase": s.phase.value,
            "turn_owner": None if s.turn_owner is None else s.turn_owner.value,
            "selected_dice": {p.value: i for p, i in s.selected_dice.items()},
            "used_dice": sorted(s.used_dice),
            "round_index": s.round_index,
            "commitment": None if s.commitment is None else s.commitment.digest,
        }
        self.turn_log.append(snap)
        return snap

    # ------------------------------------------------------------------ public API

    def start(self) -> Reply:
        """
        Open the session: commit to the first-move value and prompt for a guess.
        """
        if self.state.phase is not Phase.AWAITING_FIRST_PLAYER_GUESS or self.state.commitment is not None:
            raise InvariantViolation("session already started")
        reply = Reply()
        reply.output.append("Let's determine who makes the first move.")
        self._issue_commitment(self.config.first_move_range)
        self._prompt(reply)
        self._snapshot(action=None)
        return reply

    def handle_line(self, line: str) -> Reply:
        """
        Apply one line of input to the current phase.
        Invalid input is reported in Reply.errors and the prompt is repeated; state does not change.
        Raises:
            InvariantViolation: If called after the session terminated.
        """
        if self.state.phase is Phase.IDLE:
            raise InvariantViolation("input received after the session terminated")
        reply = Reply()
        try:
            action = parse_action(line, self.state.phase, self.config.roll_range, self.config.first_move_range)
            self.apply_action(action, reply)
        except InputValidationError as e:
            logger.debug("rejected %r in phase %s: %s", line, self.state.phase.value, e)
            reply.errors.append(str(e))
            self._prompt(reply)
        return reply

    def apply_action(self, action: Action, reply: Reply) -> None:
        """
        Apply a parsed action, appending output to reply.
        Raises:
            InputValidationError: If the action cannot be applied in the current state.
        """
        phase = self.state.phase
        if isinstance(action, ExitAction):
            self._exit(reply)
            return
        if isinstance(action, HelpAction):
            self._help(reply)
            return

        if phase is Phase.AWAITING_FIRST_PLAYER_GUESS and isinstance(action, GuessAction):
            self._resolve_first_player(action.value, reply)
        elif phase is Phase.AWAITING_DIE_SELECTION and isinstance(action, SelectDieAction):
            self._select_die(action.die_index, reply)
        elif phase is Phase.AWAITING_MODULO_INPUT and isinstance(action, ModuloAction):
            self._resolve_round(action.value, reply)
        else:
            raise InputValidationError("Invalid input. Please select a valid option.")
        self._snapshot(action={"type": type(action).__name__, **vars(action)})

    def score(self) -> Dict[str, int]:
        """Rounds won by each side and ties so far."""
        tally = {"user": 0, "peer": 0, "ties": 0}
        for r in self.state.results:
            if r.winner is None:
                tally["ties"] += 1
            else:
                tally[r.winner.value] += 1
        return tally

    def is_terminal(self) -> bool:
        return self.state.phase is Phase.IDLE

    # ------------------------------------------------------------------ transitions

    def _issue_commitment(self, value_range: int) -> Commitment:
        if self.state.commitment is not None:
            raise InvariantViolation("a commitment is already pending")
        commitment = self.generator.commit(value_range)
        self.state.commitment = commitment
        self._emit({"type": "CommitmentIssued", "range": value_range, "hmac": commitment.digest})
        return commitment

    def _take_commitment(self):
        """Reveal and consume the pending commitment; it cannot be used for another decision."""
        value, key_hex = self.generator.reveal(self.state.commitment)
        digest = self.state.commitment.digest
        self.state.commitment = None
        self._emit({"type": "CommitmentRevealed", "hmac": digest, "value": value, "key": key_hex})
        return value, key_hex

    def _resolve_first_player(self, guess: int, reply: Reply) -> None:
        value, key_hex = self._take_commitment()
        owner = Player.USER if guess == value else Player.PEER
        self.state.turn_owner = owner
        reply.output.append(f"Your selection: {guess}")
        reply.output.append(f"My selection: {value} (KEY={key_hex}).")
        reply.output.append("You make the first move." if owner is Player.USER else "I make the first move.")
        self._emit({"type": "FirstPlayerDecided", "guess": guess, "value": value, "turn_owner": owner.value})
        logger.debug("first player: %s", owner.value)
        self._begin_selection(reply)

    def _begin_selection(self, reply: Reply) -> None:
        s = self.state
        s.phase = Phase.AWAITING_DIE_SELECTION
        s.selected_dice.clear()
        s.used_dice.clear()
        if s.turn_owner is Player.PEER:
            self._peer_picks(reply)
        self._prompt(reply)

    def _peer_picks(self, reply: Reply) -> None:
        view = {
            "dice": self.dice,
            "used_dice": frozenset(self.state.used_dice),
            "user_die": self.state.selected_dice.get(Player.USER),
        }
        choice = self.agent.choose_die(view)
        if choice in self.state.used_dice or not 0 <= choice < len(self.dice):
            raise InvariantViolation(f"agent chose unavailable die {choice}")
        self.state.selected_dice[Player.PEER] = choice
        self.state.used_dice.add(choice)
        reply.output.append(f"I choose the {self.dice.describe(choice)} dice.")
        self._emit({"type": "DieSelected", "player": Player.PEER.value, "die": choice})
        logger.debug("peer picked die %d", choice)

    def _select_die(self, die_index: int, reply: Reply) -> None:
        s = self.state
        if die_index in s.used_dice:
            raise InputValidationError("This dice is unavailable. Please select another dice.")
        if not 0 <= die_index < len(self.dice):
            raise InputValidationError("Invalid choice. Please select a valid dice index.")
        s.selected_dice[Player.USER] = die_index
        s.used_dice.add(die_index)
        reply.output.append(f"You chose the {self.dice.describe(die_index)} dice.")
        self._emit({"type": "DieSelected", "player": Player.USER.value, "die": die_index})
        if s.turn_owner is Player.USER:
            self._peer_picks(reply)
        self._begin_roll(reply)

    def _begin_roll(self, reply: Reply) -> None:
        self.state.phase = Phase.AWAITING_MODULO_INPUT
        self._issue_commitment(self.config.roll_range)
        self._prompt(reply)

    def _resolve_round(self, user_value: int, reply: Reply) -> None:
        s = self.state
        n = self.config.roll_range
        peer_value, key_hex = self._take_commitment()
        result = (user_value + peer_value) % n
        user_die = s.selected_dice[Player.USER]
        peer_die = s.selected_dice[Player.PEER]
        user_face = self.dice.face_at(user_die, result)
        # TODO: confirm with product whether the peer's face should use the combined result too
        peer_face = self.dice.face_at(peer_die, peer_value)

        if user_face > peer_face:
            winner, verdict = Player.USER, "You win this round!"
        elif user_face < peer_face:
            winner, verdict = Player.PEER, "I win this round!"
        else:
            winner, verdict = None, "It's a tie!"

        reply.output.append(f"Your selection: {user_value}")
        reply.output.append(f"My number is {peer_value} (KEY={key_hex}).")
        reply.output.append(f"The result is {peer_value} + {user_value} = {result} (mod {n}).")
        reply.output.append(f"Your throw is {user_face}.")
        reply.output.append(f"My throw is {peer_face}.")
        reply.output.append(verdict)

        outcome = RoundResult(
            round_index=s.round_index,
            user_die=user_die,
            peer_die=peer_die,
            user_value=user_value,
            peer_value=peer_value,
            result=result,
            user_face=user_face,
            peer_face=peer_face,
            winner=winner,
        )
        s.results.append(outcome)
        self._emit({
            "type": "RoundResolved",
            "round": s.round_index,
            "result": result,
            "user_face": user_face,
            "peer_face": peer_face,
            "winner": None if winner is None else winner.value,
        })
        logger.debug("round %d resolved: %s", s.round_index, outcome)

        s.turn_owner = s.turn_owner.other
        s.round_index += 1
        self._begin_selection(reply)

    def _exit(self, reply: Reply) -> None:
        if self.state.results:
            tally = self.score()
            reply.output.append(f"Score: you {tally['user']}, me {tally['peer']}, ties {tally['ties']}.")
        reply.output.append(FAREWELL)
        reply.terminated = True
        self.state.phase = Phase.IDLE
        self.state.commitment = None
        self._emit({"type": "SessionEnded", "rounds": len(self.state.results)})
        self._snapshot(action={"type": "ExitAction"})

    # ------------------------------------------------------------------ rendering

    def _help(self, reply: Reply) -> None:
        phase = self.state.phase
        if phase is Phase.AWAITING_FIRST_PLAYER_GUESS:
            top = self.config.first_move_range - 1
            reply.output.append(
                f"Help: Guess the value I selected (0..{top}) to decide who makes the first move. "
                "After your guess I reveal the value and the KEY, so you can check that "
                "HMAC-SHA256(KEY, value) equals the HMAC shown above."
            )
        elif phase is Phase.AWAITING_DIE_SELECTION:
            reply.output.extend(format_probability_table(self.dice.all_dice()))
        else:
            n = self.config.roll_range
            reply.output.append(
                f"Help: Enter a number between 0 and {n - 1}. The result is (your number + my number) mod {n}, "
                "so neither of us controls it alone. My number is fixed by the HMAC above."
            )
        self._prompt(reply)

    def _prompt(self, reply: Reply) -> None:
        s = self.state
        if s.phase is Phase.AWAITING_FIRST_PLAYER_GUESS:
            top = self.config.first_move_range - 1
            reply.output.append(f"I selected a random value in the range 0..{top} (HMAC={s.commitment.digest}).")
            reply.output.append("Try to guess my selection:")
            reply.output.extend(f"{v} - {v}" for v in range(self.config.first_move_range))
        elif s.phase is Phase.AWAITING_DIE_SELECTION:
            reply.output.append("Choose your dice:")
            for i in range(len(self.dice)):
                label = f"{i} - {self.dice.describe(i)}"
                if i in s.used_dice:
                    label += ": Selected by another player."
                reply.output.append(label)
        elif s.phase is Phase.AWAITING_MODULO_INPUT:
            n = self.config.roll_range
            reply.output.append(f"I selected a random value in the range 0..{n - 1} (HMAC={s.commitment.digest}).")
            reply.output.append(f"Add your number modulo {n}:")
            reply.output.extend(f"{v} - {v}" for v in range(n))
        else:
            return
        reply.output.append("X - exit")
        reply.output.append("? - help")
