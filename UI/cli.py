"""
cli.py
Terminal driver for a generalized dice session: parses die specs, feeds stdin lines to the GameEngine
and prints each Reply (prompts to stdout, rejections to stderr).
Usage: python -m UI.cli 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3
"""

import argparse
import logging
import sys
from typing import List, Optional

from generalized_dice.agents import AGENT_MAP
from generalized_dice.core.config import GameConfig, load_dice
from generalized_dice.core.engine import ConfigurationError, GameEngine, Reply

EXAMPLE = "Example: python -m UI.cli 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3"


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that reports usage problems as ConfigurationError instead of exiting with 2."""

    def error(self, message):
        raise ConfigurationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="generalized-dice",
        description="Play a generalized (non-transitive) dice game against the computer with provably fair rolls.",
        epilog=EXAMPLE,
    )
    parser.add_argument("dice", nargs="*", metavar="DIE", help="Comma-separated faces of one die, e.g. 2,2,4,4,9,9")
    parser.add_argument("--peer", default="random", help=f"Computer strategy for picking dice: {sorted(AGENT_MAP)}")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the computer's die picks (commitments stay secure)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine transitions to stderr")
    return parser


def render(reply: Reply, stdout, stderr) -> None:
    for line in reply.output:
        print(line, file=stdout)
    for line in reply.errors:
        print(line, file=stderr)


def main(argv: Optional[List[str]] = None, stdin=None, stdout=None, stderr=None) -> int:
    """
    Run one session until 'X' or end of input.
    Returns:
        int: 0 on graceful exit, 1 on a startup misconfiguration.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        if args.peer.lower() not in AGENT_MAP:
            raise ConfigurationError(f"Unknown peer strategy {args.peer!r}. Supported: {sorted(AGENT_MAP)}")
        config = GameConfig(peer_agent=args.peer.lower(), rng_seed=args.seed)
        dice = load_dice(args.dice, config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=stderr)
        print(parser.format_usage().rstrip(), file=stderr)
        print(EXAMPLE, file=stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = GameEngine(config, dice)
    render(engine.start(), stdout, stderr)
    for line in stdin:
        reply = engine.handle_line(line)
        render(reply, stdout, stderr)
        if reply.terminated:
            break
    return 0


if __name__ == "__main__":
    sys.exit(main())
