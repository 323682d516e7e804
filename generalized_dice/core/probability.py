"""
probability.py
Pairwise win probabilities between dice, used for the help table and for offline analysis
of non-transitive dice sets. Purely informational: nothing here affects a round's outcome.
Related modules:
- dice.py: Die and DieSet compared here.
- engine.py: Shows format_probability_table on '?' during die selection.
- agents/counter_agent.py: Picks the die most likely to beat the user's.
"""

import itertools
from fractions import Fraction
from typing import List, Sequence, Tuple

from .dice import Die

# Self-comparison is never played, so the diagonal uses a fixed convention instead of the tie-excluded count.
SELF_WIN_PROBABILITY = Fraction(1, 3)


def strict_win_fraction(a: Die, b: Die) -> Fraction:
    """Share of face pairs in the Cartesian product where `a` shows the higher face."""
    wins = sum(1 for fa, fb in itertools.product(a.faces, b.faces) if fa > fb)
    return Fraction(wins, len(a.faces) * len(b.faces))


def pairwise_win_probability(a: Die, b: Die) -> Fraction:
    """
    Probability that a roll of `a` strictly exceeds a roll of `b`.
    Args:
        a (Die): The die whose wins are counted.
        b (Die): The opposing die.
    Returns:
        Fraction: wins / (|a| * |b|) over the full Cartesian product of faces,
        or SELF_WIN_PROBABILITY when a die is compared with itself.
        Separate dice with identical faces are counted normally.
    """
    if a is b:
        return SELF_WIN_PROBABILITY
    return strict_win_fraction(a, b)


def win_probability_matrix(dice: Sequence[Die]) -> List[List[Fraction]]:
    """Row i, column j: probability that die i beats die j. The diagonal is SELF_WIN_PROBABILITY."""
    matrix = []
    for i, a in enumerate(dice):
        row = []
        for j, b in enumerate(dice):
            row.append(SELF_WIN_PROBABILITY if i == j else strict_win_fraction(a, b))
        matrix.append(row)
    return matrix


def format_probability(p: Fraction) -> str:
    return f"{float(p):.4f}"


def format_probability_table(dice: Sequence[Die]) -> List[str]:
    """
    Render the win-probability matrix as an ASCII table, one string per line.
    Rows are the user's die, columns the opponent's die.
    """
    dice = list(dice)
    matrix = win_probability_matrix(dice)
    labels = [d.describe() for d in dice]
    corner = "User dice v"
    first_width = max([len(corner)] + [len(label) for label in labels])
    col_width = max([len("0.0000")] + [len(label) for label in labels])

    def row(cells: List[str]) -> str:
        first, rest = cells[0], cells[1:]
        return "| " + first.ljust(first_width) + " | " + " | ".join(c.ljust(col_width) for c in rest) + " |"

    rule = "+" + "-" * (first_width + 2) + "+" + "+".join("-" * (col_width + 2) for _ in dice) + "+"
    lines = ["Probability of the win for the user:", rule, row([corner] + labels), rule]
    for label, probs in zip(labels, matrix):
        lines.append(row([label] + [format_probability(p) for p in probs]))
    lines.append(rule)
    return lines


def beats(a: Die, b: Die) -> bool:
    """True if `a` wins against `b` more than half the time."""
    return strict_win_fraction(a, b) > Fraction(1, 2)


def find_nontransitive_cycles(dice: Sequence[Die]) -> List[Tuple[int, int, int]]:
    """
    List every index triple (i, j, k) where i beats j, j beats k and k beats i.
    Each cycle is reported once, rotated so its smallest index comes first.
    """
    dice = list(dice)
    cycles = []
    for i, j, k in itertools.permutations(range(len(dice)), 3):
        if i != min(i, j, k):
            continue
        if beats(dice[i], dice[j]) and beats(dice[j], dice[k]) and beats(dice[k], dice[i]):
            cycles.append((i, j, k))
    return cycles
