"""
Print the win-probability matrix and non-transitive cycles of a dice set, and optionally save a heatmap.
Usage: python scripts/analyze_dice.py 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3 --plot data/win_matrix.png
"""
import os
import argparse
from typing import List

from generalized_dice.core.config import GameConfig, load_dice
from generalized_dice.core.dice import DieSet
from generalized_dice.core.errors import ConfigurationError
from generalized_dice.core.probability import (
    find_nontransitive_cycles,
    format_probability_table,
    win_probability_matrix,
)


def plot_matrix(dice: DieSet, out_path: str):
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    matrix = [[float(p) for p in row] for row in win_probability_matrix(dice.all_dice())]
    labels = [d.describe() for d in dice]
    size = max(4, int(len(labels) * 1.2))
    plt.figure(figsize=(size + 1, size))
    plt.imshow(matrix, cmap='RdYlGn', vmin=0.0, vmax=1.0)
    plt.colorbar(label='P(row die beats column die)')
    plt.xticks(range(len(labels)), labels, rotation=45, ha='right', fontsize=8)
    plt.yticks(range(len(labels)), labels, fontsize=8)
    for i, row in enumerate(matrix):
        for j, val in enumerate(row):
            plt.text(j, i, f"{val:.4f}", ha='center', va='center', fontsize=8)
    plt.title('Win probability matrix')
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()


def describe_cycles(dice: DieSet) -> List[str]:
    cycles = find_nontransitive_cycles(dice.all_dice())
    if not cycles:
        return ["No non-transitive cycles found."]
    lines = []
    for cycle in cycles:
        path = list(cycle) + [cycle[0]]
        lines.append(" beats ".join(f"{i} {dice.describe(i)}" for i in path))
    return lines


def main():
    parser = argparse.ArgumentParser(description='Analyze a set of generalized dice')
    parser.add_argument('dice', nargs='+', help='Comma-separated faces of one die, e.g. 2,2,4,4,9,9')
    parser.add_argument('--plot', type=str, default=None, help='Save a heatmap of the matrix to this path')
    args = parser.parse_args()

    try:
        dice = load_dice(args.dice, GameConfig())
    except ConfigurationError as e:
        raise SystemExit(f"Invalid dice: {e}")
    for line in format_probability_table(dice.all_dice()):
        print(line)
    print()
    for line in describe_cycles(dice):
        print(line)

    if args.plot:
        out_dir = os.path.dirname(args.plot)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        plot_matrix(dice, args.plot)
        print(f"Heatmap: {args.plot}")


if __name__ == '__main__':
    main()
