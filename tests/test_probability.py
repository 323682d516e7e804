import unittest
from fractions import Fraction
from generalized_dice.core.dice import Die
from generalized_dice.core.probability import (
    SELF_WIN_PROBABILITY,
    find_nontransitive_cycles,
    format_probability_table,
    pairwise_win_probability,
    win_probability_matrix,
)

A = Die((2, 2, 4, 4, 9, 9))
B = Die((6, 8, 1, 1, 8, 6))
C = Die((7, 5, 3, 7, 5, 3))


class TestWinProbability(unittest.TestCase):
    def test_pairwise_counts_strict_wins(self):
        self.assertEqual(pairwise_win_probability(A, B), Fraction(20, 36))
        self.assertEqual(pairwise_win_probability(B, A), Fraction(16, 36))
        self.assertEqual(pairwise_win_probability(Die((1, 2)), Die((3,))), 0)

    def test_self_comparison_convention(self):
        self.assertEqual(pairwise_win_probability(A, A), SELF_WIN_PROBABILITY)
        self.assertEqual(round(float(pairwise_win_probability(C, C)), 4), 0.3333)

    def test_identical_dice_at_different_indexes_are_counted(self):
        d0, d1 = Die((1, 2, 3, 4, 5, 6)), Die((1, 2, 3, 4, 5, 6))
        m = win_probability_matrix([d0, d1, C])
        self.assertEqual(m[0][1], Fraction(15, 36))
        self.assertEqual(m[1][0], Fraction(15, 36))
        self.assertEqual(m[0][0], SELF_WIN_PROBABILITY)
        self.assertEqual(pairwise_win_probability(d0, d1), Fraction(15, 36))
        self.assertIn("0.4167", "\n".join(format_probability_table([d0, d1, C])))

    def test_ties_mean_pairs_need_not_sum_to_one(self):
        x, y = Die((1, 2, 3)), Die((2, 2, 2))
        p, q = pairwise_win_probability(x, y), pairwise_win_probability(y, x)
        self.assertTrue(0 <= p <= 1 and 0 <= q <= 1)
        self.assertEqual(p + q, Fraction(2, 3))

    def test_matrix_shape_and_diagonal(self):
        m = win_probability_matrix([A, B, C])
        self.assertEqual(len(m), 3)
        for i, row in enumerate(m):
            self.assertEqual(len(row), 3)
            self.assertEqual(row[i], SELF_WIN_PROBABILITY)
        self.assertEqual(m[1][2], Fraction(20, 36))
        self.assertEqual(m[2][0], Fraction(20, 36))

    def test_nontransitive_cycle_found_once(self):
        self.assertEqual(find_nontransitive_cycles([A, B, C]), [(0, 1, 2)])
        self.assertEqual(find_nontransitive_cycles([Die((1,)), Die((2,)), Die((3,))]), [])

    def test_table_shows_four_decimals(self):
        lines = format_probability_table([A, B, C])
        body = "\n".join(lines)
        self.assertIn("0.3333", body)
        self.assertIn("0.5556", body)
        self.assertIn("[2,2,4,4,9,9]", body)


if __name__ == '__main__':
    unittest.main()
