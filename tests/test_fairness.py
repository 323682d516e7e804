import hashlib
import hmac
import unittest
from generalized_dice.core.errors import InvariantViolation
from generalized_dice.core.fairness import FairValueGenerator, compute_digest, verify_commitment


class TestCommitments(unittest.TestCase):
    """
    Tests for the commit/reveal protocol:
      - committed values stay inside [0, N),
      - the digest is HMAC-SHA256 over the decimal value and can be recomputed from the reveal,
      - every commitment gets its own 256-bit key.
    """

    def test_values_within_range_and_digest_binds(self):
        gen = FairValueGenerator()
        for n in (1, 2, 6, 100):
            for _ in range(30):
                c = gen.commit(n)
                self.assertTrue(0 <= c.value < n)
                value, key_hex = gen.reveal(c)
                self.assertTrue(verify_commitment(c.digest, key_hex, value))
                self.assertTrue(verify_commitment(c.digest, c.key, value))

    def test_digest_is_hmac_sha256_of_decimal_value(self):
        key = bytes(range(32))
        expected = hmac.new(key, b"5", hashlib.sha256).hexdigest()
        self.assertEqual(compute_digest(key, 5), expected)

    def test_digest_and_key_are_lowercase_hex(self):
        c = FairValueGenerator().commit(6)
        self.assertEqual(c.digest, hmac.new(c.key, str(c.value).encode(), hashlib.sha256).hexdigest())
        self.assertEqual(c.key_hex, c.key.hex())
        self.assertEqual(c.digest, c.digest.lower())
        self.assertEqual(c.key_hex, c.key_hex.lower())
        # pasted values are accepted in either case
        self.assertTrue(verify_commitment(c.digest.upper(), c.key_hex.upper(), c.value))

    def test_other_value_does_not_verify(self):
        gen = FairValueGenerator()
        c = gen.commit(6)
        self.assertFalse(verify_commitment(c.digest, c.key, (c.value + 1) % 6))

    def test_keys_are_fresh_and_256_bits(self):
        gen = FairValueGenerator()
        keys = {gen.commit(2).key for _ in range(50)}
        self.assertEqual(len(keys), 50)
        self.assertTrue(all(len(k) == 32 for k in keys))

    def test_reveal_without_commitment_is_invariant_violation(self):
        with self.assertRaises(InvariantViolation):
            FairValueGenerator().reveal(None)

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            FairValueGenerator().commit(0)
        with self.assertRaises(ValueError):
            FairValueGenerator(key_bytes=16)


if __name__ == '__main__':
    unittest.main()
