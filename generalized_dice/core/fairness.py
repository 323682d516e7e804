"""
fairness.py
Commit/reveal primitives for provably fair random values.
The computer picks a secret value, publishes HMAC-SHA256(key, value) before the user answers,
then reveals value and key so the user can recompute the digest.
Related modules:
- engine.py: Issues a commitment on entering the first-move and modulo phases and reveals it on resolution.
"""

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import InvariantViolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Commitment:
    """
    A secret value bound by a keyed hash.
    Fields:
        value (int): The secret, in [0, value_range).
        key (bytes): Fresh random HMAC key, never reused.
        digest (str): Hex HMAC-SHA256 of str(value) under key.
        value_range (int): Exclusive upper bound the value was drawn from.
    """
    value: int
    key: bytes
    digest: str
    value_range: int

    @property
    def key_hex(self) -> str:
        return self.key.hex()


def compute_digest(key: bytes, value: int) -> str:
    return hmac.new(key, str(value).encode("utf-8"), hashlib.sha256).hexdigest()


def verify_commitment(digest: str, key: Union[bytes, str], value: int) -> bool:
    """
    Check a revealed (key, value) pair against a previously published digest.
    Args:
        digest (str): The digest shown before the reveal.
        key (bytes|str): The revealed key, raw or as the printed hex string.
        value (int): The revealed value.
    Returns:
        bool: True if the digest matches.
    """
    if isinstance(key, str):
        key = bytes.fromhex(key)
    return hmac.compare_digest(digest.lower(), compute_digest(key, value))


class FairValueGenerator:
    """
    Produces commitments from a cryptographically secure source (`secrets`).
    """
    def __init__(self, key_bytes: int = 32):
        if key_bytes < 32:
            raise ValueError("key_bytes must be at least 32 (256 bits)")
        self.key_bytes = key_bytes

    def _draw_value(self, value_range: int) -> int:
        return secrets.randbelow(value_range)

    def _draw_key(self) -> bytes:
        return secrets.token_bytes(self.key_bytes)

    def commit(self, value_range: int) -> Commitment:
        """
        Choose a value uniformly in [0, value_range) and bind it with a fresh key.
        Raises:
            ValueError: If value_range < 1.
        """
        if value_range < 1:
            raise ValueError("value_range must be at least 1")
        value = self._draw_value(value_range)
        key = self._draw_key()
        commitment = Commitment(value=value, key=key, digest=compute_digest(key, value), value_range=value_range)
        # Only the digest is logged before reveal.
        logger.debug("committed to a value in [0, %d): HMAC=%s", value_range, commitment.digest)
        return commitment

    def reveal(self, commitment: Optional[Commitment]) -> Tuple[int, str]:
        """
        Expose the committed value and the hex key for verification.
        Raises:
            InvariantViolation: If there is no commitment to reveal.
        """
        if commitment is None:
            raise InvariantViolation("reveal requested without a pending commitment")
        logger.debug("revealing value=%d for HMAC=%s", commitment.value, commitment.digest)
        return commitment.value, commitment.key_hex
