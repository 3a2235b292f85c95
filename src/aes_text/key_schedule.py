"""
AES-128 key expansion for the text cipher.

The schedule is a 44x4 byte matrix: rows 0-3 hold the master key
(row i = key characters 4i..4i+3) and rows 4r..4r+3 hold the key for
round r, r = 1..10.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import InvalidKeyError
from .tables import RCON, SBOX
from .utils import MATRIX_ORDER

logger = logging.getLogger(__name__)

KEY_LENGTH = 16
NUM_ROUNDS = 10
SCHEDULE_ROWS = MATRIX_ORDER * (NUM_ROUNDS + 1)


def validate_key(key: str | None) -> bytes:
    """
    Check a master key and return its 16 significant bytes.

    Only the first 16 characters are significant; anything after them is
    ignored.

    Raises:
        InvalidKeyError: If key is None, shorter than 16 characters, or a
            significant character has a code point above 255
    """
    if key is None:
        raise InvalidKeyError("Key must not be None")
    if len(key) < KEY_LENGTH:
        raise InvalidKeyError(f"Key must be at least {KEY_LENGTH} characters, got {len(key)}")

    significant = key[:KEY_LENGTH]
    for pos, ch in enumerate(significant):
        if ord(ch) > 0xff:
            raise InvalidKeyError(f"Key character {ch!r} at position {pos} does not fit in one byte")
    return bytes(ord(ch) for ch in significant)


def rot_word(word: list[int]) -> list[int]:
    """Rotate a 4-byte word up by one byte: [b0, b1, b2, b3] -> [b1, b2, b3, b0]."""
    return word[1:] + word[:1]


def sub_word(word: list[int]) -> list[int]:
    """Substitute each byte of a word through the S-box."""
    return [SBOX[b] for b in word]


def expand_key(key: str | None) -> list[list[int]]:
    """
    Expand a master key to the full 44x4 key schedule.

    For each round r the first word is
    SubWord(RotWord(w[4r-1])) ^ Rcon[r-1] ^ w[4(r-1)], and every following
    word c is w[4r+c-1] ^ w[4(r-1)+c].

    Args:
        key: Master key, at least 16 characters

    Returns:
        44 rows of 4 integers (0-255)

    Raises:
        InvalidKeyError: If the key is rejected by validate_key()
    """
    key_bytes = validate_key(key)

    w = [list(key_bytes[i:i + MATRIX_ORDER]) for i in range(0, KEY_LENGTH, MATRIX_ORDER)]

    for round_num in range(1, NUM_ROUNDS + 1):
        prev = (round_num - 1) * MATRIX_ORDER

        temp = sub_word(rot_word(w[-1]))
        temp[0] ^= RCON[round_num - 1]
        w.append([temp[j] ^ w[prev][j] for j in range(MATRIX_ORDER)])

        for col in range(1, MATRIX_ORDER):
            w.append([w[-1][j] ^ w[prev + col][j] for j in range(MATRIX_ORDER)])

    logger.debug("Expanded key schedule (%d rows)", len(w))
    return w


@dataclass(frozen=True)
class KeySchedule:
    """
    Immutable key schedule derived from one master key.

    Instances are safe to share between threads; every encrypt/decrypt call
    reads the schedule without mutating it.
    """

    rows: tuple[tuple[int, ...], ...]

    def __post_init__(self) -> None:
        if len(self.rows) != SCHEDULE_ROWS:
            raise ValueError(f"Key schedule must have {SCHEDULE_ROWS} rows, got {len(self.rows)}")
        for row in self.rows:
            if len(row) != MATRIX_ORDER:
                raise ValueError(f"Key schedule rows must have {MATRIX_ORDER} bytes, got {len(row)}")

    @classmethod
    def from_key(cls, key: str | None) -> KeySchedule:
        """Derive the schedule for a master key (raises InvalidKeyError)."""
        return cls(tuple(tuple(row) for row in expand_key(key)))

    @classmethod
    def zero(cls) -> KeySchedule:
        """All-zero schedule used by a cipher that never accepted a key."""
        return cls(tuple((0,) * MATRIX_ORDER for _ in range(SCHEDULE_ROWS)))

    def round_key(self, round_num: int) -> list[list[int]]:
        """Return the 4x4 key block for a round (0..10)."""
        if not 0 <= round_num <= NUM_ROUNDS:
            raise ValueError(f"Round must be 0..{NUM_ROUNDS}, got {round_num}")
        start = round_num * MATRIX_ORDER
        return [list(row) for row in self.rows[start:start + MATRIX_ORDER]]

    def round_keys(self) -> list[list[list[int]]]:
        """All 11 round key blocks in order."""
        return [self.round_key(r) for r in range(NUM_ROUNDS + 1)]

    def to_bytes(self) -> bytes:
        """Flatten the schedule to 176 bytes, row by row."""
        return bytes(b for row in self.rows for b in row)
