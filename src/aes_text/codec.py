"""
Text <-> state block codec.

Encryption always appends padding: the block count is len(text) // 16 + 1,
so a block-aligned text still gets one full padding block. Each padding
cell holds 16 * block_count - position, a countdown that ends at 1 on the
last cell. Every padding byte is therefore in 1..16.

Decryption drops every byte <= 16 when reassembling the text. Plaintext
characters with code points <= 16 are lost on the way back; the cipher
only round-trips text made of characters above that threshold.
"""

from __future__ import annotations

from .utils import BLOCK_SIZE, MATRIX_ORDER, bytes_to_text, text_to_bytes

ENCRYPT_MODE = "encrypt"
DECRYPT_MODE = "decrypt"
MODES = (ENCRYPT_MODE, DECRYPT_MODE)

# Bytes at or below this value are treated as padding on decrypt
PAD_THRESHOLD = 16


def _check_mode(mode: str) -> None:
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode!r} (expected one of {', '.join(MODES)})")


def block_count(length: int, mode: str) -> int:
    """Number of state blocks produced for a text of the given length."""
    _check_mode(mode)
    count = length // BLOCK_SIZE
    if mode == ENCRYPT_MODE:
        count += 1
    return count


def pad_value(position: int, count: int) -> int:
    """Padding byte for an absolute position in a message of count blocks."""
    return BLOCK_SIZE * count - position


def split_blocks(text: str, mode: str) -> list[list[list[int]]]:
    """
    Split text into 4x4 state blocks (row-major).

    Args:
        text: Plaintext (encrypt) or ciphertext (decrypt)
        mode: ENCRYPT_MODE or DECRYPT_MODE

    Returns:
        List of states. In decrypt mode a trailing partial block is dropped.

    Raises:
        TextEncodingError: If text has a character above code point 255
    """
    data = text_to_bytes(text)
    count = block_count(len(data), mode)

    states = []
    position = 0
    for _ in range(count):
        state = [[0] * MATRIX_ORDER for _ in range(MATRIX_ORDER)]
        for row in range(MATRIX_ORDER):
            for col in range(MATRIX_ORDER):
                if position < len(data):
                    state[row][col] = data[position]
                else:
                    state[row][col] = pad_value(position, count)
                position += 1
        states.append(state)

    return states


def join_blocks(states: list[list[list[int]]], mode: str) -> str:
    """
    Reassemble state blocks into text, block order then row-major order.

    In decrypt mode bytes <= PAD_THRESHOLD are discarded.
    """
    _check_mode(mode)

    out = bytearray()
    for state in states:
        for row in state:
            for value in row:
                if mode == DECRYPT_MODE and value <= PAD_THRESHOLD:
                    continue
                out.append(value)

    return bytes_to_text(bytes(out))
