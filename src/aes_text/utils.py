"""
Utility functions for byte/state conversions and hex formatting.

The cipher state is 4x4 bytes filled in ROW-major order:
  state[row][col] where row, col in [0..3]

Row-major mapping from a 16-byte block:
  byte[0]  -> state[0][0]
  byte[1]  -> state[0][1]
  byte[2]  -> state[0][2]
  byte[3]  -> state[0][3]
  byte[4]  -> state[1][0]
  ...
  byte[15] -> state[3][3]
"""

from .errors import TextEncodingError

MATRIX_ORDER = 4
BLOCK_SIZE = MATRIX_ORDER * MATRIX_ORDER


def bytes_to_state(data: bytes) -> list[list[int]]:
    """
    Convert 16 bytes to a 4x4 state (row-major).

    Args:
        data: 16 bytes of input

    Returns:
        4x4 list of integers (0-255)
    """
    if len(data) != BLOCK_SIZE:
        raise ValueError(f"Expected {BLOCK_SIZE} bytes, got {len(data)}")

    return [
        [data[row * MATRIX_ORDER + col] for col in range(MATRIX_ORDER)]
        for row in range(MATRIX_ORDER)
    ]


def state_to_bytes(state: list[list[int]]) -> bytes:
    """
    Convert a 4x4 state to 16 bytes (row-major).
    """
    return bytes(state[row][col] for row in range(MATRIX_ORDER) for col in range(MATRIX_ORDER))


def text_to_bytes(text: str) -> bytes:
    """
    Map each character of text to one byte by code point.

    Raises:
        TextEncodingError: If a character has a code point above 255
    """
    try:
        return text.encode("latin-1")
    except UnicodeEncodeError as e:
        raise TextEncodingError(
            f"Character {text[e.start]!r} at position {e.start} does not fit in one byte"
        ) from e


def bytes_to_text(data: bytes) -> str:
    """Map each byte to the character with the same code point."""
    return data.decode("latin-1")


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes.
    """
    return bytes.fromhex(hex_str)


def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to lowercase hex string.
    """
    return data.hex()


def text_to_hex(text: str) -> str:
    """Hex-encode a byte-width text (e.g. a ciphertext)."""
    return bytes_to_hex(text_to_bytes(text))


def hex_to_text(hex_str: str) -> str:
    """Decode a hex string back into a byte-width text."""
    return bytes_to_text(hex_to_bytes(hex_str))


def state_to_hex(state: list[list[int]]) -> str:
    """
    Convert state to hex string (via bytes).
    """
    return bytes_to_hex(state_to_bytes(state))


def hex_to_state(hex_str: str) -> list[list[int]]:
    """
    Convert hex string to state.
    """
    return bytes_to_state(hex_to_bytes(hex_str))


def format_state_grid(state: list[list[int]]) -> str:
    """
    Format state as a readable 4x4 grid.

    Returns multi-line string like:
      2b 7e 15 16
      28 ae d2 a6
      ab f7 15 88
      09 cf 4f 3c
    """
    lines = []
    for row in range(MATRIX_ORDER):
        row_hex = [f"{state[row][col]:02x}" for col in range(MATRIX_ORDER)]
        lines.append("  " + " ".join(row_hex))
    return "\n".join(lines)


def format_state_line(state: list[list[int]]) -> str:
    """
    Format state as single-line hex string.
    """
    return state_to_hex(state)


def copy_state(state: list[list[int]]) -> list[list[int]]:
    """
    Deep copy a 4x4 state.
    """
    return [row[:] for row in state]
