"""
Round engine for the AES-128 text cipher.

Operates on one 4x4 state (row-major fill, see utils) at a time and mutates
it in place. The key schedule is only read.

Axis conventions:
- ShiftRows rotates COLUMN c upwards by c positions (c = 0..3)
- MixColumns mixes each ROW of the state with the {02,03,01,01} circulant
- AddRoundKey XORs state row i with schedule row 4*round + i

Round schedule (forward):
- Round 0: AddRoundKey
- Rounds 1-9: SubBytes, ShiftRows, MixColumns, AddRoundKey
- Round 10: SubBytes, ShiftRows, AddRoundKey (no MixColumns)

The inverse schedule runs the mirror image from round 10 down to round 0.
"""

from __future__ import annotations

from .key_schedule import NUM_ROUNDS, KeySchedule
from .tables import INV_SBOX, MUL2, MUL3, MUL9, MUL11, MUL13, MUL14, SBOX
from .trace import TraceRecorder
from .utils import MATRIX_ORDER, bytes_to_state, copy_state, state_to_bytes

FULL_ROUND = ["SubBytes", "ShiftRows", "MixColumns", "AddRoundKey"]
INV_FULL_ROUND = ["AddRoundKey", "InvMixColumns", "InvShiftRows", "InvSubBytes"]

# (round, operations)
FORWARD_SCHEDULE = (
    [(0, ["AddRoundKey"])]
    + [(r, FULL_ROUND) for r in range(1, NUM_ROUNDS)]
    + [(NUM_ROUNDS, ["SubBytes", "ShiftRows", "AddRoundKey"])]  # Final round: no MixColumns
)

INVERSE_SCHEDULE = (
    [(NUM_ROUNDS, ["AddRoundKey", "InvShiftRows", "InvSubBytes"])]
    + [(r, INV_FULL_ROUND) for r in range(NUM_ROUNDS - 1, 0, -1)]
    + [(0, ["AddRoundKey"])]
)


# ------------------------------------------------------------------
# Forward operations
# ------------------------------------------------------------------

def add_round_key(state: list[list[int]], schedule: KeySchedule, round_num: int) -> None:
    """XOR each state row with the matching row of the round key."""
    base = round_num * MATRIX_ORDER
    for row in range(MATRIX_ORDER):
        key_row = schedule.rows[base + row]
        for col in range(MATRIX_ORDER):
            state[row][col] ^= key_row[col]


def sub_bytes(state: list[list[int]]) -> None:
    """Replace every byte of the state with its S-box value."""
    for row in state:
        for col in range(MATRIX_ORDER):
            row[col] = SBOX[row[col]]


def _rotate_column(state: list[list[int]], col: int, shift: int) -> None:
    column = [state[row][col] for row in range(MATRIX_ORDER)]
    for row in range(MATRIX_ORDER):
        state[row][col] = column[(row + shift) % MATRIX_ORDER]


def shift_rows(state: list[list[int]]) -> None:
    """Rotate column c up by c positions: new[r][c] = old[(r + c) % 4][c]."""
    for col in range(1, MATRIX_ORDER):
        _rotate_column(state, col, col)


def mix_columns(state: list[list[int]]) -> None:
    """Mix every row of the state in GF(2^8)."""
    for row in state:
        a0, a1, a2, a3 = row
        row[0] = MUL2[a0] ^ MUL3[a1] ^ a2 ^ a3
        row[1] = a0 ^ MUL2[a1] ^ MUL3[a2] ^ a3
        row[2] = a0 ^ a1 ^ MUL2[a2] ^ MUL3[a3]
        row[3] = MUL3[a0] ^ a1 ^ a2 ^ MUL2[a3]


# ------------------------------------------------------------------
# Inverse operations
# ------------------------------------------------------------------

def inv_sub_bytes(state: list[list[int]]) -> None:
    """Replace every byte of the state with its inverse S-box value."""
    for row in state:
        for col in range(MATRIX_ORDER):
            row[col] = INV_SBOX[row[col]]


def inv_shift_rows(state: list[list[int]]) -> None:
    """Rotate column c down by c positions: new[r][c] = old[(r - c) % 4][c]."""
    for col in range(1, MATRIX_ORDER):
        _rotate_column(state, col, -col)


def inv_mix_columns(state: list[list[int]]) -> None:
    """Undo mix_columns on every row of the state."""
    for row in state:
        a0, a1, a2, a3 = row
        row[0] = MUL14[a0] ^ MUL11[a1] ^ MUL13[a2] ^ MUL9[a3]
        row[1] = MUL9[a0] ^ MUL14[a1] ^ MUL11[a2] ^ MUL13[a3]
        row[2] = MUL13[a0] ^ MUL9[a1] ^ MUL14[a2] ^ MUL11[a3]
        row[3] = MUL11[a0] ^ MUL13[a1] ^ MUL9[a2] ^ MUL14[a3]


# ------------------------------------------------------------------
# Round sequences
# ------------------------------------------------------------------

def _run_schedule(
    state: list[list[int]],
    schedule: KeySchedule,
    round_schedule: list[tuple[int, list[str]]],
    direction: str,
    tracer: TraceRecorder | None,
) -> list[list[int]]:
    for round_num, operations in round_schedule:
        for op in operations:
            if op == "AddRoundKey":
                add_round_key(state, schedule, round_num)
            elif op == "SubBytes":
                sub_bytes(state)
            elif op == "ShiftRows":
                shift_rows(state)
            elif op == "MixColumns":
                mix_columns(state)
            elif op == "InvSubBytes":
                inv_sub_bytes(state)
            elif op == "InvShiftRows":
                inv_shift_rows(state)
            elif op == "InvMixColumns":
                inv_mix_columns(state)
            else:
                raise ValueError(f"Unknown operation: {op}")

            if tracer:
                tracer.record(
                    direction=direction,
                    round=round_num,
                    operation=op,
                    state=copy_state(state),
                )
    return state


def encrypt_state(
    state: list[list[int]],
    schedule: KeySchedule,
    tracer: TraceRecorder | None = None,
) -> list[list[int]]:
    """
    Apply the forward round sequence to one state, in place.

    Args:
        state: 4x4 state, mutated in place
        schedule: Key schedule (read-only)
        tracer: Optional trace recorder, one record per operation

    Returns:
        The same state object, for chaining
    """
    return _run_schedule(state, schedule, FORWARD_SCHEDULE, "encrypt", tracer)


def decrypt_state(
    state: list[list[int]],
    schedule: KeySchedule,
    tracer: TraceRecorder | None = None,
) -> list[list[int]]:
    """
    Apply the inverse round sequence to one state, in place.

    Returns:
        The same state object, for chaining
    """
    return _run_schedule(state, schedule, INVERSE_SCHEDULE, "decrypt", tracer)


def encrypt_block(block: bytes, schedule: KeySchedule, tracer: TraceRecorder | None = None) -> bytes:
    """Encrypt one 16-byte block (row-major state fill)."""
    return state_to_bytes(encrypt_state(bytes_to_state(block), schedule, tracer))


def decrypt_block(block: bytes, schedule: KeySchedule, tracer: TraceRecorder | None = None) -> bytes:
    """Decrypt one 16-byte block (row-major state fill)."""
    return state_to_bytes(decrypt_state(bytes_to_state(block), schedule, tracer))
