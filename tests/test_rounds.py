"""
Tests for the round engine.

Covers the individual round operations, the forward/inverse block round
trip, and agreement with FIPS-197 vectors and PyCryptodome.
"""

import io
import json
import random

import pytest
from Crypto.Cipher import AES

from aes_text.golden import FIPS_197_TEST_VECTORS
from aes_text.key_schedule import KeySchedule
from aes_text.rounds import (
    FORWARD_SCHEDULE,
    INVERSE_SCHEDULE,
    add_round_key,
    decrypt_block,
    decrypt_state,
    encrypt_block,
    encrypt_state,
    inv_mix_columns,
    inv_shift_rows,
    inv_sub_bytes,
    mix_columns,
    shift_rows,
    sub_bytes,
)
from aes_text.trace import TraceRecorder
from aes_text.utils import bytes_to_text, copy_state, hex_to_state, state_to_hex


KEY = "0123456789ABCDEF"


def counting_state():
    return [[row * 4 + col for col in range(4)] for row in range(4)]


def random_state(rng: random.Random):
    return [[rng.randint(0, 255) for _ in range(4)] for _ in range(4)]


class TestSubBytes:
    """Tests for SubBytes / InvSubBytes."""

    def test_substitution_changes_state(self) -> None:
        """SubBytes writes back into the state rather than a local copy."""
        state = [[0] * 4 for _ in range(4)]
        before = copy_state(state)
        sub_bytes(state)
        assert state != before
        assert state == [[0x63] * 4 for _ in range(4)]

    def test_known_values(self) -> None:
        """Known S-box entries are applied."""
        state = [[0x53, 0x00, 0xff, 0x01]] + [[0] * 4 for _ in range(3)]
        sub_bytes(state)
        assert state[0] == [0xed, 0x63, 0x16, 0x7c]

    def test_inverse(self) -> None:
        """InvSubBytes undoes SubBytes."""
        state = counting_state()
        sub_bytes(state)
        inv_sub_bytes(state)
        assert state == counting_state()


class TestShiftRows:
    """Tests for ShiftRows / InvShiftRows (column rotation)."""

    def test_columns_rotate_up(self) -> None:
        """Column c moves up by c positions."""
        state = counting_state()
        shift_rows(state)
        assert state == [
            [0, 5, 10, 15],
            [4, 9, 14, 3],
            [8, 13, 2, 7],
            [12, 1, 6, 11],
        ]

    def test_first_column_untouched(self) -> None:
        """Column 0 is not rotated."""
        state = counting_state()
        shift_rows(state)
        assert [state[r][0] for r in range(4)] == [0, 4, 8, 12]

    def test_inverse(self) -> None:
        """InvShiftRows undoes ShiftRows."""
        state = counting_state()
        shift_rows(state)
        inv_shift_rows(state)
        assert state == counting_state()


class TestMixColumns:
    """Tests for MixColumns / InvMixColumns (row mixing)."""

    @pytest.mark.parametrize(
        "row_in,row_out",
        [
            ([0xdb, 0x13, 0x53, 0x45], [0x8e, 0x4d, 0xa1, 0xbc]),
            ([0xf2, 0x0a, 0x22, 0x5c], [0x9f, 0xdc, 0x58, 0x9d]),
            ([0x01, 0x01, 0x01, 0x01], [0x01, 0x01, 0x01, 0x01]),
            ([0xc6, 0xc6, 0xc6, 0xc6], [0xc6, 0xc6, 0xc6, 0xc6]),
        ],
    )
    def test_known_vectors(self, row_in, row_out) -> None:
        """Known MixColumns vectors, applied per row."""
        state = [row_in[:] for _ in range(4)]
        mix_columns(state)
        assert state == [row_out for _ in range(4)]

    def test_mixes_rows_independently(self) -> None:
        """Each row is mixed on its own."""
        state = [[0xdb, 0x13, 0x53, 0x45], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
        mix_columns(state)
        assert state[0] == [0x8e, 0x4d, 0xa1, 0xbc]
        assert state[1:] == [[0, 0, 0, 0]] * 3

    @pytest.mark.parametrize("seed", range(5))
    def test_inverse(self, seed) -> None:
        """InvMixColumns undoes MixColumns."""
        rng = random.Random(seed)
        state = random_state(rng)
        original = copy_state(state)
        mix_columns(state)
        inv_mix_columns(state)
        assert state == original


class TestAddRoundKey:
    """Tests for AddRoundKey."""

    def test_round_zero_xors_key(self) -> None:
        """Round 0 XORs the key characters into the state."""
        schedule = KeySchedule.from_key(KEY)
        state = [[0] * 4 for _ in range(4)]
        add_round_key(state, schedule, 0)
        assert state == [[ord(c) for c in KEY[i:i + 4]] for i in range(0, 16, 4)]

    def test_is_self_inverse(self) -> None:
        """Applying the same round key twice cancels out."""
        schedule = KeySchedule.from_key(KEY)
        state = counting_state()
        add_round_key(state, schedule, 7)
        add_round_key(state, schedule, 7)
        assert state == counting_state()


class TestRoundSchedules:
    """Structure of the forward and inverse round sequences."""

    def test_forward_rounds(self) -> None:
        """Forward sequence covers rounds 0..10, last without mixing."""
        assert [r for r, _ in FORWARD_SCHEDULE] == list(range(11))
        assert FORWARD_SCHEDULE[0][1] == ["AddRoundKey"]
        assert "MixColumns" not in FORWARD_SCHEDULE[-1][1]

    def test_inverse_rounds(self) -> None:
        """Inverse sequence covers rounds 10..0, first without mixing."""
        assert [r for r, _ in INVERSE_SCHEDULE] == list(range(10, -1, -1))
        assert INVERSE_SCHEDULE[-1][1] == ["AddRoundKey"]
        assert "InvMixColumns" not in INVERSE_SCHEDULE[0][1]


class TestBlockRoundTrip:
    """Forward then inverse rounds restore the block."""

    @pytest.mark.parametrize("seed", range(10))
    def test_random_states(self, seed) -> None:
        """Forward then inverse restores a random state."""
        rng = random.Random(seed)
        schedule = KeySchedule.from_key("".join(chr(rng.randint(0, 255)) for _ in range(16)))
        state = random_state(rng)
        original = copy_state(state)

        encrypt_state(state, schedule)
        assert state != original
        decrypt_state(state, schedule)
        assert state == original

    def test_returns_same_object(self) -> None:
        """Transforms mutate and return the given state."""
        schedule = KeySchedule.from_key(KEY)
        state = counting_state()
        assert encrypt_state(state, schedule) is state
        assert decrypt_state(state, schedule) is state

    def test_zero_schedule_round_trip(self) -> None:
        """Round trip works with the all-zero schedule."""
        schedule = KeySchedule.zero()
        block = bytes(range(16))
        assert decrypt_block(encrypt_block(block, schedule), schedule) == block

    def test_schedule_not_modified(self) -> None:
        """Transforms never write to the schedule."""
        schedule = KeySchedule.from_key(KEY)
        before = schedule.to_bytes()
        encrypt_block(bytes(16), schedule)
        decrypt_block(bytes(16), schedule)
        assert schedule.to_bytes() == before


class TestGoldenVectors:
    """The block engine agrees with FIPS-197 and PyCryptodome."""

    @pytest.mark.parametrize("vec", FIPS_197_TEST_VECTORS)
    def test_fips_197_encrypt(self, vec: dict) -> None:
        """Engine matches FIPS-197 encrypt vectors."""
        schedule = KeySchedule.from_key(bytes_to_text(vec["key"]))
        assert encrypt_block(vec["plaintext"], schedule) == vec["ciphertext"]

    @pytest.mark.parametrize("vec", FIPS_197_TEST_VECTORS)
    def test_fips_197_decrypt(self, vec: dict) -> None:
        """Engine inverts FIPS-197 vectors."""
        schedule = KeySchedule.from_key(bytes_to_text(vec["key"]))
        assert decrypt_block(vec["ciphertext"], schedule) == vec["plaintext"]

    def test_fips_197_appendix_b_state(self) -> None:
        """State view of the Appendix B output is the row-major fill of the bytes."""
        vec = FIPS_197_TEST_VECTORS[0]
        schedule = KeySchedule.from_key(bytes_to_text(vec["key"]))
        state = hex_to_state(vec["plaintext"].hex())
        encrypt_state(state, schedule)
        assert state_to_hex(state) == "3925841d02dc09fbdc118597196a0b32"

    @pytest.mark.parametrize("seed", range(10))
    def test_random_blocks_match_pycryptodome(self, seed) -> None:
        """Engine matches PyCryptodome on random blocks."""
        rng = random.Random(seed)
        key = bytes(rng.randint(0, 255) for _ in range(16))
        block = bytes(rng.randint(0, 255) for _ in range(16))

        schedule = KeySchedule.from_key(bytes_to_text(key))
        expected = AES.new(key, AES.MODE_ECB).encrypt(block)

        assert encrypt_block(block, schedule) == expected
        assert decrypt_block(expected, schedule) == block


class TestTracing:
    """Round engine tracing."""

    def test_record_count(self) -> None:
        """One record per operation in each direction."""
        schedule = KeySchedule.from_key(KEY)
        tracer = TraceRecorder()
        state = counting_state()

        encrypt_state(state, schedule, tracer)
        # 1 + 9 * 4 + 3 operations
        assert len(tracer.get_records()) == 40

        decrypt_state(state, schedule, tracer)
        assert len(tracer.get_records()) == 80
        assert state == counting_state()

    def test_last_record_is_output(self) -> None:
        """Last forward record holds a copy of the output state."""
        schedule = KeySchedule.from_key(KEY)
        tracer = TraceRecorder()
        state = counting_state()
        encrypt_state(state, schedule, tracer)

        last = tracer.get_records()[-1]
        assert last["direction"] == "encrypt"
        assert last["round"] == 10
        assert last["operation"] == "AddRoundKey"
        assert last["state"] == state
        assert last["state"] is not state

    def test_clear_between_blocks(self) -> None:
        """clear() drops earlier records so the next block starts fresh."""
        schedule = KeySchedule.from_key(KEY)
        tracer = TraceRecorder()
        encrypt_block(bytes(16), schedule, tracer)
        tracer.clear()
        assert tracer.get_records() == []

        decrypt_block(bytes(16), schedule, tracer)
        records = tracer.get_records()
        assert len(records) == 40
        assert records[0]["direction"] == "decrypt"

    def test_tracing_does_not_change_result(self) -> None:
        """Tracing must not alter the output."""
        schedule = KeySchedule.from_key(KEY)
        block = bytes(range(16))
        assert encrypt_block(block, schedule, TraceRecorder()) == encrypt_block(block, schedule)

    def test_verbose_output(self, capsys) -> None:
        """Verbose mode prints one line per operation."""
        schedule = KeySchedule.from_key(KEY)
        encrypt_state(counting_state(), schedule, TraceRecorder(verbose=True))
        out = capsys.readouterr().out
        assert "ENC R0" in out
        assert "MixColumns" in out
        assert "STATE:" in out

    def test_jsonl_output(self) -> None:
        """JSON Lines trace holds one record per operation."""
        schedule = KeySchedule.from_key(KEY)
        buf = io.StringIO()
        tracer = TraceRecorder(trace_file=buf)
        decrypt_state(counting_state(), schedule, tracer)

        lines = buf.getvalue().strip().splitlines()
        assert len(lines) == 40
        first = json.loads(lines[0])
        assert first["direction"] == "decrypt"
        assert first["round"] == 10
        assert first["operation"] == "AddRoundKey"
        assert len(first["state"]) == 4
