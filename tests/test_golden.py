"""Tests for the PyCryptodome golden reference helpers."""

import secrets

import pytest
from Crypto.Cipher import AES

from aes_text.golden import (
    FIPS_197_TEST_VECTORS,
    engine_encrypt,
    golden_encrypt,
    validate_against_golden,
)


class TestGoldenEncrypt:
    """Tests for golden_encrypt function."""

    @pytest.mark.parametrize("vec", FIPS_197_TEST_VECTORS)
    def test_fips_197_all_vectors(self, vec: dict) -> None:
        """Test all FIPS-197 test vectors."""
        assert golden_encrypt(vec["key"], vec["plaintext"]) == vec["ciphertext"]

    def test_invalid_key_length(self) -> None:
        """Test that invalid key length raises ValueError."""
        with pytest.raises(ValueError, match="Key must be 16 bytes"):
            golden_encrypt(bytes(15), bytes(16))

    def test_invalid_block_length(self) -> None:
        """Test that invalid block length raises ValueError."""
        with pytest.raises(ValueError, match="Block must be 16 bytes"):
            golden_encrypt(bytes(16), bytes(17))

    def test_matches_pycryptodome_directly(self) -> None:
        """Test golden_encrypt matches direct PyCryptodome usage."""
        key = bytes(range(16))
        block = bytes(range(16, 32))
        assert golden_encrypt(key, block) == AES.new(key, AES.MODE_ECB).encrypt(block)


class TestEngineAgainstGolden:
    """The round engine keyed with raw bytes."""

    @pytest.mark.parametrize("vec", FIPS_197_TEST_VECTORS)
    def test_engine_fips_197(self, vec: dict) -> None:
        """Test the round engine on all FIPS-197 vectors."""
        assert engine_encrypt(vec["key"], vec["plaintext"]) == vec["ciphertext"]

    def test_validate_passes(self) -> None:
        """Test that a matching engine result validates."""
        is_correct, error = validate_against_golden(bytes(range(16)), bytes(16))
        assert is_correct is True
        assert error == ""

    def test_random_vectors(self) -> None:
        """Test random vectors against the golden reference."""
        for _ in range(50):
            key = secrets.token_bytes(16)
            block = secrets.token_bytes(16)
            is_correct, error = validate_against_golden(key, block)
            assert is_correct, error
