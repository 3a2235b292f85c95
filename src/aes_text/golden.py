"""Golden reference for the block engine using PyCryptodome.

With the row-major state fill, column-wise ShiftRows and row-wise
MixColumns, one block of the round engine computes exactly AES-128 on the
16 block bytes. PyCryptodome's AES-ECB is therefore a bit-exact reference
for encrypt_block(), which the self-test and the test suite rely on.
"""

from Crypto.Cipher import AES

from .key_schedule import KeySchedule
from .rounds import encrypt_block
from .utils import bytes_to_text


def golden_encrypt(key: bytes, block: bytes) -> bytes:
    """Encrypt a single block using PyCryptodome as golden reference.

    Args:
        key: 16-byte AES-128 key
        block: 16-byte block

    Returns:
        16-byte ciphertext block

    Raises:
        ValueError: If key or block is not 16 bytes
    """
    if len(key) != 16:
        raise ValueError(f"Key must be 16 bytes, got {len(key)}")
    if len(block) != 16:
        raise ValueError(f"Block must be 16 bytes, got {len(block)}")

    cipher = AES.new(key, AES.MODE_ECB)
    return cipher.encrypt(block)


def engine_encrypt(key: bytes, block: bytes) -> bytes:
    """Encrypt a single block with the round engine, keyed by raw bytes."""
    return encrypt_block(block, KeySchedule.from_key(bytes_to_text(key)))


def validate_against_golden(key: bytes, block: bytes) -> tuple[bool, str]:
    """Run the round engine on one block and compare with the reference.

    Returns:
        Tuple of (is_correct, error_detail)
    """
    expected = golden_encrypt(key, block)
    got = engine_encrypt(key, block)
    if got == expected:
        return True, ""
    return False, f"Ciphertext mismatch: expected {expected.hex()}, got {got.hex()}"


# FIPS-197 test vectors for AES-128
FIPS_197_TEST_VECTORS = [
    # Appendix B
    {
        "key": bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"),
        "plaintext": bytes.fromhex("3243f6a8885a308d313198a2e0370734"),
        "ciphertext": bytes.fromhex("3925841d02dc09fbdc118597196a0b32"),
    },
    # Appendix C.1
    {
        "key": bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        "plaintext": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "ciphertext": bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a"),
    },
    # Additional test vectors from NIST
    {
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("00000000000000000000000000000000"),
        "ciphertext": bytes.fromhex("66e94bd4ef8a2c3b884cfa59ca342b2e"),
    },
    {
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("f34481ec3cc627bacd5dc3fb08f273e6"),
        "ciphertext": bytes.fromhex("0336763e966d92595a567cc9ce537f5e"),
    },
    {
        "key": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "plaintext": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "ciphertext": bytes.fromhex("bcbf217cb280cf30b2517052193ab979"),
    },
]
