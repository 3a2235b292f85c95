"""
AES-128 Text Cipher

Encrypts and decrypts whole text messages under a 16-character key with a
from-scratch AES-128 round engine, an unchained block layout and a
countdown padding scheme.
"""

__version__ = "1.0.0"

DEFAULT_KEY = "0123456789ABCDEF"
DEFAULT_TEXT = "HELLO WORLD12345"

from .errors import (
    CipherError,
    InvalidKeyError,
    UninitializedKeyError,
    MisalignedInputError,
    TextEncodingError,
)
from .interfaces import CipherConfig
from .key_schedule import KeySchedule, expand_key
from .cipher import (
    Cipher,
    encrypt_text,
    decrypt_text,
    get_instance,
    set_key,
    encrypt,
    decrypt,
)
from .utils import text_to_hex, hex_to_text

__all__ = [
    "DEFAULT_KEY",
    "DEFAULT_TEXT",
    "CipherError",
    "InvalidKeyError",
    "UninitializedKeyError",
    "MisalignedInputError",
    "TextEncodingError",
    "CipherConfig",
    "KeySchedule",
    "expand_key",
    "Cipher",
    "encrypt_text",
    "decrypt_text",
    "get_instance",
    "set_key",
    "encrypt",
    "decrypt",
    "text_to_hex",
    "hex_to_text",
]
