"""Exception types raised at the cipher boundary."""


class CipherError(ValueError):
    """Base class for all text cipher errors."""


class InvalidKeyError(CipherError):
    """Key is missing, shorter than 16 characters, or not byte-width."""


class UninitializedKeyError(CipherError):
    """Encrypt/decrypt was requested before any valid key was accepted."""


class MisalignedInputError(CipherError):
    """Ciphertext length is not a multiple of the block size."""


class TextEncodingError(CipherError):
    """Text contains a character that does not fit in one byte."""
