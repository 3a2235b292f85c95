"""
Text cipher facade.

Two ways in:
- encrypt_text / decrypt_text: stateless, take an explicit KeySchedule
- Cipher: owns one key schedule and optionally (re)keys on every call

A process-wide lenient Cipher backs the module-level encrypt/decrypt/
set_key helpers for callers that want a single configured key.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from .codec import DECRYPT_MODE, ENCRYPT_MODE, join_blocks, split_blocks
from .errors import InvalidKeyError, MisalignedInputError, UninitializedKeyError
from .interfaces import CipherConfig
from .key_schedule import KeySchedule
from .rounds import decrypt_state, encrypt_state
from .utils import BLOCK_SIZE

logger = logging.getLogger(__name__)


def _transform_blocks(states, schedule, transform, config):
    if config is not None and config.use_pool(len(states)):
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            # map() yields results in submission order
            return list(executor.map(lambda s: transform(s, schedule), states))
    return [transform(state, schedule) for state in states]


def encrypt_text(text: str, schedule: KeySchedule, config: CipherConfig | None = None) -> str:
    """
    Encrypt a text under an explicit key schedule.

    The result is always a multiple of 16 characters long and at least one
    block longer than the padded-out text would need, because a padding
    block is always appended.

    Raises:
        TextEncodingError: If text has a character above code point 255
    """
    states = split_blocks(text, ENCRYPT_MODE)
    logger.debug("Encrypting %d block(s)", len(states))
    states = _transform_blocks(states, schedule, encrypt_state, config)
    return join_blocks(states, ENCRYPT_MODE)


def decrypt_text(text: str, schedule: KeySchedule, config: CipherConfig | None = None) -> str:
    """
    Decrypt a text under an explicit key schedule.

    A trailing partial block is ignored; every decrypted byte <= 16 is
    dropped as padding.

    Raises:
        TextEncodingError: If text has a character above code point 255
    """
    states = split_blocks(text, DECRYPT_MODE)
    logger.debug("Decrypting %d block(s)", len(states))
    states = _transform_blocks(states, schedule, decrypt_state, config)
    return join_blocks(states, DECRYPT_MODE)


class Cipher:
    """
    Text cipher holding one key schedule.

    The schedule is replaced as a whole under a lock by set_key(), and each
    encrypt()/decrypt() call snapshots it under the same lock before
    transforming any block, so a racing set_key() never mixes two keys in
    one message.
    """

    def __init__(self, key: str | None = None, config: CipherConfig | None = None):
        """
        Initialize the cipher.

        Args:
            key: Optional initial key (same rules as set_key)
            config: Optional configuration, strict by default
        """
        self.config = config or CipherConfig()
        self._lock = threading.Lock()
        self._schedule: KeySchedule | None = None

        if key is not None:
            self.set_key(key)

    @property
    def has_key(self) -> bool:
        """Whether a valid key was ever accepted."""
        with self._lock:
            return self._schedule is not None

    @property
    def key_schedule(self) -> KeySchedule | None:
        """Snapshot of the current schedule (None if never keyed)."""
        with self._lock:
            return self._schedule

    def set_key(self, key: str | None) -> None:
        """
        Replace the key schedule.

        An invalid key never touches the current schedule. In strict mode it
        raises InvalidKeyError; otherwise it is logged and ignored.
        """
        self._install_key(key)

    def _install_key(self, key: str | None) -> KeySchedule | None:
        """Store the schedule for key and return it (None if ignored)."""
        try:
            schedule = KeySchedule.from_key(key)
        except InvalidKeyError as e:
            if self.config.strict:
                raise
            logger.warning("Ignoring invalid key: %s", e)
            return None

        with self._lock:
            self._schedule = schedule
        logger.debug("Key schedule updated")
        return schedule

    def _schedule_for_call(self, key: str | None) -> KeySchedule:
        # A key given to the call is used directly, even if another thread
        # replaces the stored schedule before the transform starts
        if key is not None:
            schedule = self._install_key(key)
            if schedule is not None:
                return schedule
        return self._snapshot()

    def _snapshot(self) -> KeySchedule:
        with self._lock:
            schedule = self._schedule

        if schedule is None:
            if self.config.strict:
                raise UninitializedKeyError("No key has been set")
            logger.warning("No key has been set, using the all-zero key schedule")
            return KeySchedule.zero()
        return schedule

    def encrypt(self, text: str, key: str | None = None) -> str:
        """
        Encrypt text, optionally setting a new key first.

        Args:
            text: Plaintext (characters with code points 17..255 round-trip)
            key: Optional key; replaces the current one when valid

        Returns:
            Ciphertext, a multiple of 16 characters
        """
        schedule = self._schedule_for_call(key)
        return encrypt_text(text, schedule, self.config)

    def decrypt(self, text: str, key: str | None = None) -> str:
        """
        Decrypt text, optionally setting a new key first.

        Raises:
            MisalignedInputError: In strict mode, if len(text) is not a
                multiple of 16
        """
        schedule = self._schedule_for_call(key)

        if len(text) % BLOCK_SIZE:
            if self.config.strict:
                raise MisalignedInputError(
                    f"Ciphertext length must be a multiple of {BLOCK_SIZE}, got {len(text)}"
                )
            logger.warning("Dropping %d trailing character(s) of misaligned ciphertext",
                           len(text) % BLOCK_SIZE)

        return decrypt_text(text, schedule, self.config)

    def __repr__(self) -> str:
        return f"Cipher(strict={self.config.strict}, has_key={self.has_key})"


_default_cipher = Cipher(config=CipherConfig(strict=False))


def get_instance() -> Cipher:
    """Return the process-wide lenient cipher."""
    return _default_cipher


def set_key(key: str | None) -> None:
    """Set the key of the process-wide cipher (invalid keys are ignored)."""
    _default_cipher.set_key(key)


def encrypt(text: str, key: str | None = None) -> str:
    """Encrypt with the process-wide cipher."""
    return _default_cipher.encrypt(text, key)


def decrypt(text: str, key: str | None = None) -> str:
    """Decrypt with the process-wide cipher."""
    return _default_cipher.decrypt(text, key)
