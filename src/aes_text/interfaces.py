"""Configuration for the text cipher facade."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CipherConfig:
    """Configuration object for a Cipher instance.

    strict=True surfaces invalid keys, missing keys and misaligned
    ciphertext as typed errors. strict=False keeps the best-effort
    behaviour: bad keys are ignored, an unconfigured cipher runs with an
    all-zero schedule and a trailing partial ciphertext block is dropped.
    """

    strict: bool = True

    # Worker threads for block transforms (1 = run inline)
    workers: int = 1

    # Messages with fewer blocks than this always run inline
    min_parallel_blocks: int = 64

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.min_parallel_blocks < 1:
            raise ValueError(f"min_parallel_blocks must be >= 1, got {self.min_parallel_blocks}")

    def use_pool(self, blocks: int) -> bool:
        """Whether a message of this many blocks goes to the worker pool."""
        return self.workers > 1 and blocks >= self.min_parallel_blocks
