"""Command-line interface for the AES-128 text cipher."""

from __future__ import annotations

import logging
import random
import sys
from typing import TextIO

import click

from . import DEFAULT_KEY, DEFAULT_TEXT, __version__
from .cipher import Cipher
from .errors import CipherError
from .golden import FIPS_197_TEST_VECTORS, engine_encrypt, validate_against_golden
from .interfaces import CipherConfig
from .key_schedule import NUM_ROUNDS, KeySchedule
from .rounds import decrypt_state, encrypt_state
from .trace import TraceRecorder, print_header, print_result
from .utils import (
    bytes_to_state,
    copy_state,
    format_state_grid,
    hex_to_bytes,
    hex_to_text,
    state_to_hex,
    text_to_hex,
)


def _key_option(func):
    return click.option(
        "--key",
        type=str,
        default=DEFAULT_KEY,
        show_default=True,
        help="Cipher key (at least 16 characters, only the first 16 are used)",
    )(func)


def _lenient_option(func):
    return click.option(
        "--lenient",
        is_flag=True,
        help="Ignore invalid keys and misaligned ciphertext instead of failing",
    )(func)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="aes-text")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """AES-128 text cipher.

    Encrypts and decrypts text messages under a 16-character key.
    Ciphertext is exchanged as hex.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("text")
@_key_option
@_lenient_option
@click.option("--workers", type=int, default=1, help="Worker threads for block transforms")
def encrypt(text: str, key: str, lenient: bool, workers: int) -> None:
    """Encrypt TEXT and print the ciphertext as hex."""
    try:
        cipher = Cipher(config=CipherConfig(strict=not lenient, workers=workers))
        ciphertext = cipher.encrypt(text, key)
    except (CipherError, ValueError) as e:
        _fail(str(e))
    click.echo(text_to_hex(ciphertext))


@main.command()
@click.argument("ciphertext_hex", metavar="HEX")
@_key_option
@_lenient_option
@click.option("--workers", type=int, default=1, help="Worker threads for block transforms")
def decrypt(ciphertext_hex: str, key: str, lenient: bool, workers: int) -> None:
    """Decrypt hex-encoded ciphertext and print the plaintext."""
    try:
        ciphertext = hex_to_text(ciphertext_hex)
    except ValueError as e:
        _fail(f"Invalid ciphertext hex: {e}")

    try:
        cipher = Cipher(config=CipherConfig(strict=not lenient, workers=workers))
        plaintext = cipher.decrypt(ciphertext, key)
    except (CipherError, ValueError) as e:
        _fail(str(e))
    click.echo(plaintext)


@main.command()
@_key_option
def keyschedule(key: str) -> None:
    """Print the 11 round keys derived from a key."""
    try:
        schedule = KeySchedule.from_key(key)
    except CipherError as e:
        _fail(str(e))

    for round_num, round_key in enumerate(schedule.round_keys()):
        click.echo(f"Round {round_num:2d}:")
        click.echo(format_state_grid(round_key))


@main.command(name="round")
@_key_option
@click.option(
    "--block-hex",
    type=str,
    default=None,
    help="16-byte block as 32 hex chars (default: hex of the demo text)",
)
@click.option("--verbose", "-v", is_flag=True, help="Print the state after every operation")
@click.option("--trace", "trace_path", metavar="FILE", default=None, help="Output JSON Lines trace to file")
def round_cmd(key: str, block_hex: str | None, verbose: bool, trace_path: str | None) -> None:
    """Walk one block through all rounds and check the inverse."""
    if block_hex is None:
        block_hex = text_to_hex(DEFAULT_TEXT)

    try:
        block = hex_to_bytes(block_hex)
        state = bytes_to_state(block)
    except ValueError as e:
        _fail(f"Invalid block hex: {e}")

    try:
        schedule = KeySchedule.from_key(key)
    except CipherError as e:
        _fail(str(e))

    trace_file: TextIO | None = None
    if trace_path:
        try:
            trace_file = open(trace_path, "w")
        except OSError as e:
            _fail(f"Cannot open trace file: {e}")

    tracer = TraceRecorder(verbose=verbose, trace_file=trace_file)

    try:
        print_header(f"AES-128 round walkthrough ({NUM_ROUNDS} rounds)")
        print(f"Key:   {key[:16]!r}")
        print(f"Block: {block_hex}")
        print(format_state_grid(state))

        original = copy_state(state)
        encrypt_state(state, schedule, tracer)
        output_hex = state_to_hex(state)
        decrypt_state(state, schedule, tracer)

        passed = state == original
        print_result(output_hex, blocks=1, passed=passed)
    finally:
        if trace_file:
            trace_file.close()

    if not passed:
        sys.exit(1)


@main.command()
@click.option("--n", "num_tests", type=int, default=100, help="Number of random tests (default: 100)")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def selftest(num_tests: int, seed: int | None, verbose: bool) -> None:
    """Check the round engine against FIPS-197 and text round trips."""
    rng = random.Random(seed)
    failures = 0

    click.echo("Running FIPS-197 KAT tests...")
    for i, vec in enumerate(FIPS_197_TEST_VECTORS):
        got = engine_encrypt(vec["key"], vec["plaintext"])
        if got == vec["ciphertext"]:
            if verbose:
                click.echo(f"  FIPS test {i+1}: PASS")
        else:
            failures += 1
            click.echo(f"  FIPS test {i+1}: FAIL - expected {vec['ciphertext'].hex()}, got {got.hex()}")

    click.echo(f"Running {num_tests} random block tests against PyCryptodome...")
    for i in range(num_tests):
        key = bytes(rng.randrange(256) for _ in range(16))
        block = bytes(rng.randrange(256) for _ in range(16))
        correct, detail = validate_against_golden(key, block)
        if not correct:
            failures += 1
            if verbose:
                click.echo(f"  Random block test {i+1}: FAIL - {detail}")

    click.echo(f"Running {num_tests} random text round trips...")
    for i in range(num_tests):
        key = "".join(chr(rng.randrange(17, 256)) for _ in range(16))
        text = "".join(chr(rng.randrange(17, 256)) for _ in range(rng.randrange(0, 80)))
        cipher = Cipher(key)
        if cipher.decrypt(cipher.encrypt(text)) != text:
            failures += 1
            if verbose:
                click.echo(f"  Round trip {i+1}: FAIL (length {len(text)})")

    click.echo("")
    if failures == 0:
        click.echo("SELFTEST PASSED")
        sys.exit(0)
    else:
        click.echo(f"SELFTEST FAILED: {failures} failures")
        sys.exit(1)


if __name__ == "__main__":
    main()
