"""Small numeric helpers shared across the protocol code."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

T = TypeVar("T")

_WORD_BITS = 64


def is_power_of_two(n: int) -> bool:
    """Return True when ``n`` is a positive power of two."""
    return n > 0 and n & (n - 1) == 0


def to_binary(value: int, n_bits: int) -> list[bool]:
    """Big-endian binary decomposition of ``value`` into exactly ``n_bits`` bits.

    Bits above ``n_bits`` are ignored; the last element is the least
    significant bit.
    """
    if not 0 <= n_bits <= _WORD_BITS:
        raise ValueError(f"n_bits must be between 0 and {_WORD_BITS}, got {n_bits}")
    return [bool((value >> i) & 1) for i in reversed(range(n_bits))]


def base_decomposition(value: int, base: int, n_bits: int) -> list[int]:
    """Big-endian base-``base`` digits of ``value`` modulo ``base ** n_bits``.

    The result always has exactly ``n_bits`` digits, padded with leading zeros.
    """
    if base < 1:
        raise ValueError(f"base must be positive, got {base}")
    digits = []
    for _ in range(n_bits):
        value, digit = divmod(value, base)
        digits.append(digit)
    digits.reverse()
    return digits


def expand_randomness(base: Any, length: int) -> list[Any]:
    """Return ``[1, base, base**2, ...]`` with ``length`` entries."""
    powers = []
    acc: Any = 1
    for _ in range(length):
        powers.append(acc)
        acc = acc * base
    return powers


def dedup(values: Iterable[T]) -> list[T]:
    """Remove duplicates and return the values in ascending order."""
    return sorted(set(values))


def stack_evaluations(evals: list[Any], folding_factor: int) -> list[Any]:
    """Group evaluations so each block of ``2**folding_factor`` holds one coset.

    The input is read as a ``2**folding_factor`` by ``len(evals) / 2**folding_factor``
    row-major matrix and returned transposed.
    """
    fold_size = 1 << folding_factor
    if len(evals) % fold_size:
        raise ValueError(
            f"number of evaluations {len(evals)} is not a multiple of {fold_size}"
        )
    new_domain = len(evals) // fold_size
    rows = [evals[r * new_domain:(r + 1) * new_domain] for r in range(fold_size)]
    return [value for column in zip(*rows) for value in column]