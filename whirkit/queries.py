"""Derivation of STIR query positions from a Fiat-Shamir transcript."""

from __future__ import annotations

from typing import Any

from whirkit.utils import dedup


def get_challenge_stir_queries(
    domain_size: int, folding_factor: int, num_queries: int, transcript: Any
) -> list[int]:
    """Draw ``num_queries`` indexes into the folded domain, sorted and deduplicated.

    ``transcript`` must provide ``challenge_bytes(count) -> bytes``. Each query
    uses the fewest whole bytes that can address the folded domain, read
    big-endian and reduced modulo the folded domain size.
    """
    folded_domain_size = domain_size // (1 << folding_factor)
    if folded_domain_size < 2:
        raise ValueError(
            f"folded domain of size {folded_domain_size} is too small to query"
        )
    log_size = (folded_domain_size * 2 - 1).bit_length() - 1
    bytes_per_query = (log_size + 7) // 8
    wanted = num_queries * bytes_per_query
    raw = bytes(transcript.challenge_bytes(wanted))
    if len(raw) != wanted:
        raise ValueError(f"transcript returned {len(raw)} bytes, expected {wanted}")
    chunks = (raw[k:k + bytes_per_query] for k in range(0, wanted, bytes_per_query))
    return dedup(int.from_bytes(chunk, "big") % folded_domain_size for chunk in chunks)