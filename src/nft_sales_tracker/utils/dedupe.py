"""Deduplication key for sales."""

from __future__ import annotations


def sale_key(token_id: int | str, transaction_hash: str, *, is_bulk: bool) -> str:
    """Return the identity under which a sale may be emitted at most once.

    Bulk sales are keyed by transaction hash alone, so every Transfer log of the
    same sweep maps to one key. Single sales are keyed by token id and hash.
    """
    tx = transaction_hash.strip().lower()
    if not tx:
        raise ValueError("transaction_hash must be non-empty")
    if is_bulk:
        return tx
    return f"{token_id}-{tx}"
