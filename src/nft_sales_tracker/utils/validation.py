"""Validation and normalization helpers for addresses, hashes and hex quantities."""

from __future__ import annotations

from typing import Any


def is_hex_address(addr: Any) -> bool:
    """Return True if addr is a valid 0x address (42 chars)."""
    if not isinstance(addr, str):
        return False
    s = addr.strip()
    if len(s) != 42:
        return False
    if not s.startswith("0x"):
        return False
    try:
        int(s[2:], 16)
        return True
    except ValueError:
        return False


def is_tx_hash(x: Any) -> bool:
    """Return True if x is a valid transaction hash (0x + 64 hex chars = 66 chars)."""
    if not isinstance(x, str):
        return False
    s = x.strip()
    if not s.startswith("0x") or len(s) != 66:
        return False
    try:
        int(s[2:], 16)
        return True
    except ValueError:
        return False


def normalize_address(addr: str | None) -> str:
    """Return a lowercase 0x address for comparisons ('' for None/empty)."""
    s = (addr or "").strip().lower()
    if s and not s.startswith("0x"):
        s = "0x" + s
    return s


def same_address(a: str | None, b: str | None) -> bool:
    """Case-insensitive address equality; two missing addresses are not equal."""
    na, nb = normalize_address(a), normalize_address(b)
    return bool(na) and na == nb


def hex_to_int(value: Any) -> int:
    """Parse a JSON-RPC hex quantity ("0x1a") or int into an int.

    Raises:
        ValueError: If value is not a hex string or int.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a hex quantity: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Not a hex quantity: {value!r}")
    s = value.strip()
    if s in ("0x", ""):
        return 0
    return int(s, 16)


def topic_to_address(topic: str) -> str:
    """Return the 0x address carried in the low 20 bytes of an indexed topic."""
    s = topic.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    if len(s) != 64:
        raise ValueError(f"Invalid topic length: {topic!r}")
    return "0x" + s[-40:]


def mask_address(addr: str | None) -> str:
    """Return a masked address or hash for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"
