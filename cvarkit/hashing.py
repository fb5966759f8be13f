"""Case-insensitive name hashing for registry keys.

Jenkins one-at-a-time over the UTF-8 bytes of a name. Only ASCII upper-case
letters are folded, which matches a C-locale ``tolower`` and keeps keys stable
across platforms so they can be precomputed and embedded as constants.
"""

from __future__ import annotations

from typing import Optional

from .cvar_constants import CVAR_HASH_INVALID, CVAR_HASH_MASK


def _fold(byte: int) -> int:
    if 0x41 <= byte <= 0x5A:
        return byte + 0x20
    return byte


def _mix(value: int, byte: int) -> int:
    value = (value + byte) & CVAR_HASH_MASK
    value = (value + (value << 10)) & CVAR_HASH_MASK
    value ^= value >> 6
    return value


def _finalize(value: int) -> int:
    value = (value + (value << 3)) & CVAR_HASH_MASK
    value ^= value >> 11
    value = (value + (value << 15)) & CVAR_HASH_MASK
    return value


def _hash_bytes(data: bytes) -> int:
    value = 0
    for byte in data:
        if byte == 0:
            break
        value = _mix(value, _fold(byte))
    return _finalize(value)


def _encode(text: str) -> bytes:
    # Escaped bytes from a lossy decode hash as the original bytes; any other
    # lone surrogate is kept as its UTF-8 style encoding.
    try:
        return text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "surrogatepass")


def hash_name(name: Optional[str]) -> int:
    """Return the 32-bit key for ``name`` (0 for ``None`` or empty)."""
    if not name:
        return CVAR_HASH_INVALID
    return _hash_bytes(_encode(name))


def hash_range(text: Optional[str], start: int, end: int) -> int:
    """Hash the half-open slice ``text[start:end]``, stopping early at a NUL."""
    if text is None:
        return CVAR_HASH_INVALID
    return _hash_bytes(_encode(text[start:end]))


def format_hash(value: int) -> str:
    return f"0x{value & CVAR_HASH_MASK:08x}"


__all__ = ["hash_name", "hash_range", "format_hash"]
