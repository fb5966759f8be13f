"""Shared constants for the console variable registry.

Status values follow the console convention: non-zero is success, zero is
failure. Handlers registered as commands are expected to return the same.
"""

from __future__ import annotations

CVAR_EXEC_OK = 1
CVAR_EXEC_FAIL = 0

# Hash 0 doubles as "no name"; it is never stored in a registry.
CVAR_HASH_INVALID = 0
CVAR_HASH_MASK = 0xFFFFFFFF

# space, tab, LF, VT, FF, CR
CVAR_DEFAULT_DELIMITERS = " \t\n\v\f\r"

CVAR_INT_MIN = -(2**31)
CVAR_INT_MAX = 2**31 - 1

__all__ = [
    "CVAR_EXEC_OK",
    "CVAR_EXEC_FAIL",
    "CVAR_HASH_INVALID",
    "CVAR_HASH_MASK",
    "CVAR_DEFAULT_DELIMITERS",
    "CVAR_INT_MIN",
    "CVAR_INT_MAX",
]
