"""
cvarkit: console variables and commands.

Declare typed variables and command handlers on a ``RegistryBuilder``,
freeze it, then feed console lines to ``CommandRegistry.execute``. The
interactive console lives in ``cvarkit.cvar_console`` (``python -m
cvarkit.cvar_console`` or the ``cvar-console`` script).
"""

from __future__ import annotations

from .cvar_constants import CVAR_EXEC_FAIL, CVAR_EXEC_OK, CVAR_HASH_INVALID
from .hashing import format_hash, hash_name, hash_range
from .registry import (
    CommandEntry,
    CommandRegistry,
    EntryKind,
    FunctionEntry,
    RegistryBuilder,
    RegistryFrozenError,
    VariableEntry,
)
from .tokenizer import ArgsTokenizer, parse_bool, parse_float, parse_int
from .variables import BorrowedString, OwnedString, StringOwnershipError, Variable, VariableKind

__all__ = [
    "ArgsTokenizer",
    "BorrowedString",
    "CVAR_EXEC_FAIL",
    "CVAR_EXEC_OK",
    "CVAR_HASH_INVALID",
    "CommandEntry",
    "CommandRegistry",
    "EntryKind",
    "FunctionEntry",
    "OwnedString",
    "RegistryBuilder",
    "RegistryFrozenError",
    "StringOwnershipError",
    "Variable",
    "VariableEntry",
    "VariableKind",
    "format_hash",
    "hash_name",
    "hash_range",
    "parse_bool",
    "parse_float",
    "parse_int",
]
__version__ = "0.1.0"
