"""Console variable and command registry.

Declarations are collected by a ``RegistryBuilder`` during start-up and then
frozen into a ``CommandRegistry``. Keys are 32-bit name hashes (see
``cvarkit.hashing``); the first registrant for a key wins and later ones are
dropped. The declared name is kept next to each entry so that genuine hash
collisions can be reported.

``CommandRegistry.execute`` takes one console line such as
``g_enableLogging true`` or ``SetPlayerPosition 1 2 3`` and either assigns the
named variable or runs the named command with an ``ArgsTokenizer`` over the
rest of the line. Line-level failures never raise; they return
``CVAR_EXEC_FAIL``.
"""

from __future__ import annotations

import enum
import logging
import types
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from .cvar_constants import (
    CVAR_DEFAULT_DELIMITERS,
    CVAR_EXEC_FAIL,
    CVAR_EXEC_OK,
    CVAR_HASH_INVALID,
)
from .hashing import format_hash, hash_name, hash_range
from .tokenizer import ArgsTokenizer, parse_bool, parse_float, parse_int
from .variables import Variable, VariableKind

_LOGGER = logging.getLogger("cvarkit.registry")

CommandFunc = Callable[[ArgsTokenizer], int]


class RegistryFrozenError(RuntimeError):
    """Raised when a declaration arrives after the registry was frozen."""


# ---------------------------------------------------------------------------
# Line helpers


def find_first_non_whitespace(text: str, start: int = 0, delimiters: str = CVAR_DEFAULT_DELIMITERS) -> int:
    """Index of the first non-delimiter at or after ``start`` (``len(text)`` if none)."""
    pos = start
    end = len(text)
    while pos < end and text[pos] in delimiters:
        pos += 1
    return pos


def find_name_boundary(text: str, delimiters: str = CVAR_DEFAULT_DELIMITERS) -> int:
    """Index of the first delimiter in ``text`` (``len(text)`` if none).

    The scan starts at index 0, so a line with leading whitespace has an
    empty name.
    """
    pos = 0
    end = len(text)
    while pos < end and text[pos] not in delimiters:
        pos += 1
    return pos


# ---------------------------------------------------------------------------
# Registry entries


class EntryKind(enum.Enum):
    VARIABLE = "variable"
    FUNCTION = "function"


@dataclass(frozen=True)
class CommandEntry:
    name: str
    key: int

    @property
    def kind(self) -> EntryKind:
        raise NotImplementedError

    @property
    def key_text(self) -> str:
        return format_hash(self.key)


@dataclass(frozen=True)
class VariableEntry(CommandEntry):
    variable: Variable = field(compare=False)

    @property
    def kind(self) -> EntryKind:
        return EntryKind.VARIABLE


@dataclass(frozen=True)
class FunctionEntry(CommandEntry):
    function: CommandFunc = field(compare=False)
    help_text: str = ""

    @property
    def kind(self) -> EntryKind:
        return EntryKind.FUNCTION


# ---------------------------------------------------------------------------
# Initialization phase


class RegistryBuilder:
    """Collects variable and command declarations before dispatch begins."""

    def __init__(self) -> None:
        self._entries: Dict[int, CommandEntry] = {}
        self._frozen = False
        self._rejected = 0

    def _check_open(self, name: Optional[str]) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"cannot register {name!r}: registry already frozen")

    def _insert(self, entry_factory: Callable[[int], CommandEntry], name: Optional[str]) -> int:
        key = hash_name(name)
        if key == CVAR_HASH_INVALID:
            _LOGGER.debug("rejecting registration with empty name")
            self._rejected += 1
            return CVAR_HASH_INVALID
        existing = self._entries.get(key)
        if existing is not None:
            self._rejected += 1
            if existing.name.lower() == str(name).lower():
                _LOGGER.debug("duplicate registration of %s ignored", name)
            else:
                _LOGGER.warning(
                    "hash collision: %s and %s both hash to %s; keeping %s",
                    existing.name,
                    name,
                    format_hash(key),
                    existing.name,
                )
            return CVAR_HASH_INVALID
        self._entries[key] = entry_factory(key)
        return key

    def register_variable(self, name: Optional[str], variable: Optional[Variable]) -> int:
        """Register ``variable`` under ``name``; returns its key or 0 if rejected."""
        self._check_open(name)
        if variable is None:
            self._rejected += 1
            return CVAR_HASH_INVALID
        return self._insert(lambda key: VariableEntry(name=str(name), key=key, variable=variable), name)

    def register_function(self, name: Optional[str], function: Optional[CommandFunc], help_text: str = "") -> int:
        self._check_open(name)
        if function is None:
            self._rejected += 1
            return CVAR_HASH_INVALID
        return self._insert(
            lambda key: FunctionEntry(name=str(name), key=key, function=function, help_text=help_text),
            name,
        )

    def variable(
        self,
        name: str,
        kind: VariableKind,
        default: Union[int, float, bool, str],
        *,
        owns_string: bool = False,
        expected_hash: Optional[int] = None,
    ) -> Variable:
        """Declare a variable and register it in one step."""
        _check_expected_hash(name, expected_hash)
        var = Variable(kind, default, owns_string=owns_string)
        self.register_variable(name, var)
        return var

    def command(
        self, name: str, help_text: str = "", *, expected_hash: Optional[int] = None
    ) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator form of ``register_function``."""
        _check_expected_hash(name, expected_hash)

        def decorator(function: CommandFunc) -> CommandFunc:
            self.register_function(name, function, help_text or (function.__doc__ or "").strip())
            return function

        return decorator

    @property
    def rejected(self) -> int:
        return self._rejected

    def __len__(self) -> int:
        return len(self._entries)

    def freeze(self) -> "CommandRegistry":
        self._frozen = True
        _LOGGER.debug("freezing registry with %d entries (%d rejected)", len(self._entries), self._rejected)
        return CommandRegistry(self._entries, rejected=self._rejected)


def _check_expected_hash(name: str, expected_hash: Optional[int]) -> None:
    if expected_hash is None:
        return
    actual = hash_name(name)
    if actual != expected_hash:
        raise ValueError(f"hash mismatch for {name!r}: expected {format_hash(expected_hash)}, got {format_hash(actual)}")


# ---------------------------------------------------------------------------
# Dispatch phase


class CommandRegistry:
    """Immutable name-hash lookup table with line dispatch."""

    def __init__(self, entries: Mapping[int, CommandEntry], *, rejected: int = 0) -> None:
        self._entries: Mapping[int, CommandEntry] = types.MappingProxyType(dict(entries))
        self._rejected = rejected
        self._event_hook: Optional[Callable[..., None]] = None
        self._executed = 0
        self._failed = 0

    # ------------------------------------------------------------------ utils

    def set_event_hook(self, hook: Optional[Callable[..., None]]) -> None:
        self._event_hook = hook

    def _emit_event(self, event_type: str, **payload: Any) -> None:
        if self._event_hook:
            self._event_hook(event_type, **payload)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(self._entries.values())

    # ---------------------------------------------------------------- lookup

    def lookup(self, key: int) -> Optional[CommandEntry]:
        if key == CVAR_HASH_INVALID:
            return None
        return self._entries.get(key)

    def lookup_name(self, name: Optional[str]) -> Optional[CommandEntry]:
        return self.lookup(hash_name(name))

    def _variable_of_kind(self, key: int, kind: VariableKind) -> Optional[Variable]:
        entry = self.lookup(key)
        if not isinstance(entry, VariableEntry):
            return None
        if entry.variable.kind is not kind:
            return None
        return entry.variable

    def get_int(self, key: int) -> int:
        var = self._variable_of_kind(key, VariableKind.INTEGER)
        return var.get_int() if var else 0

    def get_float(self, key: int) -> float:
        var = self._variable_of_kind(key, VariableKind.FLOAT)
        return var.get_float() if var else 0.0

    def get_bool(self, key: int) -> bool:
        var = self._variable_of_kind(key, VariableKind.BOOLEAN)
        return var.get_bool() if var else False

    def get_string(self, key: int) -> str:
        var = self._variable_of_kind(key, VariableKind.STRING)
        return var.get_string() if var else ""

    # -------------------------------------------------------------- execute

    def execute(self, line: Optional[str]) -> int:
        """Run one console line; returns non-zero on success."""
        status = self._execute(line)
        self._executed += 1
        if not status:
            self._failed += 1
        return status

    def _execute(self, line: Optional[str]) -> int:
        if line is None:
            return CVAR_EXEC_FAIL
        boundary = find_name_boundary(line)
        expects_flag = boundary >= len(line)
        if expects_flag:
            key = hash_name(line)
        else:
            key = hash_range(line, 0, boundary)
        entry = self.lookup(key)
        if entry is None:
            _LOGGER.debug("no entry for %r", line[:boundary])
            return CVAR_EXEC_FAIL
        rest = line[find_first_non_whitespace(line, boundary) :]
        if isinstance(entry, FunctionEntry):
            return self._invoke(entry, rest)
        if isinstance(entry, VariableEntry):
            return self._assign(entry, rest, expects_flag)
        return CVAR_EXEC_FAIL

    def _invoke(self, entry: FunctionEntry, rest: str) -> int:
        self._emit_event("command_invoked", name=entry.name, key=entry.key, args=rest)
        tokenizer = ArgsTokenizer(rest)
        try:
            result = entry.function(tokenizer)
        except Exception:  # pylint: disable=broad-except
            _LOGGER.exception("command %s failed", entry.name)
            result = CVAR_EXEC_FAIL
        try:
            status = int(result or 0)
        except (TypeError, ValueError):
            _LOGGER.warning("command %s returned non-integer status %r", entry.name, result)
            status = CVAR_EXEC_FAIL
        self._emit_event("command_completed", name=entry.name, key=entry.key, status=status)
        return status

    def _assign(self, entry: VariableEntry, rest: str, expects_flag: bool) -> int:
        var = entry.variable
        old_value = var.value
        kind = var.kind
        if expects_flag:
            if kind is not VariableKind.BOOLEAN:
                _LOGGER.debug("%s is %s, bare flag form needs a boolean", entry.name, kind.value)
                return CVAR_EXEC_FAIL
            var.set_bool(True)
        elif kind is VariableKind.BOOLEAN:
            _, flag = parse_bool(rest)
            var.set_bool(flag)
        elif kind is VariableKind.INTEGER:
            _, number = parse_int(rest)
            var.set_int(number)
        elif kind is VariableKind.FLOAT:
            _, number = parse_float(rest)
            var.set_float(number)
        elif kind is VariableKind.STRING:
            var.assign_owned_string(rest)
        else:
            return CVAR_EXEC_FAIL
        self._emit_event(
            "variable_changed",
            name=entry.name,
            key=entry.key,
            kind=kind.value,
            old_value=old_value,
            new_value=var.value,
        )
        return CVAR_EXEC_OK

    # ----------------------------------------------------------- args files

    def execute_lines(self, lines: Iterable[str]) -> int:
        """Execute each non-empty line in order; returns how many succeeded."""
        succeeded = 0
        for raw in lines:
            line = raw.rstrip("\r\n")
            if not line:
                continue
            if self.execute(line):
                succeeded += 1
        return succeeded

    def execute_file(self, path: Union[str, Path]) -> int:
        file_path = Path(path).expanduser()
        try:
            # Bytes that are not UTF-8 become U+FFFD instead of aborting the file.
            with file_path.open("r", encoding="utf-8", errors="replace") as handle:
                succeeded = self.execute_lines(handle)
        except OSError as exc:
            _LOGGER.warning("cannot read args file %s: %s", file_path, exc)
            return 0
        _LOGGER.info("executed args file %s (%d lines applied)", file_path, succeeded)
        return succeeded

    def setup_from_argv(self, argv: Sequence[str]) -> int:
        """Execute the args file named by ``argv[1]``, if any."""
        if len(argv) < 2:
            return 0
        return self.execute_file(argv[1])

    # --------------------------------------------------------- introspection

    def describe_variables(self) -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []
        for entry in self._entries.values():
            if not isinstance(entry, VariableEntry):
                continue
            var = entry.variable
            results.append(
                {
                    "name": entry.name,
                    "key": entry.key,
                    "kind": var.kind.value,
                    "value": var.value,
                    "owns_string": var.owns_string,
                }
            )
        results.sort(key=lambda item: item["name"].lower())
        return results

    def describe_commands(self) -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []
        for entry in self._entries.values():
            if not isinstance(entry, FunctionEntry):
                continue
            results.append({"name": entry.name, "key": entry.key, "help": entry.help_text})
        results.sort(key=lambda item: item["name"].lower())
        return results

    def names(self) -> List[str]:
        return sorted((entry.name for entry in self._entries.values()), key=str.lower)

    def get_stats(self) -> Dict[str, Any]:
        variables = sum(1 for entry in self._entries.values() if isinstance(entry, VariableEntry))
        return {
            "entries": len(self._entries),
            "variables": variables,
            "commands": len(self._entries) - variables,
            "rejected": self._rejected,
            "executed": self._executed,
            "failed": self._failed,
        }

    # --------------------------------------------------------- housekeeping

    def close(self) -> None:
        """Release every owned string payload."""
        for entry in self._entries.values():
            if isinstance(entry, VariableEntry):
                entry.variable.close()


__all__ = [
    "CommandEntry",
    "CommandFunc",
    "CommandRegistry",
    "EntryKind",
    "FunctionEntry",
    "RegistryBuilder",
    "RegistryFrozenError",
    "VariableEntry",
    "find_first_non_whitespace",
    "find_name_boundary",
]
