"""Typed console variables.

A ``Variable`` holds exactly one value whose kind is fixed at construction.
Accessors for a different kind never touch the stored value: getters return
the zero value of their type and setters do nothing.

String payloads come in two flavours. ``BorrowedString`` wraps text the
declaring code supplied and is never released. ``OwnedString`` is a copy the
variable is responsible for; it must be released exactly once, either when it
is replaced or when the variable is closed.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Union

from .tokenizer import clamp_int32, to_f32

_LOGGER = logging.getLogger("cvarkit.variables")


class VariableKind(enum.Enum):
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING = "string"


class StringOwnershipError(RuntimeError):
    """Raised when an owned string buffer would be released twice."""


@dataclass(frozen=True)
class BorrowedString:
    text: str = ""

    @property
    def owned(self) -> bool:
        return False


@dataclass
class OwnedString:
    text: str = ""
    released: bool = field(default=False, compare=False)

    @property
    def owned(self) -> bool:
        return True

    def release(self) -> None:
        if self.released:
            raise StringOwnershipError(f"string buffer {self.text!r} already released")
        self.released = True
        self.text = ""


StringPayload = Union[BorrowedString, OwnedString]
Payload = Union[int, float, bool, BorrowedString, OwnedString]

_EMPTY = BorrowedString("")


class Variable:
    """One console variable: a kind plus a payload of that kind."""

    __slots__ = ("_kind", "_value")

    def __init__(self, kind: VariableKind, default: Union[int, float, bool, str], *, owns_string: bool = False) -> None:
        self._kind = kind
        self._value: Payload = self._coerce_default(kind, default, owns_string)

    @staticmethod
    def _coerce_default(kind: VariableKind, default: Union[int, float, bool, str], owns_string: bool) -> Payload:
        if kind is VariableKind.INTEGER:
            if isinstance(default, bool) or not isinstance(default, int):
                raise TypeError(f"integer variable needs an int default, got {default!r}")
            return clamp_int32(default)
        if kind is VariableKind.FLOAT:
            if isinstance(default, bool) or not isinstance(default, (int, float)):
                raise TypeError(f"float variable needs a float default, got {default!r}")
            return to_f32(default)
        if kind is VariableKind.BOOLEAN:
            if not isinstance(default, bool):
                raise TypeError(f"boolean variable needs a bool default, got {default!r}")
            return default
        if kind is VariableKind.STRING:
            if default is None:
                default = ""
            if not isinstance(default, str):
                raise TypeError(f"string variable needs a str default, got {default!r}")
            return OwnedString(default) if owns_string else BorrowedString(default)
        raise TypeError(f"unsupported variable kind {kind!r}")

    # ------------------------------------------------------------ accessors

    @property
    def kind(self) -> VariableKind:
        return self._kind

    @property
    def owns_string(self) -> bool:
        return isinstance(self._value, OwnedString)

    @property
    def payload(self) -> Payload:
        return self._value

    @property
    def value(self) -> Union[int, float, bool, str]:
        if self._kind is VariableKind.STRING:
            return self.get_string()
        return self._value  # type: ignore[return-value]

    def get_int(self) -> int:
        if self._kind is VariableKind.INTEGER:
            return self._value  # type: ignore[return-value]
        return 0

    def get_float(self) -> float:
        if self._kind is VariableKind.FLOAT:
            return self._value  # type: ignore[return-value]
        return 0.0

    def get_bool(self) -> bool:
        if self._kind is VariableKind.BOOLEAN:
            return self._value  # type: ignore[return-value]
        return False

    def get_string(self) -> str:
        if self._kind is VariableKind.STRING:
            return self._value.text  # type: ignore[union-attr]
        return ""

    def set_int(self, value: int) -> bool:
        if self._kind is not VariableKind.INTEGER:
            return False
        self._value = clamp_int32(value)
        return True

    def set_float(self, value: float) -> bool:
        if self._kind is not VariableKind.FLOAT:
            return False
        self._value = to_f32(value)
        return True

    def set_bool(self, value: bool) -> bool:
        if self._kind is not VariableKind.BOOLEAN:
            return False
        self._value = bool(value)
        return True

    def set_string(self, text: str) -> bool:
        """Store ``text`` as a borrowed payload."""
        return self._replace_string(BorrowedString(text))

    def assign_owned_string(self, text: str) -> bool:
        """Store a private copy of ``text``; the variable owns it from now on."""
        return self._replace_string(OwnedString(str(text)))

    def _replace_string(self, payload: StringPayload) -> bool:
        if self._kind is not VariableKind.STRING:
            return False
        self._release_owned()
        self._value = payload
        return True

    def _release_owned(self) -> None:
        current = self._value
        if isinstance(current, OwnedString):
            current.release()

    def close(self) -> None:
        """Release an owned string payload. Safe to call more than once."""
        if self._kind is not VariableKind.STRING:
            return
        if isinstance(self._value, OwnedString):
            _LOGGER.debug("releasing owned string (%d chars)", len(self._value.text))
            self._release_owned()
            self._value = _EMPTY

    def format_value(self) -> str:
        if self._kind is VariableKind.BOOLEAN:
            return "true" if self._value else "false"
        if self._kind is VariableKind.FLOAT:
            return f"{self._value:g}"
        if self._kind is VariableKind.STRING:
            return self.get_string()
        return str(self._value)

    def __repr__(self) -> str:
        owner = ", owned" if self.owns_string else ""
        return f"Variable({self._kind.value}, {self.value!r}{owner})"


__all__ = [
    "BorrowedString",
    "OwnedString",
    "StringOwnershipError",
    "Variable",
    "VariableKind",
]
