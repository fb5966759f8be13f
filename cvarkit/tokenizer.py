"""Argument tokenizer and permissive value parsers.

The parsers mirror C ``atoi``/``atof`` behaviour: they skip leading
whitespace, read the longest numeric prefix and fall back to zero on garbage.
They always report success so that a malformed console line degrades to a
default instead of aborting.

``ArgsTokenizer`` walks a line of text token by token. Tokens are slices of
the text it was initialised with; the text itself is never modified, so
handlers can still read ``input_string`` after tokenizing.
"""

from __future__ import annotations

import math
import re
import struct
from typing import Iterator, Optional, Tuple

from .cvar_constants import CVAR_DEFAULT_DELIMITERS, CVAR_INT_MAX, CVAR_INT_MIN

_F32_STRUCT = struct.Struct("<f")

_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_FLOAT_RE = re.compile(
    r"[ \t\n\v\f\r]*"
    r"([+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

Vector2 = Tuple[float, float]
Vector3 = Tuple[float, float, float]


def to_f32(value: float) -> float:
    """Round a Python float to IEEE-754 single precision."""
    try:
        packed = _F32_STRUCT.pack(float(value))
    except OverflowError:
        # Saturate to +/-inf; ``value`` may be an int too large for float().
        return math.inf if value > 0 else -math.inf
    return _F32_STRUCT.unpack(packed)[0]


def clamp_int32(value: int) -> int:
    return max(CVAR_INT_MIN, min(CVAR_INT_MAX, int(value)))


def parse_int(text: Optional[str]) -> Tuple[bool, int]:
    match = _INT_RE.match(text or "")
    if not match:
        return True, 0
    value = int(match.group(1))
    return True, clamp_int32(value)


def parse_float(text: Optional[str]) -> Tuple[bool, float]:
    match = _FLOAT_RE.match(text or "")
    if not match:
        return True, 0.0
    return True, to_f32(float(match.group(1)))


def parse_bool(text: Optional[str]) -> Tuple[bool, bool]:
    """Parse ``true``/``false`` (any case), else any non-zero integer is true."""
    lowered = (text or "").lower()
    if lowered == "true":
        return True, True
    if lowered == "false":
        return True, False
    _, number = parse_int(text)
    return True, number != 0


class ArgsTokenizer:
    """Sequential whitespace tokenizer over one line of command arguments."""

    def __init__(self, text: Optional[str] = None) -> None:
        self._text = ""
        self._cursor = 0
        self._exhausted = False
        self._current: Optional[str] = None
        if text is not None:
            self.init(text)

    @property
    def input_string(self) -> str:
        return self._text

    @property
    def current_token(self) -> Optional[str]:
        return self._current

    @property
    def remaining(self) -> str:
        """Text not yet consumed by ``next_token``."""
        if self._exhausted:
            return ""
        return self._text[self._cursor :]

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def init(self, text: Optional[str]) -> None:
        self.reset()
        self._text = text or ""

    def reset(self) -> None:
        self._text = ""
        self._cursor = 0
        self._exhausted = False
        self._current = None

    def next_token(self, delimiters: str = CVAR_DEFAULT_DELIMITERS) -> Optional[str]:
        """Return the next run of non-delimiter characters, or ``None`` at the end.

        Once ``None`` has been returned the tokenizer stays exhausted until
        ``init`` or ``reset`` is called.
        """
        if self._exhausted:
            self._current = None
            return None
        text = self._text
        end = len(text)
        pos = self._cursor
        while pos < end and text[pos] in delimiters:
            pos += 1
        if pos >= end:
            self._cursor = end
            self._exhausted = True
            self._current = None
            return None
        start = pos
        while pos < end and text[pos] not in delimiters:
            pos += 1
        token = text[start:pos]
        # Step over the delimiter that ended the token.
        self._cursor = pos + 1 if pos < end else end
        self._current = token
        return token

    @staticmethod
    def compare_token(token: Optional[str], literal: str) -> bool:
        if token is None:
            return False
        return token.lower() == literal.lower()

    def next_int(self, default: int = 0, delimiters: str = CVAR_DEFAULT_DELIMITERS) -> Tuple[bool, int]:
        token = self.next_token(delimiters)
        if token is None:
            return False, default
        return parse_int(token)

    def next_float(
        self, default: float = 0.0, delimiters: str = CVAR_DEFAULT_DELIMITERS
    ) -> Tuple[bool, float]:
        token = self.next_token(delimiters)
        if token is None:
            return False, default
        return parse_float(token)

    def _next_floats(self, defaults: Tuple[float, ...], delimiters: str) -> Tuple[bool, Tuple[float, ...]]:
        values = list(defaults)
        for index in range(len(values)):
            ok, values[index] = self.next_float(values[index], delimiters)
            if not ok:
                # Components already parsed are kept, the rest keep their defaults.
                return False, tuple(values)
        return True, tuple(values)

    def next_vector2(
        self, default: Vector2 = (0.0, 0.0), delimiters: str = CVAR_DEFAULT_DELIMITERS
    ) -> Tuple[bool, Vector2]:
        ok, values = self._next_floats(tuple(default), delimiters)
        return ok, (values[0], values[1])

    def next_vector3(
        self, default: Vector3 = (0.0, 0.0, 0.0), delimiters: str = CVAR_DEFAULT_DELIMITERS
    ) -> Tuple[bool, Vector3]:
        ok, values = self._next_floats(tuple(default), delimiters)
        return ok, (values[0], values[1], values[2])

    def __iter__(self) -> Iterator[str]:
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def __repr__(self) -> str:
        return f"ArgsTokenizer({self._text!r}, cursor={self._cursor}, exhausted={self._exhausted})"


__all__ = [
    "ArgsTokenizer",
    "clamp_int32",
    "parse_bool",
    "parse_float",
    "parse_int",
    "to_f32",
]
