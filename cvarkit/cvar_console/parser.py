"""Line classification helpers for the console."""

from __future__ import annotations

import shlex
from typing import List

META_PREFIX = "/"


def is_meta_command(line: str) -> bool:
    return line.lstrip().startswith(META_PREFIX)


def split_command(line: str) -> List[str]:
    """Split a meta-command line into argv tokens using shlex rules.

    The leading ``/`` is dropped from the first token. Console variable lines
    are never split here; the registry tokenizes those itself.
    """
    text = line.strip()
    if text.startswith(META_PREFIX):
        text = text[len(META_PREFIX) :]
    if not text:
        return []
    try:
        return shlex.split(text, comments=False, posix=True)
    except ValueError as exc:
        # Return the raw line as a single token so callers can raise a friendlier error.
        return [text, f"#parse-error:{exc}"]
