"""
cvar-console CLI package.

Interactive shell around a ``CommandRegistry``: plain lines set variables or
run registered commands, lines starting with ``/`` are console commands.
Use ``python -m cvarkit.cvar_console`` or the ``cvar-console`` script.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
