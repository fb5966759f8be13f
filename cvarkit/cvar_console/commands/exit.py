"""Exit command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ConsoleContext


class ExitCommand(Command):
    def __init__(self) -> None:
        super().__init__("exit", "Leave the console", aliases=("quit", "q"))

    def run(self, ctx: ConsoleContext, argv: List[str]) -> int:
        ctx.registry.close()
        raise SystemExit(0)
