"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import Command
from ..context import ConsoleContext

if TYPE_CHECKING:  # pragma: no cover
    from . import MetaCommandRegistry


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "Show console commands", aliases=("?",))
        self._registry: MetaCommandRegistry | None = None

    def bind(self, registry: "MetaCommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: ConsoleContext, argv: List[str]) -> int:
        registry = self._registry
        if not registry:
            return 1
        print("Lines without a leading '/' set a variable or run a registered command:")
        print("  <name> <value>     assign a variable")
        print("  <flag>             set a boolean variable to true")
        print("  <command> [args]   run a command handler")
        for command in registry.list_commands():
            print(command.format_help())
        return 0
