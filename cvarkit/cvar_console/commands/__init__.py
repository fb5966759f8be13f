"""Meta-command registry for the console."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .base import Command
from .alias import AliasCommand
from .execfile import ExecCommand
from .exit import ExitCommand
from .get import GetCommand
from .hashkey import HashCommand
from .help import HelpCommand
from .listing import ListCommand
from .stats import StatsCommand


class MetaCommandRegistry:
    """Stores the console meta-commands and resolves their aliases."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._ordered: List[Command] = []

    def register(self, command: Command) -> None:
        self._ordered.append(command)
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def list_commands(self) -> Iterable[Command]:
        return self._ordered


def build_registry() -> MetaCommandRegistry:
    registry = MetaCommandRegistry()
    commands = [
        HelpCommand(),
        ListCommand(),
        GetCommand(),
        HashCommand(),
        ExecCommand(),
        StatsCommand(),
        AliasCommand(),
        ExitCommand(),
    ]
    for command in commands:
        registry.register(command)
        bind = getattr(command, "bind", None)
        if callable(bind):
            bind(registry)
    return registry


__all__ = ["MetaCommandRegistry", "build_registry"]
