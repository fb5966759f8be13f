"""Meta-command base class."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ..context import ConsoleContext


@dataclass
class Command:
    """Console meta-command (invoked as ``/name``)."""

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)

    def run(self, ctx: ConsoleContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        return f"/{self.name:<11} {self.description}"
