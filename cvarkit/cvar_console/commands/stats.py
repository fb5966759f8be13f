"""Registry statistics."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ConsoleContext
from ..output import emit_result


class StatsCommand(Command):
    def __init__(self) -> None:
        super().__init__("stats", "Show registry statistics")

    def run(self, ctx: ConsoleContext, argv: List[str]) -> int:
        stats = ctx.registry.get_stats()
        if ctx.json_output:
            emit_result(ctx, message="stats", data=stats)
            return 0
        print("stats:")
        for key in ("entries", "variables", "commands", "rejected", "executed", "failed"):
            print(f"  {key:<10}: {stats[key]}")
        return 0
