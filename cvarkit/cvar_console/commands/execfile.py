"""Execute an args file."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .base import Command
from ..context import ConsoleContext
from ..output import emit_error, emit_result


class ExecCommand(Command):
    def __init__(self) -> None:
        super().__init__("exec", "Execute every line of an args file")

    def run(self, ctx: ConsoleContext, argv: List[str]) -> int:
        if len(argv) != 1:
            emit_error(ctx, message="usage: /exec FILE")
            return 1
        path = Path(argv[0]).expanduser()
        if not path.is_file():
            emit_error(ctx, message=f"args file not found: {path}")
            return 1
        applied = ctx.registry.execute_file(path)
        emit_result(ctx, message=f"{path}: {applied} line(s) applied", data={"path": str(path), "applied": applied})
        return 0
