"""Show one registered entry."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ConsoleContext
from ..output import emit_error, emit_result


class GetCommand(Command):
    def __init__(self) -> None:
        super().__init__("get", "Show the value of a variable", aliases=("show",))

    def run(self, ctx: ConsoleContext, argv: List[str]) -> int:
        if len(argv) != 1:
            emit_error(ctx, message="usage: /get NAME")
            return 1
        name = ctx.resolve_alias(argv[0])
        info = ctx.describe_name(name)
        if info is None:
            emit_error(ctx, message=f"unknown name: {name}")
            return 1
        if "value" in info:
            message = f"{info['name']} = {info['value']!r} ({info['type']}, {info['key']})"
        else:
            message = f"{info['name']} is a command ({info['key']})"
            if info.get("help"):
                message += f": {info['help']}"
        emit_result(ctx, message=message, data=info)
        return 0
