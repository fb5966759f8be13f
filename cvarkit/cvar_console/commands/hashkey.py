"""Print registry keys for names."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ConsoleContext
from ..output import emit_error, emit_result
from ...hashing import format_hash, hash_name


class HashCommand(Command):
    def __init__(self) -> None:
        super().__init__("hash", "Print the registry key for one or more names")

    def run(self, ctx: ConsoleContext, argv: List[str]) -> int:
        if not argv:
            emit_error(ctx, message="usage: /hash NAME [NAME ...]")
            return 1
        keys = {name: format_hash(hash_name(name)) for name in argv}
        message = "\n".join(f"{name} {key}" for name, key in keys.items())
        emit_result(ctx, message=message, data={"keys": keys})
        return 0
