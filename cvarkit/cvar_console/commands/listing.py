"""List registered variables and commands."""

from __future__ import annotations

import argparse
from typing import List

from .base import Command
from ..context import ConsoleContext
from ..output import emit_result, render_command_table, render_variable_table


class ListCommand(Command):
    def __init__(self) -> None:
        super().__init__("list", "List registered variables and commands", aliases=("ls",))
        self._parser = argparse.ArgumentParser(prog="list", add_help=False)
        self._parser.add_argument("prefix", nargs="?", default="", help="Only show names starting with this prefix")
        group = self._parser.add_mutually_exclusive_group()
        group.add_argument("--vars", action="store_true", help="Variables only")
        group.add_argument("--commands", action="store_true", help="Commands only")

    def run(self, ctx: ConsoleContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        needle = args.prefix.lower()
        variables = [] if args.commands else [
            var for var in ctx.registry.describe_variables() if var["name"].lower().startswith(needle)
        ]
        commands = [] if args.vars else [
            cmd for cmd in ctx.registry.describe_commands() if cmd["name"].lower().startswith(needle)
        ]
        if ctx.json_output:
            emit_result(ctx, message="list", data={"variables": variables, "commands": commands})
            return 0
        if not args.commands:
            render_variable_table(variables)
        if not args.vars:
            render_command_table(commands)
        return 0
