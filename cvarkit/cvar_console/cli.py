"""cvar-console CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from ..hashing import format_hash, hash_name
from ..registry import RegistryBuilder
from ..demo import FOLLOW_UP_LINE, print_variables, register_demo
from .commands import MetaCommandRegistry, build_registry
from .context import ConsoleContext
from .history import HistoryStore
from .repl import ConsoleREPL, dispatch_line

LOG = logging.getLogger("cvar_console.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Console variable and command shell")
    parser.add_argument("args_file", nargs="?", type=Path, help="Args file executed line by line before anything else")
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single console line non-interactively (quote the line)",
    )
    parser.add_argument(
        "--hash",
        metavar="NAME",
        action="append",
        help="Print the registry key for NAME and exit (repeatable)",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON output when supported")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("CVAR_CONSOLE_LOG", "INFO"),
        help="Logging level (default INFO, or $CVAR_CONSOLE_LOG)",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".cvar-console-history",
        help="Path to the console history file",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Start the console after running ARGS_FILE",
    )
    parser.add_argument("--no-demo", action="store_true", help="Do not register the demo variables and commands")
    return parser


def _print_hashes(names: List[str]) -> int:
    for name in names:
        print(f"{name} {format_hash(hash_name(name))}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    if args.hash:
        return _print_hashes(args.hash)

    builder = RegistryBuilder()
    demo = None if args.no_demo else register_demo(builder)
    registry = builder.freeze()
    LOG.debug("registry ready: %s", registry.get_stats())
    ctx = ConsoleContext(registry=registry, json_output=args.json)
    commands = build_registry()
    try:
        if args.args_file is not None:
            if not args.args_file.is_file():
                print(f"error: args file not found: {args.args_file}", file=sys.stderr)
                return 1
            if demo is not None and not args.json:
                print("Variables before args file:")
                print_variables(demo)
            registry.execute_file(args.args_file)
            if demo is not None and not args.json:
                print("Variables after args file:")
                print_variables(demo)
                registry.execute(FOLLOW_UP_LINE)
        if args.command:
            return _run_single_line(ctx, commands, args.command)
        if args.args_file is not None and not args.interactive:
            return 0
        history = HistoryStore(str(args.history)) if args.history else None
        repl = ConsoleREPL(ctx, commands, history_store=history)
        try:
            return repl.run()
        except KeyboardInterrupt:
            print()
            return 0
    except SystemExit as exc:
        return int(exc.code or 0)
    finally:
        registry.close()


def _run_single_line(ctx: ConsoleContext, commands: MetaCommandRegistry, line: str) -> int:
    try:
        return dispatch_line(ctx, commands, line)
    except SystemExit as exc:
        return int(exc.code or 0)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
