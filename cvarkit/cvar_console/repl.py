"""Interactive REPL for the console."""

from __future__ import annotations

import logging
from typing import Optional

from ..registry import VariableEntry, find_name_boundary
from .commands import MetaCommandRegistry
from .commands.help import HelpCommand
from .context import ConsoleContext
from .history import HistoryStore
from .output import emit_error, emit_result
from .parser import is_meta_command, split_command

try:
    from .completion import ConsoleCompleter
except Exception:  # pragma: no cover - prompt_toolkit missing
    ConsoleCompleter = None  # type: ignore

LOGGER = logging.getLogger("cvar_console.repl")

try:
    from prompt_toolkit import PromptSession
    from prompt_toolkit.history import InMemoryHistory
    from prompt_toolkit.patch_stdout import patch_stdout
except ImportError:  # pragma: no cover - fallback path
    PromptSession = None  # type: ignore
    InMemoryHistory = None  # type: ignore
    patch_stdout = None

try:  # pragma: no cover - optional dependency
    import readline
except ImportError:  # pragma: no cover
    readline = None

PROMPT = "] "


def run_meta_command(ctx: ConsoleContext, commands: MetaCommandRegistry, line: str) -> int:
    argv = split_command(line)
    if not argv:
        return 0
    cmd_name, *cmd_args = argv
    if cmd_args and cmd_args[-1].startswith("#parse-error"):
        emit_error(ctx, message=f"parse error: {cmd_args[-1].split(':', 1)[-1]}")
        return 1
    command = commands.get(cmd_name)
    if not command:
        emit_error(ctx, message=f"unknown console command: /{cmd_name}")
        return 1
    try:
        return command.run(ctx, cmd_args)
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive logging
        LOGGER.exception("console command failed")
        emit_error(ctx, message=f"/{cmd_name} failed: {exc}")
        return 1


def run_console_line(ctx: ConsoleContext, line: str) -> int:
    """Execute a variable or command line; returns 0 on success, 1 otherwise."""
    boundary = find_name_boundary(line)
    name = ctx.resolve_alias(line[:boundary])
    if name != line[:boundary]:
        line = name + line[boundary:]
        boundary = len(name)
    status = ctx.execute(line)
    if not status:
        emit_error(ctx, message=f"rejected: {line}", data={"line": line})
        return 1
    entry = ctx.registry.lookup_name(line[:boundary])
    if isinstance(entry, VariableEntry):
        variable = entry.variable
        emit_result(
            ctx,
            message=f"{entry.name} = {variable.format_value()}",
            data={"name": entry.name, "value": variable.value, "status": status},
        )
    elif ctx.json_output:
        emit_result(ctx, message="ok", data={"name": line[:boundary], "status": status})
    return 0


def dispatch_line(ctx: ConsoleContext, commands: MetaCommandRegistry, line: str) -> int:
    if not line.strip():
        return 0
    if is_meta_command(line):
        return run_meta_command(ctx, commands, line)
    return run_console_line(ctx, line.strip())


class ConsoleREPL:
    """prompt_toolkit REPL with a fallback to input()."""

    def __init__(
        self,
        ctx: ConsoleContext,
        commands: MetaCommandRegistry,
        *,
        history_store: Optional[HistoryStore] = None,
    ) -> None:
        self.ctx = ctx
        self.commands = commands
        self.history_store = history_store
        help_command = self.commands.get("help")
        if isinstance(help_command, HelpCommand):
            help_command.bind(commands)
        self._readline_enabled = False

    def run(self) -> int:
        if PromptSession is None:
            return self._fallback_loop()
        history = InMemoryHistory()
        if self.history_store:
            for entry in self.history_store.snapshot():
                history.append_string(entry)
        completer = None
        if ConsoleCompleter is not None:
            try:
                completer = ConsoleCompleter(self.ctx, self.commands)
            except RuntimeError:
                completer = None
        session = PromptSession(PROMPT, history=history, completer=completer, complete_while_typing=True)
        buffer: list[str] = []
        while True:
            try:
                with patch_stdout():
                    line = session.prompt()
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            self._handle(buffer, line)

    def _fallback_loop(self) -> int:
        buffer: list[str] = []
        use_readline = bool(readline and self.history_store)
        if use_readline:
            for entry in self.history_store.snapshot():  # type: ignore[union-attr]
                readline.add_history(entry)
        self._readline_enabled = use_readline
        while True:
            try:
                line = input(PROMPT)
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            self._handle(buffer, line)

    def _handle(self, buffer: list[str], line: str) -> None:
        if self._handle_multiline(buffer, line):
            return
        payload = " ".join(buffer) if buffer else line
        buffer.clear()
        self._record_history(payload)
        dispatch_line(self.ctx, self.commands, payload)

    @staticmethod
    def _handle_multiline(buffer: list[str], line: str) -> bool:
        stripped = line.rstrip()
        if stripped.endswith("\\"):
            buffer.append(stripped[:-1])
            return True
        if buffer:
            buffer.append(stripped)
        return False

    def _record_history(self, entry: str) -> None:
        stripped = entry.strip()
        if not stripped:
            return
        if self.history_store:
            self.history_store.append(stripped)
        if self._readline_enabled and readline:
            readline.add_history(stripped)
            limit = self.history_store.limit  # type: ignore[union-attr]
            while readline.get_current_history_length() > limit:
                readline.remove_history_item(0)
