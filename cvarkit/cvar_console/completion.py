"""prompt_toolkit completer for the console."""

from __future__ import annotations

from typing import Iterable, List

from .commands import MetaCommandRegistry
from .context import ConsoleContext
from .parser import META_PREFIX

try:
    from prompt_toolkit.completion import Completer, Completion, PathCompleter
    from prompt_toolkit.document import Document
except ImportError:  # pragma: no cover - prompt_toolkit not installed
    Completer = object  # type: ignore[assignment]
    Completion = object  # type: ignore[assignment]
    PathCompleter = None
    Document = object  # type: ignore[assignment]

# Meta-commands whose argument is a registered name or a file path.
NAME_COMMANDS = {"get", "show", "list", "ls"}
PATH_COMMANDS = {"exec"}


if PathCompleter is not None:

    class ConsoleCompleter(Completer):  # type: ignore[misc]
        """Completes registered names, meta-commands and args file paths."""

        def __init__(self, ctx: ConsoleContext, commands: MetaCommandRegistry) -> None:
            self.ctx = ctx
            self.commands = commands
            self._path = PathCompleter(expanduser=True)

        def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
            text = document.text_before_cursor.lstrip()
            tokens = text.split()
            if text and text[-1].isspace():
                tokens.append("")
            if not tokens:
                yield from self._complete(self.ctx.name_completions(""), "")
                return
            prefix = tokens[-1]
            is_meta = tokens[0].startswith(META_PREFIX)
            if len(tokens) == 1:
                if is_meta:
                    yield from self._complete(self._meta_names(), prefix)
                else:
                    yield from self._complete(self.ctx.name_completions(prefix), prefix)
                return
            if not is_meta:
                return
            command = tokens[0][len(META_PREFIX) :]
            if command in PATH_COMMANDS:
                path_doc = Document(prefix, cursor_position=len(prefix))
                yield from self._path.get_completions(path_doc, complete_event)
            elif command in NAME_COMMANDS:
                yield from self._complete(self.ctx.name_completions(prefix), prefix)

        def _meta_names(self) -> List[str]:
            names: List[str] = []
            for command in self.commands.list_commands():
                names.append(META_PREFIX + command.name)
                names.extend(META_PREFIX + alias for alias in command.aliases)
            return names

        @staticmethod
        def _complete(candidates: Iterable[str], prefix: str) -> Iterable[Completion]:
            needle = prefix.lower()
            for entry in sorted(dict.fromkeys(c for c in candidates if c.lower().startswith(needle))):
                yield Completion(entry, start_position=-len(prefix))

else:  # pragma: no cover - prompt_toolkit unavailable

    class ConsoleCompleter:  # type: ignore[override]
        def __init__(self, *args, **kwargs) -> None:
            raise RuntimeError("prompt_toolkit is required for completion support")
