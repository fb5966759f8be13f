"""Console context shared by the REPL and meta-commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..cvar_constants import CVAR_EXEC_FAIL
from ..registry import CommandRegistry

LOGGER = logging.getLogger("cvar_console.context")


@dataclass
class ConsoleContext:
    """Holds shared console state."""

    registry: CommandRegistry
    json_output: bool = False
    aliases: Dict[str, str] = field(default_factory=dict)
    last_status: int = CVAR_EXEC_FAIL

    def execute(self, line: str) -> int:
        """Pass a console line to the registry, remembering its status."""
        status = self.registry.execute(line)
        self.last_status = status
        if not status:
            LOGGER.debug("line rejected: %r", line)
        return status

    def resolve_alias(self, name: str) -> str:
        return self.aliases.get(name, name)

    def set_alias(self, alias: str, command: str) -> None:
        if alias == command:
            self.aliases.pop(alias, None)
            return
        self.aliases[alias] = command

    def list_aliases(self) -> Dict[str, str]:
        return dict(self.aliases)

    def name_completions(self, prefix: str = "") -> List[str]:
        needle = prefix.lower()
        return [name for name in self.registry.names() if name.lower().startswith(needle)]

    def describe_name(self, name: str) -> Optional[Dict[str, object]]:
        entry = self.registry.lookup_name(name)
        if entry is None:
            return None
        info: Dict[str, object] = {"name": entry.name, "key": entry.key_text, "kind": entry.kind.value}
        variable = getattr(entry, "variable", None)
        if variable is not None:
            info["type"] = variable.kind.value
            info["value"] = variable.value
        help_text = getattr(entry, "help_text", None)
        if help_text:
            info["help"] = help_text
        return info
