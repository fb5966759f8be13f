"""Output helpers for the console."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Sequence

from .context import ConsoleContext


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True)


def emit_result(ctx: ConsoleContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if ctx.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(ctx: ConsoleContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if ctx.json_output:
        print(_json_dump(payload))
    else:
        print(f"error: {message}")


def _format_value(kind: str, value: Any) -> str:
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "float":
        return f"{value:g}"
    if kind == "string":
        return repr(value)
    return str(value)


def render_variable_table(variables: Sequence[Mapping[str, Any]]) -> None:
    """Print registered variables."""
    if not variables:
        print("  variables: (none)")
        return
    width = max(len(str(var.get("name", ""))) for var in variables)
    print("  variables:")
    for var in variables:
        name = str(var.get("name", ""))
        kind = str(var.get("kind", "-"))
        key = int(var.get("key", 0))
        value = _format_value(kind, var.get("value"))
        owned = " (owned)" if var.get("owns_string") else ""
        print(f"    {name:<{width}}  0x{key:08x}  {kind:<8} {value}{owned}")


def render_command_table(commands: Sequence[Mapping[str, Any]]) -> None:
    """Print registered command handlers."""
    if not commands:
        print("  commands: (none)")
        return
    width = max(len(str(cmd.get("name", ""))) for cmd in commands)
    print("  commands:")
    for cmd in commands:
        name = str(cmd.get("name", ""))
        key = int(cmd.get("key", 0))
        help_text = cmd.get("help") or ""
        print(f"    {name:<{width}}  0x{key:08x}  {help_text}".rstrip())


__all__ = [
    "emit_result",
    "emit_error",
    "render_variable_table",
    "render_command_table",
]
