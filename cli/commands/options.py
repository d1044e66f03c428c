"""
Shared option parsing and error output for CLI commands.
"""

import json
from enum import IntEnum
from typing import Optional, Type, TypeVar

import typer
from rich.console import Console

from sati.core.encoding import hex_to_bytes, require_length
from sati.layout.model import SignatureMode

console = Console()

E = TypeVar("E", bound=IntEnum)

MODES = {
    "dual": SignatureMode.DUAL_SIGNATURE,
    "counterparty": SignatureMode.COUNTERPARTY_SIGNED,
    "owner": SignatureMode.AGENT_OWNER_SIGNED,
    "single": SignatureMode.SINGLE_SIGNER,
}


def parse_hex(value: str, length: int, name: str) -> bytes:
    """Decode hex (optional 0x prefix) of a fixed width."""
    try:
        raw = hex_to_bytes(value)
    except ValueError as e:
        raise ValueError(f"{name} is not valid hex: {value!r}") from e
    return require_length(raw, length, name)


def parse_enum(enum_type: Type[E], value: str, name: str) -> E:
    """Accept an enum member by name (case-insensitive) or by number."""
    if value.isdigit():
        try:
            return enum_type(int(value))
        except ValueError as e:
            raise ValueError(f"Invalid {name}: {value}") from e
    try:
        return enum_type[value.upper().replace("-", "_")]
    except KeyError as e:
        choices = ", ".join(m.name.lower() for m in enum_type)
        raise ValueError(f"Invalid {name}: {value} (choose from {choices})") from e


def parse_mode(value: Optional[str]) -> Optional[SignatureMode]:
    if value is None:
        return None
    try:
        return MODES[value.lower()]
    except KeyError as e:
        raise ValueError(f"Invalid mode: {value} (choose from {', '.join(MODES)})") from e


def fail(error: Exception, json_output: bool) -> None:
    """Print an error and exit with status 1."""
    if json_output:
        print(json.dumps({"error": str(error)}))
    else:
        console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def emit_json(data: dict) -> None:
    print(json.dumps(data, indent=2))
