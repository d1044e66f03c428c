"""
Layout commands: encode, decode, message
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from sati.core.encoding import b58encode, hex_to_bytes, to_address_bytes
from sati.core.errors import SatiError
from sati.layout.codec import deserialize, serialize
from sati.layout.content import parse_json_content
from sati.layout.model import PAYLOAD_TYPES, ContentType, DataType, Outcome
from sati.signing.messages import build_counterparty_message

from .options import emit_json, fail, parse_enum, parse_hex, parse_mode

app = typer.Typer()
console = Console()


@app.command()
def encode(
    task_ref: str = typer.Option(..., "--task-ref", "-t", help="Task reference (32-byte hex)"),
    token_account: str = typer.Option(..., "--agent", "-a", help="Agent mint address (base58)"),
    counterparty: str = typer.Option(..., "--counterparty", "-c", help="Counterparty address (base58)"),
    outcome: str = typer.Option("neutral", "--outcome", "-o", help="negative, neutral or positive"),
    data_hash: str = typer.Option("00" * 32, "--data-hash", "-d", help="Data hash (32-byte hex)"),
    content_type: str = typer.Option("none", "--content-type", help="none, json, utf8, ipfs, arweave, encrypted"),
    content: str = typer.Option("", "--content", help="Content text (UTF-8)"),
    data_type: str = typer.Option("feedback", "--data-type", help="feedback, validation, reputation_score"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Apply the content cap of: dual, counterparty, owner"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Serialize an attestation record to hex.

    Examples:
        sati layout encode -t <hex> -a <addr> -c <addr> -o positive
        sati layout encode ... --content-type json --content '{"score":90}' --mode dual
    """
    try:
        payload_cls = PAYLOAD_TYPES[parse_enum(DataType, data_type, "data type")]
        payload = payload_cls(
            task_ref=parse_hex(task_ref, 32, "task_ref"),
            token_account=to_address_bytes(token_account, "token_account"),
            counterparty=to_address_bytes(counterparty, "counterparty"),
            outcome=parse_enum(Outcome, outcome, "outcome"),
            data_hash=parse_hex(data_hash, 32, "data_hash"),
            content_type=parse_enum(ContentType, content_type, "content type"),
            content=content.encode("utf-8"),
        )
        record = serialize(payload, parse_mode(mode))
    except (SatiError, ValueError) as e:
        fail(e, json_output)

    if json_output:
        emit_json({"data": record.hex(), "size": len(record)})
    else:
        console.print(f"[green]✓ Encoded {len(record)} bytes[/green]")
        console.print(record.hex())


@app.command()
def decode(
    data: str = typer.Argument(..., help="Record bytes (hex)"),
    data_type: str = typer.Option("feedback", "--data-type", help="feedback, validation, reputation_score"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Apply the content cap of: dual, counterparty, owner"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Decode and validate an attestation record.

    Examples:
        sati layout decode 01ab...
        sati layout decode 01ab... --data-type validation --json
    """
    try:
        payload = deserialize(
            hex_to_bytes(data.strip()),
            parse_enum(DataType, data_type, "data type"),
            parse_mode(mode),
        )
    except (SatiError, ValueError) as e:
        fail(e, json_output)

    parsed = parse_json_content(payload.content, payload.content_type)
    if json_output:
        out = payload.to_dict()
        if parsed is not None:
            out["parsed_content"] = parsed
        emit_json(out)
        return

    table = Table(title=f"{payload.data_type.name} record")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Layout version", str(payload.layout_version))
    table.add_row("Task", b58encode(payload.task_ref))
    table.add_row("Agent", b58encode(payload.token_account))
    table.add_row("Counterparty", b58encode(payload.counterparty))
    table.add_row("Outcome", Outcome(payload.outcome).name)
    table.add_row("Data hash", payload.data_hash.hex())
    table.add_row("Content type", ContentType(payload.content_type).name)
    table.add_row("Content", f"{len(payload.content)} bytes")
    console.print(table)
    if parsed is not None:
        console.print(parsed)


@app.command()
def message(
    data: str = typer.Argument(..., help="Record bytes (hex)"),
    schema_name: str = typer.Option("FeedbackV1", "--schema-name", "-s", help="Schema name shown in the message"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Print the message the counterparty signs for a record."""
    try:
        signing_message = build_counterparty_message(schema_name, hex_to_bytes(data.strip()))
    except (SatiError, ValueError) as e:
        fail(e, json_output)

    if json_output:
        emit_json({"text": signing_message.text, "bytes": signing_message.message_bytes.hex()})
    else:
        console.print(signing_message.text, markup=False, highlight=False)
