"""
Address commands: derive, reputation
"""

import typer
from rich.console import Console
from rich.table import Table

from sati.addressing.derive import derive_commitment, derive_reputation_attestation_pda
from sati.config import load_settings
from sati.core.encoding import b58encode
from sati.core.errors import SatiError

from .options import emit_json, fail, parse_hex

app = typer.Typer()
console = Console()


@app.command()
def derive(
    task_ref: str = typer.Option(..., "--task-ref", "-t", help="Task reference (32-byte hex)"),
    schema: str = typer.Option(..., "--schema", "-s", help="SAS schema address (base58)"),
    subject: str = typer.Option(..., "--subject", help="Agent mint address (base58)"),
    counterparty: str = typer.Option(..., "--counterparty", "-c", help="Counterparty address (base58)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Derive the compressed attestation address.

    Program id and address tree come from SATI_PROGRAM_ID / SATI_ADDRESS_TREE.

    Examples:
        sati address derive -t <hex> -s <schema> --subject <mint> -c <addr>
    """
    try:
        settings = load_settings()
        commitment = derive_commitment(
            parse_hex(task_ref, 32, "task_ref"),
            schema,
            subject,
            counterparty,
            program_id=settings.program_id,
            address_tree=settings.address_tree,
        )
    except (SatiError, ValueError) as e:
        fail(e, json_output)

    if json_output:
        emit_json(commitment.to_dict())
        return

    table = Table(show_header=False, box=None)
    for key, value in commitment.to_dict().items():
        table.add_row(f"[bold]{key}[/bold]", value)
    console.print(table)


@app.command()
def reputation(
    provider: str = typer.Option(..., "--provider", "-p", help="Reputation provider address (base58)"),
    subject: str = typer.Option(..., "--subject", help="Agent mint address (base58)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Derive the SAS attestation PDA of a reputation score."""
    try:
        settings = load_settings()
        address, bump = derive_reputation_attestation_pda(provider, subject, settings.program_id)
    except (SatiError, ValueError) as e:
        fail(e, json_output)

    if json_output:
        emit_json({"address": b58encode(address), "bump": bump})
    else:
        console.print(f"[bold]Address:[/bold] [cyan]{b58encode(address)}[/cyan] (bump {bump})")
