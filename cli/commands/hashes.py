"""
Hash commands: interaction, nonce, reputation, evm-link, data
"""

import typer
from rich.console import Console

from sati.core.errors import SatiError
from sati.core.hashing import (
    attestation_nonce,
    cross_chain_link_hash,
    data_hash_from_strings,
    interaction_hash,
    reputation_nonce,
)

from .options import emit_json, fail, parse_hex

app = typer.Typer()
console = Console()


def _show(name: str, digest: bytes, json_output: bool) -> None:
    if json_output:
        emit_json({name: digest.hex()})
    else:
        console.print(f"[bold]{name}:[/bold] [cyan]{digest.hex()}[/cyan]")


@app.command()
def interaction(
    schema: str = typer.Option(..., "--schema", "-s", help="SAS schema address (base58)"),
    task_ref: str = typer.Option(..., "--task-ref", "-t", help="Task reference (32-byte hex)"),
    data_hash: str = typer.Option("00" * 32, "--data-hash", "-d", help="Data hash (32-byte hex)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Compute the interaction hash signed by the agent.

    Examples:
        sati hash interaction --schema <addr> --task-ref <hex>
    """
    try:
        digest = interaction_hash(schema, parse_hex(task_ref, 32, "task_ref"), parse_hex(data_hash, 32, "data_hash"))
    except (SatiError, ValueError) as e:
        fail(e, json_output)
    _show("interaction_hash", digest, json_output)


@app.command()
def nonce(
    task_ref: str = typer.Option(..., "--task-ref", "-t", help="Task reference (32-byte hex)"),
    schema: str = typer.Option(..., "--schema", "-s", help="SAS schema address (base58)"),
    subject: str = typer.Option(..., "--subject", help="Agent mint address (base58)"),
    counterparty: str = typer.Option(..., "--counterparty", "-c", help="Counterparty address (base58)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Compute the attestation nonce for compressed addressing."""
    try:
        digest = attestation_nonce(parse_hex(task_ref, 32, "task_ref"), schema, subject, counterparty)
    except (SatiError, ValueError) as e:
        fail(e, json_output)
    _show("nonce", digest, json_output)


@app.command()
def reputation(
    provider: str = typer.Option(..., "--provider", "-p", help="Reputation provider address (base58)"),
    subject: str = typer.Option(..., "--subject", help="Agent mint address (base58)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Compute the reputation score nonce for (provider, subject)."""
    try:
        digest = reputation_nonce(provider, subject)
    except (SatiError, ValueError) as e:
        fail(e, json_output)
    _show("nonce", digest, json_output)


@app.command("evm-link")
def evm_link(
    subject: str = typer.Option(..., "--subject", help="Agent mint address (base58)"),
    address: str = typer.Option(..., "--address", "-a", help="EVM address (20-byte hex)"),
    chain_id: str = typer.Option("eip155:1", "--chain-id", help="CAIP-2 chain id"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Compute the hash signed when linking an EVM address."""
    try:
        digest = cross_chain_link_hash(subject, parse_hex(address, 20, "address"), chain_id)
    except (SatiError, ValueError) as e:
        fail(e, json_output)
    _show("link_hash", digest, json_output)


@app.command()
def data(
    request: str = typer.Option(..., "--request", "-r", help="Request text"),
    response: str = typer.Option(..., "--response", help="Response text"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Compute data_hash from request and response text."""
    _show("data_hash", data_hash_from_strings(request, response), json_output)
