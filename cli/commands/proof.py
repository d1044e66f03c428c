"""
Proof commands: create, health
"""

from dataclasses import replace
from typing import Optional

import anyio
import typer
from rich.console import Console
from rich.table import Table

from sati.config import Settings, load_settings
from sati.core.encoding import to_address_bytes
from sati.core.errors import SatiError
from sati.logging_config import setup_logging
from sati.proofs.assembler import ProofAssembler, ProofContext
from sati.proofs.model import ProofBundle
from sati.proofs.rpc import PhotonRpc

from .options import emit_json, fail

app = typer.Typer()
console = Console()


def build_rpc(settings: Settings) -> PhotonRpc:
    return PhotonRpc.from_settings(settings)


async def _create(settings: Settings, address: bytes, attempts: int) -> ProofBundle:
    async with build_rpc(settings) as rpc:
        assembler = ProofAssembler(ProofContext(rpc=rpc, settings=settings))
        return await assembler.with_fresh_proof(lambda: assembler.create_proof(address), attempts)


async def _health(settings: Settings) -> dict:
    async with build_rpc(settings) as rpc:
        return {"health": await rpc.get_indexer_health(), "slot": await rpc.get_indexer_slot()}


def _settings(url: Optional[str]) -> Settings:
    settings = load_settings()
    if url:
        settings = replace(settings, photon_url=url)
    return settings


@app.command()
def create(
    address: str = typer.Argument(..., help="New compressed account address (base58)"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Photon endpoint (default: SATI_PHOTON_URL)"),
    attempts: int = typer.Option(3, "--attempts", help="Retries when the proof goes stale"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Fetch a validity proof and packed accounts for a new address.

    Examples:
        sati proof create <address>
        sati proof create <address> --url http://localhost:8784 --json
    """
    setup_logging()
    try:
        bundle = anyio.run(_create, _settings(url), to_address_bytes(address, "address"), attempts)
    except (SatiError, ValueError) as e:
        fail(e, json_output)

    if json_output:
        emit_json(bundle.to_dict())
        return

    info = bundle.address_tree_info
    console.print("[green]✓ Proof ready[/green]")
    table = Table(show_header=False, box=None)
    table.add_row("[bold]Root index[/bold]", str(info.root_index))
    table.add_row("[bold]Address tree index[/bold]", str(info.address_merkle_tree_pubkey_index))
    table.add_row("[bold]Address queue index[/bold]", str(info.address_queue_pubkey_index))
    table.add_row("[bold]Output tree index[/bold]", str(bundle.output_state_tree_index))
    table.add_row("[bold]Remaining accounts[/bold]", str(len(bundle.remaining_accounts)))
    table.add_row("[bold]Packed start[/bold]", str(bundle.packed_start))
    console.print(table)


@app.command()
def health(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Photon endpoint (default: SATI_PHOTON_URL)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Check indexer health and slot."""
    try:
        status = anyio.run(_health, _settings(url))
    except (SatiError, ValueError) as e:
        fail(e, json_output)

    if json_output:
        emit_json(status)
    else:
        console.print(f"[bold]Health:[/bold] {status['health']}  [bold]Slot:[/bold] {status['slot']}")
