#!/usr/bin/env python3
"""
SATI CLI - Attestation protocol tooling

Main entrypoint for the sati command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import address, hashes, layout, proof

# Initialize Typer app
app = typer.Typer(
    name="sati",
    help="SATI attestation hashing, layout, addressing and proof tooling",
    add_completion=False,
)

# Console for rich output
console = Console()

# Add command groups
app.add_typer(hashes.app, name="hash", help="Domain-separated hashes and nonces")
app.add_typer(layout.app, name="layout", help="Attestation record encoding")
app.add_typer(address.app, name="address", help="Commitment and PDA derivation")
app.add_typer(proof.app, name="proof", help="Validity proofs from the Photon indexer")


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from sati import __version__ as sati_version
    from sati.layout.model import CURRENT_LAYOUT_VERSION

    table = Table(show_header=False, box=None)
    table.add_row("[bold]SATI CLI[/bold]", f"v{__version__}")
    table.add_row("Library", f"v{sati_version}")
    table.add_row("Layout", f"v{CURRENT_LAYOUT_VERSION}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
