"""Worker management commands."""

import json
from typing import Annotated

import typer
from rich.table import Table

from wgmesh.cli import client
from wgmesh.cli import config as cli_config
from wgmesh.cli.output import console, print_error, print_success
from wgmesh.utils.wireguard import mask_key

app = typer.Typer(help="Worker management commands")


def format_worker_table(workers: list[dict], show_keys: bool = False) -> Table:
    """Build a rich table of workers."""
    table = Table(title="Workers", show_lines=False)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("API")
    table.add_column("Overlay", style="green")
    table.add_column("Public Key")
    table.add_column("Private Key")

    for w in workers:
        private_key = w.get("private_key", "")
        table.add_row(
            str(w.get("id")),
            w.get("name", ""),
            f"{w.get('ip')}:{w.get('port')}",
            w.get("cidr", ""),
            w.get("public_key", ""),
            private_key if show_keys else mask_key(private_key),
        )
    return table


@app.command("list")
def list_workers(
    show_keys: Annotated[
        bool,
        typer.Option("--show-keys", help="Print private keys in full"),
    ] = False,
):
    """List all enrolled workers."""
    try:
        workers = client.get_workers()
    except client.APIError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if cli_config.OUTPUT_FORMAT == "json":
        console.print_json(json.dumps(workers))
        return

    if not workers:
        console.print("[yellow]No workers enrolled.[/yellow]")
        return

    console.print(format_worker_table(workers, show_keys=show_keys))


@app.command("add")
def add_worker(
    name: Annotated[str, typer.Argument(help="Worker label")],
    ip: Annotated[str, typer.Argument(help="Worker API address or hostname")],
    api_key: Annotated[
        str,
        typer.Option("--api-key", "-k", help="Worker shared secret", prompt=True),
    ],
    port: Annotated[int, typer.Option("--port", "-p", help="Worker API port")] = 8080,
    private_key: Annotated[
        str, typer.Option("--private-key", help="Fallback private key")
    ] = "",
    public_key: Annotated[
        str, typer.Option("--public-key", help="Fallback public key")
    ] = "",
):
    """Enroll a worker and start meshing it with the others."""
    try:
        result = client.add_worker(
            name, ip, port, api_key, private_key=private_key, public_key=public_key
        )
    except client.APIError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(
        f"Worker '{name}' enrolled: id={result.get('id')} cidr={result.get('cidr')}"
    )
    console.print("[dim]Mesh setup continues in the background.[/dim]")


@app.command("status")
def worker_status(
    worker_id: Annotated[int, typer.Argument(help="Worker id")],
):
    """Show the WireGuard status of a worker."""
    try:
        output = client.get_worker_status(worker_id)
    except client.APIError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(output, markup=False, highlight=False)
