"""
wgmesh unified CLI entry point.

Usage:
    wgmesh [OPTIONS] COMMAND [ARGS]...

Commands:
    serve     Run the master or a worker agent
    workers   Worker enrollment and status (talks to the master)
    version   Show version information
"""

from typing import Annotated

import typer

from wgmesh.cli import config as cli_config
from wgmesh.cli.commands import serve, workers
from wgmesh.cli.output import console

app = typer.Typer(
    name="wgmesh",
    help="WireGuard full-mesh control plane",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(serve.app, name="serve", help="Run wgmesh servers")
app.add_typer(workers.app, name="workers", help="Worker management")


@app.callback()
def main(
    master: Annotated[
        str | None,
        typer.Option("--master", "-M", help="Master address", envvar="WGMESH_MASTER"),
    ] = None,
    master_port: Annotated[
        int | None,
        typer.Option("--master-port", help="Master port", envvar="WGMESH_MASTER_PORT"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table|json"),
    ] = "table",
):
    """
    wgmesh control plane CLI.

    Enroll workers, inspect the mesh, and run the master and worker servers.
    """
    if master:
        cli_config.MASTER_ADDRESS = master
    if master_port:
        cli_config.MASTER_PORT = master_port
    cli_config.OUTPUT_FORMAT = output_format


@app.command("version")
def version():
    """Show version information."""
    from wgmesh import __version__

    console.print(f"wgmesh v{__version__}")


if __name__ == "__main__":
    app()
