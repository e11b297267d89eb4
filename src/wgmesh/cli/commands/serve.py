"""Server commands: run the master or a worker agent."""

from typing import Annotated

import typer

from wgmesh.cli.output import print_error
from wgmesh.models.enums import LogLevel

app = typer.Typer(help="Run wgmesh servers")


@app.command("master")
def serve_master(
    bind: Annotated[str, typer.Option("--bind", help="Bind address")] = "0.0.0.0",
    port: Annotated[int, typer.Option("--port", "-p", help="HTTP port")] = 8080,
    db_file: Annotated[
        str | None, typer.Option("--db-file", help="SQLite registry path")
    ] = None,
    pool: Annotated[
        str | None, typer.Option("--pool", help="Overlay pool CIDR")
    ] = None,
    settle: Annotated[
        float | None,
        typer.Option("--settle", help="Pause (seconds) after each mesh fan-out"),
    ] = None,
    log_level: Annotated[
        LogLevel, typer.Option("--log-level", "-l", help="Log verbosity")
    ] = LogLevel.INFO,
    log_file: Annotated[str, typer.Option("--log-file", help="Extra log file")] = "",
):
    """Run the master server."""
    from wgmesh.master import app as master_app
    from wgmesh.master.config import config

    config.BIND_IP = bind
    config.PORT = port
    if db_file:
        config.DB_FILE = db_file
    if pool:
        config.OVERLAY_POOL = pool
    if settle is not None:
        config.MESH_SETTLE_SECONDS = settle
    config.LOG_LEVEL = log_level
    config.LOG_FILE = log_file

    try:
        config.get_overlay_network()
    except ValueError as e:
        print_error(f"Invalid overlay pool '{config.OVERLAY_POOL}': {e}")
        raise typer.Exit(1)

    master_app.run()


@app.command("worker")
def serve_worker(
    api_key: Annotated[
        str,
        typer.Option(
            "--api-key",
            "-k",
            help="Shared secret expected in X-API-Key",
            envvar="WORKER_API_KEY",
        ),
    ] = "",
    bind: Annotated[str, typer.Option("--bind", help="Bind address")] = "0.0.0.0",
    port: Annotated[int, typer.Option("--port", "-p", help="HTTP port")] = 8080,
    conf_dir: Annotated[
        str, typer.Option("--conf-dir", help="WireGuard config directory")
    ] = "/etc/wireguard",
    log_level: Annotated[
        LogLevel, typer.Option("--log-level", "-l", help="Log verbosity")
    ] = LogLevel.INFO,
    log_file: Annotated[str, typer.Option("--log-file", help="Extra log file")] = "",
):
    """Run a worker agent."""
    from wgmesh.worker import app as worker_app
    from wgmesh.worker.config import config

    if not api_key:
        print_error("WORKER_API_KEY not set (use --api-key or the environment)")
        raise typer.Exit(1)

    config.API_KEY = api_key
    config.BIND_IP = bind
    config.PORT = port
    config.CONF_DIR = conf_dir
    config.LOG_LEVEL = log_level
    config.LOG_FILE = log_file

    worker_app.run()
