"""Command line entry point."""

from typing import Annotated

import typer

from fitback.core.logging import configure_logging
from fitback.core.settings import get_settings
from fitback.core.supervisor import Supervisor, SupervisorConfig

app = typer.Typer(help="FitBack API server.", no_args_is_help=True)


@app.callback()
def main() -> None:
    """FitBack API server."""


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Interface to bind.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to listen on.")] = None,
    workers: Annotated[
        int | None,
        typer.Option(min=1, help="Worker processes (default: one per CPU)."),
    ] = None,
) -> None:
    """Start the supervisor and its worker processes."""
    configure_logging()
    config = SupervisorConfig.from_settings(
        get_settings(), host=host, port=port, workers=workers
    )
    raise typer.Exit(code=Supervisor(config).run())


@app.command()
def version() -> None:
    """Show version."""
    typer.echo("FitBack 0.1.0")
