"""CLI commands for TrackAcademia.

- serve: run the Web API with uvicorn
- config: show the effective configuration
"""

from pathlib import Path

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from trackacademia.config.app_config import CONFIG_FILE, load_app_config

app = typer.Typer(
    name="trackacademia",
    help="Personal study tracker: books, lectures and topics.",
    no_args_is_help=True,
)

console = Console()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Start the Web API."""
    console.print(f"[blue]Starting TrackAcademia API on http://{host}:{port}[/blue]")
    uvicorn.run("trackacademia.web.api:app", host=host, port=port, reload=reload)


@app.command()
def config(
    config_file: Path | None = typer.Option(
        None, "--file", "-f", help=f"Config file (default: {CONFIG_FILE})"
    ),
) -> None:
    """Show the effective configuration."""
    path = config_file or CONFIG_FILE
    if config_file is not None and not config_file.exists():
        console.print(f"[red]✗ Config file not found: {config_file}[/red]")
        raise typer.Exit(code=1)

    cfg = load_app_config(force_reload=True, config_file=path)
    source = str(path) if path.exists() else "built-in defaults"

    table = Table(show_header=True, header_style="bold", title=f"Config ({source})")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("store.backend", cfg.store.backend)
    if cfg.store.backend == "firestore":
        table.add_row("store.project_id", cfg.store.project_id or "[dim](default)[/dim]")
        table.add_row("store.database", cfg.store.database or "[dim](default)[/dim]")

    table.add_row("auth.backend", cfg.auth.backend)
    if cfg.auth.backend == "firebase":
        key_state = "set" if cfg.auth.get_api_key() else "[red]missing[/red]"
        table.add_row("auth.api_key_env", f"{cfg.auth.api_key_env} ({key_state})")

    table.add_row("uploads.backend", cfg.uploads.backend)
    if cfg.uploads.backend != "disabled":
        table.add_row("uploads.cloud_name", cfg.uploads.cloud_name)
        table.add_row("uploads.folder", cfg.uploads.folder)
    table.add_row("uploads.max_bytes", f"{cfg.uploads.max_bytes:,}")

    table.add_row("routes.sign_in", cfg.routes.sign_in)
    table.add_row("routes.profile_setup", cfg.routes.profile_setup)

    table.add_row("web.cors_origins", ", ".join(cfg.web.cors_origins) or "[dim](none)[/dim]")

    console.print(table)


if __name__ == "__main__":
    app()
