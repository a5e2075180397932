"""CLI commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from webdavhub.config import Config

app = typer.Typer(
    name="webdavhub",
    help="WebDavHub auth gateway - serve the API and WebDAV behind login.",
    no_args_is_help=True,
)
console = Console()


def _get_config() -> Config:
    """Lazy import and load config."""
    from webdavhub.config import Config

    return Config.load()


def _setup_logging(level: str) -> None:
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def serve(
    host: Annotated[
        str | None, typer.Option(help="Bind address (overrides config)")
    ] = None,
    port: Annotated[
        int | None, typer.Option(help="Port number (overrides config)")
    ] = None,
) -> None:
    """Start the server."""
    try:
        import uvicorn
    except ImportError:
        console.print("[red]Server dependencies not installed.[/red]")
        console.print("Install with:")
        console.print("  [bold]pip install -e \".\\[server]\"[/bold]")
        raise typer.Exit(1)

    from webdavhub.server.app import create_app

    cfg = _get_config()
    _setup_logging(cfg.log_level)
    bind_host = host or cfg.host
    bind_port = int(port or cfg.port)

    # Security warning
    if bind_host == "0.0.0.0" and cfg.is_auth_enabled() and cfg.password == "admin":
        console.print(
            "[yellow]Warning:[/yellow] Binding to 0.0.0.0 with the default password. "
            "Set CINESYNC_PASSWORD before exposing the server."
        )

    server_app = create_app(cfg)
    _print_banner(cfg, bind_host, bind_port)

    uvicorn.run(server_app, host=bind_host, port=bind_port, log_level=cfg.log_level)


def _print_banner(cfg: Config, host: str, port: int) -> None:
    """Print server startup info."""
    base_url = f"http://{host}:{port}"

    console.print()
    console.print("[bold]webdavhub[/bold]")
    console.print(f"  Listening on [cyan]{base_url}[/cyan]")
    console.print(f"  REST API: [green]{base_url}/api/[/green]")
    console.print(f"  WebDAV:   [green]{base_url}/webdav/[/green]")
    auth_status = "[green]enabled[/green]" if cfg.is_auth_enabled() else "[yellow]disabled[/yellow]"
    console.print(f"  Auth:     {auth_status}")
    console.print("\n[dim]Press Ctrl+C to stop.[/dim]\n")


@app.command()
def token(
    username: Annotated[
        str | None, typer.Option(help="Username to embed (must be the configured one)")
    ] = None,
) -> None:
    """Issue a bearer token for the configured user."""
    from webdavhub.auth.credentials import AuthSettings
    from webdavhub.auth.errors import SigningFailure
    from webdavhub.auth.tokens import TokenIssuer

    cfg = _get_config()
    if not cfg.jwt_secret_value:
        console.print("[red]No jwt_secret configured; the server would not accept this token.[/red]")
        raise typer.Exit(1)

    settings = AuthSettings.from_config(cfg)
    name = username or settings.credentials.username
    if name != settings.credentials.username:
        console.print(f"[red]Unknown user:[/red] {name}")
        raise typer.Exit(1)

    try:
        issued = TokenIssuer(settings.secret, settings.token_ttl).issue(name)
    except SigningFailure as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    # Plain print so the token can be piped
    print(issued)


@app.command("config")
def show_config() -> None:
    """Show effective configuration (secrets masked)."""
    cfg = _get_config()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Key")
    table.add_column("Value")
    table.add_column("Description", style="dim")
    for key, desc, value in cfg.get_settings():
        if key == "auth_enabled":
            value = cfg.is_auth_enabled()
        table.add_row(key, str(value), desc)

    console.print(f"[dim]{cfg.config_dir / 'config.json'}[/dim]")
    console.print(table)


def main() -> None:
    app()
