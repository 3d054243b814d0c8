"""Command-line interface for Last.fm Jam Sync."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config.settings import Settings
from .core.detector import DuplicateDetector
from .errors import JamSyncError
from .models.result import ImportOutcome, SyncSummary
from .utils.logger import setup_logger
from .utils.platform import get_config_dir

app = typer.Typer(help="Import Last.fm loved tracks as jam records")
console = Console()

OUTCOME_STYLES = {
    ImportOutcome.IMPORTED: "[green]imported[/green]",
    ImportOutcome.SKIPPED: "[yellow]skipped[/yellow]",
    ImportOutcome.FAILED: "[red]failed[/red]",
}


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from file or defaults."""
    return Settings.from_file_or_default(config_path)


def render_summary(summary: SyncSummary) -> Table:
    """Build a table of per-track outcomes."""
    table = Table(title="Loved Tracks Sync")
    table.add_column("Loved", style="cyan")
    table.add_column("Artist", style="green")
    table.add_column("Track")
    table.add_column("Result")
    table.add_column("Details")

    for result in summary.results:
        if result.outcome == ImportOutcome.FAILED:
            details = result.reason or ""
        else:
            details = result.path.name if result.path else ""

        table.add_row(
            str(result.track.uts) if result.track.uts is not None else "?",
            result.track.artist,
            result.track.name,
            OUTCOME_STYLES[result.outcome],
            details
        )

    return table


@app.command()
def sync(
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        min=1,
        help="Number of loved tracks to fetch (default: webhook.limit)"
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    )
):
    """Import new loved tracks once."""
    from .core.sync import JamSyncService

    settings = get_settings(config)
    logger = setup_logger(
        log_file=settings.logging.path,
        level=settings.logging.level,
        max_size_mb=settings.logging.max_size_mb,
        backup_count=settings.logging.backup_count,
        console=True
    )

    service = JamSyncService.from_settings(settings, logger)

    try:
        summary = service.sync(limit)
    except JamSyncError as e:
        console.print(f"[red]Sync failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        service.remote.close()

    if summary.results:
        console.print(render_summary(summary))

    console.print(
        f"[green]Total: {summary.total}, imported: {summary.imported}, "
        f"skipped: {summary.skipped}, errors: {summary.errors}[/green]"
    )


@app.command()
def start(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    )
):
    """Start the scheduled sync service."""
    console.print("[cyan]Starting Last.fm Jam Sync service...[/cyan]")

    # Import here to avoid loading the scheduler for one-shot commands
    from .service import JamSyncDaemon

    try:
        service = JamSyncDaemon(config_path=config)
        service.start()
    except KeyboardInterrupt:
        console.print("\n[yellow]Service stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Service error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    ),
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: webhook.host)"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port (default: webhook.port)")
):
    """Serve the sync webhook."""
    import uvicorn

    from .webhook import SYNC_PATH, create_app

    settings = get_settings(config)
    logger = setup_logger(
        log_file=settings.logging.path,
        level=settings.logging.level,
        max_size_mb=settings.logging.max_size_mb,
        backup_count=settings.logging.backup_count,
        console=True
    )

    if not settings.webhook.secret:
        console.print("[yellow]Warning: webhook.secret is not set, the endpoint is unprotected[/yellow]")

    bind_host = host or settings.webhook.host
    bind_port = port or settings.webhook.port
    console.print(f"[cyan]Listening on http://{bind_host}:{bind_port}{SYNC_PATH}[/cyan]")

    uvicorn.run(create_app(settings, logger=logger), host=bind_host, port=bind_port)


@app.command()
def status(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file"
    )
):
    """Show configuration and record count."""
    settings = get_settings(config)
    logger = setup_logger(log_file=None, level="WARNING", console=True)

    content_root = settings.content.jams_path
    record_count = DuplicateDetector(content_root, logger).count()

    console.print("[cyan]Last.fm Jam Sync Status[/cyan]\n")

    console.print(f"Config directory: {get_config_dir()}")
    console.print(f"Content directory: {content_root}")
    console.print(f"Log file: {settings.logging.path}\n")

    console.print("[bold]Last.fm:[/bold]")
    console.print(f"  User: {settings.lastfm.user or '[red]not set[/red]'}")
    console.print(f"  API key: {'set' if settings.lastfm.api_key else '[red]not set[/red]'}\n")

    console.print("[bold]Records:[/bold]")
    console.print(f"  Jams: {record_count}")


@app.command()
def init_config(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for config file"
    )
):
    """Initialize a configuration file with defaults."""
    if output is None:
        output = get_config_dir() / 'config.yaml'

    if output.exists():
        overwrite = typer.confirm(
            f"Config file already exists at {output}. Overwrite?",
            default=False
        )
        if not overwrite:
            console.print("[yellow]Cancelled[/yellow]")
            return

    settings = Settings()
    settings.save(output)

    console.print(f"[green]Configuration file created: {output}[/green]")
    console.print("\nSet lastfm.api_key and lastfm.user, then run 'sync'")


if __name__ == "__main__":
    app()
