"""
Main CLI application using Typer.
"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..adapters.mock_record_store import MockRecordStoreClient
from ..adapters.record_store_client import RestRecordStoreClient
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import TutorSlotsError
from ..logging_setup import configure_logging
from ..services.availability_service import RecordStoreProtocol, TrueAvailabilityService

app = typer.Typer(
    name="tutorslots",
    help="Compute a tutor's free time slots from availability and bookings",
    add_completion=False
)

console = Console()


def _load_config(config_file: Optional[Path], mock: bool) -> AppConfig:
    """
    Load the configuration file.

    A missing file is fine in mock mode, or when the store connection
    comes from SUPABASE_URL and SUPABASE_ANON_KEY; defaults are used then.
    """
    config_path = config_file or get_default_config_path()

    if not config_path.exists():
        defaults = AppConfig()
        if mock or defaults.store.is_complete():
            return defaults

    return AppConfig.load_from_yaml(config_path)


def _build_store(config: AppConfig, mock: bool) -> RecordStoreProtocol:
    if mock:
        return MockRecordStoreClient()

    return RestRecordStoreClient(
        base_url=config.store.url,
        api_key=config.store.api_key,
        timeout_seconds=config.store.timeout_seconds,
        availability_table=config.store.availability_table,
        bookings_table=config.store.bookings_table
    )


@app.command()
def availability(
    tutor_id: Annotated[str, typer.Argument(help="Tutor ID")],
    date: Annotated[str, typer.Argument(help="Day to inspect (YYYY-MM-DD, UTC)")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Use packaged mock records instead of the hosted backend.")] = False,
    min_duration: Annotated[Optional[int], typer.Option("--min-duration", "-d", help="Hide slots shorter than this many minutes")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the unfiltered JSON response body instead of a table.")] = False,
):
    """
    Show the free time slots of a tutor on one day.

    Examples:

        tutorslots availability tutor-ana 2025-03-10 --mock

        tutorslots availability 3f2c... 2025-03-10 --min-duration 60

        tutorslots availability tutor-ana 2025-03-10 --mock --json
    """
    if as_json and min_duration is not None:
        console.print("[bold red]Error:[/bold red] --min-duration cannot be combined with --json; JSON output is the unfiltered response body.")
        raise typer.Exit(1)

    try:
        config = _load_config(config_file, mock)
        configure_logging(config.log_level, console=console)

        service = TrueAvailabilityService(
            record_store=_build_store(config, mock),
            active_status=config.active_booking_status
        )

        if as_json:
            response = service.handle_request({"tutor_id": tutor_id, "date": date})
            console.print_json(json.dumps(response.body))
            if not response.ok:
                raise typer.Exit(1)
            return

        min_minutes = min_duration if min_duration is not None else config.defaults.min_duration_minutes
        slots = service.get_true_availability(tutor_id, date, min_duration_minutes=min_minutes)

    except (FileNotFoundError, ValueError, TutorSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if mock:
        console.print("[yellow]⚠  MOCK MODE: using packaged test records[/yellow]")

    if not slots:
        console.print(f"[yellow]No slots available for {tutor_id} on {date}.[/yellow]")
        return

    table = Table(
        title=f"Free slots for {tutor_id} on {date} (UTC)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Start", style="bold green")
    table.add_column("End", style="bold green")
    table.add_column("Minutes", justify="right", style="dim")

    for slot in slots:
        table.add_row(slot.start, slot.end, str(slot.duration_minutes()))

    console.print(table)


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to listen on")] = 8000,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Serve packaged mock records.")] = False,
):
    """
    Run the HTTP endpoint (POST /get-true-availability).
    """
    import uvicorn

    from ..api.app import create_app

    try:
        config = _load_config(config_file, mock)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    configure_logging(config.log_level, console=console)

    store = MockRecordStoreClient() if mock else None
    uvicorn.run(create_app(config=config, store=store), host=host, port=port, log_config=None)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]tutorslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
