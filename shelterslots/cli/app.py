"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..adapters.json_slot_source import JsonSlotSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SchedulingConflictError, ShelterSlotsError
from ..services.scheduling import SchedulingService

app = typer.Typer(
    name="shelterslots",
    help="Normalize shelter slots and build weekly visit schedules",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Shelter slot scheduling tools.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s"
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig) -> SchedulingService:
    return SchedulingService(
        slot_source=JsonSlotSource(data_file=config.data_file, timezone=config.timezone)
    )


def _parse_date(value: str, tz: str, label: str):
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz)
    except ValueError as e:
        raise ValueError(f"Could not parse {label} '{value}' (expected YYYY-MM-DD): {e}") from e


def _parse_datetime(value: str, tz: str, label: str):
    try:
        return pendulum.from_format(value, "YYYY-MM-DD HH:mm", tz=tz)
    except ValueError as e:
        raise ValueError(f"Could not parse {label} '{value}' (expected 'YYYY-MM-DD HH:mm'): {e}") from e


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def normalize(
    shelter_id: Annotated[str, typer.Argument(help="Shelter id as configured.")],
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD). Defaults to today.")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date, exclusive (YYYY-MM-DD). Defaults to start + 7 days.")] = None,
    animal: Annotated[Optional[str], typer.Option("--animal", "-a", help="Only include activities of this animal.")] = None,
    config_file: ConfigOption = None,
):
    """
    Show slots split per day and clipped to the shelter's opening hours.

    Examples:

        shelterslots normalize lisbon-north --start 2025-01-06
        shelterslots normalize lisbon-north --start 2025-01-06 --end 2025-01-08 --animal rex
    """
    try:
        config = _load_config(config_file)
        shelter = config.resolve_shelter(shelter_id)
        tz = config.timezone

        range_start = _parse_date(start, tz, "start date") if start else pendulum.today(tz)
        range_end = _parse_date(end, tz, "end date") if end else range_start.add(days=7)

        normalized = asyncio.run(
            _build_service(config).get_normalized_slots(
                hours=shelter.get_hours(),
                shelter_id=shelter.id,
                start=range_start,
                end=range_end,
                animal_id=animal,
            )
        )
    except (ShelterSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not len(normalized):
        console.print("[yellow]⚠ No slots within opening hours for this period.[/yellow]")
        return

    table = Table(
        title=f"{shelter.display_name()} ({shelter.get_hours()})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold", no_wrap=True)
    table.add_column("Time", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details")
    table.add_column("Id", style="dim")

    for slot in normalized:
        table.add_row(
            slot.start.format("ddd DD.MM.YYYY"),
            f"{slot.start.format('HH:mm')} - {slot.end.format('HH:mm')}",
            slot.status.value,
            slot.label,
            slot.id
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def week(
    shelter_id: Annotated[str, typer.Argument(help="Shelter id as configured.")],
    start: Annotated[Optional[str], typer.Option("--start", help="First day of the week (YYYY-MM-DD). Defaults to this Monday.")] = None,
    animal: Annotated[Optional[str], typer.Option("--animal", "-a", help="Only include activities of this animal.")] = None,
    config_file: ConfigOption = None,
):
    """
    Show a seven-day schedule with free, reserved and unavailable time.
    """
    try:
        config = _load_config(config_file)
        shelter = config.resolve_shelter(shelter_id)
        tz = config.timezone

        week_start = _parse_date(start, tz, "start date") if start else pendulum.now(tz).start_of("week")

        schedule = asyncio.run(
            _build_service(config).get_weekly_schedule(
                hours=shelter.get_hours(),
                shelter_id=shelter.id,
                week_start=week_start.date(),
                timezone=tz,
                animal_id=animal,
            )
        )
    except (ShelterSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    table = Table(
        title=f"{shelter.display_name()} - week of {schedule.start_date.format('DD.MM.YYYY')}",
        show_header=True,
        header_style="bold cyan",
        show_lines=True
    )
    table.add_column("Day", style="bold", no_wrap=True)
    table.add_column("Free", style="green", no_wrap=True)
    table.add_column("Reserved", style="yellow")
    table.add_column("Unavailable", style="red")

    for daily in schedule.days:
        table.add_row(
            daily.date.format("ddd DD.MM"),
            "\n".join(
                f"{block.start.strftime('%H:%M')} - {block.end.strftime('%H:%M')}"
                for block in daily.available
            ) or "-",
            "\n".join(
                f"{slot.start.format('HH:mm')} - {slot.end.format('HH:mm')} {slot.label}"
                for slot in daily.reserved
            ) or "-",
            "\n".join(
                f"{slot.start.format('HH:mm')} - {slot.end.format('HH:mm')} {slot.label}"
                for slot in daily.unavailable
            ) or "-",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def check(
    shelter_id: Annotated[str, typer.Argument(help="Shelter id as configured.")],
    animal_id: Annotated[str, typer.Argument(help="Animal to visit.")],
    start: Annotated[str, typer.Option("--start", help="Visit start ('YYYY-MM-DD HH:mm').")],
    end: Annotated[str, typer.Option("--end", help="Visit end ('YYYY-MM-DD HH:mm').")],
    config_file: ConfigOption = None,
):
    """
    Check whether a visit can be scheduled.

    Exits with status 1 if the visit is outside opening hours or overlaps
    reserved or unavailable time.
    """
    try:
        config = _load_config(config_file)
        shelter = config.resolve_shelter(shelter_id)
        tz = config.timezone

        visit_start = _parse_datetime(start, tz, "start")
        visit_end = _parse_datetime(end, tz, "end")

        proposal = asyncio.run(
            _build_service(config).validate_new_activity(
                hours=shelter.get_hours(),
                shelter_id=shelter.id,
                animal_id=animal_id,
                start=visit_start,
                end=visit_end,
            )
        )
    except SchedulingConflictError as e:
        console.print(f"[bold red]✗ {e}[/bold red]")
        for slot in e.conflicts:
            console.print(
                f"  {slot.start.format('DD.MM.YYYY HH:mm')} - {slot.end.format('HH:mm')} "
                f"{slot.label} ({slot.status.value})"
            )
        raise typer.Exit(1)
    except (ShelterSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[bold green]✓ Slot is free:[/bold green] {proposal}")


@app.command()
def list_shelters(config_file: ConfigOption = None):
    """
    List all configured shelters.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)

    if not config.shelters:
        console.print("[yellow]No shelters defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured shelters",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Opening hours", style="dim")

    for shelter in config.shelters:
        table.add_row(shelter.id, shelter.display_name(), str(shelter.get_hours()))

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]shelterslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
