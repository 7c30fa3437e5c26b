"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_repository import JsonScheduleRepository
from ..adapters.memory_repository import CachedScheduleRepository
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import DataSourceUnavailable
from ..domain.models import DayTimetable, SlotRequest
from ..domain.timezone import TimezoneConverter, seconds_to_clock
from ..services.availability import AvailabilityService, ScheduleRepositoryProtocol

app = typer.Typer(
    name="timetabler",
    help="Find bookable time slots from work hours and existing bookings",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

WEEKDAY_NAMES = {
    1: "Sunday",
    2: "Monday",
    3: "Tuesday",
    4: "Wednesday",
    5: "Thursday",
    6: "Friday",
    7: "Saturday",
}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load an explicit config file, the default one if present, or built-in defaults."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig()


def _configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.get_log_level(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build_repository(config: AppConfig) -> ScheduleRepositoryProtocol:
    repository = JsonScheduleRepository(
        events_path=config.data.events_path,
        workhours_path=config.data.workhours_path,
    )
    if config.data.cache_ttl_seconds > 0:
        return CachedScheduleRepository(repository, ttl_seconds=config.data.cache_ttl_seconds)
    return repository


def _render_day(timetable: DayTimetable, converter: TimezoneConverter, tz: str) -> None:
    """Print one day as a table of local slot times."""
    day_label = converter.format_date(timetable.start_of_day, tz)
    title = f"{day_label} (day_modifier {timetable.day_modifier:+d})"

    if timetable.is_day_off:
        console.print(f"[bold]{title}[/bold]: [yellow]day off[/yellow]\n")
        return

    if not timetable.timeslots:
        console.print(f"[bold]{title}[/bold]: [yellow]no available slots[/yellow]\n")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column(f"Begin ({tz})", style="bold yellow")
    table.add_column(f"End ({tz})", style="bold yellow")
    table.add_column("begin_at", style="dim")
    table.add_column("end_at", style="dim")

    for index, slot in enumerate(timetable.timeslots, 1):
        table.add_row(
            str(index),
            converter.format_time(slot.begin_at, tz),
            converter.format_time(slot.end_at, tz),
            str(slot.begin_at),
            str(slot.end_at),
        )

    console.print(table)
    console.print()


@app.command()
def slots(
    start_day: Annotated[str, typer.Argument(help="First day as YYYYMMDD, e.g. 20231001")],
    duration: Annotated[int, typer.Option("--duration", "-d", help="Service duration in seconds")],
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-z", help="IANA timezone, e.g. Asia/Seoul. Defaults to the configured timezone")] = None,
    days: Annotated[Optional[int], typer.Option("--days", "-n", help="Number of days to compute")] = None,
    interval: Annotated[Optional[int], typer.Option("--interval", "-i", help="Step between slot starts in seconds")] = None,
    ignore_schedule: Annotated[bool, typer.Option("--ignore-schedule", help="Do not remove slots overlapping existing events")] = False,
    ignore_workhour: Annotated[bool, typer.Option("--ignore-workhour", help="Use whole days instead of configured work hours")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw response as JSON")] = False,
    config_file: ConfigOption = None,
):
    """
    Compute bookable time slots.

    Examples:

        timetabler slots 20231001 --duration 3600

        timetabler slots 20210509 -d 3600 -z Asia/Seoul --days 3 --ignore-workhour

        timetabler slots 20231001 -d 1800 --interval 900 --json
    """
    try:
        config = _load_config(config_file)
        _configure_logging(config)

        tz = timezone or config.timezone
        request = SlotRequest(
            start_day_identifier=start_day,
            timezone_identifier=tz,
            service_duration=duration,
            days=days if days is not None else config.defaults.days,
            timeslot_interval=interval if interval is not None else config.defaults.timeslot_interval,
            is_ignore_schedule=ignore_schedule,
            is_ignore_workhour=ignore_workhour,
        )

        service = AvailabilityService(
            repository=_build_repository(config),
            reference_date=config.reference_date,
        )
        timetables = asyncio.run(service.get_time_slots(request))

    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps([timetable.to_dict() for timetable in timetables], indent=2))
        return

    converter = TimezoneConverter()
    console.print()
    for timetable in timetables:
        _render_day(timetable, converter, tz)

    total = sum(len(timetable.timeslots) for timetable in timetables)
    console.print(f"[bold green]✓ {total} available slot(s) across {len(timetables)} day(s)[/bold green]\n")


@app.command()
def workhours(config_file: ConfigOption = None):
    """
    List the configured weekly work hours.
    """
    try:
        config = _load_config(config_file)
        _configure_logging(config)
        rules = asyncio.run(_build_repository(config).load_workhours())
    except (FileNotFoundError, ValueError, DataSourceUnavailable) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not rules:
        console.print("[yellow]No work hours configured - every day is a full working day.[/yellow]")
        return

    table = Table(title="Work hours", show_header=True, header_style="bold cyan")
    table.add_column("Weekday", style="bold yellow")
    table.add_column("Open")
    table.add_column("Close")
    table.add_column("Day off", style="dim")

    rows: List[tuple] = []
    for rule in sorted(rules, key=lambda r: r.weekday):
        name = WEEKDAY_NAMES.get(rule.weekday, f"invalid ({rule.weekday})")
        if rule.is_day_off:
            rows.append((name, "-", "-", "yes"))
        else:
            rows.append((
                name,
                seconds_to_clock(rule.open_interval),
                seconds_to_clock(rule.close_interval),
                "no",
            ))

    for row in rows:
        table.add_row(*row)

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]timetabler[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
