"""CLI entry point for the course scheduler."""

import logging
from dataclasses import replace
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .exceptions import SchedulerError
from .exporters import format_section_row, get_exporter
from .loaders import load_input, load_schedule, read_course_table, read_faculty_table, write_input
from .scheduler import (
    ConfigLoader,
    ConflictDetector,
    CourseScheduler,
    JSONScheduleRepository,
    RoomCatalog,
    SchedulerConfig,
    Semester,
    Severity,
    academic_year,
    balance_workload,
    default_catalog,
    is_restricted_block,
    version_name,
)
from .scheduler.models import Conflict
from .validators import validate_generation_input

app = typer.Typer(
    name="course-scheduler",
    help="Generate and check course section schedules",
    add_completion=False,
)
console = Console()

SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    excel = "excel"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_dir: Path | None) -> ConfigLoader:
    try:
        return ConfigLoader(config_dir)
    except SchedulerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _print_messages(title: str, messages: list[str], style: str) -> None:
    if not messages:
        return
    console.print(f"\n[bold {style}]{title} ({len(messages)}):[/bold {style}]")
    for message in messages:
        console.print(f"  [{style}]• {message}[/{style}]")


def _conflict_table(conflicts: list[Conflict], limit: int = 30) -> Table:
    table = Table(title="Conflicts")
    table.add_column("Severity")
    table.add_column("Type", style="cyan")
    table.add_column("Description", max_width=70)

    for conflict in conflicts[:limit]:
        style = SEVERITY_STYLES[conflict.severity]
        table.add_row(
            f"[{style}]{conflict.severity.value}[/{style}]",
            conflict.type.value,
            conflict.description,
        )

    if len(conflicts) > limit:
        table.add_row("...", "...", f"{len(conflicts) - limit} more")

    return table


@app.command()
def generate(
    input_file: Annotated[
        Path,
        typer.Argument(help="Scheduling input JSON (config, courses, faculty)"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file path"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.json,
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Directory with rooms.csv and policy.json"),
    ] = None,
    time_limit: Annotated[
        Optional[float],
        typer.Option("--time-limit", help="Backtracking time limit in seconds"),
    ] = None,
    balance: Annotated[
        bool,
        typer.Option("--balance-workload", help="Rebalance faculty among candidates first"),
    ] = False,
    save_dir: Annotated[
        Optional[Path],
        typer.Option("--save-dir", help="Save the schedule as a version in this directory"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Generate a schedule from a scheduling input file."""
    _configure_logging(verbose)

    if not input_file.exists():
        console.print(f"[bold red]Error:[/bold red] File not found: {input_file}")
        raise typer.Exit(1)

    try:
        config, courses, faculty = load_input(input_file)
    except SchedulerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if time_limit is not None:
        config = replace(config, backtrack_time_limit=time_limit)

    errors, warnings = validate_generation_input(config, courses, faculty)
    if errors:
        _print_messages("Errors", errors, "red")
        raise typer.Exit(1)
    if verbose:
        _print_messages("Warnings", warnings, "yellow")

    loader = _load_config(config_dir)
    try:
        rooms = RoomCatalog(loader.rooms.get_all_rooms(), loader.policy.block_room_ids)
    except SchedulerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if balance:
        with console.status("[bold green]Balancing faculty workload..."):
            courses = balance_workload(courses, faculty)

    console.print(f"\n[bold]Schedule Generation for:[/bold] {input_file.name}")
    console.print(f"  Semester: {config.semester.value} {config.year}")
    console.print(f"  Courses: {len(courses)}")
    console.print(f"  Faculty: {len(faculty)}")

    with console.status("[bold green]Generating schedule..."):
        scheduler = CourseScheduler(config, courses, faculty, rooms=rooms, policy=loader.policy)
        result = scheduler.generate()

    if not result.success:
        _print_messages("Errors", result.errors, "red")
        _print_messages("Suggestions", result.warnings, "yellow")
        raise typer.Exit(1)

    stats = result.statistics
    summary = Table(title="Summary", show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Strategy", stats.strategy.value)
    summary.add_row("Sections", f"{stats.scheduled_sections} / {stats.total_sections}")
    summary.add_row("Scheduling Rate", f"{stats.scheduling_rate:.1%}")
    summary.add_row("Errors", str(stats.error_conflicts))
    summary.add_row("Warnings", str(stats.warning_conflicts))
    summary.add_row("Info", str(stats.info_conflicts))
    console.print(summary)

    if result.unscheduled_sections:
        console.print(
            f"\n[bold yellow]Unscheduled sections ({len(result.unscheduled_sections)}):"
            "[/bold yellow]"
        )
        for entry in result.unscheduled_sections[:10]:
            console.print(f"  [yellow]- {entry.course_code} ({entry.section_id}): {entry.details}[/yellow]")
        if len(result.unscheduled_sections) > 10:
            console.print(
                f"  [yellow]... and {len(result.unscheduled_sections) - 10} more[/yellow]"
            )

    if verbose:
        courses_by_id = {c.id: c for c in courses}
        sections_table = Table(title="Sections")
        for column in ("Course", "Section", "Kind", "Time", "Room"):
            sections_table.add_column(column)
        for section in result.schedule.sections:
            sections_table.add_row(*format_section_row(section, courses_by_id))
        console.print(sections_table)

        if result.schedule.conflicts:
            console.print(_conflict_table(result.schedule.conflicts))

    if output:
        exporter = get_exporter(format.value, courses=courses, faculty=faculty)
        suffix = ".json" if format == OutputFormat.json else ".xlsx"
        output_path = output if output.suffix else output.with_suffix(suffix)

        with console.status(f"[bold green]Exporting to {format.value}..."):
            exporter.export(result, output_path)

        console.print(f"\n[bold green]✓[/bold green] Exported to: {output_path}")

    if save_dir:
        repository = JSONScheduleRepository(save_dir)
        repository.create(result.schedule)
        today = date.today()
        console.print(
            f"[bold green]✓[/bold green] Saved {version_name(today)} "
            f"({academic_year(today)}) as {result.schedule.id}"
        )


@app.command()
def check(
    schedule_file: Annotated[
        Path,
        typer.Argument(help="Schedule or exported result JSON"),
    ],
    input_file: Annotated[
        Path,
        typer.Argument(help="Scheduling input JSON the schedule was built from"),
    ],
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Directory with rooms.csv and policy.json"),
    ] = None,
) -> None:
    """Re-run conflict detection on a saved schedule."""
    for path in (schedule_file, input_file):
        if not path.exists():
            console.print(f"[bold red]Error:[/bold red] File not found: {path}")
            raise typer.Exit(1)

    try:
        schedule = load_schedule(schedule_file)
        config, courses, faculty = load_input(input_file)
    except SchedulerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    loader = _load_config(config_dir)
    policy = loader.policy.with_overrides(
        max_electives_per_slot=config.max_electives_per_slot,
        restricted_hour_enabled=config.restricted_hour_enabled,
    )

    with console.status("[bold green]Checking schedule..."):
        conflicts = ConflictDetector(courses, faculty, policy).detect(schedule.sections)

    console.print(f"\n[bold]Check Results for:[/bold] {schedule.name}")
    console.print(f"  Sections: {len(schedule.sections)}")

    error_count = sum(1 for c in conflicts if c.severity == Severity.ERROR)
    if not conflicts:
        console.print("[bold green]✓ No conflicts[/bold green]")
        return

    console.print(_conflict_table(conflicts))

    if error_count:
        console.print(f"[bold red]✗ {error_count} error(s)[/bold red]")
        raise typer.Exit(1)
    console.print("[bold green]✓ No errors[/bold green]")


@app.command()
def slots(
    discussions: Annotated[
        bool,
        typer.Option("--discussions", help="List discussion slots instead of lecture slots"),
    ] = False,
) -> None:
    """Show the built-in time-slot catalog."""
    catalog = default_catalog()
    entries = catalog.discussion_slots if discussions else catalog.lecture_slots

    table = Table(title="Discussion Slots" if discussions else "Lecture Slots")
    table.add_column("ID", style="cyan")
    table.add_column("Days")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Minutes", justify="right")
    table.add_column("Restricted Block")

    for slot in entries:
        table.add_row(
            slot.id,
            slot.day_codes,
            slot.start_time,
            slot.end_time,
            str(slot.duration),
            "yes" if is_restricted_block(slot) else "",
        )

    console.print(table)


@app.command()
def rooms(
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config-dir", help="Directory with rooms.csv and policy.json"),
    ] = None,
) -> None:
    """Show the room catalog."""
    loader = _load_config(config_dir)
    block_ids = set(loader.policy.block_room_ids)

    table = Table(title="Rooms")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Capacity", justify="right")
    table.add_column("Block Room")

    for room in loader.rooms.get_all_rooms():
        table.add_row(
            room.id,
            room.name,
            room.type.value,
            str(room.capacity),
            "yes" if room.id in block_ids else "",
        )

    console.print(table)


@app.command("import-tables")
def import_tables(
    courses_file: Annotated[
        Path,
        typer.Argument(help="Course data spreadsheet (CSV or Excel)", exists=True, readable=True),
    ],
    faculty_file: Annotated[
        Path,
        typer.Argument(help="Faculty preferences spreadsheet (CSV or Excel)", exists=True, readable=True),
    ],
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Output scheduling input JSON"),
    ],
    semester: Annotated[
        Semester,
        typer.Option("--semester", help="Semester to schedule"),
    ] = Semester.FALL,
    year: Annotated[
        Optional[int],
        typer.Option("--year", help="Year to schedule (defaults to the current year)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Convert course and faculty spreadsheets into a scheduling input file."""
    _configure_logging(verbose)

    try:
        with console.status("[bold green]Reading spreadsheets..."):
            faculty = read_faculty_table(faculty_file)
            courses = read_course_table(courses_file, faculty)
    except SchedulerError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    config = SchedulerConfig(semester=semester, year=year or date.today().year)
    output_path = output if output.suffix == ".json" else output.with_suffix(".json")
    write_input(config, courses, faculty, output_path)

    console.print(f"  Faculty: {len(faculty)}")
    console.print(f"  Courses: {len(courses)}")
    console.print(f"\n[bold green]✓[/bold green] Input written to: {output_path}")


if __name__ == "__main__":
    app()
