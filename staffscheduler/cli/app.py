"""
Main CLI application using Typer.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..adapters.config_calendar import ConfigCalendarStore
from ..adapters.json_store import JsonAppointmentStore
from ..config import AppConfig, ServiceConfig, format_weekday, get_default_config_path
from ..domain.exceptions import BookingRejectedError, SchedulingError
from ..domain.models import Appointment, format_clock, parse_local
from ..services.booking import BookingService
from ..services.scheduling import SchedulingService

app = typer.Typer(
    name="staffscheduler",
    help="Check staff availability and book conflict-free appointments",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


@dataclass
class CliContext:
    config: AppConfig
    store: JsonAppointmentStore
    scheduling: SchedulingService
    booking: BookingService


def _load_context(config_file: Optional[Path]) -> CliContext:
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)

    # --verbose wins over a quieter configured level
    package_logger = logging.getLogger("staffscheduler")
    package_logger.setLevel(
        min(package_logger.getEffectiveLevel(), logging.getLevelName(config.log_level))
    )

    store = JsonAppointmentStore(config.data_file)
    scheduling = SchedulingService(
        appointment_store=store,
        calendar_store=ConfigCalendarStore(config),
    )
    return CliContext(
        config=config,
        store=store,
        scheduling=scheduling,
        booking=BookingService(scheduling=scheduling),
    )


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(1)


def _resolve_service(config: AppConfig, service: Optional[str]) -> Optional[ServiceConfig]:
    if service is None:
        return None
    found = config.find_service(service)
    if found is None:
        _fail(f"Unknown service: '{service}'")
    return found


def _resolve_duration(config: AppConfig, service: Optional[ServiceConfig], duration: Optional[int]) -> int:
    if duration is not None:
        return duration
    if service is not None:
        return service.duration_minutes
    return config.defaults.duration_minutes


def _print_violations(messages) -> None:
    for message in messages:
        console.print(f"  [red]✗[/red] {escape(message)}")


def _print_appointment(appointment: Appointment, title: str) -> None:
    console.print(Panel.fit(
        f"[bold]ID:[/bold] {appointment.id}\n"
        f"[bold]Staff:[/bold] {appointment.staff_id}\n"
        f"[bold]Service:[/bold] {appointment.service_name or appointment.service_id}\n"
        f"[bold]When:[/bold] {appointment.time_range}\n"
        f"[bold]Customer:[/bold] {appointment.display_customer()}\n"
        f"[bold]Status:[/bold] {appointment.status.value}",
        title=title
    ))


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Staff availability and booking tool.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


@app.command()
def slots(
    staff: Annotated[str, typer.Argument(help="Staff id or name")],
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    service: Annotated[Optional[str], typer.Option("--service", "-s", help="Service id or name; sets the duration")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Duration in minutes")] = None,
    config_file: ConfigOption = None,
):
    """
    List bookable slots for a staff member on one date.

    Examples:

        staffscheduler slots ana 2024-11-25 --service haircut
        staffscheduler slots ana 2024-11-25 --duration 90
    """
    try:
        ctx = _load_context(config_file)
        staff_id = ctx.config.resolve_staff_id(staff)
        service_config = _resolve_service(ctx.config, service)
        minutes = _resolve_duration(ctx.config, service_config, duration)
        day = parse_local(date).date()

        found = ctx.scheduling.get_available_slots(staff_id, day, minutes)
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    console.print(
        f"\n[bold cyan]{staff_id}[/bold cyan] on {format_weekday(day.weekday())}, "
        f"{day.strftime('%d.%m.%Y')} ({minutes} min)\n"
    )
    if not found:
        console.print("[yellow]⚠ No available slots.[/yellow]\n")
        return

    console.print(f"[bold green]✓ {len(found)} slot(s) available:[/bold green]")
    for slot in found:
        console.print(f"  {slot}")
    console.print()


@app.command()
def validate(
    staff: Annotated[str, typer.Argument(help="Staff id or name")],
    start: Annotated[str, typer.Argument(help="Start (YYYY-MM-DD HH:MM)")],
    end: Annotated[Optional[str], typer.Option("--end", help="End (YYYY-MM-DD HH:MM)")] = None,
    service: Annotated[Optional[str], typer.Option("--service", "-s", help="Service id or name; sets the duration")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Duration in minutes")] = None,
    exclude: Annotated[Optional[str], typer.Option("--exclude", help="Appointment id being edited")] = None,
    config_file: ConfigOption = None,
):
    """
    Check whether an interval can be booked, listing every violation.
    """
    try:
        ctx = _load_context(config_file)
        staff_id = ctx.config.resolve_staff_id(staff)
        start_at = parse_local(start)
        if end is not None:
            end_at = parse_local(end)
        else:
            service_config = _resolve_service(ctx.config, service)
            minutes = _resolve_duration(ctx.config, service_config, duration)
            end_at = ctx.scheduling.calculate_end_time(start_at, minutes)

        result = ctx.scheduling.validate_schedule(staff_id, start_at, end_at, exclude_id=exclude)
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    window = f"{start_at.strftime('%d.%m.%Y %H:%M')} - {format_clock(end_at)}"
    if result.valid:
        console.print(f"\n[bold green]✓ {window} is available for {staff_id}[/bold green]\n")
        return

    console.print(f"\n[bold red]✗ {window} cannot be booked for {staff_id}:[/bold red]")
    _print_violations(result.messages)
    console.print()
    raise typer.Exit(1)


@app.command()
def book(
    staff: Annotated[str, typer.Argument(help="Staff id or name")],
    start: Annotated[str, typer.Argument(help="Start (YYYY-MM-DD HH:MM)")],
    service: Annotated[str, typer.Option("--service", "-s", help="Service id or name")],
    customer: Annotated[Optional[str], typer.Option("--customer", help="Customer display name")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Free-text notes")] = None,
    config_file: ConfigOption = None,
):
    """
    Book a PENDING appointment after validating it.
    """
    try:
        ctx = _load_context(config_file)
        staff_id = ctx.config.resolve_staff_id(staff)
        service_config = _resolve_service(ctx.config, service)

        appointment = ctx.booking.book(
            staff_id=staff_id,
            service_id=service_config.id,
            start=parse_local(start),
            duration_minutes=service_config.duration_minutes,
            service_name=service_config.name,
            customer_name=customer,
            notes=notes,
        )
    except BookingRejectedError as e:
        console.print("\n[bold red]✗ Booking rejected:[/bold red]")
        _print_violations(e.result.messages if e.result else [str(e)])
        console.print()
        raise typer.Exit(1)
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    console.print()
    _print_appointment(appointment, "✓ Booked")
    console.print()


@app.command()
def reschedule(
    appointment_id: Annotated[str, typer.Argument(help="Appointment id")],
    start: Annotated[str, typer.Argument(help="New start (YYYY-MM-DD HH:MM)")],
    config_file: ConfigOption = None,
):
    """
    Move an appointment to a new start time, keeping its duration.
    """
    try:
        ctx = _load_context(config_file)
        appointment = ctx.booking.reschedule(appointment_id, parse_local(start))
    except BookingRejectedError as e:
        console.print("\n[bold red]✗ Reschedule rejected:[/bold red]")
        _print_violations(e.result.messages if e.result else [str(e)])
        console.print()
        raise typer.Exit(1)
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    _print_appointment(appointment, "✓ Rescheduled")


def _change_status(config_file: Optional[Path], appointment_id: str, action: str) -> None:
    try:
        ctx = _load_context(config_file)
        appointment = getattr(ctx.booking, action)(appointment_id)
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    console.print(
        f"\n[green]✓ Appointment {appointment.id} is now {appointment.status.value}.[/green]\n"
    )


@app.command()
def confirm(
    appointment_id: Annotated[str, typer.Argument(help="Appointment id")],
    config_file: ConfigOption = None,
):
    """Confirm a pending appointment."""
    _change_status(config_file, appointment_id, "confirm")


@app.command()
def cancel(
    appointment_id: Annotated[str, typer.Argument(help="Appointment id")],
    config_file: ConfigOption = None,
):
    """Cancel an appointment that has not started yet."""
    _change_status(config_file, appointment_id, "cancel")


@app.command()
def complete(
    appointment_id: Annotated[str, typer.Argument(help="Appointment id")],
    config_file: ConfigOption = None,
):
    """Mark a confirmed appointment as completed."""
    _change_status(config_file, appointment_id, "complete")


@app.command("no-show")
def no_show(
    appointment_id: Annotated[str, typer.Argument(help="Appointment id")],
    config_file: ConfigOption = None,
):
    """Mark a confirmed appointment as a no-show."""
    _change_status(config_file, appointment_id, "mark_no_show")


@app.command()
def appointments(
    staff: Annotated[str, typer.Argument(help="Staff id or name")],
    config_file: ConfigOption = None,
):
    """
    List live appointments for a staff member.
    """
    try:
        ctx = _load_context(config_file)
        staff_id = ctx.config.resolve_staff_id(staff)
        live = sorted(ctx.store.find_live(staff_id), key=lambda a: a.start_at)
    except (FileNotFoundError, ValueError, SchedulingError) as e:
        _fail(str(e))

    if not live:
        console.print(f"[yellow]No live appointments for {staff_id}.[/yellow]")
        return

    table = Table(
        title=f"Appointments for {staff_id}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="dim")
    table.add_column("When", style="bold yellow")
    table.add_column("Service")
    table.add_column("Customer")
    table.add_column("Status")

    for appointment in live:
        table.add_row(
            appointment.id,
            str(appointment.time_range),
            appointment.service_name or appointment.service_id,
            appointment.display_customer(),
            appointment.status.value,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def list_staff(
    config_file: ConfigOption = None,
):
    """
    List configured staff members and their working hours.
    """
    try:
        config_path = config_file or get_default_config_path()
        config = AppConfig.load_from_yaml(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    if not config.staff:
        console.print("[yellow]No staff members defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured staff",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Day")
    table.add_column("Hours")
    table.add_column("Break", style="dim")

    for member in config.staff:
        windows = member.windows()
        if not windows:
            table.add_row(member.id, member.name, "-", "-", "-")
        for window in sorted(windows, key=lambda w: w.weekday):
            table.add_row(
                member.id,
                member.name,
                format_weekday(window.weekday),
                window.format_hours(),
                window.format_break() or "-",
            )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]staffscheduler[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
