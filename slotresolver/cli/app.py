"""
Main CLI application using Typer.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, time
from pathlib import Path
from typing import Annotated, List, NoReturn, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.memory_store import SAMPLE_DATA_FILE, InMemoryStore
from ..config import AppConfig, load_config
from ..domain.clock import SystemClock
from ..domain.exceptions import InvalidDateRangeError, SlotResolverError
from ..domain.models import DayAvailability, ReservationSettings, SlotStatus, TimeSlot
from ..services.availability_service import AvailabilityService
from ..services.reservation_service import ReservationService
from ..services.rule_resolver import RuleResolver
from ..services.settings_service import ReservationSettingsService

app = typer.Typer(
    name="slotresolver",
    help="Resolve bookable time slots for businesses and their employees",
    add_completion=False,
)

console = Console()

STATUS_STYLES = {
    SlotStatus.AVAILABLE: "green",
    SlotStatus.BOOKED: "yellow",
    SlotStatus.BLOCKED: "red",
    SlotStatus.EXPIRED: "dim",
}


@dataclass
class AppState:
    """Per-invocation state shared by all commands."""
    config: AppConfig
    data_path: Path
    _store: Optional[InMemoryStore] = field(default=None, repr=False)

    def load_store(self) -> InMemoryStore:
        if self._store is None:
            self._store = InMemoryStore.from_yaml(self.data_path)
        return self._store

    @property
    def store(self) -> InMemoryStore:
        return self.load_store()

    @property
    def uses_sample_data(self) -> bool:
        return self.data_path.resolve() == SAMPLE_DATA_FILE.resolve()

    def build_settings_service(self, clock: Optional[SystemClock] = None) -> ReservationSettingsService:
        return ReservationSettingsService(
            settings_store=self.store,
            business_store=self.store,
            clock=clock or SystemClock(self.config.timezone),
            defaults_factory=self.config.settings_defaults.build,
        )

    def build_services(self) -> "tuple[AvailabilityService, ReservationService]":
        clock = SystemClock(self.config.timezone)
        settings_service = self.build_settings_service(clock)
        availability = AvailabilityService(
            business_store=self.store,
            reservation_store=self.store,
            settings_service=settings_service,
            rule_resolver=RuleResolver(self.store),
            clock=clock,
            week_days=self.config.week_days,
            month_days=self.config.month_days,
        )
        reservations = ReservationService(
            business_store=self.store,
            reservation_store=self.store,
            settings_service=settings_service,
            clock=clock,
        )
        return availability, reservations


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _parse_date(value: str, tz: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Error parsing date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _parse_time(value: str) -> time:
    try:
        return pendulum.from_format(value, "HH:mm").time()
    except ValueError as e:
        console.print(f"[red]Error parsing time '{value}': {e}[/red]")
        raise typer.Exit(1)


def _fail(error: SlotResolverError) -> NoReturn:
    console.print(f"[bold red]Error [{error.code}]:[/bold red] {error}")
    raise typer.Exit(1)


def _render_day(day: DayAvailability) -> None:
    table = Table(
        title=f"{day.business_id} - {day.date.isoformat()}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Reason", style="dim")
    table.add_column("Available employees")
    table.add_column("Reserved employees", style="dim")

    for info in day.all_slots_sorted:
        style = STATUS_STYLES[info.status]
        table.add_row(
            str(info.time_slot),
            f"[{style}]{info.status.value}[/{style}]",
            info.reason or "",
            ", ".join(info.available_employee_user_ids),
            ", ".join(info.reserved_employee_user_ids),
        )

    console.print()
    console.print(table)
    console.print(
        f"  {len(day.available_slots)} available, {len(day.booked_slots)} booked, "
        f"{len(day.blocked_slots)} blocked, {len(day.expired_slots)} expired"
    )


def _output(days: List[DayAvailability], as_json: bool, single: bool = False) -> None:
    if as_json:
        payload = days[0].to_dict() if single else [day.to_dict() for day in days]
        typer.echo(json.dumps(payload, indent=2))
        return

    if not days:
        console.print("[yellow]No dates in the requested range.[/yellow]")
        return

    for day in days:
        _render_day(day)
    console.print()


def _persist(state: AppState) -> None:
    if state.uses_sample_data:
        console.print("[yellow]Using bundled sample data: changes are not saved.[/yellow]")
        return
    state.store.save_to_yaml(state.data_path)


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    data_file: Annotated[Optional[Path], typer.Option("--data", "-d", help="Path to the YAML data file. Overrides the config.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Load configuration and data before running a command.
    """
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    _configure_logging("DEBUG" if verbose else config.log_level)

    data_path = data_file or config.data_file or SAMPLE_DATA_FILE
    ctx.obj = AppState(config=config, data_path=data_path)


def _state(ctx: typer.Context) -> AppState:
    state: AppState = ctx.obj
    try:
        state.load_store()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    return state


@app.command()
def slots(
    ctx: typer.Context,
    business_id: Annotated[str, typer.Argument(help="Business ID")],
    on: Annotated[Optional[str], typer.Option("--date", help="Target date (YYYY-MM-DD). Defaults to today.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")] = False,
):
    """
    Show the status of every slot of a business on one date.
    """
    state = _state(ctx)
    availability, _ = state.build_services()

    try:
        if on:
            day = availability.get_available_slots(business_id, _parse_date(on, state.config.timezone))
        else:
            day = availability.get_available_slots_for_today(business_id)
    except SlotResolverError as e:
        _fail(e)

    _output([day], as_json, single=True)


@app.command()
def tomorrow(
    ctx: typer.Context,
    business_id: Annotated[str, typer.Argument(help="Business ID")],
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")] = False,
):
    """
    Show the status of every slot of a business tomorrow.
    """
    availability, _ = _state(ctx).build_services()
    try:
        day = availability.get_available_slots_for_tomorrow(business_id)
    except SlotResolverError as e:
        _fail(e)
    _output([day], as_json, single=True)


@app.command("range")
def range_(
    ctx: typer.Context,
    business_id: Annotated[str, typer.Argument(help="Business ID")],
    start: Annotated[str, typer.Option("--start", help="Start date (YYYY-MM-DD)")],
    end: Annotated[str, typer.Option("--end", help="End date (YYYY-MM-DD), inclusive")],
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of tables.")] = False,
):
    """
    Show slot availability for every date of an inclusive range.
    """
    state = _state(ctx)
    availability, _ = state.build_services()
    tz = state.config.timezone

    start_date = _parse_date(start, tz)
    end_date = _parse_date(end, tz)

    try:
        span = (end_date - start_date).days + 1
        if span > state.config.max_range_days:
            raise InvalidDateRangeError(
                f"Range of {span} days exceeds the maximum of {state.config.max_range_days}"
            )
        days = availability.get_available_slots_for_range(business_id, start_date, end_date)
    except SlotResolverError as e:
        _fail(e)

    _output(days, as_json)


@app.command()
def week(
    ctx: typer.Context,
    business_id: Annotated[str, typer.Argument(help="Business ID")],
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of tables.")] = False,
):
    """
    Show slot availability from today through the next week.
    """
    availability, _ = _state(ctx).build_services()
    try:
        days = availability.get_available_slots_for_next_week(business_id)
    except SlotResolverError as e:
        _fail(e)
    _output(days, as_json)


@app.command()
def month(
    ctx: typer.Context,
    business_id: Annotated[str, typer.Argument(help="Business ID")],
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of tables.")] = False,
):
    """
    Show slot availability from today through the next month.
    """
    availability, _ = _state(ctx).build_services()
    try:
        days = availability.get_available_slots_for_next_month(business_id)
    except SlotResolverError as e:
        _fail(e)
    _output(days, as_json)


@app.command()
def book(
    ctx: typer.Context,
    business_id: Annotated[str, typer.Argument(help="Business ID")],
    user: Annotated[str, typer.Option("--user", "-u", help="Customer user ID")],
    on: Annotated[str, typer.Option("--date", help="Reservation date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Option("--start", help="Slot start (HH:MM)")],
    end: Annotated[str, typer.Option("--end", help="Slot end (HH:MM)")],
    employee: Annotated[Optional[str], typer.Option("--employee", "-e", help="Employee user ID. Defaults to the first free employee.")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Free-text notes")] = None,
):
    """
    Book a time slot with one employee of a business.
    """
    state = _state(ctx)
    _, reservations = state.build_services()

    day = _parse_date(on, state.config.timezone)
    try:
        time_slot = TimeSlot(start=_parse_time(start), end=_parse_time(end))
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    try:
        reservation = reservations.create_reservation(
            user_id=user,
            business_id=business_id,
            day=day,
            time_slot=time_slot,
            assigned_employee_user_id=employee,
            notes=notes,
        )
    except SlotResolverError as e:
        _fail(e)

    _persist(state)

    status = "confirmed" if reservation.is_confirmed else "pending confirmation"
    console.print(
        f"[bold green]✓ Reservation {reservation.id}[/bold green] "
        f"{reservation.date.isoformat()} {reservation.time_slot} "
        f"with {reservation.assigned_employee_user_id} ({status})"
    )


@app.command()
def cancel(
    ctx: typer.Context,
    reservation_id: Annotated[str, typer.Argument(help="Reservation ID")],
    reason: Annotated[Optional[str], typer.Option("--reason", help="Cancellation reason")] = None,
):
    """
    Cancel a reservation, releasing its slot.
    """
    state = _state(ctx)
    _, reservations = state.build_services()

    try:
        reservation = reservations.cancel_reservation(reservation_id, reason)
    except SlotResolverError as e:
        _fail(e)

    _persist(state)
    console.print(f"[green]✓ Reservation {reservation.id} cancelled.[/green]")


def _render_settings(settings: ReservationSettings, title: str) -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Opening time", settings.default_start.strftime("%H:%M"))
    table.add_row("Closing time", settings.default_end.strftime("%H:%M"))
    table.add_row("Slot duration (min)", str(settings.slot_duration_minutes))
    table.add_row("Max advance (days)", str(settings.max_advance_booking_days))
    table.add_row("Min advance (hours)", str(settings.min_advance_booking_hours))
    table.add_row("Accept reservations", "yes" if settings.accept_reservations else "no")
    table.add_row("Auto confirm", "yes" if settings.auto_confirm else "no")

    console.print()
    console.print(table)
    console.print()


@app.command("settings")
def settings_(
    ctx: typer.Context,
    business_id: Annotated[str, typer.Argument(help="Business ID")],
    start: Annotated[Optional[str], typer.Option("--start", help="Opening time (HH:MM)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Closing time (HH:MM), 00:00 for midnight")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", min=1, help="Slot duration in minutes")] = None,
    max_days: Annotated[Optional[int], typer.Option("--max-days", min=0, help="How many days ahead bookings are accepted")] = None,
    min_hours: Annotated[Optional[int], typer.Option("--min-hours", min=0, help="Minimum notice in hours")] = None,
    accept: Annotated[Optional[bool], typer.Option("--accept/--no-accept", help="Accept reservations")] = None,
    auto_confirm: Annotated[Optional[bool], typer.Option("--auto-confirm/--no-auto-confirm", help="Confirm reservations automatically")] = None,
):
    """
    Show the reservation settings of a business, or update them.

    Without options the stored settings are shown. Any option updates only
    that setting; a business without settings starts from the defaults.
    """
    state = _state(ctx)
    service = state.build_settings_service()

    changes = {
        "default_start": _parse_time(start) if start else None,
        "default_end": _parse_time(end) if end else None,
        "slot_duration_minutes": duration,
        "max_advance_booking_days": max_days,
        "min_advance_booking_hours": min_hours,
        "accept_reservations": accept,
        "auto_confirm": auto_confirm,
    }

    try:
        if all(value is None for value in changes.values()):
            current = service.get_settings(business_id)
        else:
            current = service.create_or_update_settings(business_id, **changes)
            _persist(state)
            console.print(f"[green]✓ Settings of {business_id} updated.[/green]")
    except SlotResolverError as e:
        _fail(e)

    if current is None:
        console.print(f"[yellow]No settings stored for {business_id}; these defaults apply on first use.[/yellow]")
        current = state.config.settings_defaults.build(business_id)

    _render_settings(current, f"Reservation settings - {business_id}")


@app.command()
def businesses(ctx: typer.Context):
    """
    List all businesses with their employee rosters.
    """
    state = _state(ctx)
    items = state.store.list_businesses()

    if not items:
        console.print("[yellow]No businesses defined in the data file.[/yellow]")
        return

    table = Table(title="Businesses", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Active employees", justify="right")

    for business in items:
        table.add_row(business.id, business.name, str(len(business.active_employees())))

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotresolver[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
