"""Rich terminal display functions for the sensor bridge."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from rtl_sensor_bridge.accessories.accessory import SensorAccessory
    from rtl_sensor_bridge.accessories.dispatcher import DispatchStats


# Global console instance
_console: Console | None = None


def get_console() -> Console:
    """Get the global rich console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def print_banner(title: str, subtitle: str | None = None, plain: bool = False) -> None:
    """Print a styled banner.

    Args:
        title: Main title text.
        subtitle: Optional subtitle.
        plain: Print plain text instead of a rich panel.
    """
    if plain:
        print(f"\n{'=' * 50}")
        print(f"  {title}")
        if subtitle:
            print(f"  {subtitle}")
        print(f"{'=' * 50}\n")
        return

    text = Text(title, style="bold cyan")
    if subtitle:
        text.append(f"\n{subtitle}", style="dim")
    get_console().print(Panel(text, border_style="cyan"))


def print_success(message: str) -> None:
    get_console().print(f"[bold green]✓[/] {message}")


def print_error(message: str) -> None:
    get_console().print(f"[bold red]✗[/] {message}", highlight=False)


def _format_reading(value: Any, unit: str) -> str:
    if value is None:
        return "-"
    if isinstance(value, (int, float)):
        return f"{value:.1f}{unit}"
    return f"{value}{unit}"


def _format_battery(accessory: SensorAccessory) -> str:
    if not accessory.identity.watch_battery:
        return "not watched"
    if accessory.state.battery_low is None:
        return "-"
    return "LOW" if accessory.state.battery_low else "ok"


def display_accessories(
    accessories: Sequence[SensorAccessory],
    stats: DispatchStats | None = None,
    plain: bool = False,
) -> None:
    """Display the last readings of every accessory.

    Args:
        accessories: Accessories in registry order.
        stats: Optional dispatch counters shown as a summary.
        plain: Print plain text instead of a rich table.
    """
    if plain:
        print("\n" + "=" * 50)
        print("Sensor Readings")
        print("=" * 50)
        for accessory in accessories:
            state = accessory.state
            print(
                f"  {accessory.name}\n"
                f"    Temp: {_format_reading(state.temperature, 'C')}\n"
                f"    Humidity: {_format_reading(state.humidity, '%')}\n"
                f"    Battery: {_format_battery(accessory)}"
            )
        if stats is not None:
            print(
                f"\nRecords: {stats.records} (matched {stats.matched}, "
                f"unmatched {stats.unmatched}), malformed: {stats.malformed}, "
                f"noise: {stats.noise}, oversized: {stats.oversized}"
            )
        return

    console = get_console()

    if stats is not None:
        summary = Text()
        summary.append("Records: ", style="dim")
        summary.append(f"{stats.records}\n", style="cyan")
        summary.append("Matched: ", style="dim")
        summary.append(f"{stats.matched}\n", style="bold green")
        summary.append("Unmatched: ", style="dim")
        summary.append(f"{stats.unmatched}\n", style="yellow")
        summary.append("Malformed / Noise / Oversized: ", style="dim")
        summary.append(f"{stats.malformed} / {stats.noise} / {stats.oversized}", style="red")
        console.print(Panel(summary, title="[bold]Decoder Summary[/]", border_style="green"))

    if not accessories:
        console.print("[dim]No devices configured.[/]")
        return

    table = Table(
        title="Sensor Readings",
        show_header=True,
        header_style="bold magenta",
    )

    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Name", justify="left", style="cyan")
    table.add_column("Identity", justify="left", style="dim")
    table.add_column("Temperature", justify="right", style="green")
    table.add_column("Humidity", justify="right", style="green")
    table.add_column("Battery", justify="right", style="yellow")

    for i, accessory in enumerate(accessories, 1):
        identity = accessory.identity
        match_fields = ", ".join(
            f"{name}={value}"
            for name, value in (
                ("id", identity.id),
                ("channel", identity.channel),
                ("rid", identity.rid),
                ("model", identity.model),
            )
            if value is not None
        )
        table.add_row(
            str(i),
            accessory.name,
            match_fields or "*",
            _format_reading(accessory.state.temperature, " °C"),
            _format_reading(accessory.state.humidity, " %"),
            _format_battery(accessory),
        )

    console.print(table)
