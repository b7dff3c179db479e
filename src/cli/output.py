"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
status messages, page and converter tables, and the live countdown view
used by ``recipe-timers run``. Supports --no-color.
"""

from contextlib import contextmanager
from typing import Iterable, Iterator

from rich.console import Console
from rich.live import Live
from rich.progress_bar import ProgressBar
from rich.spinner import Spinner
from rich.table import Table

from src.conversions import ConversionRegistry, ConverterInstance
from src.models import PageRecord
from src.timers import TimerState, TimerStatus

STATUS_STYLES = {
    TimerStatus.IDLE: "dim",
    TimerStatus.RUNNING: "green",
    TimerStatus.PAUSED: "yellow",
    TimerStatus.COMPLETED: "bold red",
}


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(no_color=False)
        >>> handler.success("Timer added")
        >>> with handler.spinner("Loading page..."):
        ...     session.load()
    """

    def __init__(self, no_color: bool = False):
        """Initialize output handler.

        Args:
            no_color: Disable color output if True
        """
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a store request runs.

        Example:
            >>> with handler.spinner("Saving converter..."):
            ...     session.save_converter(converter_id)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def bell(self, timer: TimerState) -> None:
        """Completion notifier: ring the terminal bell and announce the timer."""
        self.console.bell()
        self.console.print(f"[bold red]⏰[/bold red] {timer.label} is done!")

    def print_pages(self, pages: Iterable[PageRecord]) -> None:
        """Display the dashboard as a table of pages."""
        pages = list(pages)
        if not pages:
            self.console.print("[yellow]No pages yet[/yellow]")
            return

        table = Table(title="Recipe pages")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Label")
        table.add_column("Timers", justify="right")
        for page in pages:
            table.add_row(page.page_id, page.label, str(len(page.timers)))
        self.console.print(table)

    def timers_table(self, timers: Iterable[TimerState], title: str = "Timers") -> Table:
        """Build the countdown table; re-rendered by Live on every refresh."""
        table = Table(title=title)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Label")
        table.add_column("Remaining", justify="right")
        table.add_column("Progress", width=22)
        table.add_column("Status")
        for timer in timers:
            style = STATUS_STYLES[timer.status]
            table.add_row(
                timer.timer_id,
                timer.label,
                timer.display(),
                ProgressBar(total=1.0, completed=timer.progress, width=20),
                f"[{style}]{timer.status.value}[/{style}]",
            )
        return table

    def converters_table(self, converters: Iterable[ConverterInstance]) -> Table:
        table = Table(title="Unit converters")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Converter")
        table.add_column("Category")
        table.add_column("Saved")
        for converter in converters:
            table.add_row(
                converter.converter_id,
                converter.display_label,
                converter.category.key,
                "yes" if converter.persisted else "no",
            )
        return table

    def print_page(
        self,
        label: str,
        timers: Iterable[TimerState],
        converters: Iterable[ConverterInstance],
    ) -> None:
        """Display one page with its timers and converters."""
        self.console.print(f"\n[bold]{label}[/bold]")
        timers = list(timers)
        if timers:
            self.console.print(self.timers_table(timers))
        else:
            self.console.print("[dim]No timers on this page[/dim]")
        self.console.print(self.converters_table(converters))

    @contextmanager
    def live_timers(self, timers: Iterable[TimerState], title: str) -> Iterator[Live]:
        """Show a countdown table that the caller refreshes with update().

        Example:
            >>> with handler.live_timers(session.timers, "Pasta") as live:
            ...     live.update(handler.timers_table(session.timers, "Pasta"))
        """
        with Live(
            self.timers_table(timers, title),
            console=self.console,
            refresh_per_second=4,
        ) as live:
            yield live

    def print_categories(self, registry: ConversionRegistry) -> None:
        """Display every conversion category with its unit pair."""
        table = Table(title="Conversion categories")
        table.add_column("Key", style="cyan")
        table.add_column("Label")
        table.add_column("Units")
        table.add_column("Factor", justify="right")
        for category in registry:
            table.add_row(
                category.key,
                category.label,
                f"{category.unit1} ↔ {category.unit2}",
                f"{category.factor:g}",
            )
        self.console.print(table)

    def print_conversion(self, value: str, from_unit: str, result: str, to_unit: str) -> None:
        self.console.print(f"{value} {from_unit} = [bold]{result}[/bold] {to_unit}")
