"""Unit tests for cli.output module."""

import io
from unittest.mock import MagicMock, Mock, patch

from rich.console import Console

from src.cli.output import OutputHandler
from src.conversions import DEFAULT_REGISTRY, ConverterCollection
from src.models import ConverterRecord, PageRecord, TimerRecord
from src.timers import TimerState
from tests.helpers import FakeScheduler


def capture(handler):
    """Point the handler at an in-memory console and return the buffer."""
    buffer = io.StringIO()
    handler.console = Console(file=buffer, width=120, no_color=True, highlight=False)
    return buffer


class TestOutputHandlerInit:
    """Test cases for OutputHandler initialization."""

    def test_init_color_enabled_by_default(self):
        handler = OutputHandler()
        assert handler.console.no_color is False

    def test_init_no_color_true(self):
        handler = OutputHandler(no_color=True)
        assert handler.console.no_color is True


class TestOutputHandlerMessages:
    """Test cases for message output methods."""

    @patch('src.cli.output.Console')
    def test_success_displays_green_message(self, mock_console_class):
        """success() displays message with green checkmark."""
        mock_console = Mock()
        mock_console_class.return_value = mock_console

        OutputHandler().success("Timer added")

        mock_console.print.assert_called_once_with("[green]✓[/green] Timer added")

    @patch('src.cli.output.Console')
    def test_error_displays_red_message(self, mock_console_class):
        mock_console = Mock()
        mock_console_class.return_value = mock_console

        OutputHandler().error("Page not found")

        mock_console.print.assert_called_once_with("[red]✗[/red] Page not found", style="red")

    @patch('src.cli.output.Console')
    def test_warning_displays_yellow_message(self, mock_console_class):
        mock_console = Mock()
        mock_console_class.return_value = mock_console

        OutputHandler().warning("Refreshing page failed")

        mock_console.print.assert_called_once_with(
            "[yellow]⚠[/yellow] Refreshing page failed", style="yellow"
        )

class TestOutputHandlerSpinner:
    """Test cases for spinner context manager."""

    @patch('src.cli.output.Live')
    @patch('src.cli.output.Spinner')
    def test_spinner_creates_live_spinner(self, mock_spinner_class, mock_live_class):
        """spinner() creates Live spinner with correct message."""
        mock_spinner = Mock()
        mock_spinner_class.return_value = mock_spinner
        mock_live = MagicMock()
        mock_live_class.return_value = mock_live

        handler = OutputHandler()
        with handler.spinner("Loading page..."):
            pass

        mock_spinner_class.assert_called_once_with("dots", text="Loading page...")
        mock_live_class.assert_called_once_with(
            mock_spinner,
            console=handler.console,
            refresh_per_second=10
        )
        mock_live.__enter__.assert_called_once()
        mock_live.__exit__.assert_called_once()


class TestOutputHandlerTables:
    """Test cases for pages, timers and converters rendering."""

    def test_print_pages(self):
        handler = OutputHandler(no_color=True)
        buffer = capture(handler)

        handler.print_pages([PageRecord("p1", "Carbonara", [TimerRecord("t1", "Boil", 540)])])

        text = buffer.getvalue()
        assert "Carbonara" in text
        assert "p1" in text

    def test_print_pages_empty(self):
        handler = OutputHandler(no_color=True)
        buffer = capture(handler)

        handler.print_pages([])

        assert "No pages yet" in buffer.getvalue()

    def test_timers_table_shows_remaining_and_status(self):
        scheduler = FakeScheduler()
        timer = TimerState("t1", "Boil pasta", 540, scheduler)
        timer.start()
        scheduler.advance(5)
        handler = OutputHandler(no_color=True)
        buffer = capture(handler)

        handler.console.print(handler.timers_table([timer]))

        text = buffer.getvalue()
        assert "Boil pasta" in text
        assert "08:55" in text
        assert "running" in text

    @patch('src.cli.output.ProgressBar')
    def test_timers_table_progress_follows_timer(self, mock_bar_class):
        """The progress bar is fed the timer's elapsed fraction."""
        scheduler = FakeScheduler()
        timer = TimerState("t1", "Rest dough", 4, scheduler)
        timer.start()
        scheduler.advance(1)
        mock_bar_class.return_value = ""  # keep the patched bar renderable for Table.add_row

        OutputHandler(no_color=True).timers_table([timer])

        mock_bar_class.assert_called_once_with(total=1.0, completed=0.25, width=20)

    def test_print_page_with_converters(self):
        converters = ConverterCollection([ConverterRecord("c1", "grams", "oz", "g", 28.35)])
        handler = OutputHandler(no_color=True)
        buffer = capture(handler)

        handler.print_page("Carbonara", [], converters)

        text = buffer.getvalue()
        assert "No timers on this page" in text
        assert "oz to g" in text

    def test_print_categories(self):
        handler = OutputHandler(no_color=True)
        buffer = capture(handler)

        handler.print_categories(DEFAULT_REGISTRY)

        text = buffer.getvalue()
        for key in DEFAULT_REGISTRY.categories():
            assert key in text
        assert "236.588" in text

    def test_bell_rings_and_announces(self):
        handler = OutputHandler(no_color=True)
        handler.console = Mock()
        timer = TimerState("t1", "Eggs", 300, FakeScheduler())

        handler.bell(timer)

        handler.console.bell.assert_called_once()
        assert "Eggs is done!" in handler.console.print.call_args.args[0]
