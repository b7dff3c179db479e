"""Main CLI entry point for the recipe-timers command.

This module provides the Typer application behind ``recipe-timers``: page
and timer management against the page store, a live multi-timer countdown,
and the unit converters.
"""

import asyncio
import logging
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

import typer

from src.cli.config import ConfigLoader, SessionStore
from src.cli.models import ExitCode, SavedSession, Settings
from src.cli.output import OutputHandler
from src.conversions import (
    DEFAULT_REGISTRY,
    ConverterNotFoundError,
    SaveRejectedError,
    derive_display,
)
from src.session import LoadFailedError, OperationResult, PageSession
from src.store_client.api_wrapper import StoreAPI
from src.store_client.auth import Authenticator
from src.store_client.errors import (
    InvalidCredentialsError,
    NotFoundError,
    RecipeTimersError,
    TransportError,
    UnauthorizedError,
)
from src.timers import AsyncioScheduler, TimerNotFoundError

__version__ = "0.1.0"

app = typer.Typer(
    name="recipe-timers",
    help="""Kitchen timers and unit converters for your recipe pages.

QUICK START:
  recipe-timers login cook@example.com       # Get a token from the page store
  recipe-timers pages                        # List your recipe pages
  recipe-timers add-timer <page> "Boil" -d 540
  recipe-timers run <page>                   # Run every timer on the page
  recipe-timers convert Fahrenheit 100       # 100 Celsius -> Fahrenheit""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# Seconds between redraws of the live countdown table
REFRESH_SECONDS = 0.25


class CLIContext:
    """Objects shared by every command of one invocation."""

    def __init__(self, output: OutputHandler, settings: Settings, sessions: SessionStore):
        self.output = output
        self.settings = settings
        self.sessions = sessions

    def store(self) -> StoreAPI:
        """Build a store client; the environment token wins over a saved login."""
        authenticator = Authenticator(
            url=self.settings.store_url, token_fallback=self.sessions.token
        )
        return StoreAPI(authenticator, timeout=self.settings.request_timeout)

    def page_session(self, page_id: str) -> PageSession:
        return PageSession(
            page_id,
            self.store(),
            AsyncioScheduler(),
            on_complete=self.output.bell,
            default_duration=self.settings.default_timer_duration,
            default_category=self.settings.default_converter_category,
        )


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"recipe-timers_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _exit_code_for(error: BaseException) -> ExitCode:
    """Map an exception to the exit code reported to the shell."""
    if isinstance(error, SaveRejectedError) and error.__cause__ is not None:
        error = error.__cause__

    if isinstance(error, (NotFoundError, TimerNotFoundError, ConverterNotFoundError)):
        return ExitCode.NOT_FOUND
    if isinstance(error, (InvalidCredentialsError, UnauthorizedError)):
        return ExitCode.AUTH_ERROR
    if isinstance(error, TransportError):
        return ExitCode.NETWORK_ERROR
    if isinstance(error, LoadFailedError):
        return ExitCode.NETWORK_ERROR
    return ExitCode.GENERAL_ERROR


@contextmanager
def _handle_errors(output: OutputHandler, action: str) -> Iterator[None]:
    """Report domain errors to the user and exit with the matching code."""
    try:
        yield
    except typer.Exit:
        raise
    except RecipeTimersError as e:
        logger.error(f"{action} failed: {e}")
        output.error(str(e))
        raise typer.Exit(_exit_code_for(e))
    except Exception as e:
        logger.exception(f"Unexpected error during {action}")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _report(output: OutputHandler, result: OperationResult, message: str) -> None:
    """Print the outcome of a session mutation, exiting non-zero on failure."""
    if result.success:
        output.success(message)
        return

    output.error(result.error or f"{result.operation} failed")
    code = _exit_code_for(result.cause) if result.cause else ExitCode.GENERAL_ERROR
    raise typer.Exit(code)


def _load(output: OutputHandler, session: PageSession) -> None:
    with output.spinner(f"Loading page {session.page_id}..."):
        session.load()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"recipe-timers version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        help="Settings file (default: ./recipe-timers.yaml)",
        metavar="FILE",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Kitchen timers and unit converters for your recipe pages."""
    _configure_logging(verbosity, logdir)
    output = OutputHandler(no_color=no_color)

    with _handle_errors(output, "loading settings"):
        settings = ConfigLoader.load(config)

    ctx.obj = CLIContext(output, settings, SessionStore())


@app.command("pages")
def list_pages(ctx: typer.Context) -> None:
    """List recipe pages on the dashboard."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "listing pages"):
        with state.output.spinner("Fetching pages..."):
            pages = state.store().list_pages()
        state.output.print_pages(pages)


@app.command("show")
def show_page(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page identifier"),
) -> None:
    """Show one page with its timers and converters."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "showing page"):
        with state.page_session(page_id) as session:
            _load(state.output, session)
            state.output.print_page(session.label, session.timers, session.converters)


@app.command("add-page")
def add_page(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Page title, e.g. \"Sunday roast\""),
) -> None:
    """Create a new, empty recipe page."""
    state: CLIContext = ctx.obj
    if not label.strip():
        state.output.error("Page label is required")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    with _handle_errors(state.output, "creating page"):
        page = state.store().create_page(label.strip())
        state.output.success(f"Created page {page.page_id} ({page.label})")


@app.command("delete-page")
def delete_page(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page identifier"),
) -> None:
    """Delete a page with all its timers and converters."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "deleting page"):
        state.store().delete_page(page_id)
        state.output.success(f"Deleted page {page_id}")


@app.command("add-timer")
def add_timer(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page identifier"),
    label: str = typer.Argument(..., help="Timer name, e.g. \"Boil pasta\""),
    duration: Optional[int] = typer.Option(
        None,
        "--duration",
        "-d",
        help="Duration in seconds (default from settings, 60)",
    ),
) -> None:
    """Add a timer to a page."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "adding timer"):
        with state.page_session(page_id) as session:
            _load(state.output, session)
            result = session.add_timer(label, duration)
            _report(state.output, result, f"Added timer {result.entity_id} ({label.strip()})")


@app.command("delete-timer")
def delete_timer(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page identifier"),
    timer_id: str = typer.Argument(..., help="Timer identifier"),
) -> None:
    """Delete a timer from a page."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "deleting timer"):
        with state.page_session(page_id) as session:
            _load(state.output, session)
            result = session.delete_timer(timer_id)
            _report(state.output, result, f"Deleted timer {timer_id}")


async def _countdown(session: PageSession, timer_ids: List[str], output: OutputHandler) -> None:
    """Start the selected timers and redraw until none is running."""
    timers = [session.timers.find(t) for t in timer_ids] if timer_ids else list(session.timers)
    for timer in timers:
        timer.start()

    title = session.label or session.page_id
    with output.live_timers(session.timers, title) as live:
        while any(timer.is_running for timer in timers):
            await asyncio.sleep(REFRESH_SECONDS)
            live.update(output.timers_table(session.timers, title))


@app.command("run")
def run_timers(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page identifier"),
    timer_ids: Optional[List[str]] = typer.Option(
        None,
        "--timer",
        "-t",
        help="Timer to start (can be used multiple times; default: all)",
        metavar="TIMER_ID",
    ),
) -> None:
    """Run timers of a page side by side with a live countdown.

    Each timer rings the terminal bell when it reaches zero. Press Ctrl+C
    to stop; every pending tick is cancelled on the way out.
    """
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "running timers"):
        with state.page_session(page_id) as session:
            _load(state.output, session)
            if not len(session.timers):
                state.output.warning("No timers on this page")
                raise typer.Exit(ExitCode.SUCCESS)

            try:
                asyncio.run(_countdown(session, timer_ids or [], state.output))
            except KeyboardInterrupt:
                state.output.warning("Stopped")
                raise typer.Exit(ExitCode.SUCCESS)

            state.output.success("All timers finished")


@app.command("convert")
def convert(
    ctx: typer.Context,
    category: str = typer.Argument(..., help="Category key, see 'recipe-timers categories'"),
    value: str = typer.Argument(..., help="Value to convert (put -- before negative numbers)"),
    reverse: bool = typer.Option(
        False,
        "--reverse",
        "-r",
        help="Convert from the second unit to the first",
    ),
) -> None:
    """Convert a value within a category, e.g. 'convert grams 8'."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "converting"):
        resolved = DEFAULT_REGISTRY.lookup(category)
        result = derive_display(resolved, value, reverse=reverse)
        if not result:
            state.output.error(f"Not a number: {value!r}")
            raise typer.Exit(ExitCode.GENERAL_ERROR)

        if reverse:
            state.output.print_conversion(value, resolved.unit2, result, resolved.unit1)
        else:
            state.output.print_conversion(value, resolved.unit1, result, resolved.unit2)


@app.command("categories")
def list_categories(ctx: typer.Context) -> None:
    """List the available conversion categories."""
    state: CLIContext = ctx.obj
    state.output.print_categories(DEFAULT_REGISTRY)


@app.command("save-converter")
def save_converter(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page identifier"),
    category: str = typer.Argument(..., help="Category key, e.g. grams"),
) -> None:
    """Save a unit converter for a category on a page."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "saving converter"):
        with state.page_session(page_id) as session:
            _load(state.output, session)
            converter = session.add_converter(category)
            label = f"{converter.from_unit} to {converter.to_unit}"
            result = session.save_converter(converter.converter_id)
            _report(state.output, result, f"Saved converter {result.entity_id} ({label})")


@app.command("delete-converter")
def delete_converter(
    ctx: typer.Context,
    page_id: str = typer.Argument(..., help="Page identifier"),
    converter_id: str = typer.Argument(..., help="Converter identifier"),
) -> None:
    """Delete a saved converter from a page (the last one is kept)."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "deleting converter"):
        with state.page_session(page_id) as session:
            _load(state.output, session)
            result = session.delete_converter(converter_id)
            _report(state.output, result, f"Deleted converter {converter_id}")


@app.command("login")
def login(
    ctx: typer.Context,
    email: str = typer.Argument(..., help="Account e-mail address"),
    password: str = typer.Option(
        ...,
        "--password",
        prompt=True,
        hide_input=True,
        help="Account password (prompted when omitted)",
    ),
) -> None:
    """Log in to the page store and remember the token."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "logging in"):
        token = state.store().login(email, password)
        state.sessions.save(SavedSession(token=token, email=email))
        state.output.success(f"Logged in as {email}")


@app.command("logout")
def logout(ctx: typer.Context) -> None:
    """Forget the saved token."""
    state: CLIContext = ctx.obj
    with _handle_errors(state.output, "logging out"):
        if state.sessions.clear():
            state.output.success("Logged out")
        else:
            state.output.warning("Not logged in")


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
