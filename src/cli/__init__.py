"""Command-line interface for recipe page timers and unit converters.

This package provides the `recipe-timers` CLI tool: it manages pages and
timers in the page store, runs timers side by side with a live countdown,
and converts kitchen units.
"""

from .config import ConfigLoader, SessionStore
from .models import ExitCode, SavedSession, Settings
from .errors import (
    CLIError,
    ConfigError,
    ConfigFilesystemError,
)

__all__ = [
    'ConfigLoader',
    'SessionStore',
    'ExitCode',
    'SavedSession',
    'Settings',
    'CLIError',
    'ConfigError',
    'ConfigFilesystemError',
]
