"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError so the entry point can catch them in
one place; each message carries the file or field it concerns.
"""

from typing import Optional

from src.store_client.errors import RecipeTimersError


class CLIError(RecipeTimersError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigError(CLIError):
    """Raised when a settings or session file is invalid."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class ConfigFilesystemError(CLIError):
    """Raised when a settings or session file cannot be read or written."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"File operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
