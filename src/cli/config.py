"""Settings and login session files.

This module loads user settings from ``recipe-timers.yaml`` and keeps the
bearer token issued by ``recipe-timers login`` in a session file under the
user's home directory. Both are small YAML dictionaries.
"""

import os
from typing import Any, Dict, Optional

import yaml

from src.conversions import DEFAULT_REGISTRY
from .errors import ConfigError, ConfigFilesystemError
from .models import SavedSession, Settings


def _read_yaml(path: str) -> Optional[Dict[str, Any]]:
    """Read a YAML dictionary, returning None for a missing or empty file.

    Raises:
        ConfigFilesystemError: If the file exists but cannot be read
        ConfigError: If the file is not a YAML dictionary
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError:
        return None
    except PermissionError:
        raise ConfigFilesystemError(path, 'read', 'Permission denied')
    except OSError as e:
        raise ConfigFilesystemError(path, 'read', str(e))

    if not content.strip():
        return None

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {str(e)}")

    if data is None:
        return None

    if not isinstance(data, dict):
        raise ConfigError(
            f"{path} must be a YAML dictionary, got {type(data).__name__}"
        )
    return data


def _write_yaml(path: str, data: Dict[str, Any]) -> None:
    """Write a YAML dictionary, creating the parent directory.

    Raises:
        ConfigFilesystemError: If the directory or file cannot be written
    """
    yaml_str = yaml.safe_dump(
        data,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False
    )

    directory = os.path.dirname(path)
    if directory:
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise ConfigFilesystemError(directory, 'create_directory', str(e))

    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(yaml_str)
    except PermissionError:
        raise ConfigFilesystemError(path, 'write', 'Permission denied')
    except OSError as e:
        raise ConfigFilesystemError(path, 'write', str(e))


class ConfigLoader:
    """Loads and validates the optional settings file.

    Settings file structure:
        store_url: "http://localhost:5690/api/users"
        request_timeout: 30
        default_timer_duration: 60
        default_converter_category: "Fahrenheit"

    Every field is optional; a missing file yields the defaults.
    """

    DEFAULT_CONFIG_FILE = 'recipe-timers.yaml'

    KNOWN_FIELDS = {
        'store_url',
        'request_timeout',
        'default_timer_duration',
        'default_converter_category',
    }

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> Settings:
        """Load settings from a YAML file.

        Args:
            config_path: Path to the settings file (default: ./recipe-timers.yaml)

        Returns:
            Settings with defaults for absent fields

        Raises:
            ConfigFilesystemError: If the file cannot be read
            ConfigError: If a field is unknown or has the wrong type
        """
        config_dict = _read_yaml(config_path or cls.DEFAULT_CONFIG_FILE)
        if config_dict is None:
            return Settings()
        return cls._parse_config(config_dict)

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> Settings:
        """Validate a raw settings dictionary.

        Raises:
            ConfigError: If settings are invalid
        """
        unknown = set(config_dict.keys()) - cls.KNOWN_FIELDS
        if unknown:
            raise ConfigError(f"Unknown fields: {', '.join(sorted(map(str, unknown)))}")

        settings = Settings()

        store_url = config_dict.get('store_url')
        if store_url is not None:
            if not isinstance(store_url, str) or not store_url.strip():
                raise ConfigError("Field 'store_url' must be a non-empty string", 'store_url')
            settings.store_url = store_url.strip().rstrip('/')

        timeout = config_dict.get('request_timeout')
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError(
                    f"Field 'request_timeout' must be a positive number, got {timeout!r}",
                    'request_timeout'
                )
            settings.request_timeout = timeout

        duration = config_dict.get('default_timer_duration')
        if duration is not None:
            if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
                raise ConfigError(
                    f"Field 'default_timer_duration' must be a positive integer, got {duration!r}",
                    'default_timer_duration'
                )
            settings.default_timer_duration = duration

        category = config_dict.get('default_converter_category')
        if category is not None:
            if category not in DEFAULT_REGISTRY:
                raise ConfigError(
                    f"Unknown category {category!r}, expected one of: "
                    f"{', '.join(DEFAULT_REGISTRY.categories())}",
                    'default_converter_category'
                )
            settings.default_converter_category = category

        return settings


class SessionStore:
    """Keeps the login token between invocations.

    Session file structure:
        token: "eyJhbGciOi..."
        email: "cook@example.com"

    A missing file means nobody is logged in.
    """

    DEFAULT_SESSION_DIR = os.path.join('~', '.recipe-timers')
    DEFAULT_SESSION_FILE = 'session.yaml'

    def __init__(self, session_path: Optional[str] = None):
        self.session_path = os.path.expanduser(
            session_path or os.path.join(self.DEFAULT_SESSION_DIR, self.DEFAULT_SESSION_FILE)
        )

    def load(self) -> SavedSession:
        """Read the saved session.

        Raises:
            ConfigFilesystemError: If the file cannot be read
            ConfigError: If the file is malformed
        """
        data = _read_yaml(self.session_path)
        if data is None:
            return SavedSession()

        token = data.get('token')
        if token is not None and not isinstance(token, str):
            raise ConfigError(
                f"Field 'token' must be a string, got {type(token).__name__}", 'token'
            )
        email = data.get('email')
        return SavedSession(token=token or None, email=str(email) if email else None)

    def token(self) -> Optional[str]:
        """Return the saved token, if any; used as the Authenticator fallback."""
        return self.load().token

    def save(self, session: SavedSession) -> None:
        """Write the session file, readable only by its owner.

        Raises:
            ConfigFilesystemError: If the file cannot be written
        """
        _write_yaml(self.session_path, {'token': session.token, 'email': session.email})
        try:
            os.chmod(self.session_path, 0o600)
        except OSError as e:
            raise ConfigFilesystemError(self.session_path, 'chmod', str(e))

    def clear(self) -> bool:
        """Delete the session file.

        Returns:
            True if a session was removed, False if none existed

        Raises:
            ConfigFilesystemError: If the file cannot be removed
        """
        try:
            os.remove(self.session_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ConfigFilesystemError(self.session_path, 'delete', str(e))
        return True
