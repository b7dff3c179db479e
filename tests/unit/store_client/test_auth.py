"""Unit tests for store_client.auth module."""

import pytest
from unittest.mock import Mock, patch

from src.store_client.auth import DEFAULT_STORE_URL, Authenticator, Credentials
from src.store_client.errors import InvalidCredentialsError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment and .env out of these tests."""
    monkeypatch.delenv('RECIPE_TIMERS_URL', raising=False)
    monkeypatch.delenv('RECIPE_TIMERS_TOKEN', raising=False)
    with patch('src.store_client.auth.load_dotenv') as mock_load_dotenv:
        yield mock_load_dotenv


class TestCredentials:
    """Test cases for Credentials NamedTuple."""

    def test_credentials_are_immutable(self):
        """Credentials fields cannot be modified after creation."""
        creds = Credentials(url=DEFAULT_STORE_URL, token="abc")
        with pytest.raises(AttributeError):
            creds.token = "other"


class TestAuthenticator:
    """Test cases for Authenticator class."""

    def test_init_loads_dotenv(self, clean_env):
        """Authenticator __init__ should call load_dotenv()."""
        Authenticator()
        clean_env.assert_called_once()

    def test_default_url(self):
        assert Authenticator().get_url() == "http://localhost:5690/api/users"

    def test_url_argument_used_when_env_missing(self):
        auth = Authenticator(url="https://timers.example.com/api/users/")
        assert auth.get_url() == "https://timers.example.com/api/users"

    def test_env_url_wins(self, monkeypatch):
        """RECIPE_TIMERS_URL overrides the settings file."""
        monkeypatch.setenv('RECIPE_TIMERS_URL', 'https://env.example.com/api/users')
        auth = Authenticator(url="https://settings.example.com/api/users")
        assert auth.get_url() == "https://env.example.com/api/users"

    def test_get_credentials_from_env(self, monkeypatch):
        monkeypatch.setenv('RECIPE_TIMERS_TOKEN', 'env-token')
        fallback = Mock(return_value='saved-token')

        creds = Authenticator(token_fallback=fallback).get_credentials()

        assert creds == Credentials(url=DEFAULT_STORE_URL, token='env-token')
        fallback.assert_not_called()

    def test_get_credentials_from_saved_login(self):
        """A token saved by login is used when the environment has none."""
        auth = Authenticator(token_fallback=lambda: 'saved-token')
        assert auth.get_credentials().token == 'saved-token'

    def test_missing_token_raises(self):
        """No token anywhere raises InvalidCredentialsError naming the endpoint."""
        auth = Authenticator(token_fallback=lambda: None)

        with pytest.raises(InvalidCredentialsError) as exc_info:
            auth.get_credentials()

        assert exc_info.value.endpoint == DEFAULT_STORE_URL
        assert "recipe-timers login" in str(exc_info.value)
