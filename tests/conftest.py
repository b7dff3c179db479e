"""Root pytest configuration for all tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_app_logging():
    """Drop handlers the CLI attaches to the 'src' logger between tests.

    CliRunner swaps stderr per invocation; a handler left behind would keep
    writing to a closed stream.
    """
    yield
    app_logger = logging.getLogger("src")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)
