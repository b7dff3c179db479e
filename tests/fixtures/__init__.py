"""Test fixtures for page store responses."""

from .store_responses import (
    DASHBOARD_RESPONSE,
    CONVERTERS_RESPONSE,
    EMPTY_CONVERTERS_RESPONSE,
    PAGE_ID,
    make_page,
    make_timer,
    make_converter,
)

__all__ = [
    "DASHBOARD_RESPONSE",
    "CONVERTERS_RESPONSE",
    "EMPTY_CONVERTERS_RESPONSE",
    "PAGE_ID",
    "make_page",
    "make_timer",
    "make_converter",
]
