"""Data models for pages, timers and converters held by the page store."""

from src.models.page import PageRecord
from src.models.timer import TimerRecord
from src.models.converter import ConverterRecord

__all__ = ['PageRecord', 'TimerRecord', 'ConverterRecord']
