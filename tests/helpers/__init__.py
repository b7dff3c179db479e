"""Test helper modules.

- fake_scheduler: Deterministic clock for driving timers without waiting
"""

from .fake_scheduler import FakeScheduler, FakeHandle

__all__ = [
    'FakeScheduler',
    'FakeHandle',
]
