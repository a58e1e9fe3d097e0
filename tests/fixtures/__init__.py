"""
Test fixtures for xorca-cloudevent.

Provides fake implementations of the injected ports:
- FakeClock: Controllable time for deterministic tests
- SequentialIds: Predictable id factory
- RecordingTracer: Tracer that keeps every span it starts
"""

from .fake_clock import FakeClock, create_test_clock
from .fake_ids import SequentialIds, is_uuid4
from .recording_tracer import RecordingSpan, RecordingTracer

__all__ = [
    "FakeClock",
    "create_test_clock",
    "SequentialIds",
    "is_uuid4",
    "RecordingSpan",
    "RecordingTracer",
]
