from __future__ import annotations
import re
from contextlib import contextmanager
from typing import TYPE_CHECKING, Protocol, Iterator

if TYPE_CHECKING:
    from ..events import XOrcaCloudEvent

# W3C trace context: version-traceid-parentid-flags
_TRACEPARENT = re.compile(r"^[0-9a-f]{2}-([0-9a-f]{32})-[0-9a-f]{16}-[0-9a-f]{2}$")

class Span(Protocol):
    def set_tag(self, key: str, value): ...
    def record_exception(self, err: BaseException) -> None: ...
    def end(self) -> None: ...

class Tracer(Protocol):
    def start_span(self, name: str, trace_id: str | None = None) -> Span: ...

class _NoopSpan:
    def set_tag(self, key: str, value): pass
    def record_exception(self, err: BaseException) -> None: pass
    def end(self) -> None: pass

class NoopTracer:
    def start_span(self, name: str, trace_id: str | None = None) -> Span:
        return _NoopSpan()

def trace_id_from_traceparent(traceparent: str | None) -> str | None:
    """Return the trace id carried by a traceparent header, or None if it is malformed."""
    if not traceparent:
        return None
    match = _TRACEPARENT.match(traceparent.strip().lower())
    if match is None or set(match.group(1)) == {"0"}:
        return None
    return match.group(1)

@contextmanager
def span_cm(tracer: Tracer, name: str, trace_id: str | None = None) -> Iterator[Span]:
    s = NoopTracer().start_span(name, trace_id) if not hasattr(tracer, "start_span") else tracer.start_span(name, trace_id)
    try:
        yield s
    except BaseException as e:
        s.record_exception(e)
        raise
    finally:
        s.end()

@contextmanager
def span_for_event(tracer: Tracer, name: str, event: "XOrcaCloudEvent") -> Iterator[Span]:
    """Open a span joined to the event's trace and tagged with its telemetry attributes."""
    with span_cm(tracer, name, trace_id_from_traceparent(event.traceparent)) as s:
        for key, value in event.open_telemetry_attributes().items():
            s.set_tag(key, value)
        yield s
