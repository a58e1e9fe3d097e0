"""Injected capabilities used while building and tracing events."""
from .clock import Clock, SystemClock
from .ids import IdFactory, uuid4_factory
from .tracer import Tracer, Span, NoopTracer, span_cm, span_for_event, trace_id_from_traceparent
__all__ = ["Clock","SystemClock",
           "IdFactory","uuid4_factory",
           "Tracer","Span","NoopTracer","span_cm","span_for_event","trace_id_from_traceparent"]
