"""
xorca-cloudevent: CloudEvents 1.0 envelope with XOrca extensions.

This package provides:
- The XOrcaCloudEventV1 JSONSchema and schema variant generation
- Validation with field-level errors
- An immutable event value with CloudEvents and OpenTelemetry views
"""

from .events import XOrcaCloudEvent, create_event, OPEN_TELEMETRY_ATTRIBUTES
from .normalization import NormalizationError
from .schemas import DEFAULT_DATACONTENTTYPE, EXTENSION_FIELDS, SPECVERSION
from .validators import (
    DEFAULT_SCHEMA,
    EventSchema,
    FieldViolation,
    SchemaValidationError,
    generate_schema,
    validate_event,
)

__version__ = "1.0.0"

__all__ = [
    "XOrcaCloudEvent",
    "create_event",
    "OPEN_TELEMETRY_ATTRIBUTES",
    "NormalizationError",
    "DEFAULT_DATACONTENTTYPE",
    "EXTENSION_FIELDS",
    "SPECVERSION",
    "DEFAULT_SCHEMA",
    "EventSchema",
    "FieldViolation",
    "SchemaValidationError",
    "generate_schema",
    "validate_event",
]
