"""
XOrca CloudEvent value type and constructor.

create_event turns a raw record into an immutable XOrcaCloudEvent: it
validates the record against an EventSchema, then applies defaults and
canonical encodings (UUIDv4 id, ISO-8601 time, percent-encoded URIs).
"""

import copy
import json
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import structlog
from cloudevents.http import CloudEvent

from .metrics import events_created
from .normalization import encode_optional_uri, encode_uri, to_iso_timestamp
from .ports.clock import Clock, SystemClock
from .ports.ids import IdFactory, uuid4_factory
from .schemas import DEFAULT_DATACONTENTTYPE, EXTENSION_FIELDS, SPECVERSION
from .validators import DEFAULT_SCHEMA, EventSchema

logger = structlog.get_logger()

# (attribute key, event field) pairs exported to tracing backends
OPEN_TELEMETRY_ATTRIBUTES = (
    ("cloudevents.event_id", "id"),
    ("cloudevents.event_source", "source"),
    ("cloudevents.event_spec_version", "specversion"),
    ("cloudevents.event_subject", "subject"),
    ("cloudevents.event_type", "type"),
    ("cloudevents.xorca.event_redirectto", "redirectto"),
    ("cloudevents.xorca.event_to", "to"),
    ("cloudevents.xorca.event_executionunits", "executionunits"),
    ("cloudevents.xorca.event_elapsedtime", "elapsedtime"),
)


@dataclass(frozen=True)
class XOrcaCloudEvent:
    """
    CloudEvents 1.0 envelope with XOrca routing and observability extensions.

    Build instances with create_event(); the dataclass constructor stores
    values as given and performs no normalization. Assigning to any field
    raises dataclasses.FrozenInstanceError. create_event stores data as a
    read-only mapping over a private copy, so item assignment raises TypeError.

    See https://github.com/cloudevents/spec/blob/v1.0/spec.md
    """

    id: str
    type: str
    source: str
    specversion: str
    datacontenttype: str
    subject: str
    time: str
    data: Mapping[str, Any]
    to: Optional[str] = None
    redirectto: Optional[str] = None
    traceparent: Optional[str] = None
    tracestate: Optional[str] = None
    elapsedtime: Optional[str] = None
    executionunits: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        """Plain dict snapshot of every field; the payload is a deep copy."""
        snapshot = {f.name: getattr(self, f.name) for f in fields(self)}
        data = self.data
        snapshot["data"] = copy.deepcopy(dict(data) if isinstance(data, Mapping) else data)
        return snapshot

    def to_string(self) -> str:
        return json.dumps(self.to_json())

    def __str__(self) -> str:
        return self.to_string()

    @property
    def xorca_extensions(self) -> Dict[str, Optional[str]]:
        """Only the XOrca extension fields, as stored."""
        return {name: getattr(self, name) for name in EXTENSION_FIELDS}

    @property
    def extension_fields(self) -> List[str]:
        return list(EXTENSION_FIELDS)

    @property
    def cloudevent(self) -> Dict[str, Any]:
        """Only the standard CloudEvents fields."""
        extension_fields = self.extension_fields
        return {key: value for key, value in self.to_json().items() if key not in extension_fields}

    def to_cloud_event(self) -> CloudEvent:
        """
        Convert to a CloudEvents SDK event.

        Null extension attributes are left out since CloudEvents attributes
        cannot be null.
        """
        attributes = self.to_json()
        data = attributes.pop("data")
        return CloudEvent({key: value for key, value in attributes.items() if value is not None}, data)

    def open_telemetry_attributes(self) -> Dict[str, str]:
        """Span attributes for the event; missing values become empty strings."""
        return {key: getattr(self, name) or "" for key, name in OPEN_TELEMETRY_ATTRIBUTES}


def create_event(
    record: Mapping[str, Any],
    *,
    schema: Optional[EventSchema] = None,
    validate: bool = True,
    clock: Optional[Clock] = None,
    id_factory: Optional[IdFactory] = None,
) -> XOrcaCloudEvent:
    """
    Validate and normalize a raw record into an XOrcaCloudEvent.

    Args:
        record: Raw event fields (see XOrcaCloudEventV1.json)
        schema: Schema to validate against (defaults to DEFAULT_SCHEMA)
        validate: Skip validation when False. Only for records that already
            passed validation; missing required fields then fail in
            normalization or end up as None.
        clock: Source of the default time (defaults to SystemClock)
        id_factory: Source of the default id (defaults to UUIDv4)

    Returns:
        Frozen XOrcaCloudEvent

    Raises:
        SchemaValidationError: If the record doesn't conform to the schema
        NormalizationError: If time or a URI field cannot be converted
    """
    schema = schema or DEFAULT_SCHEMA
    clock = clock or SystemClock()
    id_factory = id_factory or uuid4_factory

    if validate:
        record = schema.validate(record, clock=clock)

    time = record.get("time")
    event = XOrcaCloudEvent(
        id=record.get("id") or id_factory(),
        type=record.get("type"),
        source=encode_uri(record.get("source"), "source"),
        specversion=record.get("specversion") or SPECVERSION,
        datacontenttype=record.get("datacontenttype") or DEFAULT_DATACONTENTTYPE,
        subject=record.get("subject"),
        time=to_iso_timestamp(clock.now_utc() if time is None else time),
        data=_read_only(record.get("data")),
        to=encode_optional_uri(record.get("to"), "to"),
        redirectto=encode_optional_uri(record.get("redirectto"), "redirectto"),
        traceparent=record.get("traceparent") or None,
        tracestate=record.get("tracestate") or None,
        elapsedtime=record.get("elapsedtime") or None,
        executionunits=record.get("executionunits") or None,
    )

    events_created.labels(schema=schema.name).inc()
    logger.debug(
        "XOrca CloudEvent created",
        schema=schema.name,
        event_id=event.id,
        event_type=event.type,
        subject=event.subject,
    )
    return event


def _read_only(data: Any) -> Any:
    if isinstance(data, Mapping):
        return MappingProxyType(copy.deepcopy(dict(data)))
    return copy.deepcopy(data)
