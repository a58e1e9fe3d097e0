"""
Schema validation for XOrca CloudEvent records.

The envelope contract is data: a JSONSchema document (field -> type, format,
required flag) plus a table of default providers. Variants are produced by
generate_schema, which copies and overrides table entries instead of
duplicating validation code.
"""

import copy
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import structlog
from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.validators import extend

from .metrics import schema_validation_errors
from .normalization import NormalizationError, encode_uri, to_iso_timestamp
from .ports.clock import Clock, SystemClock
from .schemas import XORCA_CLOUDEVENT_V1

logger = structlog.get_logger()

# "datetime" lets callers hand over date/datetime objects for time-like fields
_type_checker = Draft202012Validator.TYPE_CHECKER.redefine(
    "datetime", lambda checker, instance: isinstance(instance, date)
)
EventValidator = extend(Draft202012Validator, type_checker=_type_checker)

FORMAT_CHECKER = FormatChecker()


@FORMAT_CHECKER.checks("xorca-uri", raises=NormalizationError)
def _is_uri_representable(instance: Any) -> bool:
    if isinstance(instance, str):
        encode_uri(instance)
    return True


@FORMAT_CHECKER.checks("xorca-timestamp", raises=NormalizationError)
def _is_timestamp(instance: Any) -> bool:
    # Non-timestamp types are reported by the "type" keyword
    if isinstance(instance, (str, date)) or (
        isinstance(instance, (int, float)) and not isinstance(instance, bool)
    ):
        to_iso_timestamp(instance)
    return True


@dataclass(frozen=True)
class FieldViolation:
    """One failed constraint on one field ("$" for the record itself)."""

    field: str
    constraint: str
    message: str


class SchemaValidationError(ValueError):
    """Raised when a record doesn't conform to an event schema."""

    def __init__(self, schema_name: str, errors: List[FieldViolation], payload_snippet: Optional[str] = None):
        self.schema_name = schema_name
        self.errors = errors
        self.payload_snippet = payload_snippet

        error_summary = "; ".join(f"{err.field}: {err.message}" for err in errors[:3])
        if len(errors) > 3:
            error_summary += f" (and {len(errors) - 3} more)"

        super().__init__(f"Schema validation failed for {schema_name}: {error_summary}")

    @property
    def fields(self) -> List[str]:
        """Offending field names, in the order they were reported."""
        return list(dict.fromkeys(err.field for err in self.errors))


def _now(clock: Clock) -> Any:
    return clock.now_utc()


DEFAULT_PROVIDERS: Dict[str, Callable[[Clock], Any]] = {
    "time": _now,
}


def _violations(error) -> List[FieldViolation]:
    """Flatten a jsonschema error into per-field violations."""
    if error.path:
        return [FieldViolation(".".join(str(p) for p in error.path), error.validator, error.message)]

    if error.validator == "required" and isinstance(error.instance, dict):
        missing = [
            name for name in error.validator_value
            if name not in error.instance and error.message.startswith(repr(name))
        ]
        return [FieldViolation(name, "required", error.message) for name in missing[:1]] or [
            FieldViolation("$", "required", error.message)
        ]

    if error.validator == "additionalProperties" and isinstance(error.instance, dict):
        known = error.schema.get("properties", {})
        return [
            FieldViolation(name, "additionalProperties", f"{name!r} is not an event field")
            for name in error.instance if name not in known
        ]

    return [FieldViolation("$", error.validator, error.message)]


@dataclass(frozen=True)
class EventSchema:
    """
    A named event contract: JSONSchema document plus default providers.

    Instances are never mutated; use derive() or generate_schema() to build
    variants. The schema keeps a private copy of the document for validation
    and exposes read-only views of document and defaults, so editing the
    dict passed in, or anything reached through the views, leaves validation
    unchanged.
    """

    name: str
    document: Mapping[str, Any]
    defaults: Mapping[str, Callable[[Clock], Any]] = field(default_factory=lambda: dict(DEFAULT_PROVIDERS))

    def __post_init__(self):
        document = copy.deepcopy(dict(self.document))
        object.__setattr__(self, "_document", document)
        object.__setattr__(self, "_validator", EventValidator(document, format_checker=FORMAT_CHECKER))
        object.__setattr__(self, "document", MappingProxyType(copy.deepcopy(document)))
        object.__setattr__(self, "defaults", MappingProxyType(dict(self.defaults)))

    @property
    def field_names(self) -> List[str]:
        return list(self._document.get("properties", {}))

    @property
    def required(self) -> List[str]:
        return list(self._document.get("required", []))

    def iter_violations(self, record: Any) -> Iterable[FieldViolation]:
        for error in self._validator.iter_errors(record):
            yield from _violations(error)

    def check(self, record: Any, *, strict: bool = True) -> List[FieldViolation]:
        """
        Validate a record against this schema.

        Args:
            record: Candidate event record
            strict: If True, raise on any violation. If False, log a warning
                and return the violations.

        Returns:
            List of violations (empty if valid)

        Raises:
            SchemaValidationError: If validation fails and strict=True
        """
        violations = list(self.iter_violations(record))
        if not violations:
            return violations

        record_str = str(record)
        snippet = record_str[:200] + "..." if len(record_str) > 200 else record_str

        logger.error(
            "Schema validation failed",
            schema=self.name,
            error_count=len(violations),
            errors=[f"{v.field}: {v.message}" for v in violations[:5]],
            payload_snippet=snippet,
        )
        known = set(self.field_names)
        for violation in violations:
            # top-level schema fields only, everything else counts under "$"
            top = violation.field.split(".", 1)[0]
            schema_validation_errors.labels(schema=self.name, field=top if top in known else "$").inc()

        if strict:
            raise SchemaValidationError(self.name, violations, snippet)
        logger.warning("Schema validation failed but continuing (strict=False)", schema=self.name)
        return violations

    def is_valid(self, record: Any) -> bool:
        return not any(True for _ in self.iter_violations(record))

    def validate(self, record: Mapping[str, Any], *, clock: Optional[Clock] = None) -> Dict[str, Any]:
        """
        Validate a record and apply schema-level defaults.

        Returns:
            A new dict; the input record is left untouched

        Raises:
            SchemaValidationError: If the record doesn't conform
        """
        self.check(record)
        clock = clock or SystemClock()
        validated = dict(record)
        for name, provider in self.defaults.items():
            if name not in validated:
                validated[name] = provider(clock)
        return validated

    def derive(self, **config) -> "EventSchema":
        """Build a variant of this schema; see generate_schema for options."""
        return generate_schema(base=self, **config)


DEFAULT_SCHEMA = EventSchema(XORCA_CLOUDEVENT_V1["title"], copy.deepcopy(XORCA_CLOUDEVENT_V1))


def generate_schema(
    *,
    name: Optional[str] = None,
    base: Optional[EventSchema] = None,
    require: Iterable[str] = (),
    relax: Iterable[str] = (),
    event_type: Optional[str] = None,
    data_schema: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> EventSchema:
    """
    Create a schema variant without touching the base schema.

    Args:
        name: Name of the new schema (defaults to the base name)
        base: Schema to start from (defaults to DEFAULT_SCHEMA)
        require: Optional fields that become required
        relax: Required fields that become optional
        event_type: Pin "type" to this value, for a single event family
        data_schema: JSONSchema the "data" payload must satisfy
        overrides: Per-field JSONSchema fragments merged over the base entries

    Returns:
        New EventSchema

    Raises:
        ValueError: If a field is unknown or both required and relaxed
    """
    base = base or DEFAULT_SCHEMA
    require = list(require)
    relax = list(relax)
    overrides = overrides or {}

    document = copy.deepcopy(base._document)
    properties = document.setdefault("properties", {})

    unknown = [f for f in [*require, *relax, *overrides] if f not in properties]
    if unknown:
        raise ValueError(f"Unknown event fields: {unknown}. Available: {list(properties)}")

    conflicting = sorted(set(require) & set(relax))
    if conflicting:
        raise ValueError(f"Fields cannot be both required and relaxed: {conflicting}")

    for field_name, fragment in overrides.items():
        properties[field_name] = {**properties[field_name], **copy.deepcopy(fragment)}

    if event_type is not None:
        properties["type"] = {**properties["type"], "const": event_type}

    if data_schema is not None:
        properties["data"] = {**copy.deepcopy(data_schema), "type": "object"}

    required = [f for f in document.get("required", []) if f not in relax]
    required += [f for f in require if f not in required]
    document["required"] = required

    name = name or base.name
    document["title"] = name

    return EventSchema(name, document, dict(base.defaults))


def validate_event(record: Any, schema: Optional[EventSchema] = None, *, strict: bool = True) -> List[FieldViolation]:
    """Convenience function for validating a record against DEFAULT_SCHEMA or a variant."""
    return (schema or DEFAULT_SCHEMA).check(record, strict=strict)
