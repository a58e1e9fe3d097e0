from importlib.resources import files
import json

__all__ = [
    "load_schema",
    "XORCA_CLOUDEVENT_V1",
    "SPECVERSION",
    "DEFAULT_DATACONTENTTYPE",
    "CORE_FIELDS",
    "EXTENSION_FIELDS",
    "EVENT_FIELDS",
]

SPECVERSION = "1.0"
DEFAULT_DATACONTENTTYPE = "application/cloudevents+json; charset=UTF-8; profile=xorca"

CORE_FIELDS = (
    "id",
    "type",
    "source",
    "specversion",
    "datacontenttype",
    "subject",
    "time",
    "data",
)

# Authoritative partition key: anything not listed here is a CloudEvents field.
EXTENSION_FIELDS = (
    "to",
    "redirectto",
    "traceparent",
    "tracestate",
    "executionunits",
    "elapsedtime",
)

EVENT_FIELDS = CORE_FIELDS + EXTENSION_FIELDS

_cache = {}

def load_schema(name: str) -> dict:
    """Load and cache a JSONSchema by filename.

    The cached dictionary is shared; callers that want to change it must copy
    it first.

    Args:
        name: Schema filename (e.g., 'XOrcaCloudEventV1.json')

    Returns:
        Parsed JSON schema dictionary

    Raises:
        FileNotFoundError: If schema file doesn't exist
        json.JSONDecodeError: If schema file is invalid JSON
    """
    if name in _cache:
        return _cache[name]

    try:
        schema_file = files(__package__).joinpath(name)
        if not schema_file.is_file():
            raise FileNotFoundError(f"Schema file not found: {name}")

        data = schema_file.read_text(encoding="utf-8")
        _cache[name] = json.loads(data)
        return _cache[name]
    except Exception:
        # Clear cache entry on error to allow retry
        _cache.pop(name, None)
        raise

XORCA_CLOUDEVENT_V1 = load_schema("XOrcaCloudEventV1.json")
