"""
Field normalization steps applied while building an event.

Each step converts one caller-supplied value into its canonical stored form
and raises NormalizationError when the value cannot be converted.
"""

from datetime import date, datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

# encodeURIComponent leaves these unescaped in addition to letters, digits and "-_.~"
_URI_SAFE = "!*'()"


class NormalizationError(ValueError):
    """Raised when a value passes the schema but cannot be converted."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot normalize {field}={value!r}: {reason}")


def to_iso_timestamp(value: Any, field: str = "time") -> str:
    """
    Convert a timestamp-like value to an ISO-8601 UTC string.

    Accepts ISO-8601 strings, epoch milliseconds (int/float), and
    datetime/date objects. Naive values are taken as UTC. The result always
    has millisecond precision and a trailing "Z", e.g.
    "2025-01-01T00:00:00.000Z", so feeding it back in yields the same string.

    Raises:
        NormalizationError: If the value is not a timestamp or is out of range
    """
    moment = _to_datetime(value, field)
    try:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        moment = moment.astimezone(timezone.utc)
    except (OverflowError, ValueError) as e:
        raise NormalizationError(field, value, f"out of range in UTC ({e})") from e
    return moment.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def _to_datetime(value: Any, field: str) -> datetime:
    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    # bool is an int subclass but never an epoch
    if isinstance(value, bool):
        raise NormalizationError(field, value, "boolean is not a timestamp")

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise NormalizationError(field, value, f"epoch milliseconds out of range ({e})") from e

    if isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as e:
            raise NormalizationError(field, value, "not an ISO-8601 timestamp") from e

    raise NormalizationError(field, value, f"unsupported type {type(value).__name__}")


def encode_uri(value: str, field: str = "source") -> str:
    """
    Percent-encode a URI-reference component.

    Everything except ASCII letters, digits and "-_.!~*'()" is escaped, so
    "svc/orders" becomes "svc%2Forders".

    Raises:
        NormalizationError: If the value is not a string or is not UTF-8 encodable
    """
    if not isinstance(value, str):
        raise NormalizationError(field, value, "expected a string")
    try:
        return quote(value, safe=_URI_SAFE)
    except UnicodeEncodeError as e:
        raise NormalizationError(field, value, "not representable as a URI") from e


def encode_optional_uri(value: Optional[str], field: str) -> Optional[str]:
    """Percent-encode value when present; empty or missing values become None."""
    if not value:
        return None
    return encode_uri(value, field)
