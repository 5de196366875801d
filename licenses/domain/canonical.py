"""
Canonical encoding of license fields.

The signer compares raw bytes, so the encoding must be identical for the same
logical content regardless of how the caller built the mapping.
"""
import json
from datetime import datetime, timezone
from typing import Any, Mapping

from core.domain.exceptions import InvalidRequestError

CANONICAL_FIELDS = (
    "license_id",
    "customer",
    "modules",
    "issued_at",
    "expires_at",
    "renewed_from",
)
OPTIONAL_FIELDS = frozenset({"renewed_from"})

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def format_timestamp(value: datetime) -> str:
    """Render a datetime as a UTC timestamp with microseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, (set, frozenset)):
        # Sets have no order of their own
        return sorted(value)
    raise TypeError(f"{type(value).__name__} is not serializable")


def encode(fields: Mapping[str, Any]) -> bytes:
    """
    Encode license fields into the bytes that get signed.

    The ``signature`` key and unknown keys are ignored; ``renewed_from`` is
    only included when set.

    Raises:
        InvalidRequestError: If a required field is missing or a value
            cannot be serialized
    """
    if not isinstance(fields, Mapping):
        raise InvalidRequestError("License fields must be a mapping")

    ordered = {}
    for name in CANONICAL_FIELDS:
        value = fields.get(name)
        if value is None:
            if name in OPTIONAL_FIELDS:
                continue
            raise InvalidRequestError(f"Missing license field: {name}")
        ordered[name] = value

    try:
        return json.dumps(
            ordered,
            default=_default,
            ensure_ascii=False,
            separators=(",", ":"),
            allow_nan=False,
        ).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"License fields cannot be encoded: {e}") from e
