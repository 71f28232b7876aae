"""Parsing and normalization of raw Tika metadata."""

import json
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from tika_metadata.core.enums import FieldKind
from tika_metadata.core.logging import LoggerManager

logger = LoggerManager.get_logger("metadata.raw")

ARRAY_DELIMITER = ", "


def flatten_value(value: Any) -> Any:
    """Collapse a raw metadata value to a scalar.

    Arrays are joined with ``", "`` and nested objects become ``key: value``
    pairs joined the same way. Scalars are returned unchanged.
    """
    if isinstance(value, (list, tuple)):
        return ARRAY_DELIMITER.join(str(flatten_value(item)) for item in value)
    if isinstance(value, dict):
        return ARRAY_DELIMITER.join(f"{key}: {flatten_value(item)}" for key, item in value.items())
    return value


def clean_metadata(raw_json: Optional[str]) -> Optional[dict[str, Any]]:
    """Parse Tika JSON output into flat raw metadata.

    Tika's recursive metadata endpoints answer with a list of objects, the
    first of which describes the container resource.

    Args:
        raw_json: JSON text as returned by Tika.

    Returns:
        Mapping of raw keys to flattened values, None if there is nothing usable.
    """
    if not raw_json or not raw_json.strip():
        return None

    try:
        parsed = json.loads(raw_json)
    except json.JSONDecodeError as e:
        logger.warning(f"Unparseable Tika metadata: {e}")
        return None

    if isinstance(parsed, list):
        parsed = parsed[0] if parsed else None

    if not isinstance(parsed, dict) or not parsed:
        return None

    return {str(key): flatten_value(value) for key, value in parsed.items()}


def resolve_alias(rawmetadata: Mapping[str, Any], aliases: list[str]) -> Optional[Any]:
    """Get the flattened value of the first alias present in raw metadata."""
    for alias in aliases:
        if alias in rawmetadata:
            return flatten_value(rawmetadata[alias])
    return None


def coerce_value(value: Any, kind: FieldKind) -> Optional[Any]:
    """Coerce a flattened raw value to a field's storage kind.

    Values which cannot be coerced become None.
    """
    if value is None:
        return None

    if kind == FieldKind.INTEGER:
        return _to_integer(value)
    if kind == FieldKind.TIMESTAMP:
        return _to_timestamp(value)

    value = str(value)
    return value if value != "" else None


def _to_integer(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value

    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass

    # int() of an infinite float overflows, and of NaN is a ValueError.
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        logger.debug(f"Dropping non-integer metadata value: {value!r}")
        return None


def _to_timestamp(value: Any) -> Optional[int]:
    text = str(value).strip()
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(value)
        if text.isdecimal():
            return int(text)
    except (ValueError, OverflowError):
        logger.debug(f"Dropping out of range metadata timestamp: {value!r}")
        return None

    # fromisoformat only accepts a trailing Z from Python 3.11.
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return int(parsed.timestamp())
    except (ValueError, OverflowError, OSError):
        logger.debug(f"Dropping unparseable metadata timestamp: {value!r}")
        return None
