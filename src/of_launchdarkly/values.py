"""Value conversion between OpenFeature values and LaunchDarkly JSON values.

OpenFeature values are plain Python objects: ``None``, ``bool``, ``int``,
``float``, ``str``, ``datetime``, sequences and string-keyed mappings.
LaunchDarkly values are the JSON subset of those; a ``datetime`` is sent as
an ISO-8601 UTC string and never comes back as a ``datetime``.

Anything outside those variants raises :class:`ValueConversionError`.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from of_launchdarkly.errors import ValueConversionError

DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_datetime(value: datetime) -> str:
    """Render *value* as ``YYYY-MM-DDTHH:MM:SSZ``; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(DATETIME_FORMAT)


def _unsupported(value: Any) -> ValueConversionError:
    type_name = type(value).__name__
    return ValueConversionError(
        f"Cannot convert value of type {type_name}",
        value_type=type_name,
    )


def _convert_mapping(value: Mapping[Any, Any], convert: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise ValueConversionError(
                f"Structure keys must be strings, got {type(key).__name__}",
                value_type=type(key).__name__,
            )
        result[key] = convert(item)
    return result


def to_backend(value: Any) -> Any:
    """Convert an OpenFeature value into a LaunchDarkly JSON value."""
    match value:
        case None:
            return None
        case bool() | int() | float() | str():
            return value
        case datetime():
            return format_datetime(value)
        case Mapping():
            return _convert_mapping(value, to_backend)
        case list() | tuple():
            return [to_backend(item) for item in value]
        case _:
            raise _unsupported(value)


def to_generic(value: Any) -> Any:
    """Convert a LaunchDarkly JSON value into an OpenFeature value."""
    match value:
        case None:
            return None
        case bool() | int() | float() | str():
            return value
        case Mapping():
            return _convert_mapping(value, to_generic)
        case list() | tuple():
            return [to_generic(item) for item in value]
        case _:
            raise _unsupported(value)


__all__ = ["DATETIME_FORMAT", "format_datetime", "to_backend", "to_generic"]
