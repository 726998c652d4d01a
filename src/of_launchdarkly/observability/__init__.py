"""Observability – structured logging helpers."""
from of_launchdarkly.observability.factory import JsonLoggerFactory
from of_launchdarkly.observability.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from of_launchdarkly.observability.processors import get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]
