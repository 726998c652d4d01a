"""Provider error hierarchy.

Hierarchy::

    BaseError
    ├── ValueConversionError
    └── ConfigError                (config/errors.py)
        ├── MissingRequiredSettingError
        └── InvalidSettingValueError

    openfeature.exception.ProviderFatalError
    └── LaunchDarklyProviderInitError
"""

from __future__ import annotations

import json
from typing import Any

from openfeature.exception import ProviderFatalError

PERMANENT_ERROR_MESSAGE = "the provider has encountered a permanent error or been shutdown"


class BaseError(Exception):
    """Root of the provider's own error hierarchy.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        detail: Arbitrary extra context (serialisable dict).
        cause: Original exception that triggered this error.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (safe for logging)."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


class ValueConversionError(BaseError):
    """A value could not be represented in the target value model."""

    default_code = "parse_error"

    def __init__(self, message: str, *, value_type: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.value_type = value_type


class LaunchDarklyProviderInitError(ProviderFatalError):
    """The provider hit a permanent error, or was shut down, during initialization."""

    def __init__(self, message: str = PERMANENT_ERROR_MESSAGE) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


__all__ = [
    "BaseError",
    "LaunchDarklyProviderInitError",
    "PERMANENT_ERROR_MESSAGE",
    "ValueConversionError",
]
