"""Config – Settings base class and ProviderConfiguration."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from of_launchdarkly.config.errors import InvalidSettingValueError

DEFAULT_EVENT_CHANNEL_CAPACITY = 100


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class ProviderConfiguration(Settings):
    """Options for :class:`~of_launchdarkly.provider.LaunchDarklyProvider`.

    Instances can be built directly or read
    from ``LD_OPENFEATURE_*`` environment variables with
    :class:`~of_launchdarkly.config.loaders.EnvSettingsLoader`.

    Attributes
    ----------
    base_logger_name:
        When set, the provider logs as ``<base_logger_name>.OpenFeature.ServerProvider``;
        otherwise it logs under the provider's metadata name.
    event_channel_capacity:
        Maximum number of undelivered provider events held for the host.
    """

    _prefix: ClassVar[str] = "LD_OPENFEATURE"

    base_logger_name: str | None = None
    event_channel_capacity: int = DEFAULT_EVENT_CHANNEL_CAPACITY

    def _validate(self) -> None:
        if self.event_channel_capacity <= 0:
            raise InvalidSettingValueError(
                "event_channel_capacity",
                self.event_channel_capacity,
                "must be a positive integer",
            )


__all__ = ["DEFAULT_EVENT_CHANNEL_CAPACITY", "ProviderConfiguration", "Settings"]
