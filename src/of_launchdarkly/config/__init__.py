"""Config – provider settings, loaders and validation errors."""

from of_launchdarkly.config.errors import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from of_launchdarkly.config.loaders import EnvSettingsLoader, SettingsLoader
from of_launchdarkly.config.settings import (
    DEFAULT_EVENT_CHANNEL_CAPACITY,
    ProviderConfiguration,
    Settings,
)

__all__ = [
    "ConfigError",
    "DEFAULT_EVENT_CHANNEL_CAPACITY",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "ProviderConfiguration",
    "Settings",
    "SettingsLoader",
]
