"""
of_launchdarkly – OpenFeature provider for the LaunchDarkly server-side SDK.

Import path convention::

    from of_launchdarkly import LaunchDarklyProvider
    from of_launchdarkly.config import ProviderConfiguration, EnvSettingsLoader
    from of_launchdarkly.testing import FakeLDClient
"""

from of_launchdarkly.config.settings import ProviderConfiguration
from of_launchdarkly.errors import LaunchDarklyProviderInitError, PERMANENT_ERROR_MESSAGE
from of_launchdarkly.events import EventChannel, ProviderEventPayload
from of_launchdarkly.provider import LaunchDarklyProvider, PROVIDER_NAME

__version__ = "0.1.0"
__all__ = [
    "EventChannel",
    "LaunchDarklyProvider",
    "LaunchDarklyProviderInitError",
    "PERMANENT_ERROR_MESSAGE",
    "PROVIDER_NAME",
    "ProviderConfiguration",
    "ProviderEventPayload",
    "__version__",
]
