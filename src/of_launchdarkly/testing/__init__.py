"""Testing support – in-memory fakes of the LaunchDarkly client.

Usage::

    from of_launchdarkly.testing import FakeLDClient

    client = FakeLDClient().set_flag("new-checkout", True)
"""

from of_launchdarkly.testing.fakes import (
    FakeDataSourceStatusProvider,
    FakeFlagTracker,
    FakeLDClient,
    TrackedEvent,
)

__all__ = [
    "FakeDataSourceStatusProvider",
    "FakeFlagTracker",
    "FakeLDClient",
    "TrackedEvent",
]
