"""Unit tests for tracking event detail conversion."""

from __future__ import annotations

from datetime import datetime, timezone

from openfeature.track import TrackingEventDetails

from of_launchdarkly.tracking import to_ld_tracking


class TestToLdTracking:
    def test_value_and_attributes(self) -> None:
        details = TrackingEventDetails(value=99.77, attributes={"currency": "USD"})
        assert to_ld_tracking(details) == (99.77, {"currency": "USD"})

    def test_attributes_only(self) -> None:
        details = TrackingEventDetails(attributes={"color": "red"})
        assert to_ld_tracking(details) == (None, {"color": "red"})

    def test_value_only(self) -> None:
        assert to_ld_tracking(TrackingEventDetails(value=3)) == (3, None)

    def test_empty_details(self) -> None:
        assert to_ld_tracking(TrackingEventDetails()) == (None, None)

    def test_none(self) -> None:
        assert to_ld_tracking(None) == (None, None)

    def test_attribute_values_are_converted(self) -> None:
        when = datetime(2024, 5, 1, tzinfo=timezone.utc)
        details = TrackingEventDetails(attributes={"at": when, "items": ("a", "b")})
        assert to_ld_tracking(details) == (None, {"at": "2024-05-01T00:00:00Z", "items": ["a", "b"]})
