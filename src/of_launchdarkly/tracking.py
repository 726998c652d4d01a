"""Tracking – OpenFeature tracking event details to LaunchDarkly track arguments."""
from __future__ import annotations

from typing import Any

from openfeature.track import TrackingEventDetails

from of_launchdarkly import values


def to_ld_tracking(details: TrackingEventDetails | None) -> tuple[float | None, dict[str, Any] | None]:
    """Split *details* into ``(metric_value, data)`` for :meth:`LDClient.track`.

    Either element is ``None`` when the details do not carry it, so the caller
    can leave the matching keyword out entirely.
    """
    if details is None:
        return None, None
    metric_value = details.value
    attributes = details.attributes or {}
    data = values.to_backend(dict(attributes)) if attributes else None
    return metric_value, data


__all__ = ["to_ld_tracking"]
