"""Provider status – lifecycle state machine that emits provider events."""
from __future__ import annotations

import threading
from typing import Any

from openfeature.event import ProviderEvent
from openfeature.exception import ErrorCode
from openfeature.provider import ProviderStatus

from of_launchdarkly.events import EventChannel, ProviderEventPayload

_EVENT_FOR_STATUS: dict[ProviderStatus, ProviderEvent] = {
    ProviderStatus.READY: ProviderEvent.PROVIDER_READY,
    ProviderStatus.STALE: ProviderEvent.PROVIDER_STALE,
    ProviderStatus.ERROR: ProviderEvent.PROVIDER_ERROR,
    ProviderStatus.FATAL: ProviderEvent.PROVIDER_ERROR,
}


class StatusBridge:
    """Tracks the provider's :class:`ProviderStatus` and reports changes.

    Transitions are serialised by a lock. Setting the current status again is
    a no-op. The first accepted transition after construction emits nothing,
    because OpenFeature raises its own ready/error event once ``initialize``
    returns. Later transitions put one payload on the event channel, except
    transitions into ``NOT_READY`` which are silent. ``ERROR`` and ``FATAL``
    both surface as ``PROVIDER_ERROR``; ``FATAL`` carries
    ``ErrorCode.PROVIDER_FATAL``.

    Emission uses :meth:`EventChannel.try_send`: a full or closed channel
    drops the event and logs a warning, so the caller is never blocked.
    """

    def __init__(self, channel: EventChannel, provider_name: str, logger: Any) -> None:
        self._channel = channel
        self._provider_name = provider_name
        self._log = logger
        self._status = ProviderStatus.NOT_READY
        self._transitioned = False
        self._lock = threading.Lock()

    @property
    def status(self) -> ProviderStatus:
        with self._lock:
            return self._status

    def set_status(self, status: ProviderStatus, message: str | None = None) -> bool:
        """Move to *status*; return ``True`` if an event was put on the channel."""
        with self._lock:
            if status == self._status:
                return False
            self._status = status
            if not self._transitioned:
                self._transitioned = True
                return False

            event_type = _EVENT_FOR_STATUS.get(status)
            if event_type is None:
                return False
            error_code = ErrorCode.PROVIDER_FATAL if status == ProviderStatus.FATAL else None
            return self._emit(event_type, message, error_code)

    def _emit(self, event_type: ProviderEvent, message: str | None, error_code: ErrorCode | None) -> bool:
        payload = ProviderEventPayload(
            event_type=event_type,
            provider_name=self._provider_name,
            message=message,
            error_code=error_code,
        )
        if self._channel.try_send(payload):
            return True
        self._log.warning(
            "Provider was unable to write to the event channel for a change in provider status.",
            event_type=event_type.value,
        )
        return False


__all__ = ["StatusBridge"]
