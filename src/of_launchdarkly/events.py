"""Provider events – payload type and the bounded per-provider event channel."""
from __future__ import annotations

import queue
import threading
from dataclasses import dataclass

from openfeature.event import ProviderEvent, ProviderEventDetails
from openfeature.exception import ErrorCode

from of_launchdarkly.config.settings import DEFAULT_EVENT_CHANNEL_CAPACITY


@dataclass(frozen=True)
class ProviderEventPayload:
    """A provider lifecycle or configuration-change notification."""

    event_type: ProviderEvent
    provider_name: str
    message: str | None = None
    flags_changed: tuple[str, ...] | None = None
    error_code: ErrorCode | None = None

    def to_details(self) -> ProviderEventDetails:
        return ProviderEventDetails(
            flags_changed=list(self.flags_changed) if self.flags_changed is not None else None,
            message=self.message,
            error_code=self.error_code,
        )


class EventChannel:
    """Bounded FIFO of :class:`ProviderEventPayload` drained by the host.

    Producers use :meth:`try_send`, which never blocks: a full or closed
    channel rejects the payload and returns ``False``. Consumers call
    :meth:`receive` or :meth:`drain`. After :meth:`close`, already queued
    payloads can still be received.
    """

    def __init__(self, capacity: int = DEFAULT_EVENT_CHANNEL_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._queue: queue.Queue[ProviderEventPayload] = queue.Queue(maxsize=capacity)
        self._closed = threading.Event()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __len__(self) -> int:
        return self._queue.qsize()

    def try_send(self, payload: ProviderEventPayload) -> bool:
        if self._closed.is_set():
            return False
        try:
            self._queue.put_nowait(payload)
        except queue.Full:
            return False
        return True

    def receive(self, timeout: float | None = None) -> ProviderEventPayload | None:
        """Return the next payload, or ``None`` once *timeout* elapses.

        A closed channel never blocks: it yields what is left, then ``None``.
        """
        if self._closed.is_set():
            timeout = 0
        try:
            if timeout == 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[ProviderEventPayload]:
        """Remove and return every payload currently queued."""
        items: list[ProviderEventPayload] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items

    def close(self) -> None:
        self._closed.set()


__all__ = ["EventChannel", "ProviderEventPayload"]
