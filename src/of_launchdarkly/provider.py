"""OpenFeature provider backed by the LaunchDarkly server-side SDK."""
from __future__ import annotations

import asyncio
import concurrent.futures
import threading
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ldclient import LDClient
from ldclient.config import Config
from ldclient.evaluation import EvaluationDetail
from ldclient.interfaces import DataSourceState, DataSourceStatus, FlagChange
from openfeature.evaluation_context import EvaluationContext
from openfeature.event import ProviderEvent
from openfeature.exception import ErrorCode
from openfeature.flag_evaluation import FlagResolutionDetails
from openfeature.provider import AbstractProvider, ProviderStatus
from openfeature.provider.metadata import Metadata
from openfeature.track import TrackingEventDetails

from of_launchdarkly.config.settings import ProviderConfiguration
from of_launchdarkly.context import ContextConverter
from of_launchdarkly.errors import LaunchDarklyProviderInitError, ValueConversionError
from of_launchdarkly.events import EventChannel, ProviderEventPayload
from of_launchdarkly.observability.processors import get_logger
from of_launchdarkly.resolution import (
    ERROR_KIND,
    to_resolution_details,
    to_value_detail,
    type_mismatch_detail,
)
from of_launchdarkly.status import StatusBridge
from of_launchdarkly.tracking import to_ld_tracking

NAMESPACE = "OpenFeature.ServerProvider"
PROVIDER_NAME = f"LaunchDarkly.{NAMESPACE}"
INTERRUPTED_MESSAGE = "LaunchDarkly data source interrupted"

# ---------------------------------------------------------------------------
# Type coercion for the single untyped ``variation_detail`` call
# ---------------------------------------------------------------------------

_MISMATCH = object()


def _coerce_bool(value: Any) -> Any:
    return value if isinstance(value, bool) else _MISMATCH


def _coerce_str(value: Any) -> Any:
    return value if isinstance(value, str) else _MISMATCH


def _coerce_int(value: Any) -> Any:
    if isinstance(value, bool):
        return _MISMATCH
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return _MISMATCH


def _coerce_float(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _MISMATCH
    return float(value)


class LaunchDarklyProvider(AbstractProvider):
    """OpenFeature provider delegating evaluation to an :class:`ldclient.LDClient`.

    Args:
        client: A ready-made ``LDClient``, an ``ldclient.config.Config`` or an
            SDK key. The provider builds, and later closes, its own client for
            the last two forms; a client passed in stays owned by the caller.
        config: Provider options; defaults to :class:`ProviderConfiguration`.

    Status and configuration-change events are queued on :attr:`event_channel`.
    Hosts either drain it themselves or call :meth:`dispatch_events` to forward
    the queued events to OpenFeature.

    Example::

        provider = LaunchDarklyProvider("sdk-key")
        api.set_provider(provider)
        client = api.get_client()
        client.get_boolean_value("my-flag", False)
    """

    def __init__(
        self,
        client: LDClient | Config | str,
        config: ProviderConfiguration | None = None,
    ) -> None:
        super().__init__()
        config = config or ProviderConfiguration()
        if isinstance(client, str):
            client = Config(client)
        if isinstance(client, Config):
            self._client = LDClient(client, start_wait=0)
            self._owns_client = True
        else:
            self._client = client
            self._owns_client = False

        self._metadata = Metadata(name=PROVIDER_NAME)
        self._logger_name = (
            f"{config.base_logger_name}.{NAMESPACE}" if config.base_logger_name else PROVIDER_NAME
        )
        self._log = get_logger(self._logger_name)
        self._converter = ContextConverter(self._log)
        self._channel = EventChannel(config.event_channel_capacity)
        self._status = StatusBridge(self._channel, PROVIDER_NAME, self._log)

        # Reentrant: status callbacks settle the init future while holding it.
        self._lock = threading.RLock()
        self._init_future: concurrent.futures.Future[None] | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def client(self) -> LDClient:
        """The underlying LaunchDarkly client, for use outside OpenFeature."""
        return self._client

    @property
    def status(self) -> ProviderStatus:
        return self._status.status

    @property
    def event_channel(self) -> EventChannel:
        return self._channel

    @property
    def logger_name(self) -> str:
        return self._logger_name

    def get_metadata(self) -> Metadata:
        return self._metadata

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def resolve_boolean_details(
        self,
        flag_key: str,
        default_value: bool,
        evaluation_context: EvaluationContext | None = None,
    ) -> FlagResolutionDetails[bool]:
        return self._resolve_primitive(flag_key, default_value, evaluation_context, _coerce_bool)

    def resolve_string_details(
        self,
        flag_key: str,
        default_value: str,
        evaluation_context: EvaluationContext | None = None,
    ) -> FlagResolutionDetails[str]:
        return self._resolve_primitive(flag_key, default_value, evaluation_context, _coerce_str)

    def resolve_integer_details(
        self,
        flag_key: str,
        default_value: int,
        evaluation_context: EvaluationContext | None = None,
    ) -> FlagResolutionDetails[int]:
        return self._resolve_primitive(flag_key, default_value, evaluation_context, _coerce_int)

    def resolve_float_details(
        self,
        flag_key: str,
        default_value: float,
        evaluation_context: EvaluationContext | None = None,
    ) -> FlagResolutionDetails[float]:
        return self._resolve_primitive(flag_key, default_value, evaluation_context, _coerce_float)

    def resolve_object_details(
        self,
        flag_key: str,
        default_value: Sequence[Any] | Mapping[str, Any],
        evaluation_context: EvaluationContext | None = None,
    ) -> FlagResolutionDetails[Sequence[Any] | Mapping[str, Any]]:
        context = self._converter.to_ld_context(evaluation_context)
        detail = self._client.variation_detail(flag_key, context, None)
        if not detail.is_default_value() and not isinstance(detail.value, (dict, list)):
            return to_resolution_details(type_mismatch_detail(default_value), flag_key)
        try:
            detail = to_value_detail(detail, default_value)
        except ValueConversionError as exc:
            return FlagResolutionDetails(
                value=default_value,
                reason=ERROR_KIND,
                error_code=ErrorCode.PARSE_ERROR,
                error_message=exc.message,
            )
        return to_resolution_details(detail, flag_key)

    def _resolve_primitive(
        self,
        flag_key: str,
        default_value: Any,
        evaluation_context: EvaluationContext | None,
        coerce: Callable[[Any], Any],
    ) -> FlagResolutionDetails[Any]:
        context = self._converter.to_ld_context(evaluation_context)
        detail = self._client.variation_detail(flag_key, context, default_value)
        if (detail.reason or {}).get("kind") != ERROR_KIND:
            value = coerce(detail.value)
            if value is _MISMATCH:
                detail = type_mismatch_detail(default_value)
            else:
                detail = EvaluationDetail(value, detail.variation_index, detail.reason)
        return to_resolution_details(detail, flag_key)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(
        self,
        evaluation_context: EvaluationContext | None = None,
        timeout: float | None = None,
    ) -> None:
        """Block until the data source is valid.

        Raises:
            LaunchDarklyProviderInitError: the data source is off, or the
                provider was shut down before it became valid.
            concurrent.futures.TimeoutError: *timeout* elapsed first.
        """
        self._start().result(timeout=timeout)

    async def initialize_async(self, evaluation_context: EvaluationContext | None = None) -> None:
        """Awaitable form of :meth:`initialize`; cancelling the caller leaves initialization running."""
        await asyncio.shield(asyncio.wrap_future(self._start()))

    def _start(self) -> concurrent.futures.Future[None]:
        with self._lock:
            if self._init_future is not None:
                return self._init_future
            future: concurrent.futures.Future[None] = concurrent.futures.Future()
            self._init_future = future
            if self._closed:
                future.set_exception(LaunchDarklyProviderInitError())
                return future

        self._client.flag_tracker.add_listener(self._on_flag_change)
        status_provider = self._client.data_source_status_provider
        status_provider.add_listener(self._on_status_change)
        # Read once after subscribing so a change made in between is not lost.
        current = status_provider.status
        initialized = self._client.is_initialized()

        with self._lock:
            closed = self._closed
            if closed:
                self._log.debug("Provider shut down during initialization")
            elif current.state == DataSourceState.INITIALIZING and initialized:
                self._log.debug("LaunchDarkly client already initialized")
                self._on_ready()
            else:
                self._on_status_change(current)
        if closed:
            # shutdown() ran while subscribing and may have missed these listeners.
            self._unsubscribe()
        return future

    def shutdown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            subscribed = self._init_future is not None
            self._status.set_status(ProviderStatus.NOT_READY)
            self._settle(LaunchDarklyProviderInitError())
            self._channel.close()

        if subscribed:
            self._unsubscribe()
        if self._owns_client:
            self._client.close()
        self._log.info("Provider shut down", owned_client=self._owns_client)

    def _unsubscribe(self) -> None:
        self._client.flag_tracker.remove_listener(self._on_flag_change)
        self._client.data_source_status_provider.remove_listener(self._on_status_change)

    def _settle(self, error: BaseException | None) -> None:
        with self._lock:
            future = self._init_future
            if future is None or future.done():
                return
            if error is None:
                future.set_result(None)
            else:
                future.set_exception(error)

    # ------------------------------------------------------------------
    # Backend callbacks
    # ------------------------------------------------------------------

    def _on_ready(self) -> None:
        self._status.set_status(ProviderStatus.READY)
        self._settle(None)

    def _on_status_change(self, status: DataSourceStatus) -> None:
        # Held for the whole transition so shutdown() always has the last word.
        with self._lock:
            if self._closed:
                return
            state = status.state
            self._log.debug("LaunchDarkly data source status changed", state=state.value)
            if state == DataSourceState.VALID:
                self._on_ready()
            elif state == DataSourceState.INTERRUPTED:
                error = status.error
                message = error.message if error is not None and error.message else INTERRUPTED_MESSAGE
                self._status.set_status(ProviderStatus.STALE, message)
            elif state == DataSourceState.OFF:
                self._log.error("LaunchDarkly data source is permanently off")
                self._status.set_status(ProviderStatus.FATAL, LaunchDarklyProviderInitError().message)
                self._settle(LaunchDarklyProviderInitError())

    def _on_flag_change(self, change: FlagChange) -> None:
        payload = ProviderEventPayload(
            event_type=ProviderEvent.PROVIDER_CONFIGURATION_CHANGED,
            provider_name=PROVIDER_NAME,
            flags_changed=(change.key,),
        )
        if not self._channel.try_send(payload):
            self._log.warning(
                "Provider was unable to write to the event channel for a flag change.",
                flag_key=change.key,
            )

    def dispatch_events(self) -> int:
        """Forward every queued event through :meth:`emit`; return how many were sent."""
        payloads = self._channel.drain()
        for payload in payloads:
            self.emit(payload.event_type, payload.to_details())
        return len(payloads)

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def track(
        self,
        tracking_event_name: str,
        evaluation_context: EvaluationContext | None = None,
        tracking_event_details: TrackingEventDetails | None = None,
    ) -> None:
        context = self._converter.to_ld_context(evaluation_context)
        try:
            metric_value, data = to_ld_tracking(tracking_event_details)
        except ValueConversionError as exc:
            self._log.error(
                "Tracking event attributes could not be converted and will be dropped.",
                event_name=tracking_event_name,
                value_type=exc.value_type,
            )
            metric_value, data = tracking_event_details.value, None

        if metric_value is not None and data is not None:
            self._client.track(tracking_event_name, context, data, metric_value)
        elif metric_value is not None:
            self._client.track(tracking_event_name, context, metric_value=metric_value)
        elif data is not None:
            self._client.track(tracking_event_name, context, data)
        else:
            self._client.track(tracking_event_name, context)


__all__ = ["INTERRUPTED_MESSAGE", "LaunchDarklyProvider", "NAMESPACE", "PROVIDER_NAME"]
