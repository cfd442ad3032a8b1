"""Request handlers - one per capability.

Each request moves RECEIVED -> VALIDATED -> UPSTREAM_CALLED -> RESPONDED, or to
ERROR from any state. Validation happens before any upstream call; every
failure leaves as a GatewayError carrying the caller-facing message.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from backend.gateway.errors import (
    ConfigurationError,
    GatewayError,
    NormalizationError,
    NormalizationErrorKind,
    ParameterValidationError,
    UpstreamTransportError,
)
from backend.gateway.models.common import (
    CallerRequest,
    Capability,
    NormalizedPayload,
    TargetDescriptor,
)
from backend.gateway.upstream.client import UpstreamClient
from backend.gateway.upstream.forecast_window import resolve_forecast_window
from backend.gateway.upstream.normalizer import normalize
from backend.gateway.upstream.request_builder import AUTH_KEY, build_request_url
from backend.gateway.utils.logging import StructuredUpstreamLogger
from backend.gateway.utils.metrics import PrometheusUpstreamMetrics

logger = logging.getLogger(__name__)


class HandlerState(str, Enum):
    """Lifecycle of one request."""

    RECEIVED = "received"
    VALIDATED = "validated"
    UPSTREAM_CALLED = "upstream_called"
    RESPONDED = "responded"
    ERROR = "error"


@dataclass(frozen=True)
class CapabilityRule:
    """Parameter rules and caller-facing wording for a capability."""

    capability: Capability
    label: str
    required: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    missing_message: str = ""
    uses_forecast_window: bool = False

    def missing_parameters(self, request: CallerRequest) -> list[str]:
        """Return the parameter names that must be supplied but were not."""
        missing = [name for name in self.required if request.value(name) is None]
        if self.any_of and all(request.value(name) is None for name in self.any_of):
            missing.extend(self.any_of)
        return missing


RULES: dict[Capability, CapabilityRule] = {
    Capability.FERTILIZER: CapabilityRule(
        capability=Capability.FERTILIZER,
        label="fertilizer",
        required=("cropCode",),
        missing_message="Please provide a crop code (cropCode).",
    ),
    Capability.WEATHER_FORECAST: CapabilityRule(
        capability=Capability.WEATHER_FORECAST,
        label="weather forecast",
        required=("regId",),
        missing_message="Please provide a region code (regId).",
        uses_forecast_window=True,
    ),
    Capability.WEATHER_OBSERVATION: CapabilityRule(
        capability=Capability.WEATHER_OBSERVATION,
        label="weather observation",
        required=("spotCode", "date"),
        missing_message="Please provide an observation spot code (spotCode) and a date (date).",
    ),
    Capability.PEST: CapabilityRule(
        capability=Capability.PEST,
        label="pest",
        any_of=("cropName", "pestName"),
        missing_message="Please provide a crop name (cropName) or a pest name (pestName).",
    ),
}


class CapabilityHandler:
    """Validate, call the capability's upstream, and normalize its answer."""

    def __init__(
        self,
        rule: CapabilityRule,
        target: TargetDescriptor,
        credential: str,
        credential_env: str,
        client: UpstreamClient,
        clock: Callable[[], datetime],
        upstream_logger: StructuredUpstreamLogger | None = None,
        metrics: PrometheusUpstreamMetrics | None = None,
    ) -> None:
        """Initialize handler.

        Args:
            rule: Validation rule and wording for the capability
            target: Upstream target descriptor
            credential: Key sent to the upstream (empty when not configured)
            credential_env: Env var that supplies the key, for error messages
            client: Upstream client
            clock: Returns the current local date-time
            upstream_logger: Structured logger (optional)
            metrics: Metrics recorder (optional)
        """
        self._rule = rule
        self._target = target
        self._credential = credential.strip()
        self._credential_env = credential_env
        self._client = client
        self._clock = clock
        self._upstream_logger = upstream_logger or StructuredUpstreamLogger()
        self._metrics = metrics or PrometheusUpstreamMetrics()
        self.state = HandlerState.RECEIVED

    @property
    def capability(self) -> Capability:
        return self._rule.capability

    async def handle(self, request: CallerRequest) -> NormalizedPayload:
        """Run one request through the handler.

        Returns:
            The normalized upstream payload

        Raises:
            GatewayError: Any failure, already classified for the caller
        """
        self.state = HandlerState.RECEIVED
        try:
            params = self._validate(request)
            self._transition(HandlerState.VALIDATED)

            payload = await self._call_upstream(params)
        except GatewayError:
            self._transition(HandlerState.ERROR)
            raise

        self._transition(HandlerState.RESPONDED)
        return payload

    def _validate(self, request: CallerRequest) -> dict[str, str | None]:
        if not self._credential:
            raise ConfigurationError(
                f"The {self._rule.label} service is unavailable: "
                f"{self._credential_env} is not configured."
            )

        missing = self._rule.missing_parameters(request)
        if missing:
            self._metrics.inc_rejection(self.capability.value)
            raise ParameterValidationError(self._rule.missing_message, missing=missing)

        params: dict[str, str | None] = {
            name: request.value(name) for name in self._target.query_param_map
        }
        params[AUTH_KEY] = self._credential
        if self._rule.uses_forecast_window:
            params["tmFc"] = resolve_forecast_window(self._clock()).reference_timestamp
        return params

    async def _call_upstream(self, params: dict[str, str | None]) -> NormalizedPayload:
        url = build_request_url(self._target, params)
        start = time.monotonic()

        try:
            response = await self._client.fetch(url, self._target.response_format)
            self._transition(HandlerState.UPSTREAM_CALLED)
            payload = normalize(response, self._target)
        except UpstreamTransportError as e:
            self._record_failure(start, e.reason, e)
            raise UpstreamTransportError(
                f"Failed to retrieve {self._rule.label} data.", reason=e.reason
            ) from e
        except NormalizationError as e:
            self._record_failure(start, e.kind.value, e)
            raise NormalizationError(e.kind, self._normalization_message(e.kind)) from e

        elapsed_ms = (time.monotonic() - start) * 1000
        self._metrics.record_latency(self.capability.value, "success", elapsed_ms)
        self._upstream_logger.log_call(self.capability, "success", elapsed_ms)
        return payload

    def _normalization_message(self, kind: NormalizationErrorKind) -> str:
        if kind == NormalizationErrorKind.MALFORMED:
            return (
                f"Invalid upstream response: the {self._rule.label} service "
                "sent a malformed response."
            )
        return (
            f"Invalid upstream response: the {self._rule.label} service "
            "returned no usable data."
        )

    def _record_failure(self, start: float, reason: str, error: GatewayError) -> None:
        elapsed_ms = (time.monotonic() - start) * 1000
        cause = error.message
        if isinstance(error, NormalizationError) and error.upstream_message:
            cause = f"{cause}: {error.upstream_message}"
        self._metrics.record_latency(self.capability.value, "error", elapsed_ms)
        self._metrics.inc_error(self.capability.value, reason)
        self._upstream_logger.log_call(
            self.capability, "error", elapsed_ms, error_reason=reason, cause=cause
        )

    def _transition(self, state: HandlerState) -> None:
        logger.debug("%s handler: %s -> %s", self.capability.value, self.state.value, state.value)
        self.state = state
