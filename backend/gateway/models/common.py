"""Common types and enums shared across the gateway."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

# Whatever value sits at the end of a target's payload path.
NormalizedPayload = Any


class Capability(str, Enum):
    """Logical operation offered to callers, one per upstream target."""

    FERTILIZER = "fertilizer"
    WEATHER_FORECAST = "weather_forecast"
    WEATHER_OBSERVATION = "weather_observation"
    PEST = "pest"


class ResponseFormat(str, Enum):
    """Serialization format an upstream answers in."""

    XML = "xml"
    JSON = "json"


@dataclass(frozen=True)
class TargetDescriptor:
    """How to call one upstream and where its payload lives.

    query_param_map maps logical parameter names to upstream parameter names,
    in the order they are emitted.
    """

    capability: Capability
    base_url: str
    auth_key_name: str
    query_param_map: Mapping[str, str]
    response_format: ResponseFormat
    payload_path: tuple[str, ...]
    fixed_params: Mapping[str, str] = field(default_factory=dict)
    optional_params: frozenset[str] = frozenset()


@dataclass(frozen=True)
class CallerRequest:
    """One inbound request, reduced to its capability and raw query values."""

    capability: Capability
    parameters: Mapping[str, str | None]

    def value(self, name: str) -> str | None:
        """Return the stripped value of a parameter, or None when absent or blank."""
        raw = self.parameters.get(name)
        if raw is None:
            return None
        stripped = raw.strip()
        return stripped or None


@dataclass(frozen=True)
class ForecastWindow:
    """Forecast bulletin the mid-range upstream has most recently published."""

    reference_timestamp: str  # YYYYMMDDHHmm


@dataclass(frozen=True)
class UpstreamResponse:
    """Raw upstream answer; raw_body is text or an already-parsed JSON value."""

    status_code: int
    body_format: ResponseFormat
    raw_body: Any


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str
    code: str
