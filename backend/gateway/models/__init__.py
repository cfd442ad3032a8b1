"""Models package - re-exports for convenience."""

from backend.gateway.models.common import (
    CallerRequest,
    Capability,
    ErrorResponse,
    ForecastWindow,
    NormalizedPayload,
    ResponseFormat,
    TargetDescriptor,
    UpstreamResponse,
)

__all__ = [
    # Enums
    "Capability",
    "ResponseFormat",
    # Upstream
    "TargetDescriptor",
    "UpstreamResponse",
    "ForecastWindow",
    "NormalizedPayload",
    # Caller
    "CallerRequest",
    "ErrorResponse",
]
