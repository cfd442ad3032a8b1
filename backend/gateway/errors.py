"""Gateway error taxonomy.

Every failure a request can end in is one of these. They are raised inside the
request handler and rendered to ``{"error", "code"}`` bodies by the exception
handler registered in ``main``.
"""

from enum import Enum

from fastapi import status


class GatewayError(Exception):
    """Base class for failures surfaced to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParameterValidationError(GatewayError):
    """Required query parameter missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "missing_parameter"

    def __init__(self, message: str, missing: list[str]) -> None:
        super().__init__(message)
        self.missing = missing


class ConfigurationError(GatewayError):
    """Credential for a capability is not configured."""

    code = "capability_unavailable"


class UpstreamTransportError(GatewayError):
    """Network failure, non-2xx status, or timeout talking to an upstream.

    ``reason`` is one of ``timeout``, ``http_status`` or ``network``.
    """

    code = "upstream_unavailable"

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


class NormalizationErrorKind(str, Enum):
    """Why an upstream body could not be reduced to a payload."""

    MALFORMED = "malformed"
    PATH_NOT_FOUND = "path_not_found"
    UPSTREAM_ERROR_ENVELOPE = "upstream_error_envelope"


class NormalizationError(GatewayError):
    """Upstream body is unparseable or lacks the payload path."""

    def __init__(
        self,
        kind: NormalizationErrorKind,
        message: str,
        upstream_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.upstream_message = upstream_message

    @property
    def code(self) -> str:  # type: ignore[override]
        if self.kind == NormalizationErrorKind.MALFORMED:
            return "malformed_response"
        return "no_data"


class RequestBuildError(RuntimeError):
    """A value the request builder needs was never supplied.

    Programming error: handlers validate parameters before building.
    """
