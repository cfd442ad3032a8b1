"""Structured logging for upstream calls."""

import logging
from typing import Any

from backend.gateway.models.common import Capability

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class StructuredUpstreamLogger:
    """Structured logger for upstream calls."""

    def log_call(
        self,
        capability: Capability,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
        cause: str | None = None,
    ) -> None:
        """Log one upstream call with structured data."""
        log_data: dict[str, Any] = {
            "capability": capability.value,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason
        if cause:
            log_data["cause"] = cause

        log_msg = f"Upstream call: {capability.value} - {outcome}"
        if cause:
            log_msg = f"{log_msg} ({cause})"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
