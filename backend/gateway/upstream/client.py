"""Upstream HTTP client - issues the outbound call, never interprets the payload."""

import asyncio
import logging

import httpx

from backend.gateway.errors import UpstreamTransportError
from backend.gateway.models.common import ResponseFormat, UpstreamResponse

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Single-shot GET against an upstream with a hard timeout.

    No retries: one failure is surfaced immediately.
    """

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize client.

        Args:
            timeout_seconds: Hard bound on the whole call, connect through body
            client: Optional httpx client (for testing with mocks)
        """
        self._timeout_seconds = timeout_seconds
        self._client = client

    async def fetch(self, url: str, body_format: ResponseFormat) -> UpstreamResponse:
        """GET ``url`` and return its status and body text.

        Raises:
            UpstreamTransportError: On network errors, non-2xx status or timeout
        """
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_seconds)
            close_client = True

        try:
            response = await asyncio.wait_for(client.get(url), timeout=self._timeout_seconds)
            response.raise_for_status()
            return UpstreamResponse(
                status_code=response.status_code,
                body_format=body_format,
                raw_body=response.text,
            )
        except (TimeoutError, httpx.TimeoutException) as e:
            raise UpstreamTransportError(
                f"Upstream did not answer within {self._timeout_seconds}s", reason="timeout"
            ) from e
        except httpx.HTTPStatusError as e:
            raise UpstreamTransportError(
                f"Upstream answered HTTP {e.response.status_code}", reason="http_status"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamTransportError(
                f"Upstream request failed: {type(e).__name__}", reason="network"
            ) from e
        finally:
            if close_client:
                await client.aclose()
