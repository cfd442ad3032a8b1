"""FastAPI dependencies - settings, upstream client, clock and handlers.

Tests substitute any of these through ``app.dependency_overrides``.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends

from backend.gateway.config import CREDENTIAL_ENV, Settings, get_settings
from backend.gateway.handlers import RULES, CapabilityHandler
from backend.gateway.models.common import Capability
from backend.gateway.upstream.client import UpstreamClient
from backend.gateway.upstream.targets import build_targets

Clock = Callable[[], datetime]


def get_upstream_client(settings: Annotated[Settings, Depends(get_settings)]) -> UpstreamClient:
    """Upstream client bounded by the configured timeout."""
    return UpstreamClient(timeout_seconds=settings.upstream_timeout_seconds)


def get_clock(settings: Annotated[Settings, Depends(get_settings)]) -> Clock:
    """Wall clock in the configured local zone."""
    zone = ZoneInfo(settings.timezone)
    return lambda: datetime.now(zone)


def build_handler(
    capability: Capability,
    settings: Settings,
    client: UpstreamClient,
    clock: Clock,
) -> CapabilityHandler:
    """Wire a handler for one capability from settings and collaborators."""
    return CapabilityHandler(
        rule=RULES[capability],
        target=build_targets(settings)[capability],
        credential=settings.credential_for(capability),
        credential_env=CREDENTIAL_ENV[capability],
        client=client,
        clock=clock,
    )


def handler_for(capability: Capability) -> Callable[..., CapabilityHandler]:
    """Create a dependency that yields the handler for ``capability``."""

    def dependency(
        settings: Annotated[Settings, Depends(get_settings)],
        client: Annotated[UpstreamClient, Depends(get_upstream_client)],
        clock: Annotated[Clock, Depends(get_clock)],
    ) -> CapabilityHandler:
        return build_handler(capability, settings, client, clock)

    return dependency
