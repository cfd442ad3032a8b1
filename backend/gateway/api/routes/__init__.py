"""API routers."""

from typing import Any

from backend.gateway.models.common import ErrorResponse

# OpenAPI documentation for the error bodies every capability route can return
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing or empty required parameter"},
    500: {"model": ErrorResponse, "description": "Upstream, parsing or configuration failure"},
}
