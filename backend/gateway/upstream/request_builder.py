"""Outbound request URL construction."""

from collections.abc import Mapping

import httpx

from backend.gateway.errors import RequestBuildError
from backend.gateway.models.common import TargetDescriptor

# Logical name under which the resolved credential is passed to the builder.
AUTH_KEY = "authKey"


def build_request_url(target: TargetDescriptor, params: Mapping[str, str | None]) -> str:
    """Build the fully-qualified upstream URL for a target.

    Emits the auth parameter first, then ``target.query_param_map`` in
    declaration order, then ``target.fixed_params``. Values are URL-encoded.

    Args:
        target: Upstream target descriptor
        params: Logical parameter values, including AUTH_KEY and computed values

    Returns:
        Request URL with query string

    Raises:
        RequestBuildError: If a required value is absent
    """
    query: list[tuple[str, str]] = [(target.auth_key_name, _require(params, AUTH_KEY))]

    for logical_name, upstream_name in target.query_param_map.items():
        value = params.get(logical_name)
        if value is None and logical_name in target.optional_params:
            value = ""
        elif value is None:
            value = _require(params, logical_name)
        query.append((upstream_name, value))

    query.extend(target.fixed_params.items())

    return str(httpx.URL(target.base_url, params=query))


def _require(params: Mapping[str, str | None], name: str) -> str:
    value = params.get(name)
    if value is None:
        raise RequestBuildError(f"No value supplied for required parameter {name!r}")
    return value
