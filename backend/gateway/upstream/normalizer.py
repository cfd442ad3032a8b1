"""Envelope normalization - reduce heterogeneous upstream bodies to their payload.

Upstreams bury their data at different depths (``response.body.items.item``,
``response.body.items``, ``service.list``). Each target declares a payload path;
the normalizer parses the body into a tree and descends that path. A missing
step means the upstream sent something other than a data envelope, usually an
error document.
"""

import json
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from typing import Any

from backend.gateway.errors import NormalizationError, NormalizationErrorKind
from backend.gateway.models.common import (
    NormalizedPayload,
    ResponseFormat,
    TargetDescriptor,
    UpstreamResponse,
)

# data.go.kr result codes that mean "no error"
_SUCCESS_RESULT_CODES = {"00", "0"}


def normalize(response: UpstreamResponse, target: TargetDescriptor) -> NormalizedPayload:
    """Extract the payload at ``target.payload_path`` from an upstream response.

    Args:
        response: Raw upstream response
        target: Target descriptor naming format and payload path

    Returns:
        The value at the end of the path, unmodified

    Raises:
        NormalizationError: MALFORMED if the body cannot be parsed,
            UPSTREAM_ERROR_ENVELOPE if the body is a recognised error document,
            PATH_NOT_FOUND if any other step of the path is missing
    """
    tree = parse_body(response.raw_body, target.response_format)

    found, payload = descend(tree, target.payload_path)
    if not found:
        upstream_message = detect_error_envelope(tree)
        if upstream_message is not None:
            raise NormalizationError(
                NormalizationErrorKind.UPSTREAM_ERROR_ENVELOPE,
                f"{target.capability.value} upstream returned an error envelope",
                upstream_message=upstream_message,
            )
        raise NormalizationError(
            NormalizationErrorKind.PATH_NOT_FOUND,
            f"{target.capability.value} payload path {'.'.join(target.payload_path)} not found",
        )
    return payload


def parse_body(raw_body: Any, response_format: ResponseFormat) -> Any:
    """Parse a raw body into a JSON-compatible tree."""
    if response_format == ResponseFormat.XML:
        if not isinstance(raw_body, str | bytes):
            raise NormalizationError(
                NormalizationErrorKind.MALFORMED, "Expected XML text from upstream"
            )
        return xml_to_tree(raw_body)

    if not isinstance(raw_body, str | bytes):
        # Already a parsed JSON value
        return raw_body

    try:
        return json.loads(raw_body)
    except ValueError as e:
        # data.go.kr answers auth failures with XML even when JSON was requested
        if _looks_like_xml(raw_body):
            return xml_to_tree(raw_body)
        raise NormalizationError(
            NormalizationErrorKind.MALFORMED, f"Upstream body is not valid JSON: {e}"
        ) from e


def xml_to_tree(text: str | bytes) -> dict[str, Any]:
    """Convert an XML document to nested dicts keyed by tag name.

    Repeated child tags become lists in document order, leaves become their
    stripped text, attributes are dropped. No type coercion is applied.

    Raises:
        NormalizationError: MALFORMED if the document cannot be parsed
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise NormalizationError(
            NormalizationErrorKind.MALFORMED, f"Upstream body is not valid XML: {e}"
        ) from e
    return {root.tag: _element_value(root)}


def _element_value(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        return (element.text or "").strip()

    value: dict[str, Any] = {}
    for child in children:
        child_value = _element_value(child)
        if child.tag not in value:
            value[child.tag] = child_value
        elif isinstance(value[child.tag], list):
            value[child.tag].append(child_value)
        else:
            value[child.tag] = [value[child.tag], child_value]
    return value


def descend(tree: Any, path: Sequence[str]) -> tuple[bool, Any]:
    """Walk ``path`` through nested dicts.

    Returns:
        (found, value) - found is False as soon as a step is missing
    """
    node = tree
    for step in path:
        if not isinstance(node, dict) or step not in node:
            return (False, None)
        node = node[step]
    return (True, node)


def detect_error_envelope(tree: Any) -> str | None:
    """Return the upstream's error message if ``tree`` is a known error document."""
    if not isinstance(tree, dict):
        return None

    # data.go.kr gateway errors (bad key, quota, unregistered service)
    service_response = tree.get("OpenAPI_ServiceResponse")
    if isinstance(service_response, dict):
        header = service_response.get("cmmMsgHeader", {})
        if isinstance(header, dict):
            return str(
                header.get("returnAuthMsg") or header.get("errMsg") or "OpenAPI service error"
            )
        return "OpenAPI service error"

    # data.go.kr application errors
    _, header = descend(tree, ("response", "header"))
    if isinstance(header, dict):
        result_code = str(header.get("resultCode", "")).strip()
        if result_code and result_code not in _SUCCESS_RESULT_CODES:
            return f"{result_code}: {header.get('resultMsg', '')}".strip()

    # NCPMS errors
    service = tree.get("service")
    if isinstance(service, dict):
        error_message = service.get("errorMsg") or service.get("errorCode")
        if error_message:
            return str(error_message)

    return None


def _looks_like_xml(text: str | bytes) -> bool:
    head = text.lstrip()[:1]
    return head in ("<", b"<")
