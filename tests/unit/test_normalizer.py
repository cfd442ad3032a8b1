"""Tests for envelope normalization."""

import json

import pytest

from backend.gateway.errors import NormalizationError, NormalizationErrorKind
from backend.gateway.models.common import (
    Capability,
    ResponseFormat,
    TargetDescriptor,
    UpstreamResponse,
)
from backend.gateway.upstream.normalizer import (
    descend,
    detect_error_envelope,
    normalize,
    xml_to_tree,
)
from tests.upstream_samples import AUTH_FAILURE_XML, FERTILIZER_XML, MID_TA_JSON, PEST_XML


def make_target(
    response_format: ResponseFormat, payload_path: tuple[str, ...]
) -> TargetDescriptor:
    return TargetDescriptor(
        capability=Capability.FERTILIZER,
        base_url="https://example.test",
        auth_key_name="serviceKey",
        query_param_map={},
        response_format=response_format,
        payload_path=payload_path,
    )


ITEM_PATH = ("response", "body", "items", "item")


class TestJsonEnvelopes:
    """JSON bodies, parsed or as text."""

    def test_returns_inner_array_unchanged(self) -> None:
        items = [{"a": 1}, {"a": 2, "nested": {"b": None}}]
        tree = {"response": {"body": {"items": {"item": items}}}}
        response = UpstreamResponse(200, ResponseFormat.JSON, tree)

        payload = normalize(response, make_target(ResponseFormat.JSON, ITEM_PATH))

        assert payload == items
        assert payload is items

    def test_parses_json_text(self) -> None:
        response = UpstreamResponse(200, ResponseFormat.JSON, json.dumps(MID_TA_JSON))

        payload = normalize(
            response, make_target(ResponseFormat.JSON, ("response", "body", "items"))
        )

        assert payload == {"item": [{"regId": "11B00000", "taMin4": 12, "taMax4": 23}]}

    def test_scalar_payload_returned_as_is(self) -> None:
        response = UpstreamResponse(200, ResponseFormat.JSON, {"service": {"count": 0}})

        assert normalize(response, make_target(ResponseFormat.JSON, ("service", "count"))) == 0

    def test_missing_body_is_path_not_found(self) -> None:
        tree = {"response": {"header": {"resultCode": "00"}}}
        response = UpstreamResponse(200, ResponseFormat.JSON, tree)

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.JSON, ITEM_PATH))

        assert exc_info.value.kind == NormalizationErrorKind.PATH_NOT_FOUND
        assert exc_info.value.code == "no_data"

    def test_step_through_non_object_is_path_not_found(self) -> None:
        tree = {"response": {"body": {"items": ""}}}
        response = UpstreamResponse(200, ResponseFormat.JSON, tree)

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.JSON, ITEM_PATH))

        assert exc_info.value.kind == NormalizationErrorKind.PATH_NOT_FOUND

    def test_unparseable_json_text_is_malformed(self) -> None:
        response = UpstreamResponse(200, ResponseFormat.JSON, "{not json")

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.JSON, ITEM_PATH))

        assert exc_info.value.kind == NormalizationErrorKind.MALFORMED
        assert exc_info.value.code == "malformed_response"

    def test_non_success_result_code_is_error_envelope(self) -> None:
        tree = {"response": {"header": {"resultCode": "03", "resultMsg": "NO_DATA"}}}
        response = UpstreamResponse(200, ResponseFormat.JSON, tree)

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.JSON, ITEM_PATH))

        assert exc_info.value.kind == NormalizationErrorKind.UPSTREAM_ERROR_ENVELOPE
        assert exc_info.value.upstream_message == "03: NO_DATA"
        assert exc_info.value.code == "no_data"

    def test_xml_auth_failure_on_json_target_is_error_envelope(self) -> None:
        response = UpstreamResponse(200, ResponseFormat.JSON, AUTH_FAILURE_XML)

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.JSON, ITEM_PATH))

        assert exc_info.value.kind == NormalizationErrorKind.UPSTREAM_ERROR_ENVELOPE
        assert exc_info.value.upstream_message == "SERVICE_KEY_IS_NOT_REGISTERED_ERROR"


class TestXmlEnvelopes:
    """XML bodies converted to trees."""

    def test_repeated_items_become_list(self) -> None:
        response = UpstreamResponse(200, ResponseFormat.XML, FERTILIZER_XML)

        payload = normalize(response, make_target(ResponseFormat.XML, ITEM_PATH))

        assert payload == [
            {"crop_Code": "01", "crop_Nm": "벼", "fstd_Nitrogen": "9"},
            {"crop_Code": "01", "crop_Nm": "벼", "fstd_Nitrogen": "11"},
        ]

    def test_pest_list_path(self) -> None:
        response = UpstreamResponse(200, ResponseFormat.XML, PEST_XML)

        payload = normalize(response, make_target(ResponseFormat.XML, ("service", "list")))

        assert payload["item"][0]["sickNameKor"] == "탄저병"
        assert payload["item"][1]["sickKey"] == "D00002"

    def test_unparseable_xml_is_malformed(self) -> None:
        response = UpstreamResponse(200, ResponseFormat.XML, "<response><body></response>")

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.XML, ITEM_PATH))

        assert exc_info.value.kind == NormalizationErrorKind.MALFORMED

    def test_non_text_body_on_xml_target_is_malformed(self) -> None:
        response = UpstreamResponse(200, ResponseFormat.XML, {"response": {}})

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.XML, ITEM_PATH))

        assert exc_info.value.kind == NormalizationErrorKind.MALFORMED

    def test_empty_items_is_path_not_found(self) -> None:
        body = (
            "<response><header><resultCode>00</resultCode></header>"
            "<body><items/><totalCount>0</totalCount></body></response>"
        )
        response = UpstreamResponse(200, ResponseFormat.XML, body)

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.XML, ITEM_PATH))

        assert exc_info.value.kind == NormalizationErrorKind.PATH_NOT_FOUND

    def test_ncpms_error_is_error_envelope(self) -> None:
        body = "<service><errorCode>ERR_001</errorCode><errorMsg>bad apiKey</errorMsg></service>"
        response = UpstreamResponse(200, ResponseFormat.XML, body)

        with pytest.raises(NormalizationError) as exc_info:
            normalize(response, make_target(ResponseFormat.XML, ("service", "list")))

        assert exc_info.value.kind == NormalizationErrorKind.UPSTREAM_ERROR_ENVELOPE
        assert exc_info.value.upstream_message == "bad apiKey"


def test_normalize_is_idempotent() -> None:
    """Normalizing the same input twice yields identical output."""
    response = UpstreamResponse(200, ResponseFormat.XML, FERTILIZER_XML)
    target = make_target(ResponseFormat.XML, ITEM_PATH)

    assert normalize(response, target) == normalize(response, target)


class TestXmlToTree:
    """XML conversion rules."""

    def test_single_child_stays_object(self) -> None:
        tree = xml_to_tree("<a><b><c>1</c></b></a>")
        assert tree == {"a": {"b": {"c": "1"}}}

    def test_three_repeats_keep_document_order(self) -> None:
        tree = xml_to_tree("<a><i>1</i><i>2</i><i>3</i></a>")
        assert tree == {"a": {"i": ["1", "2", "3"]}}

    def test_leading_zeros_and_whitespace(self) -> None:
        tree = xml_to_tree("<a><code> 007 </code><empty/></a>")
        assert tree == {"a": {"code": "007", "empty": ""}}

    def test_attributes_are_dropped(self) -> None:
        tree = xml_to_tree('<a version="2"><b id="x">v</b></a>')
        assert tree == {"a": {"b": "v"}}

    def test_bytes_input(self) -> None:
        tree = xml_to_tree("<a><b>고추</b></a>".encode())
        assert tree == {"a": {"b": "고추"}}


def test_descend_reports_found_flag() -> None:
    assert descend({"a": {"b": None}}, ("a", "b")) == (True, None)
    assert descend({"a": {}}, ("a", "b")) == (False, None)
    assert descend({"a": 1}, ()) == (True, {"a": 1})


def test_detect_error_envelope_ignores_data_documents() -> None:
    assert detect_error_envelope({"response": {"header": {"resultCode": "00"}}}) is None
    assert detect_error_envelope(["not", "a", "dict"]) is None
