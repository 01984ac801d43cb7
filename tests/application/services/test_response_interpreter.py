from __future__ import annotations

import json
from datetime import timedelta

import pytest

from application.ports.http_client import HttpResponse
from application.services.response_interpreter import ResponseInterpreter, decode_body, json_text
from domain.exceptions import ContentError, InvalidJsonPathError
from domain.steps.http import Method, RequestTemplate


def _template(extractors=None, method=Method.GET) -> RequestTemplate:
    return RequestTemplate(name="req", uri="https://x.test", method=method, extractors=extractors)


def _json(payload, status=200, content_type="application/json") -> HttpResponse:
    return HttpResponse(
        status=status,
        headers={"Content-Type": content_type},
        content=json.dumps(payload).encode("utf-8"),
        time_to_headers=timedelta(milliseconds=4),
        time_total=timedelta(milliseconds=9),
    )


def test_string_values_are_unwrapped_and_others_become_compact_json() -> None:
    payload = {"token": "abc", "count": 3, "items": [1, {"a": True}], "nothing": None}
    template = _template(
        {"token": "$.token", "count": "$.count", "items": "$.items", "nothing": "$.nothing"}
    )

    response = ResponseInterpreter().interpret(template, _json(payload))

    assert response.extracted_variables == {
        "token": "abc",
        "count": "3",
        "items": '[1,{"a":true}]',
        "nothing": "null",
    }


def test_first_match_is_used() -> None:
    payload = {"users": [{"id": "u1"}, {"id": "u2"}]}

    response = ResponseInterpreter().interpret(_template({"first": "$.users[*].id"}), _json(payload))

    assert response.extracted_variables == {"first": "u1"}


def test_filter_expression() -> None:
    payload = {"users": [{"id": "u1", "role": "user"}, {"id": "u2", "role": "admin"}]}

    response = ResponseInterpreter().interpret(
        _template({"admin": "$.users[?role = 'admin'].id"}),
        _json(payload),
    )

    assert response.extracted_variables == {"admin": "u2"}


def test_no_match_yields_unset_variable() -> None:
    response = ResponseInterpreter().interpret(_template({"missing": "$.nope"}), _json({"a": 1}))

    assert response.extracted_variables == {"missing": None}


def test_json_content_type_with_charset_is_accepted() -> None:
    response = ResponseInterpreter().interpret(
        _template({"a": "$.a"}),
        _json({"a": "x"}, content_type="application/json; charset=utf-8"),
    )

    assert response.extracted_variables == {"a": "x"}


def test_non_json_response_skips_extraction() -> None:
    raw = HttpResponse(status=200, headers={"Content-Type": "text/html"}, content=b"<html></html>")

    response = ResponseInterpreter().interpret(_template({"a": "$.a"}), raw)

    assert response.extracted_variables == {}
    assert response.body == "<html></html>"


def test_malformed_json_is_a_content_error() -> None:
    raw = HttpResponse(status=200, headers={"content-type": "application/json"}, content=b"{not json")

    with pytest.raises(ContentError) as excinfo:
        ResponseInterpreter().interpret(_template({"a": "$.a"}), raw)

    assert excinfo.value.request_name == "req"
    assert excinfo.value.code == "content"


@pytest.mark.parametrize(
    "status, content",
    [(502, b"<html>Bad Gateway</html>"), (401, b""), (500, b"oops")],
)
def test_error_status_body_is_not_parsed(status, content) -> None:
    raw = HttpResponse(status=status, headers={"Content-Type": "application/json"}, content=content)

    response = ResponseInterpreter().interpret(_template({"a": "$.a"}), raw)

    assert response.status_code == status
    assert response.extracted_variables == {}
    assert response.body == content.decode("utf-8")


def test_error_status_with_valid_json_skips_extraction() -> None:
    response = ResponseInterpreter().interpret(_template({"a": "$.a"}), _json({"a": "x"}, status=404))

    assert response.extracted_variables == {}


def test_empty_body_on_no_content_status_is_not_parsed() -> None:
    raw = HttpResponse(status=204, headers={"Content-Type": "application/json"}, content=b"")

    response = ResponseInterpreter().interpret(_template({"a": "$.a"}), raw)

    assert response.status_code == 204
    assert response.extracted_variables == {}


def test_head_request_is_not_parsed() -> None:
    raw = HttpResponse(status=200, headers={"Content-Type": "application/json"}, content=b"")

    response = ResponseInterpreter().interpret(_template({"a": "$.a"}, method=Method.HEAD), raw)

    assert response.extracted_variables == {}


def test_invalid_json_path_is_a_configuration_error() -> None:
    with pytest.raises(InvalidJsonPathError) as excinfo:
        ResponseInterpreter().interpret(_template({"bad": "$.[[["}), _json({"a": 1}))

    assert excinfo.value.field == "extractors.bad"
    assert excinfo.value.code == "configuration"


def test_timings_and_headers_are_carried_over() -> None:
    response = ResponseInterpreter().interpret(_template(), _json({}, status=201))

    assert response.status_code == 201
    assert response.time_to_headers == timedelta(milliseconds=4)
    assert response.time_total == timedelta(milliseconds=9)
    assert response.headers == {"Content-Type": "application/json"}


def test_decode_body_uses_declared_charset() -> None:
    raw = "café".encode("latin-1")

    assert decode_body(raw, {"Content-Type": "text/plain; charset=latin-1"}) == "café"
    assert decode_body(b"\xff", {"Content-Type": "text/plain; charset=unknown-enc"}) == "\ufffd"


def test_json_text_keeps_non_ascii() -> None:
    assert json_text({"name": "日本"}) == '{"name":"日本"}'
