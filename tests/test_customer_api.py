"""Tests for :mod:`app_utils.customer_api`."""

from __future__ import annotations

import logging
from typing import Any

import pytest
import requests

from app_utils import customer_api
from app_utils.customer_api import (
    ApiRequestError,
    NetworkError,
    ResponseParseError,
    create_customer,
    fetch_json,
    list_customers,
)
from schemas.customer import CustomerDraft
from tests.dummies import ADA, API_URL, GRACE, DummyResponse, DummySession


def _session(method: str, resp: DummyResponse) -> DummySession:
    session = DummySession()
    session.on(method, lambda **k: resp)
    return session


def test_fetch_json_returns_body_on_success():
    session = _session("GET", DummyResponse(200, [GRACE]))
    assert fetch_json(API_URL, session=session, timeout=5) == [GRACE]
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", API_URL)
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["Accept"] == "application/json"
    assert "Content-Type" not in kwargs["headers"]


def test_fetch_json_uses_configured_timeout(monkeypatch):
    monkeypatch.setenv("CUSTOMERS_API_TIMEOUT", "2.5")
    session = _session("GET", DummyResponse(200, []))
    fetch_json(API_URL, session=session)
    assert session.calls[0][2]["timeout"] == 2.5


def test_fetch_json_surfaces_api_error_body(caplog):
    body = {"code": "validation_failed", "message": "Email already exists"}
    session = _session("POST", DummyResponse(422, body))
    with caplog.at_level(logging.WARNING, logger="app_utils.customer_api"):
        with pytest.raises(ApiRequestError) as exc:
            fetch_json(API_URL, "POST", json=ADA, session=session)
    assert exc.value.status == 422
    assert exc.value.code == "validation_failed"
    assert exc.value.message == "Email already exists"
    assert not isinstance(exc.value, NetworkError)
    assert "validation_failed" in caplog.text
    assert session.calls[0][2]["headers"]["Content-Type"] == "application/json"


def test_fetch_json_wraps_unstructured_error_body():
    session = _session("GET", DummyResponse(500, {"error": "boom"}, reason="Server Error"))
    with pytest.raises(ApiRequestError) as exc:
        fetch_json(API_URL, session=session)
    assert exc.value.code == "http_500"
    assert exc.value.message == "boom"


def test_fetch_json_non_json_error_is_parse_error():
    session = _session("GET", DummyResponse.text(502, "Bad Gateway"))
    with pytest.raises(ResponseParseError) as exc:
        fetch_json(API_URL, session=session)
    assert exc.value.code == customer_api.PARSE_ERROR_CODE
    assert exc.value.status == 502


def test_fetch_json_network_failure():
    session = DummySession()

    def refuse(**k: Any) -> DummyResponse:
        raise requests.ConnectionError("connection refused")

    session.on("GET", refuse)
    with pytest.raises(NetworkError) as exc:
        fetch_json(API_URL, session=session)
    assert exc.value.code == customer_api.NETWORK_ERROR_CODE
    assert exc.value.status is None
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


def test_fetch_json_timeout_is_network_error():
    session = DummySession()

    def slow(**k: Any) -> DummyResponse:
        raise requests.Timeout("read timed out")

    session.on("GET", slow)
    with pytest.raises(NetworkError):
        fetch_json(API_URL, session=session)


def test_fetch_json_defaults_to_requests_module(monkeypatch):
    calls: list[tuple[str, str]] = []

    def fake_request(method: str, url: str, **k: Any) -> DummyResponse:
        calls.append((method, url))
        return DummyResponse(200, [])

    monkeypatch.setattr(customer_api.requests, "request", fake_request)
    assert fetch_json(API_URL) == []
    assert calls == [("GET", API_URL)]


def test_list_customers_parses_records():
    session = _session("GET", DummyResponse(200, [GRACE, ADA]))
    customers = list_customers(API_URL, session=session)
    assert [c.first_name for c in customers] == ["Grace", "Ada"]


def test_list_customers_rejects_malformed_payload():
    session = _session("GET", DummyResponse(200, {"customers": []}))
    with pytest.raises(ResponseParseError) as exc:
        list_customers(API_URL, session=session)
    assert exc.value.code == customer_api.INVALID_RESPONSE_CODE


def test_create_customer_posts_payload():
    session = _session("POST", DummyResponse(201, ADA))
    draft = CustomerDraft(first_name="Ada", last_name="Lovelace", email="ada@example.com")
    created = create_customer(API_URL, draft, session=session)
    assert created is not None and created.email == "ada@example.com"
    method, _, kwargs = session.calls[0]
    assert method == "POST"
    assert kwargs["json"] == ADA


def test_create_customer_tolerates_id_only_body():
    session = _session("POST", DummyResponse(201, {"id": "cus_1"}))
    draft = CustomerDraft(first_name="Ada", last_name="Lovelace", email="ada@example.com")
    assert create_customer(API_URL, draft, session=session) is None
