from __future__ import annotations

"""HTTP access to the customers endpoint.

``fetch_json`` is the single place where requests are issued. It parses the
body as JSON whatever the status code and turns every failure into an
``ApiRequestError`` carrying a structured ``ApiError``:

* non-2xx with a JSON body  -> ``ApiRequestError`` (the body is the error)
* body is not JSON          -> ``ResponseParseError`` (code ``parse_error``)
* connection/DNS/timeout    -> ``NetworkError`` (code ``network_error``)

Nothing is retried; callers decide.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests
from pydantic import ValidationError

from app_utils.config import api_timeout
from schemas.customer import (
    ApiError,
    Customer,
    CustomerDraft,
    customer_list_adapter,
)

logger = logging.getLogger(__name__)

NETWORK_ERROR_CODE = "network_error"
PARSE_ERROR_CODE = "parse_error"
INVALID_RESPONSE_CODE = "invalid_response"


class ApiRequestError(Exception):
    """A backend call failed; ``error`` holds the user-facing payload."""

    def __init__(self, error: ApiError, status: int | None = None) -> None:
        super().__init__(error.message)
        self.error = error
        self.status = status

    @property
    def code(self) -> str:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message


class NetworkError(ApiRequestError):
    """The request never produced a response."""


class ResponseParseError(ApiRequestError):
    """The response body could not be understood."""


def _error_from_body(body: Any, resp: requests.Response) -> ApiError:
    if isinstance(body, dict):
        try:
            return ApiError.model_validate(body)
        except ValidationError:
            pass
        message = body.get("message") or body.get("error") or resp.reason
    else:
        message = resp.reason
    return ApiError(
        code=f"http_{resp.status_code}",
        message=str(message or f"Request failed with status {resp.status_code}"),
    )


def fetch_json(
    url: str,
    method: str = "GET",
    *,
    json: Any = None,
    headers: Optional[Mapping[str, str]] = None,
    session: Optional[requests.Session] = None,
    timeout: float | None = None,
) -> Any:
    """Issue ``method url`` and return the decoded JSON body."""
    http = session if session is not None else requests
    req_headers: Dict[str, str] = {"Accept": "application/json"}
    if json is not None:
        req_headers["Content-Type"] = "application/json"
    if headers:
        req_headers.update(headers)
    logger.debug("%s %s", method, url)
    try:
        resp = http.request(
            method,
            url,
            json=json,
            headers=req_headers,
            timeout=timeout if timeout is not None else api_timeout(),
        )
    except requests.RequestException as err:
        logger.warning("%s %s failed: %s", method, url, err)
        raise NetworkError(
            ApiError(
                code=NETWORK_ERROR_CODE,
                message="Unable to reach the customer service. Please try again.",
            )
        ) from err

    try:
        body = resp.json()
    except ValueError as err:
        logger.warning(
            "%s %s returned a non-JSON body (status %s)", method, url, resp.status_code
        )
        raise ResponseParseError(
            ApiError(
                code=PARSE_ERROR_CODE,
                message=f"Unexpected response from server (status {resp.status_code})",
            ),
            status=resp.status_code,
        ) from err

    if not resp.ok:
        error = _error_from_body(body, resp)
        logger.warning(
            "%s %s -> %s %s: %s", method, url, resp.status_code, error.code, error.message
        )
        raise ApiRequestError(error, status=resp.status_code)
    return body


def list_customers(url: str, **kwargs: Any) -> List[Customer]:
    """GET the customer list in server order."""
    body = fetch_json(url, "GET", **kwargs)
    try:
        return customer_list_adapter.validate_python(body)
    except ValidationError as err:
        raise ResponseParseError(
            ApiError(
                code=INVALID_RESPONSE_CODE,
                message="Server returned an invalid customer list",
            )
        ) from err


def create_customer(url: str, draft: CustomerDraft, **kwargs: Any) -> Customer | None:
    """POST a new customer and return the created record when the body has one."""
    body = fetch_json(url, "POST", json=draft.to_payload(), **kwargs)
    try:
        return Customer.model_validate(body)
    except ValidationError:
        # 2xx bodies without a full record (e.g. just an id) are accepted
        logger.debug("create response is not a customer record: %r", body)
        return None
