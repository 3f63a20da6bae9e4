"""Token request and response validation.

:func:`fetch_token` sends one GET to the token endpoint and checks the
response step by step, as required by :rfc:`6749` section 5.1 (a
successful token response is ``application/json`` carrying
``access_token``):

1. transport succeeded,
2. status is 200,
3. a ``Content-Type`` header is present,
4. its media type is ``application/json``,
5. the body is a JSON object,
6. the object has an ``access_token``.

There is no retry: the first failure ends the run. Each failure is
reported on stderr where it is detected and raised as a
:class:`~bearertoken.exceptions.FetchError` subclass.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn, Optional

import httpx

from bearertoken.exceptions import (
    MalformedJSONError,
    MissingAccessTokenError,
    MissingContentTypeError,
    TransportError,
    UnexpectedContentTypeError,
    UnexpectedStatusError,
)
from bearertoken.models import JSON_MEDIA_TYPE, TokenResponse
from bearertoken.output import debug, error, info, warning
from bearertoken.request_builder import redact_url

BODY_SNIPPET_LENGTH = 200


def fetch_token(url: httpx.URL | str, client: Optional[httpx.Client] = None) -> str:
    """Request a token from *url* and return the ``access_token`` value.

    Args:
        url: Fully built token request URL (see
            :func:`~bearertoken.request_builder.build_auth_url`).
        client: Optional pre-configured :class:`httpx.Client`. When omitted,
            a client with default settings is created and closed here.

    Returns:
        The access token as a string, not otherwise validated.

    Raises:
        TransportError: On connection, DNS, timeout or protocol errors.
        UnexpectedStatusError: If the status code is not 200.
        MissingContentTypeError: If there is no usable ``Content-Type``.
        UnexpectedContentTypeError: If the media type is not JSON.
        MalformedJSONError: If the body is not a JSON object.
        MissingAccessTokenError: If ``access_token`` is absent or null.
    """
    url = httpx.URL(url)
    info(f"Requesting {redact_url(url)}")

    response = _send(url, client)
    return extract_token(response, url)


def _send(url: httpx.URL, client: Optional[httpx.Client]) -> TokenResponse:
    """Issue the GET and capture status, first Content-Type value and body."""
    try:
        if client is not None:
            raw = client.get(url)
        else:
            with httpx.Client() as owned:
                raw = owned.get(url)
    except httpx.HTTPError as exc:
        error(f"Token request failed: {type(exc).__name__}")
        error(str(exc) or repr(exc))
        raise TransportError(f"Token request failed: {exc}") from exc

    content_types = raw.headers.get_list("content-type")
    debug(f"HTTP {raw.status_code} {raw.reason_phrase or ''}".rstrip())

    return TokenResponse(
        status_code=raw.status_code,
        content_type=content_types[0] if content_types else "",
        body=raw.text,
        headers=dict(raw.headers),
    )


def extract_token(response: TokenResponse, url: httpx.URL | None = None) -> str:
    """Validate *response* and return its access token.

    Args:
        response: Status, content type and body of the token response.
        url: The requested URL, used only in diagnostics.

    Returns:
        The access token as a string.

    Raises:
        The :class:`~bearertoken.exceptions.FetchError` subclasses listed in
        :func:`fetch_token`, except :class:`TransportError`.
    """
    if not response.is_valid:
        _reject_response(response, url)

    payload = _parse_object(response.body)

    value = payload.get("access_token")
    if value is None:
        warning("Response JSON has no 'access_token' field")
        debug(f"Fields present: {', '.join(sorted(payload)) or '(none)'}")
        raise MissingAccessTokenError("Token response missing 'access_token' field")

    return _as_text(value)


def _reject_response(response: TokenResponse, url: Optional[httpx.URL]) -> NoReturn:
    """Report why *response* is not a usable token response and raise."""
    if response.status_code != 200:
        warning(
            f"Request was unsuccessful. Received status code {response.status_code}"
        )
        if url is not None:
            warning(f"URL requested was\n{redact_url(url)}")
        warning(f"Response body text:\n{response.body}")
        raise UnexpectedStatusError(
            response.status_code, response.body[:BODY_SNIPPET_LENGTH]
        )

    if not response.content_type.strip():
        error("Content-Type header is missing or empty")
        error(f"Response headers: {response.headers}")
        raise MissingContentTypeError("Response has no Content-Type header")

    warning(f"Content-Type is {response.media_type} not {JSON_MEDIA_TYPE}.")
    raise UnexpectedContentTypeError(response.media_type)


def _parse_object(body: str) -> dict[str, Any]:
    """Decode *body* as a JSON object."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, ValueError) as exc:
        warning(f"Caught {type(exc).__name__} while searching for access token")
        warning(f"Message:\n{exc}")
        raise MalformedJSONError(f"Response body is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        warning(
            f"Expected a JSON object in the response body, got {type(payload).__name__}"
        )
        raise MalformedJSONError("Response body is not a JSON object")
    return payload


def _as_text(value: Any) -> str:  # noqa: ANN401
    """Render a JSON value as token text: strings verbatim, others as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))
