"""Token-endpoint URL assembly.

The client-credentials request is a plain GET whose query string carries
the grant type and the client credentials::

    https://auth.example.com/token?grant_type=client_credentials&client_id=...&client_secret=...

:func:`build_auth_url` takes the user-supplied authorization server URL,
keeps only its scheme, host, port and path, and appends those three
parameters URL-encoded. Any query string, fragment or user-info on the
input is dropped.

Failures are reported on stderr here and raised as a
:class:`~bearertoken.exceptions.BuildError` subclass.
"""

from __future__ import annotations

import re

import httpx
from pydantic import ValidationError

from bearertoken.exceptions import MalformedInputURLError, URLConstructionError
from bearertoken.models import AuthRequestSpec
from bearertoken.output import error, warning

REDACTED = "REDACTED"
SECRET_PARAM = "client_secret"

# RFC 3986 reg-name characters, pct-encoded octets excluded.
_HOST_PATTERN = re.compile(r"^[A-Za-z0-9\-._~!$&'()*+,;=]+$")
_MAX_PORT = 65535


def _reject(raw_auth_url: str, reason: str) -> MalformedInputURLError:
    error(
        "Unable to create a URL from the supplied authorization server url\n"
        f"{raw_auth_url}"
    )
    error(reason)
    return MalformedInputURLError(f"Invalid authorization server URL: {reason}")


def parse_auth_request(
    raw_auth_url: str, client_id: str, client_secret: str
) -> AuthRequestSpec:
    """Split *raw_auth_url* into an :class:`~bearertoken.models.AuthRequestSpec`.

    The path is kept exactly as given, percent-escapes included, so
    ``/tenants/a%2Fb/token`` still names a single ``a/b`` segment.

    Args:
        raw_auth_url: Authorization server URL, e.g.
            ``https://auth.example.com/oauth2/token``.
        client_id: OAuth2 client identifier.
        client_secret: OAuth2 client secret.

    Returns:
        The parsed request spec. ``port`` is ``None`` when the URL uses the
        scheme's default port.

    Raises:
        MalformedInputURLError: If the URL does not parse, has no scheme or
            host, has characters not allowed in a host, or has a port
            outside 0-65535.
    """
    try:
        parsed = httpx.URL(raw_auth_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise _reject(raw_auth_url, str(exc)) from exc

    if not parsed.scheme:
        raise _reject(raw_auth_url, "The URL is not absolute (missing scheme)")
    if not parsed.host:
        raise _reject(raw_auth_url, "The URL is not absolute (missing host)")

    # raw_host is ASCII (IDNA-encoded); IPv6 literals arrive validated and unbracketed.
    raw_host = parsed.raw_host.decode("ascii")
    if ":" not in raw_host and not _HOST_PATTERN.match(raw_host):
        raise _reject(raw_auth_url, f"Illegal character in host: {raw_host!r}")
    if parsed.port is not None and not 0 <= parsed.port <= _MAX_PORT:
        raise _reject(raw_auth_url, f"Port out of range: {parsed.port}")

    raw_path = parsed.raw_path.split(b"?", 1)[0].decode("ascii")

    try:
        return AuthRequestSpec(
            scheme=parsed.scheme,
            host=parsed.host,
            port=parsed.port,
            path=raw_path or "/",
            client_id=client_id,
            client_secret=client_secret,
        )
    except ValidationError as exc:
        error(f"Invalid authorization server url components: {exc}")
        raise MalformedInputURLError(str(exc)) from exc


def assemble_url(spec: AuthRequestSpec) -> httpx.URL:
    """Build the full token request URL from *spec*.

    Raises:
        URLConstructionError: If the reassembled URL is invalid.
    """
    try:
        return httpx.URL(
            scheme=spec.scheme,
            host=spec.host,
            port=spec.port,
            path=spec.path,
            params=spec.query_params(),
        )
    except httpx.InvalidURL as exc:
        warning("Unable to assemble the token request URL")
        warning(str(exc))
        warning(f"{spec.scheme}://{spec.host}{spec.path}")
        raise URLConstructionError(f"Cannot construct token request URL: {exc}") from exc


def build_auth_url(raw_auth_url: str, client_id: str, client_secret: str) -> httpx.URL:
    """Return the client-credentials token request URL.

    Args:
        raw_auth_url: Authorization server URL without query parameters.
        client_id: OAuth2 client identifier.
        client_secret: OAuth2 client secret.

    Returns:
        A fully qualified :class:`httpx.URL` whose query string is
        ``grant_type=client_credentials&client_id=<id>&client_secret=<secret>``.

    Raises:
        MalformedInputURLError: If *raw_auth_url* is not an absolute URL.
        URLConstructionError: If the reassembled URL is invalid.
    """
    spec = parse_auth_request(raw_auth_url, client_id, client_secret)
    return assemble_url(spec)


def redact_url(url: httpx.URL) -> str:
    """Return *url* as a string with the ``client_secret`` value replaced."""
    if SECRET_PARAM not in url.params:
        return str(url)
    return str(url.copy_set_param(SECRET_PARAM, REDACTED))
