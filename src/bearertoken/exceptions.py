"""Exception hierarchy for bearertoken.

All exceptions inherit from :class:`BearerTokenError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`bearertoken.exit_codes`. The entry point in :func:`bearertoken.app.main`
catches ``BearerTokenError`` and exits with the matching code.

Build and fetch errors are reported on stderr by the component that raised
them, so the entry point only converts them to an exit status.

Subclass hierarchy::

    BearerTokenError (exit 70)
    +-- InvalidUsageError            (exit 2)
    +-- ConfigError                  (exit 78)
    +-- BuildError                   (exit 70)
    |   +-- MalformedInputURLError
    |   +-- URLConstructionError
    +-- FetchError                   (exit 70)
        +-- TransportError
        +-- UnexpectedStatusError
        +-- MissingContentTypeError
        +-- UnexpectedContentTypeError
        +-- MalformedJSONError
        +-- MissingAccessTokenError
"""

from bearertoken.exit_codes import EXIT_CONFIG, EXIT_INVALID_USAGE, EXIT_SOFTWARE


class BearerTokenError(Exception):
    """Base exception for all bearertoken errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_SOFTWARE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(BearerTokenError):
    """Raised when a required value is missing after config resolution."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(BearerTokenError):
    """Raised for an unreadable or invalid config file."""

    exit_code = EXIT_CONFIG


# --- Request Builder ---


class BuildError(BearerTokenError):
    """Raised when the token-endpoint URL cannot be assembled."""


class MalformedInputURLError(BuildError):
    """The supplied authorization server URL does not parse or lacks a scheme or host."""


class URLConstructionError(BuildError):
    """The reassembled URL with credentials in its query is invalid."""


# --- Token Fetcher ---


class FetchError(BearerTokenError):
    """Raised when the token request fails or its response is unusable."""


class TransportError(FetchError):
    """A network-level failure (connection refused, DNS, timeout, interruption)."""


class UnexpectedStatusError(FetchError):
    """The token endpoint answered with a status other than 200.

    Args:
        status_code: The HTTP status code received.
        body_snippet: The start of the response body.
    """

    def __init__(self, status_code: int, body_snippet: str = ""):
        super().__init__(f"Token request returned HTTP {status_code}")
        self.status_code = status_code
        self.body_snippet = body_snippet


class MissingContentTypeError(FetchError):
    """The response carried no ``Content-Type`` header, or an empty one."""


class UnexpectedContentTypeError(FetchError):
    """The response media type is not ``application/json``.

    Args:
        content_type: The primary media type actually received.
    """

    def __init__(self, content_type: str):
        super().__init__(f"Content-Type is {content_type} not application/json")
        self.content_type = content_type


class MalformedJSONError(FetchError):
    """The response body is not a JSON object."""


class MissingAccessTokenError(FetchError):
    """The JSON response has no ``access_token`` value."""
