"""Pydantic models shared across bearertoken.

All values here are transient: built once per run and discarded at exit.

:class:`AuthRequestSpec`
    The parsed pieces of the authorization server URL plus the client
    credentials, produced by :mod:`bearertoken.request_builder`.
:class:`TokenResponse`
    The parts of the token endpoint's HTTP response that
    :mod:`bearertoken.fetcher` validates.
:class:`Settings`
    The credentials and URL after :mod:`bearertoken.config` has merged
    CLI flags, environment variables and the config file.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

JSON_MEDIA_TYPE = "application/json"


class AuthRequestSpec(BaseModel):
    """Everything needed to build the token request URL.

    ``client_secret`` is a :class:`~pydantic.SecretStr`, so printing or
    logging the model shows ``'**********'`` instead of the secret.

    Example::

        AuthRequestSpec(
            scheme="https",
            host="auth.example.com",
            path="/oauth2/token",
            client_id="my-client",
            client_secret="s3cret",
        )
    """

    model_config = ConfigDict(frozen=True)

    scheme: str
    host: str
    port: Optional[int] = None
    path: str = "/"
    client_id: str
    client_secret: SecretStr

    @field_validator("scheme", "host", "path")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    def query_params(self) -> dict[str, str]:
        """Return the client-credentials grant parameters, in wire order."""
        return {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret.get_secret_value(),
        }


class TokenResponse(BaseModel):
    """Status, media type and body of a token endpoint response.

    ``content_type`` holds the first ``Content-Type`` header value verbatim
    (empty when the header is absent). ``headers`` keeps all response
    headers for diagnostics.
    """

    status_code: int
    content_type: str = ""
    body: str = ""
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def media_type(self) -> str:
        """The primary media type, without parameters such as ``charset``."""
        return self.content_type.split(";")[0].strip()

    @property
    def is_json(self) -> bool:
        """Whether the primary media type is ``application/json`` (any case)."""
        return self.media_type.lower() == JSON_MEDIA_TYPE

    @property
    def is_valid(self) -> bool:
        """Whether this response can carry a token: HTTP 200 and JSON."""
        return self.status_code == 200 and self.is_json


class Settings(BaseModel):
    """Resolved run settings. Any field may still be missing."""

    model_config = ConfigDict(extra="forbid")

    client_id: Optional[str] = Field(default=None, description="OAuth2 client id")
    client_secret: Optional[SecretStr] = Field(
        default=None, description="OAuth2 client secret"
    )
    auth_url: Optional[str] = Field(
        default=None, description="Authorization server URL without query parameters"
    )
