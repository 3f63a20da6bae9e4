"""The build-fetch-print pipeline.

:class:`BearerTokenFlow` runs the three steps in order and tracks where
it got to::

    IDLE --build_auth_url--> URL_BUILT --fetch_token--> COMPLETED
      \\                          \\
       +--------------------------+----> FAILED

The export line is printed only after the token has been fetched, so a
failed run never leaves a partial line on stdout.
"""

from __future__ import annotations

import enum
from typing import Optional

import httpx

from bearertoken.fetcher import fetch_token
from bearertoken.output import debug, print_export
from bearertoken.request_builder import build_auth_url


class FlowState(str, enum.Enum):
    """Progress of a single run."""

    IDLE = "idle"
    URL_BUILT = "url_built"
    COMPLETED = "completed"
    FAILED = "failed"


class BearerTokenFlow:
    """One token retrieval run.

    Args:
        auth_url: Authorization server URL without query parameters.
        client_id: OAuth2 client identifier.
        client_secret: OAuth2 client secret.
        client: Optional :class:`httpx.Client` passed through to
            :func:`~bearertoken.fetcher.fetch_token`.

    Example::

        flow = BearerTokenFlow("https://auth.example.com/token", "id", "secret")
        token = flow.run()   # prints: export BEARER="Bearer ..."
    """

    def __init__(
        self,
        auth_url: str,
        client_id: str,
        client_secret: str,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._auth_url = auth_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._client = client
        self._state = FlowState.IDLE

    @property
    def state(self) -> FlowState:
        """The current :class:`FlowState`."""
        return self._state

    def _advance(self, state: FlowState) -> None:
        debug(f"{self._state.value} -> {state.value}")
        self._state = state

    def run(self) -> str:
        """Build the URL, fetch the token and print the export line.

        Returns:
            The access token.

        Raises:
            BuildError: If the token request URL cannot be built.
            FetchError: If the token request or its response fails.
            RuntimeError: If the flow has already run.
        """
        if self._state is not FlowState.IDLE:
            raise RuntimeError(f"Flow already ran (state: {self._state.value})")

        try:
            url = build_auth_url(self._auth_url, self._client_id, self._client_secret)
            self._advance(FlowState.URL_BUILT)

            token = fetch_token(url, client=self._client)
        except Exception:
            self._advance(FlowState.FAILED)
            raise

        print_export(token)
        self._advance(FlowState.COMPLETED)
        return token
