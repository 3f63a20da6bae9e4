"""Tests for the build-fetch-print pipeline."""

from __future__ import annotations

import httpx
import pytest

from bearertoken.exceptions import (
    MalformedInputURLError,
    MissingAccessTokenError,
    UnexpectedStatusError,
)
from bearertoken.flow import BearerTokenFlow, FlowState


def _client(status_code: int = 200, json_body: object = None) -> httpx.Client:
    body = {"access_token": "abc123", "expires_in": 3600} if json_body is None else json_body

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestBearerTokenFlow:
    def test_starts_idle(self) -> None:
        flow = BearerTokenFlow("https://auth.example.com/token", "id", "secret")
        assert flow.state is FlowState.IDLE

    def test_success_prints_export_line(self, plain_output, capsys) -> None:
        flow = BearerTokenFlow(
            "https://auth.example.com/token", "id", "secret", client=_client()
        )

        assert flow.run() == "abc123"

        assert flow.state is FlowState.COMPLETED
        assert capsys.readouterr().out == 'export BEARER="Bearer abc123"\n'

    def test_bad_url_fails_before_request(self, plain_output, capsys) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"access_token": "abc123"})

        flow = BearerTokenFlow(
            "not a url",
            "id",
            "secret",
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        with pytest.raises(MalformedInputURLError):
            flow.run()

        assert flow.state is FlowState.FAILED
        assert requests == []
        assert capsys.readouterr().out == ""

    def test_fetch_failure_prints_nothing(self, plain_output, capsys) -> None:
        flow = BearerTokenFlow(
            "https://auth.example.com/token",
            "id",
            "secret",
            client=_client(status_code=401, json_body={"error": "invalid_client"}),
        )

        with pytest.raises(UnexpectedStatusError):
            flow.run()

        assert flow.state is FlowState.FAILED
        assert capsys.readouterr().out == ""

    def test_missing_token_fails(self, plain_output) -> None:
        flow = BearerTokenFlow(
            "https://auth.example.com/token",
            "id",
            "secret",
            client=_client(json_body={"foo": "bar"}),
        )
        with pytest.raises(MissingAccessTokenError):
            flow.run()
        assert flow.state is FlowState.FAILED

    def test_cannot_run_twice(self, plain_output) -> None:
        flow = BearerTokenFlow(
            "https://auth.example.com/token", "id", "secret", client=_client()
        )
        flow.run()
        with pytest.raises(RuntimeError):
            flow.run()

    def test_transitions_logged_in_verbose_mode(self, capsys) -> None:
        from bearertoken.output import OutputManager, set_output

        set_output(OutputManager(no_color=True, verbose=True))
        flow = BearerTokenFlow(
            "https://auth.example.com/token", "id", "secret", client=_client()
        )
        flow.run()

        err = capsys.readouterr().err
        assert "[debug] idle -> url_built" in err
        assert "[debug] url_built -> completed" in err

    def test_unexpected_error_marks_failed(self, plain_output, monkeypatch, capsys) -> None:
        def boom(url, client=None):
            raise httpx.InvalidURL("bad url")

        monkeypatch.setattr("bearertoken.flow.fetch_token", boom)
        flow = BearerTokenFlow("https://auth.example.com/token", "id", "secret")

        with pytest.raises(httpx.InvalidURL):
            flow.run()

        assert flow.state is FlowState.FAILED
        assert capsys.readouterr().out == ""
