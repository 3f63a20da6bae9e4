"""Typer application and CLI entry point for bearertoken.

The application has a single command. It resolves the client id, client
secret and authorization server URL (see :mod:`bearertoken.config`),
prompts for the secret with hidden input when no source supplies it, and
then runs :class:`~bearertoken.flow.BearerTokenFlow`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.

Exit codes are listed in :mod:`bearertoken.exit_codes`.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from bearertoken import __version__
from bearertoken.config import ENV_AUTH_URL, ENV_CLIENT_ID, ENV_CLIENT_SECRET, resolve_settings
from bearertoken.exceptions import BearerTokenError, ConfigError, InvalidUsageError
from bearertoken.exit_codes import EXIT_INTERRUPTED, EXIT_SOFTWARE
from bearertoken.flow import BearerTokenFlow
from bearertoken.output import OutputManager, debug, error, set_output


app = typer.Typer(
    name="bearer-token",
    help="Retrieve a Bearer Token for authentication to an API.",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"bearer-token {__version__}")
        raise typer.Exit()


def _require(value: Optional[str], option: str, env_var: str) -> str:
    if not value:
        raise InvalidUsageError(
            f"Missing required option '{option}' (or set {env_var})"
        )
    return value


@app.command()
def fetch_command(
    client_id: Optional[str] = typer.Option(
        None, "--id", "-i", help="Client Id."
    ),
    client_secret: Optional[str] = typer.Option(
        None,
        "--secret",
        "-s",
        help="Client Secret (prompted interactively when not supplied).",
    ),
    auth_url: Optional[str] = typer.Option(
        None,
        "--auth",
        "-a",
        help="Authorization Server URL (without arguments).",
    ),
    config_file: Optional[str] = typer.Option(
        None,
        "--file",
        "-f",
        help="JSON config file to read (default: ./.bearer.cfg if present).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    no_input: bool = typer.Option(
        False, "--no-input", help="Disable interactive prompts."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Fetch an OAuth2 token and print [bold]export BEARER="Bearer <token>"[/bold].

    Use it as ``eval "$(bearer-token -i ID -a URL)"`` and then pass
    ``-H "Authorization: $BEARER"`` to curl.
    """
    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    try:
        settings = resolve_settings(
            cli_client_id=client_id,
            cli_client_secret=client_secret,
            cli_auth_url=auth_url,
            config_file=config_file,
        )
        resolved_id = _require(settings.client_id, "--id", ENV_CLIENT_ID)
        resolved_url = _require(settings.auth_url, "--auth", ENV_AUTH_URL)

        if settings.client_secret is not None:
            secret = settings.client_secret.get_secret_value()
        elif no_input:
            secret = _require(None, "--secret", ENV_CLIENT_SECRET)
        else:
            secret = typer.prompt("Client Secret", hide_input=True, err=True)
    except (InvalidUsageError, ConfigError) as exc:
        error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    try:
        BearerTokenFlow(resolved_url, resolved_id, secret).run()
    except BearerTokenError as exc:
        # Already reported on stderr where it happened.
        debug(f"{type(exc).__name__}: {exc}")
        raise typer.Exit(exc.exit_code) from exc


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``bearer-token`` console script.

    Unexpected exceptions are reported on stderr and exit with
    :data:`~bearertoken.exit_codes.EXIT_SOFTWARE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        if isinstance(exc, BearerTokenError):
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {type(exc).__name__}: {exc}")
        sys.exit(EXIT_SOFTWARE)
