"""bearertoken -- Fetch an OAuth2 bearer token and print a shell export line.

This package performs the OAuth2 client-credentials grant against an
authorization server and writes ``export BEARER="Bearer <token>"`` to
stdout, ready to be ``eval``-ed before calling an API with curl or wget.

Typical workflow::

    eval "$(bearer-token --id my-client --auth https://auth.example.com/token)"
    curl -H "Authorization: $BEARER" https://api.example.com/things

Modules:
    app: Typer application and console-script entry point.
    flow: The build-fetch-print pipeline.
    request_builder: Token-endpoint URL assembly.
    fetcher: HTTP GET and token response validation.
    models: Pydantic models for the request and the response.
    config: Credential resolution from CLI flags, environment and config file.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following sysexits conventions.
    output: stdout/stderr output system with Rich support.
"""

__version__ = "1.0.0"
