"""Numeric process exit codes following ``sysexits.h`` conventions.

Each constant maps to an error category and is referenced by the
corresponding :class:`~bearertoken.exceptions.BearerTokenError` subclass.
Shell wrappers can inspect the exit code to tell a bad invocation apart
from a failed token request without parsing stderr.

Example::

    $ bearer-token -i my-client -s wrong -a https://auth.example.com/token
    $ echo $?
    70   # EXIT_SOFTWARE -- the token request failed
"""

EXIT_SUCCESS = 0
"""The token was retrieved and the export line printed."""

EXIT_INVALID_USAGE = 2
"""A required value (client id, secret or auth URL) was not supplied."""

EXIT_SOFTWARE = 70
"""URL construction or the token fetch failed (``EX_SOFTWARE``)."""

EXIT_CONFIG = 78
"""The config file could not be read or is invalid (``EX_CONFIG``)."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
