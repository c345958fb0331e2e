"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~directorctl.exceptions.DirectorError` subclass.
Shell wrappers can inspect the exit code to tell an authentication problem
from an unreachable director without parsing stderr.

Example::

    $ directorctl get /deployments
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- the director could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""No credentials were configured, or the auth negotiation failed."""

EXIT_RESPONSE_ERROR = 5
"""The director answered with a non-2xx status code."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, TLS failure, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The response body was not valid JSON or did not match the expected shape."""
