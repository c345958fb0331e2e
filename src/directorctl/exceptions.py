"""Exception hierarchy for directorctl.

All exceptions inherit from :class:`DirectorError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`directorctl.exit_codes`.
The CLI entry point in :func:`directorctl.app.main` catches ``DirectorError``
and exits with the appropriate code.

Subclass hierarchy::

    DirectorError              (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- ConfigError            (exit 1)
    +-- AuthError              (exit 3)
    |   +-- NoCredentialsError
    |   +-- UnknownAuthTypeError
    |   +-- TokenExchangeError
    +-- NonSuccessStatusError  (exit 5)
    +-- TransportError         (exit 6)
    +-- DecodeError            (exit 7)
"""

from directorctl.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_RESPONSE_ERROR,
)


class DirectorError(Exception):
    """Base exception for all directorctl errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`directorctl.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(DirectorError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(DirectorError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class AuthError(DirectorError):
    """Base class for failures while resolving an ``Authorization`` header."""

    exit_code = EXIT_AUTH_FAILURE


class NoCredentialsError(AuthError):
    """Raised when no username, password or refresh token is configured."""

    def __init__(self, message: str = "No authorization options. Need to log in"):
        super().__init__(message)


class UnknownAuthTypeError(AuthError):
    """Raised when the director advertises an auth type this client cannot perform.

    Args:
        auth_type: The ``user_authentication.type`` value reported by ``/info``.
    """

    def __init__(self, auth_type: str):
        super().__init__(f"Unknown auth type: `{auth_type}'")
        self.auth_type = auth_type


class TokenExchangeError(AuthError):
    """Raised when the token service rejects a password or refresh grant."""


class NonSuccessStatusError(DirectorError):
    """Raised when a response has a status code of 300 or above.

    The status code is deliberately not part of the error; callers see the
    same error for every non-2xx response.
    """

    exit_code = EXIT_RESPONSE_ERROR

    def __init__(self, message: str = "Non-2xx response code"):
        super().__init__(message)


class TransportError(DirectorError):
    """Raised on network-level failures (DNS, connection refused, TLS handshake, timeout).

    The underlying :class:`httpx.TransportError` is chained as ``__cause__``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(DirectorError):
    """Raised when a response body is not valid JSON or does not fit the requested type."""

    exit_code = EXIT_DECODE_ERROR
