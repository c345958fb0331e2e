"""Authentication for director sessions.

The director tells unauthenticated callers, through ``GET /info``, which
auth scheme it expects. This package resolves a usable ``Authorization``
header from that answer and the session's credentials.

The main entry points are:

- :class:`CredentialStore` -- the mutable auth state of one session.
- :class:`AuthNegotiator` -- the header-resolution state machine and
  handler registry; :func:`create_default_negotiator` builds one with the
  ``basic`` and ``uaa`` handlers.
- :class:`UAAClient` -- the token-service client used for ``uaa`` auth.
"""

from directorctl.auth.base import AuthHandler, TokenService
from directorctl.auth.basic import BasicAuthHandler
from directorctl.auth.credentials import CredentialStore
from directorctl.auth.negotiator import AuthNegotiator, create_default_negotiator
from directorctl.auth.uaa import CLIENT_ID, CLIENT_SECRET, UAAAuthHandler, UAAClient

__all__ = [
    "AuthHandler",
    "AuthNegotiator",
    "BasicAuthHandler",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "CredentialStore",
    "TokenService",
    "UAAAuthHandler",
    "UAAClient",
    "create_default_negotiator",
]
