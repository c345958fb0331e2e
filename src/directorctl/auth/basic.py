"""HTTP Basic authentication handler.

Used when the director's ``/info`` reports ``"type": "basic"``. The
configured ``username:password`` pair is Base64-encoded and sent as an
``Authorization: Basic <encoded>`` header per :rfc:`7617`.
"""

from __future__ import annotations

from directorctl.auth.base import AuthHandler
from directorctl.auth.credentials import CredentialStore
from directorctl.models import AuthInfo, AuthType


class BasicAuthHandler(AuthHandler):
    """Authenticate with the static username and password.

    The store is switched to :attr:`~directorctl.models.AuthMode.BASIC`, so
    later requests rebuild the header directly from the credentials without
    another discovery call.
    """

    @property
    def auth_type(self) -> AuthType:
        return AuthType.BASIC

    def authenticate(self, store: CredentialStore, info: AuthInfo) -> str:
        store.resolve_basic()
        return store.basic_header()
