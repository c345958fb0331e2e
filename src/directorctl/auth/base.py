"""Interfaces of the auth subsystem.

- :class:`AuthHandler` -- one implementation per :class:`~directorctl.models.AuthType`
  member. The :class:`~directorctl.auth.negotiator.AuthNegotiator` picks the
  handler matching the type the director advertises in ``/info``.
- :class:`TokenService` -- the OAuth2 token service consumed by the ``uaa``
  handler. :class:`~directorctl.auth.uaa.UAAClient` is the production
  implementation; tests substitute their own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol

from directorctl.auth.credentials import CredentialStore
from directorctl.models import AuthInfo, AuthType, TokenPair


class TokenService(Protocol):
    """Token endpoint supporting the password and refresh-token grants."""

    def password(
        self, client_id: str, client_secret: str, username: str, password: str
    ) -> TokenPair: ...

    def refresh(
        self, client_id: str, client_secret: str, refresh_token: str
    ) -> TokenPair: ...


class AuthHandler(ABC):
    """Resolves an ``Authorization`` header for one advertised auth type.

    Handlers mutate the session's :class:`CredentialStore` when they settle
    the auth mode, so that later requests take the negotiator's fast paths.
    """

    @property
    @abstractmethod
    def auth_type(self) -> AuthType:
        """The :class:`AuthType` member this handler serves."""
        ...

    @abstractmethod
    def authenticate(self, store: CredentialStore, info: AuthInfo) -> str:
        """Obtain a credential and return the ``Authorization`` header value.

        Args:
            store: The session's credential store. Implementations record
                the resolved mode (and token, if any) on it.
            info: The director's discovery document.

        Returns:
            A header value such as ``"Basic ..."`` or ``"Bearer ..."``.
        """
        ...
