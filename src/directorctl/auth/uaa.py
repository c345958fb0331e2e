"""UAA token-service client and the ``uaa`` auth handler.

When the director's ``/info`` reports ``"type": "uaa"`` it also names the
token service (``user_authentication.options.url``). :class:`UAAAuthHandler`
exchanges the session's refresh token, or failing that its username and
password, for an access token at that service and returns an
``Authorization: Bearer <token>`` header.

:class:`UAAClient` speaks the OAuth2 token endpoint (:rfc:`6749` sections
4.3 and 6): a form-encoded ``POST {url}/oauth/token`` with the client
credentials sent as HTTP Basic auth.

See Also:
    :class:`directorctl.auth.base.TokenService` for the interface the
    handler relies on.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx
from pydantic import ValidationError

from directorctl.auth.base import AuthHandler, TokenService
from directorctl.auth.credentials import CredentialStore
from directorctl.exceptions import TokenExchangeError, TransportError
from directorctl.models import AuthInfo, AuthType, TokenPair

CLIENT_ID = "bosh_cli"
"""OAuth2 client the director CLI is registered as in UAA."""

CLIENT_SECRET = ""

TokenServiceFactory = Callable[[str], TokenService]
"""Builds a :class:`TokenService` bound to the given token-service URL."""


class UAAClient:
    """Minimal OAuth2 token-endpoint client for a UAA server.

    Args:
        url: Base URL of the token service, e.g. ``"https://10.0.0.6:8443"``.
        verify: Verify the server's TLS certificate.
        timeout: Request timeout in seconds; ``None`` disables it.
        transport: Optional :class:`httpx.BaseTransport` (tests use
            :class:`httpx.MockTransport`).

    Example::

        uaa = UAAClient("https://10.0.0.6:8443")
        pair = uaa.password("bosh_cli", "", "admin", "secret")
        print(pair.access_token)
    """

    def __init__(
        self,
        url: str,
        verify: bool = True,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._verify = verify
        self._timeout = timeout
        self._transport = transport

    @property
    def token_endpoint(self) -> str:
        return f"{self.url.rstrip('/')}/oauth/token"

    def password(
        self, client_id: str, client_secret: str, username: str, password: str
    ) -> TokenPair:
        """Perform the resource-owner password grant."""
        return self._request_token(
            client_id,
            client_secret,
            {"grant_type": "password", "username": username, "password": password},
        )

    def refresh(
        self, client_id: str, client_secret: str, refresh_token: str
    ) -> TokenPair:
        """Perform the refresh-token grant."""
        return self._request_token(
            client_id,
            client_secret,
            {"grant_type": "refresh_token", "refresh_token": refresh_token},
        )

    def _request_token(
        self, client_id: str, client_secret: str, data: dict[str, str]
    ) -> TokenPair:
        """POST *data* to the token endpoint and parse the token response.

        Raises:
            TransportError: If the token service cannot be reached.
            TokenExchangeError: If the service rejects the grant or answers
                with something other than a token document.
        """
        kwargs: dict[str, Any] = {"verify": self._verify, "timeout": self._timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport

        try:
            with httpx.Client(**kwargs) as client:
                response = client.post(
                    self.token_endpoint,
                    data=data,
                    auth=(client_id, client_secret),
                    headers={"Accept": "application/json"},
                )
        except httpx.InvalidURL as exc:
            raise TokenExchangeError(
                f"Invalid token service URL '{self.url}': {exc}"
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(f"Token request failed: {exc}") from exc

        if response.status_code >= 300:
            raise TokenExchangeError(
                f"Token request failed with status {response.status_code}: "
                f"{response.text[:200]}"
            )

        try:
            return TokenPair.model_validate_json(response.content)
        except ValidationError as exc:
            raise TokenExchangeError(
                "Token response missing 'access_token' field"
            ) from exc


class UAAAuthHandler(AuthHandler):
    """Negotiate a bearer token with the token service named in ``/info``.

    Args:
        token_service_factory: Builds the token-service client for the URL
            advertised by the director.
        logger: Logger for grant diagnostics; defaults to the module logger.
    """

    def __init__(
        self,
        token_service_factory: TokenServiceFactory,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._factory = token_service_factory
        self._log = logger if logger is not None else logging.getLogger(__name__)

    @property
    def auth_type(self) -> AuthType:
        return AuthType.UAA

    def authenticate(self, store: CredentialStore, info: AuthInfo) -> str:
        """Run a refresh grant if a refresh token is set, else a password grant.

        Token-service errors are not caught here; they reach the caller of
        :meth:`~directorctl.client.DirectorClient.get` as raised.
        """
        service = self._factory(info.token_url)
        if store.refresh_token:
            self._log.debug("Performing refresh token grant UAA auth")
            pair = service.refresh(CLIENT_ID, CLIENT_SECRET, store.refresh_token)
        else:
            self._log.debug(
                "Performing password grant UAA auth for user `%s'", store.username
            )
            pair = service.password(
                CLIENT_ID, CLIENT_SECRET, store.username, store.password
            )

        store.resolve_bearer(pair.access_token)
        return store.bearer_header()
