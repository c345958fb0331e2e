"""Auth negotiator -- decides how a session authorizes its requests.

The :class:`AuthNegotiator` turns a session's (possibly partial)
credentials into an ``Authorization`` header value. Resolution walks a
small state machine over :class:`~directorctl.models.AuthMode`:

1. A known access token is always used as-is (``Bearer``), with no
   discovery.
2. A session already resolved to basic auth rebuilds the ``Basic`` header
   from its username and password.
3. With no credential material at all, :class:`NoCredentialsError` is
   raised before any network call.
4. Otherwise the director's ``/info`` is fetched and the advertised
   :class:`~directorctl.models.AuthType` selects an
   :class:`~directorctl.auth.base.AuthHandler`. An unrecognised type raises
   :class:`UnknownAuthTypeError`.

After a successful negotiation the store's state makes every later call
take step 1 or 2, so discovery and token exchange happen at most once per
session.

For most use cases, call :func:`create_default_negotiator` to get a
negotiator with the ``basic`` and ``uaa`` handlers registered.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from directorctl.auth.base import AuthHandler, TokenService
from directorctl.auth.credentials import CredentialStore
from directorctl.exceptions import NoCredentialsError, UnknownAuthTypeError
from directorctl.models import AuthInfo, AuthMode, AuthType

InfoFetcher = Callable[[], AuthInfo]


class AuthNegotiator:
    """Registry of auth handlers plus the header-resolution state machine.

    Args:
        store: The session's credential store. The negotiator mutates it
            when an auth mode is settled.
        fetch_info: Performs the unauthenticated discovery call.
        handlers: Handlers to register, one per :class:`AuthType` member.
        logger: Logger for negotiation diagnostics.

    Example::

        negotiator = AuthNegotiator(store, client.info, [BasicAuthHandler()])
        header = negotiator.auth_header()
    """

    def __init__(
        self,
        store: CredentialStore,
        fetch_info: InfoFetcher,
        handlers: Iterable[AuthHandler] = (),
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._fetch_info = fetch_info
        self._handlers: dict[AuthType, AuthHandler] = {}
        self._log = logger if logger is not None else logging.getLogger(__name__)
        for handler in handlers:
            self.register(handler)

    @property
    def store(self) -> CredentialStore:
        return self._store

    def register(self, handler: AuthHandler) -> None:
        """Register *handler* for its :attr:`~AuthHandler.auth_type`, replacing any previous one."""
        self._handlers[handler.auth_type] = handler

    def get_handler(self, auth_type: str) -> AuthHandler:
        """Return the handler for the advertised *auth_type* tag.

        Raises:
            UnknownAuthTypeError: If *auth_type* is not an :class:`AuthType`
                member or no handler is registered for it.
        """
        try:
            member = AuthType(auth_type)
        except ValueError:
            raise UnknownAuthTypeError(auth_type) from None

        handler = self._handlers.get(member)
        if handler is None:
            raise UnknownAuthTypeError(auth_type)
        return handler

    def auth_header(self) -> str:
        """Return the ``Authorization`` header value for the next request.

        Raises:
            NoCredentialsError: If nothing usable is configured.
            UnknownAuthTypeError: If the director advertises an unsupported
                auth type.
            TokenExchangeError: If the token service rejects the grant.
            TransportError: If the discovery call or token exchange cannot
                reach its server.
            NonSuccessStatusError: If the discovery call returns a non-2xx
                status.
            DecodeError: If ``/info`` is not a valid discovery document.
        """
        store = self._store
        if store.access_token:
            return store.bearer_header()

        if store.mode is AuthMode.BASIC:
            return store.basic_header()

        if not store.has_credentials():
            raise NoCredentialsError()

        info = self._fetch_info()
        handler = self.get_handler(info.auth_type)
        self._log.debug("Director advertises `%s' auth", info.auth_type)
        return handler.authenticate(store, info)


def create_default_negotiator(
    store: CredentialStore,
    fetch_info: InfoFetcher,
    token_service_factory: Callable[[str], TokenService],
    logger: Optional[logging.Logger] = None,
) -> AuthNegotiator:
    """Create an :class:`AuthNegotiator` with the built-in handlers.

    - ``basic`` -- :class:`~directorctl.auth.basic.BasicAuthHandler`
    - ``uaa`` -- :class:`~directorctl.auth.uaa.UAAAuthHandler`, using
      *token_service_factory* to reach the advertised token service.
    """
    from directorctl.auth.basic import BasicAuthHandler
    from directorctl.auth.uaa import UAAAuthHandler

    return AuthNegotiator(
        store,
        fetch_info,
        handlers=[
            BasicAuthHandler(),
            UAAAuthHandler(token_service_factory, logger=logger),
        ],
        logger=logger,
    )
