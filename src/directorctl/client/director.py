"""Synchronous director client with auth negotiation and response caching.

This module provides :class:`DirectorClient`, one authenticated session
against a director. It wraps :class:`httpx.Client` and layers on:

- **Endpoint resolution** -- bare hosts get ``https://`` and port 25555
  (see :func:`directorctl.endpoint.resolve`).
- **Auth negotiation** -- the first authenticated request discovers the
  director's auth type via ``GET /info`` and obtains a credential through
  :class:`~directorctl.auth.negotiator.AuthNegotiator`.
- **Response caching** -- every successful body is kept in a
  session-scoped :class:`~directorctl.cache.ResponseCache` and served for
  all later reads of the same path.

There are no retries: the first transport, status or decode error is
raised to the caller.

A client is not safe for concurrent use. Serialise calls on one instance
or give each concurrent caller its own client.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from directorctl.auth.base import TokenService
from directorctl.auth.credentials import CredentialStore
from directorctl.auth.negotiator import AuthNegotiator, create_default_negotiator
from directorctl.auth.uaa import TokenServiceFactory, UAAClient
from directorctl.cache import ResponseCache
from directorctl.endpoint import resolve
from directorctl.exceptions import (
    ConfigError,
    DecodeError,
    NonSuccessStatusError,
    TransportError,
)
from directorctl.models import AuthInfo

INFO_PATH = "/info"
"""Unauthenticated discovery endpoint advertising the director's auth type."""


class DirectorClient:
    """One authenticated session against a director.

    Args:
        url: Director address, with or without scheme and port.
        username: Username for basic auth or the UAA password grant.
        password: Password matching *username*.
        refresh_token: UAA refresh token; preferred over the password grant.
        access_token: Pre-issued bearer token. When set, requests use it
            directly and discovery never runs.
        skip_ssl_validation: Disable TLS certificate verification for the
            director and the token service.
        timeout: Per-request timeout in seconds. ``None`` (the default)
            disables the timeout.
        transport: Optional :class:`httpx.BaseTransport` shared by the
            director and token-service connections.
        token_service_factory: Builds the token-service client for the URL
            advertised in ``/info``. Defaults to :class:`UAAClient`.
        logger: Logging sink for request and cache diagnostics.

    Example::

        with DirectorClient("10.0.0.6", username="admin", password="s3cret") as director:
            deployments = director.get("/deployments", list[dict])
    """

    def __init__(
        self,
        url: str,
        username: str = "",
        password: str = "",
        refresh_token: str = "",
        access_token: str = "",
        skip_ssl_validation: bool = False,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        token_service_factory: Optional[TokenServiceFactory] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.url = url
        self.skip_ssl_validation = skip_ssl_validation
        self._timeout = timeout
        self._transport = transport
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._cache = ResponseCache()
        self._credentials = CredentialStore(
            username=username,
            password=password,
            refresh_token=refresh_token,
            access_token=access_token,
        )
        self._negotiator = create_default_negotiator(
            self._credentials,
            self.info,
            token_service_factory or self._make_token_service,
            logger=self._log,
        )
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> DirectorClient:
        self._http()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection pool. The cache and auth state are kept."""
        if self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Session state
    # ------------------------------------------------------------------ #

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def negotiator(self) -> AuthNegotiator:
        return self._negotiator

    def reset_auth(self) -> None:
        """Drop the negotiated auth mode and token; the next request rediscovers."""
        self._credentials.reset()

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def path(self, path: str) -> str:
        """Return the fully qualified URL for *path* on this director."""
        return resolve(self.url, path)

    def get(self, path: str, output: Any = None) -> Any:
        """Fetch *path* with authorization, serving repeated reads from the cache.

        On a cache hit the stored body is decoded again and no auth or
        network work happens. On a miss the negotiator supplies the
        ``Authorization`` header and the request is executed.

        Args:
            path: Request path, e.g. ``"/deployments"``.
            output: Type to decode the JSON body into (a Pydantic model,
                ``dict``, ``list[Model]`` ...). ``None`` skips decoding.

        Returns:
            The decoded body, or ``None`` when *output* is ``None``.

        Raises:
            NoCredentialsError: If auth is needed and nothing is configured.
            UnknownAuthTypeError: If the director uses an unsupported scheme.
            TokenExchangeError: If the token service rejects the grant.
            TransportError: On network-level failures.
            NonSuccessStatusError: On a status code of 300 or above.
            DecodeError: If the body does not decode into *output*.
        """
        cached = self._cache.get(path)
        if cached is not None:
            self._log.debug("http cache hit: %s", path)
            return self._decode(cached, output)

        self._log.debug("http cache miss: %s", path)
        auth_header = self._negotiator.auth_header()
        request = self._build_request(path, {"Authorization": auth_header})
        return self.execute(request, path, output)

    def info(self) -> AuthInfo:
        """Return the director's unauthenticated ``/info`` document.

        The discovery call is cached like any other path, so only the first
        call in a session touches the network.
        """
        cached = self._cache.get(INFO_PATH)
        if cached is not None:
            self._log.debug("http cache hit: %s", INFO_PATH)
            return self._decode(cached, AuthInfo)

        request = self._build_request(INFO_PATH)
        return self.execute(request, INFO_PATH, AuthInfo)

    def execute(self, request: httpx.Request, path: str, output: Any = None) -> Any:
        """Send *request*, validate the status, cache the body and decode it.

        The body is cached under *path* as soon as the status check passes,
        before decoding. A :class:`DecodeError` therefore leaves the body
        cached.

        Args:
            request: The prepared request.
            path: Cache key for the response body.
            output: Type to decode into, or ``None`` to skip decoding.

        Returns:
            The decoded body, or ``None`` when *output* is ``None``.
        """
        client = self._http()
        self._log.debug("%s %s", request.method, request.url)
        try:
            response = client.send(request)
        except httpx.RequestError as exc:
            raise TransportError(f"{request.method} {request.url} failed: {exc}") from exc

        self._log.debug("HTTP %d for %s", response.status_code, path)
        if response.status_code >= 300:
            raise NonSuccessStatusError()

        body = response.text
        self._log.debug("Inserting to cache: %s", path)
        self._cache.put(path, body)
        return self._decode(body, output)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _http(self) -> httpx.Client:
        """Return the pooled :class:`httpx.Client`, creating it on first use."""
        if self._client is None:
            kwargs: dict[str, Any] = {
                "verify": not self.skip_ssl_validation,
                "timeout": self._timeout,
                "follow_redirects": True,
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.Client(**kwargs)
        return self._client

    def _build_request(
        self, path: str, headers: Optional[dict[str, str]] = None
    ) -> httpx.Request:
        url = self.path(path)
        merged_headers = {"Accept": "application/json"}
        merged_headers.update(headers or {})
        try:
            return httpx.Request("GET", url, headers=merged_headers)
        except httpx.InvalidURL as exc:
            raise ConfigError(f"Invalid director URL '{url}': {exc}") from exc

    def _make_token_service(self, url: str) -> TokenService:
        return UAAClient(
            url,
            verify=not self.skip_ssl_validation,
            timeout=self._timeout,
            transport=self._transport,
        )

    @staticmethod
    def _decode(body: str, output: Any) -> Any:
        if output is None:
            return None
        try:
            return TypeAdapter(output).validate_json(body)
        except ValidationError as exc:
            raise DecodeError(f"Could not decode response body: {exc}") from exc
