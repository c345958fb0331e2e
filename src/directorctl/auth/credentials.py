"""Mutable authentication state of one client session.

A :class:`CredentialStore` is created by, and exclusively owned by, a
single :class:`~directorctl.client.DirectorClient`. Every change to the
resolved auth mode goes through :meth:`CredentialStore.resolve_basic`,
:meth:`CredentialStore.resolve_bearer` or :meth:`CredentialStore.reset`
on that one instance; nothing copies the store.

The store is not thread-safe. Share a client between threads only if the
callers serialise their requests.
"""

from __future__ import annotations

import base64

from directorctl.models import AuthMode


class CredentialStore:
    """Static credentials plus the negotiated auth state.

    Args:
        username: Director username for basic auth or the password grant.
        password: Password matching *username*.
        refresh_token: Token-service refresh token. Takes priority over the
            password when the director uses ``uaa`` auth.
        access_token: Optional pre-issued bearer token. When set, every
            request uses it and discovery never runs.
    """

    def __init__(
        self,
        username: str = "",
        password: str = "",
        refresh_token: str = "",
        access_token: str = "",
    ) -> None:
        self._username = username or ""
        self._password = password or ""
        self._refresh_token = refresh_token or ""
        self.access_token = access_token or ""
        self.mode = AuthMode.BEARER if self.access_token else AuthMode.UNRESOLVED

    @property
    def username(self) -> str:
        return self._username

    @property
    def password(self) -> str:
        return self._password

    @property
    def refresh_token(self) -> str:
        return self._refresh_token

    def has_credentials(self) -> bool:
        """Return ``True`` if any username, password or refresh token is configured."""
        return bool(self._username or self._password or self._refresh_token)

    def basic_header(self) -> str:
        """Return ``Basic <base64(username:password)>``."""
        raw = f"{self._username}:{self._password}".encode("utf-8")
        return f"Basic {base64.b64encode(raw).decode('ascii')}"

    def bearer_header(self) -> str:
        """Return ``Bearer <access_token>``."""
        return f"Bearer {self.access_token}"

    def resolve_basic(self) -> None:
        """Record that the director uses static basic auth."""
        self.mode = AuthMode.BASIC

    def resolve_bearer(self, access_token: str) -> None:
        """Record a negotiated bearer token."""
        self.access_token = access_token
        self.mode = AuthMode.BEARER

    def reset(self) -> None:
        """Forget the negotiated state so the next request rediscovers the auth type."""
        self.access_token = ""
        self.mode = AuthMode.UNRESOLVED

    def __repr__(self) -> str:
        return (
            f"CredentialStore(username={self._username!r}, mode={self.mode.value!r}, "
            f"has_refresh_token={bool(self._refresh_token)}, "
            f"has_access_token={bool(self.access_token)})"
        )
