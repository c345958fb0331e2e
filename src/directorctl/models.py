"""Canonical Pydantic models shared across all directorctl modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig`, :class:`GlobalConfig`,
    and :class:`Profile`.

**Wire models** -- decoded from director and token-service responses:
    :class:`AuthInfo` (the ``/info`` discovery document) and
    :class:`TokenPair` (the result of a password or refresh grant), along
    with the :class:`AuthType` and :class:`AuthMode` enumerations used by
    the auth negotiator.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Auth enumerations ---


class AuthType(str, enum.Enum):
    """Auth schemes a director can advertise in ``/info`` that this client performs."""

    BASIC = "basic"
    UAA = "uaa"


class AuthMode(str, enum.Enum):
    """Resolved authorization mode of one client session."""

    UNRESOLVED = "unresolved"
    BASIC = "basic"
    BEARER = "bearer"


# --- Wire models ---


class AuthOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str = ""


class UserAuthentication(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = ""
    options: AuthOptions = Field(default_factory=AuthOptions)


class AuthInfo(BaseModel):
    """The director's unauthenticated ``GET /info`` document.

    Only ``user_authentication`` matters for auth negotiation; other keys
    (``name``, ``uuid``, ``version``, ``features`` ...) are preserved in
    ``model_extra``.

    Example::

        info = AuthInfo.model_validate_json(
            '{"user_authentication": {"type": "uaa",'
            ' "options": {"url": "https://uaa.example.com:8443"}}}'
        )
        assert info.auth_type == "uaa"
    """

    model_config = ConfigDict(extra="allow")

    user_authentication: UserAuthentication = Field(default_factory=UserAuthentication)

    @property
    def auth_type(self) -> str:
        """The raw auth type tag, e.g. ``"basic"`` or ``"uaa"``."""
        return self.user_authentication.type

    @property
    def token_url(self) -> str:
        """The token-service URL advertised for ``uaa`` auth (empty otherwise)."""
        return self.user_authentication.options.url


class TokenPair(BaseModel):
    """Access/refresh token pair returned by the token service."""

    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None


# --- Configuration models ---


class RequestConfig(BaseModel):
    """HTTP transport settings applied to every call made for a profile."""

    timeout: Optional[float] = Field(
        default=30.0,
        description="Request timeout in seconds (null disables the timeout)",
    )


class OutputConfig(BaseModel):
    """Default output format, used when neither ``--json`` nor ``--plain`` is given."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/directorctl/config.json``.

    Fields here have the lowest precedence and can be overridden by
    environment variables or CLI flags. See
    :func:`~directorctl.config.resolve_config` for the full precedence chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)


class Profile(BaseModel):
    """Connection settings for one director, stored under ``profiles/``.

    Secrets never live in a profile. Passwords and tokens are referenced
    through *credential sources* (``env:VAR``, ``file:/path`` or
    ``prompt``) that :func:`~directorctl.config.resolve_credential`
    reads at connection time.

    See Also:
        :func:`~directorctl.config.load_profile`: Deserialise a profile by name.
        :func:`~directorctl.config.client_from_profile`: Build a client from it.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    url: str = Field(description="Director address, with or without scheme and port")
    username: Optional[str] = None
    password_source: Optional[str] = Field(
        default=None, description="Credential source for the password"
    )
    refresh_token_source: Optional[str] = Field(
        default=None, description="Credential source for a UAA refresh token"
    )
    access_token_source: Optional[str] = Field(
        default=None, description="Credential source for a pre-issued access token"
    )
    skip_ssl_validation: bool = Field(
        default=False, description="Skip TLS certificate verification"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
