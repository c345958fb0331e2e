"""Tests for AuthNegotiator and the built-in handlers."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from directorctl.auth.basic import BasicAuthHandler
from directorctl.auth.credentials import CredentialStore
from directorctl.auth.negotiator import AuthNegotiator, create_default_negotiator
from directorctl.auth.uaa import CLIENT_ID, CLIENT_SECRET, UAAAuthHandler
from directorctl.exceptions import (
    NoCredentialsError,
    TokenExchangeError,
    TransportError,
    UnknownAuthTypeError,
)
from directorctl.models import AuthInfo, AuthMode, AuthType, TokenPair


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _info(auth_type: str, url: str = "https://uaa.example.com:8443") -> AuthInfo:
    return AuthInfo.model_validate(
        {"user_authentication": {"type": auth_type, "options": {"url": url}}}
    )


class FakeTokenService:
    def __init__(self, pair: TokenPair | None = None, error: Exception | None = None) -> None:
        self.pair = pair or TokenPair(access_token="access-1", refresh_token="refresh-1")
        self.error = error
        self.calls: list[tuple] = []

    def password(self, client_id, client_secret, username, password):
        self.calls.append(("password", client_id, client_secret, username, password))
        if self.error:
            raise self.error
        return self.pair

    def refresh(self, client_id, client_secret, refresh_token):
        self.calls.append(("refresh", client_id, client_secret, refresh_token))
        if self.error:
            raise self.error
        return self.pair


def _negotiator(
    store: CredentialStore,
    info: AuthInfo | None = None,
    service: FakeTokenService | None = None,
) -> tuple[AuthNegotiator, MagicMock, list[str]]:
    fetch_info = MagicMock(return_value=info or _info("basic"))
    urls: list[str] = []
    service = service or FakeTokenService()

    def factory(url: str) -> FakeTokenService:
        urls.append(url)
        return service

    return create_default_negotiator(store, fetch_info, factory), fetch_info, urls


# ---------------------------------------------------------------------------
# Fast paths and pre-check
# ---------------------------------------------------------------------------


class TestFastPaths:
    def test_access_token_skips_discovery(self) -> None:
        store = CredentialStore(username="admin", password="pw", access_token="tok")
        negotiator, fetch_info, _ = _negotiator(store)
        assert negotiator.auth_header() == "Bearer tok"
        fetch_info.assert_not_called()

    def test_access_token_without_any_credentials(self) -> None:
        negotiator, fetch_info, _ = _negotiator(CredentialStore(access_token="tok"))
        assert negotiator.auth_header() == "Bearer tok"
        fetch_info.assert_not_called()

    def test_resolved_basic_skips_discovery(self) -> None:
        store = CredentialStore(username="admin", password="pw")
        store.resolve_basic()
        negotiator, fetch_info, _ = _negotiator(store)
        assert negotiator.auth_header() == store.basic_header()
        fetch_info.assert_not_called()

    def test_no_credentials_fails_before_discovery(self) -> None:
        negotiator, fetch_info, _ = _negotiator(CredentialStore())
        with pytest.raises(NoCredentialsError):
            negotiator.auth_header()
        fetch_info.assert_not_called()


# ---------------------------------------------------------------------------
# Basic dispatch
# ---------------------------------------------------------------------------


class TestBasicDispatch:
    def test_basic_resolves_mode_and_returns_header(self) -> None:
        store = CredentialStore(username="admin", password="pw")
        negotiator, fetch_info, _ = _negotiator(store, _info("basic"))

        header = negotiator.auth_header()

        assert header == store.basic_header()
        assert store.mode is AuthMode.BASIC
        assert store.access_token == ""
        fetch_info.assert_called_once()

    def test_second_call_uses_fast_path(self) -> None:
        store = CredentialStore(username="admin", password="pw")
        negotiator, fetch_info, _ = _negotiator(store, _info("basic"))
        negotiator.auth_header()
        negotiator.auth_header()
        fetch_info.assert_called_once()


# ---------------------------------------------------------------------------
# UAA dispatch
# ---------------------------------------------------------------------------


class TestUAADispatch:
    def test_password_grant(self) -> None:
        store = CredentialStore(username="admin", password="pw")
        service = FakeTokenService()
        negotiator, _, urls = _negotiator(store, _info("uaa", "https://uaa:8443"), service)

        assert negotiator.auth_header() == "Bearer access-1"
        assert urls == ["https://uaa:8443"]
        assert service.calls == [("password", CLIENT_ID, CLIENT_SECRET, "admin", "pw")]
        assert store.mode is AuthMode.BEARER
        assert store.access_token == "access-1"

    def test_refresh_grant_preferred_over_password(self) -> None:
        store = CredentialStore(username="admin", password="pw", refresh_token="r-1")
        service = FakeTokenService()
        negotiator, _, _ = _negotiator(store, _info("uaa"), service)

        negotiator.auth_header()

        assert service.calls == [("refresh", "bosh_cli", "", "r-1")]

    def test_refresh_token_alone_is_enough(self) -> None:
        store = CredentialStore(refresh_token="r-1")
        negotiator, _, _ = _negotiator(store, _info("uaa"))
        assert negotiator.auth_header() == "Bearer access-1"

    def test_bearer_sticks_after_success(self) -> None:
        store = CredentialStore(username="admin", password="pw")
        service = FakeTokenService()
        negotiator, fetch_info, _ = _negotiator(store, _info("uaa"), service)

        negotiator.auth_header()
        fetch_info.side_effect = TransportError("director unreachable")
        assert negotiator.auth_header() == "Bearer access-1"
        assert len(service.calls) == 1

    @pytest.mark.parametrize(
        "error",
        [TokenExchangeError("bad credentials"), TransportError("uaa unreachable")],
    )
    def test_token_errors_propagate_unchanged(self, error: Exception) -> None:
        store = CredentialStore(username="admin", password="pw")
        negotiator, _, _ = _negotiator(store, _info("uaa"), FakeTokenService(error=error))

        with pytest.raises(type(error)) as exc_info:
            negotiator.auth_header()

        assert exc_info.value is error
        assert store.mode is AuthMode.UNRESOLVED
        assert store.access_token == ""

    def test_uaa_failure_never_falls_back_to_basic(self) -> None:
        store = CredentialStore(username="admin", password="pw")
        service = FakeTokenService(error=TokenExchangeError("denied"))
        negotiator, fetch_info, _ = _negotiator(store, _info("uaa"), service)

        for _ in range(2):
            with pytest.raises(TokenExchangeError):
                negotiator.auth_header()
        assert store.mode is AuthMode.UNRESOLVED
        assert fetch_info.call_count == 2


# ---------------------------------------------------------------------------
# Unknown types and the registry
# ---------------------------------------------------------------------------


class TestUnknownAuthType:
    @pytest.mark.parametrize("auth_type", ["ldap", "", "BASIC", "oauth2"])
    def test_unknown_type(self, auth_type: str) -> None:
        store = CredentialStore(username="admin", password="pw")
        negotiator, _, urls = _negotiator(store, _info(auth_type))

        with pytest.raises(UnknownAuthTypeError) as exc_info:
            negotiator.auth_header()

        assert exc_info.value.auth_type == auth_type
        assert store.mode is AuthMode.UNRESOLVED
        assert urls == []

    def test_message(self) -> None:
        assert str(UnknownAuthTypeError("ldap")) == "Unknown auth type: `ldap'"

    def test_member_without_registered_handler(self) -> None:
        store = CredentialStore(username="admin", password="pw")
        negotiator = AuthNegotiator(
            store, MagicMock(return_value=_info("uaa")), handlers=[BasicAuthHandler()]
        )
        with pytest.raises(UnknownAuthTypeError):
            negotiator.auth_header()


class TestRegistry:
    def test_default_handlers(self) -> None:
        negotiator, _, _ = _negotiator(CredentialStore())
        assert isinstance(negotiator.get_handler("basic"), BasicAuthHandler)
        assert isinstance(negotiator.get_handler("uaa"), UAAAuthHandler)

    def test_register_replaces_handler(self) -> None:
        negotiator, _, _ = _negotiator(CredentialStore())
        replacement = BasicAuthHandler()
        negotiator.register(replacement)
        assert negotiator.get_handler("basic") is replacement

    def test_handler_auth_types(self) -> None:
        assert BasicAuthHandler().auth_type is AuthType.BASIC
        assert UAAAuthHandler(lambda url: FakeTokenService()).auth_type is AuthType.UAA
