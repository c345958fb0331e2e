"""Shared test fixtures for directorctl.

Provides a scriptable director/UAA server behind :class:`httpx.MockTransport`,
config isolation, and output-state management. These fixtures are
discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from directorctl.output import OutputManager, reset_output, set_output


UAA_URL = "https://uaa.example.com:8443"


class DirectorStub:
    """In-memory director plus token service.

    ``GET /info`` advertises :attr:`auth_type`; ``POST /oauth/token`` on the
    UAA host answers with :attr:`token_status` / :attr:`token_body`; every
    other path is served from :attr:`routes`. All requests are recorded.
    """

    def __init__(self, auth_type: str = "basic", uaa_url: str = UAA_URL) -> None:
        self.auth_type = auth_type
        self.uaa_url = uaa_url
        self.routes: dict[str, tuple[int, str]] = {}
        self.requests: list[httpx.Request] = []
        self.info_unreachable = False
        self.info_extra: dict[str, Any] = {}
        self.token_status = 200
        self.token_body: Any = {
            "access_token": "access-1",
            "refresh_token": "refresh-1",
            "token_type": "bearer",
            "expires_in": 600,
        }

    def add(self, path: str, body: Any, status: int = 200) -> None:
        text = body if isinstance(body, str) else json.dumps(body)
        self.routes[path] = (status, text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/oauth/token":
            if isinstance(self.token_body, str):
                return httpx.Response(self.token_status, text=self.token_body)
            return httpx.Response(self.token_status, json=self.token_body)

        if path == "/info":
            if self.info_unreachable:
                raise httpx.ConnectError("connection refused", request=request)
            document = {
                "name": "test-director",
                "uuid": "b1c2d3",
                "version": "280.0.0",
                "user_authentication": {
                    "type": self.auth_type,
                    "options": {"url": self.uaa_url},
                },
            }
            document.update(self.info_extra)
            return httpx.Response(200, json=document)

        status, text = self.routes.get(path, (404, "Not Found"))
        return httpx.Response(status, text=text)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def token_form(self, index: int = 0) -> dict[str, str]:
        """Decoded form fields of the *index*-th token request."""
        request = self.requests_to("/oauth/token")[index]
        return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


@pytest.fixture
def director() -> DirectorStub:
    """A director stub advertising basic auth, with ``/deployments`` routed."""
    stub = DirectorStub()
    stub.add("/deployments", [{"name": "cf"}, {"name": "redis"}])
    return stub


# ---------------------------------------------------------------------------
# Output and config isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager binds sys.stdout/sys.stderr when it is created; CliRunner
    swaps those streams, so a manager left over from one test would write
    to closed files in the next.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo the level and handlers the CLI callback sets on the ``directorctl`` logger."""
    log = logging.getLogger("directorctl")
    level, handlers = log.level, list(log.handlers)
    yield
    log.setLevel(level)
    log.handlers[:] = handlers


@pytest.fixture
def quiet_output() -> OutputManager:
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at tmp_path and clear DIRECTORCTL_* variables."""
    monkeypatch.setattr("directorctl.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["DIRECTORCTL_PROFILE", "DIRECTORCTL_URL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
