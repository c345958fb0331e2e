"""directorctl -- an authenticated client for director management APIs.

A director advertises the auth scheme it requires through an
unauthenticated ``GET /info``. :class:`~directorctl.client.DirectorClient`
discovers that scheme on first use, obtains a credential (static basic
auth, or a bearer token from the UAA token service via a password or
refresh grant), and caches every successful response for the rest of the
session.

Typical usage::

    from directorctl.client import DirectorClient

    with DirectorClient("10.0.0.6", username="admin", password="s3cret") as director:
        deployments = director.get("/deployments", list[dict])

Modules:
    app: Typer application and ``directorctl`` entry point.
    client: The director session (request pipeline and cache wiring).
    auth: Credential store, auth negotiator and token-service client.
    cache: Session-scoped response cache.
    endpoint: Request URL construction.
    config: XDG-aware profile and global configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting for the CLI.
"""

__version__ = "0.1.0"
