"""Director HTTP client.

:class:`DirectorClient` is one authenticated session against a director:
it resolves endpoint URLs, negotiates auth on the first request and caches
every successful response body for the life of the session.

Example::

    from directorctl.client import DirectorClient

    with DirectorClient("10.0.0.6", username="admin", password="s3cret") as director:
        info = director.info()
        deployments = director.get("/deployments", list[dict])
"""

from directorctl.client.director import INFO_PATH, DirectorClient

__all__ = ["DirectorClient", "INFO_PATH"]
