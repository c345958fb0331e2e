"""In-memory response cache keyed by request path.

Cache policy: entries are never evicted, never expire and cannot be
invalidated. Memory grows with the number of distinct paths fetched and is
released when the owning client is discarded. Only bodies of responses that
passed status validation are stored, so every cached body came from a
response with a status code below 300.

Keys are the request path exactly as the caller passed it (``"/info"``,
``"/deployments"``), not the resolved URL. A client only ever talks to one
director, so the path alone identifies the resource.
"""

from __future__ import annotations

from typing import Any, Optional


class ResponseCache:
    """Unbounded path -> body map for one client session.

    Example::

        cache = ResponseCache()
        cache.put("/info", '{"name": "bosh"}')
        assert cache.get("/info") == '{"name": "bosh"}'
        assert cache.get("/deployments") is None
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def get(self, path: str) -> Optional[str]:
        """Return the cached body for *path*, or ``None`` on a miss.

        An empty string is a valid cached body and is distinct from a miss.
        """
        return self._entries.get(path)

    def put(self, path: str, body: str) -> None:
        """Store *body* for *path*, replacing any previous entry."""
        self._entries[path] = body

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``size`` (number of entries), ``bytes`` (total
            length of cached bodies) and ``paths`` (sorted cached paths).
        """
        return {
            "size": len(self._entries),
            "bytes": sum(len(body) for body in self._entries.values()),
            "paths": sorted(self._entries),
        }
