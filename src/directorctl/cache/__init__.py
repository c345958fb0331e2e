"""Session-scoped response caching for directorctl.

This package provides :class:`ResponseCache`, an in-memory map from the
logical request path to the raw body of the first successful response for
that path. It is owned by a :class:`~directorctl.client.DirectorClient`
and lives exactly as long as the client does.
"""

from directorctl.cache.cache import ResponseCache

__all__ = ["ResponseCache"]
