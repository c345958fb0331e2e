"""Request URL construction for director endpoints.

Directors are usually configured by bare host name (``10.0.0.6`` or
``director.example.com``); this module turns such a base into a fully
qualified URL with the ``https`` scheme and the director's default port
filled in.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

DEFAULT_PORT = 25555
"""Port the director API listens on when the base URL does not name one."""

_SCHEME_RE = re.compile(r"^(http|https)://")
_PORT_RE = re.compile(r"[0-9]+")


def resolve(base: str, path: str) -> str:
    """Build the full request URL for *path* on the director at *base*.

    ``https://`` is prepended when *base* has no ``http``/``https`` scheme,
    and :data:`DEFAULT_PORT` is added when the host has no port. *path*
    replaces the base URL's path verbatim. Scheme, credentials, host and
    port given in *base* are kept as they are.

    If the base cannot be parsed as a URL, the result is the naive
    concatenation ``base + path``; this function never raises.

    Args:
        base: The director address, e.g. ``"director.example.com"`` or
            ``"http://10.0.0.6:8443"``.
        path: An already-valid request path such as ``"/info"``.

    Returns:
        The fully qualified URL string.

    Example::

        >>> resolve("director.example.com", "/info")
        'https://director.example.com:25555/info'
    """
    url = base
    if not _SCHEME_RE.match(url):
        url = "https://" + url

    try:
        parts = urlsplit(url)
    except ValueError:
        return base + path

    port = _explicit_port(parts.netloc)
    if port and not _PORT_RE.fullmatch(port):
        return base + path

    netloc = parts.netloc
    if not port:
        netloc = f"{netloc}:{DEFAULT_PORT}"

    return urlunsplit((parts.scheme, netloc, path, parts.query, parts.fragment))


def _explicit_port(netloc: str) -> str:
    """Return the raw port text of *netloc*, or ``""`` when none is given.

    Unlike :attr:`urllib.parse.SplitResult.port` this does not range-check,
    so ``host:99999`` keeps its port. Only non-numeric ports are rejected
    by :func:`resolve`.
    """
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        rest = hostport.partition("]")[2]
        return rest[1:] if rest.startswith(":") else ""
    return hostport.rpartition(":")[2] if ":" in hostport else ""
