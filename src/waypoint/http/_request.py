"""HttpRequest — a plain HTTP request description that renders an environ.

For callers that do not already have a WSGI environ (tests, ASGI apps,
custom servers): describe the request once and hand ``request.path`` and
``request.environ`` to ``Route.evaluate()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

# WSGI keeps these two headers out of the HTTP_ namespace.
_UNPREFIXED_HEADERS = frozenset({"content-type", "content-length"})


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """HTTP request context for matching.

    The path should be provided as-is from the wire (may include query
    string). The query string is split off into ``QUERY_STRING`` and left
    unparsed.

    Header names are case-insensitive. ``extra`` is merged last into the
    environ, for server fields routes may constrain (``SERVER_NAME``,
    ``REMOTE_ADDR``, ...).
    """

    method: str = "GET"
    raw_path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)
    scheme: str = "http"
    server_port: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    # Computed fields, split from raw_path
    _clean_path: str = field(init=False, repr=False)
    _query_string: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        path, _, query_string = self.raw_path.partition("?")
        object.__setattr__(self, "_clean_path", path)
        object.__setattr__(self, "_query_string", query_string)

    @property
    def path(self) -> str:
        """Path without query string."""
        return self._clean_path

    @property
    def port(self) -> int:
        """The server port, defaulting from the scheme."""
        if self.server_port is not None:
            return self.server_port
        return 443 if self.scheme == "https" else 80

    @property
    def environ(self) -> MappingProxyType[str, Any]:
        """WSGI-style request metadata for the match chain."""
        environ: dict[str, Any] = {
            "REQUEST_METHOD": self.method,
            "PATH_INFO": self._clean_path,
            "QUERY_STRING": self._query_string,
            "SERVER_PORT": str(self.port),
            "wsgi.url_scheme": self.scheme,
        }
        if self.scheme == "https":
            environ["HTTPS"] = "on"

        for name, value in self.headers.items():
            lowered = name.lower()
            key = lowered.upper().replace("-", "_")
            if lowered not in _UNPREFIXED_HEADERS:
                key = f"HTTP_{key}"
            environ[key] = value

        environ.update(self.extra)
        return MappingProxyType(environ)
