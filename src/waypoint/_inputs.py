"""DataInput implementations over the request metadata.

Each input extracts one field from an Environ and returns it as
MatchingData for the match chain.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waypoint._types import Environ, MatchingData

HTTPS_PORT = 443

_AFFIRMATIVE = frozenset({"on", "1", "true", "yes"})


@dataclass(frozen=True, slots=True)
class EnvironInput:
    """Extracts a metadata field by key.

    Missing fields yield ``default``. Non-string values are converted with
    ``str()`` so ports and flags given as ints still match patterns.
    """

    key: str
    default: str | None = None

    def get(self, environ: Environ, /) -> MatchingData:
        value = environ.get(self.key)
        if value is None:
            return self.default
        if isinstance(value, str):
            return value
        return str(value)


@dataclass(frozen=True, slots=True)
class MethodInput:
    """Extracts the HTTP method (case-sensitive)."""

    def get(self, environ: Environ, /) -> MatchingData:
        return environ.get("REQUEST_METHOD")


@dataclass(frozen=True, slots=True)
class AcceptInput:
    """Extracts the raw Accept header, or None when it was not sent."""

    def get(self, environ: Environ, /) -> MatchingData:
        return environ.get("HTTP_ACCEPT")


@dataclass(frozen=True, slots=True)
class SecureInput:
    """Derives whether the request arrived over a secure transport.

    Secure when ``HTTPS`` is True or one of ``on``/``1``/``true``/``yes``
    (case-insensitive), when ``wsgi.url_scheme`` is ``https``, or when
    ``SERVER_PORT`` is 443.
    Never returns None.
    """

    def get(self, environ: Environ, /) -> MatchingData:
        https = environ.get("HTTPS")
        if isinstance(https, bool):
            if https:
                return True
        elif https is not None and str(https).lower() in _AFFIRMATIVE:
            return True

        if environ.get("wsgi.url_scheme") == "https":
            return True

        return str(environ.get("SERVER_PORT", "")) == str(HTTPS_PORT)
