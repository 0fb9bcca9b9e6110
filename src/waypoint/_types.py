"""Core protocols and type aliases for waypoint.

- Environ is the request metadata mapping (WSGI/CGI keys)
- DataInput is the extraction port over an Environ
- IsMatch is the custom predicate port consulted last in the match chain
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any, Protocol, TypeAlias, runtime_checkable

# Request metadata, shaped like a WSGI environ.
Environ: TypeAlias = Mapping[str, Any]

# Captures gathered during matching. None marks an optional group that
# did not participate in the match.
Matches: TypeAlias = Mapping[str, str | None]

# The erased value type returned by inputs.
# None means "not supplied by the request".
MatchingData: TypeAlias = str | bool | None

# Link generation is owned by the routing layer; the route only carries it.
Generate: TypeAlias = Callable[..., Any]


class Failure(StrEnum):
    """Which stage of the match chain rejected the request.

    Values are listed in evaluation order.
    """

    ROUTABLE = "FAILED_ROUTABLE"
    SECURE = "FAILED_SECURE"
    REGEX = "FAILED_REGEX"
    METHOD = "FAILED_METHOD"
    ACCEPT = "FAILED_ACCEPT"
    SERVER = "FAILED_SERVER"
    CUSTOM = "FAILED_CUSTOM"


@runtime_checkable
class DataInput(Protocol):
    """Extract a value from the request metadata."""

    def get(self, environ: Environ, /) -> MatchingData: ...


@runtime_checkable
class IsMatch(Protocol):
    """Custom route predicate.

    Receives the request metadata and a read-only view of everything
    captured so far (path tokens and server field matches).
    """

    def __call__(self, environ: Environ, matches: Matches, /) -> bool: ...
