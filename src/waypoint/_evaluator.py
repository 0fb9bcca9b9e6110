"""Match evaluation — the ordered check chain for a single route.

Checks run strictly in this order and stop at the first rejection:

| Check    | Applies when          | Failure          |
|----------|-----------------------|------------------|
| routable | always                | FAILED_ROUTABLE  |
| secure   | route.secure set      | FAILED_SECURE    |
| regex    | always                | FAILED_REGEX     |
| method   | route.methods set     | FAILED_METHOD    |
| accept   | route.accept set      | FAILED_ACCEPT    |
| server   | once per server field | FAILED_SERVER    |
| custom   | route.predicate set   | FAILED_CUSTOM    |

Every applicable check that passes adds one to the score. Checks that do
not apply are skipped and add nothing.

All per-attempt state lives in the returned MatchAttempt; routes are never
mutated, so one route may be evaluated from many threads at once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeAlias

from waypoint._inputs import AcceptInput, EnvironInput, MethodInput, SecureInput
from waypoint._negotiation import negotiate
from waypoint._params import extract_params
from waypoint._types import Failure

if TYPE_CHECKING:
    from collections.abc import Mapping

    from waypoint._route import Route
    from waypoint._types import DataInput, Environ

logger = logging.getLogger("waypoint")

_EMPTY: Mapping[str, Any] = MappingProxyType({})

_METHOD: DataInput = MethodInput()
_ACCEPT: DataInput = AcceptInput()
_SECURE: DataInput = SecureInput()


@dataclass(frozen=True, slots=True)
class Rejection:
    """Why a check rejected the request."""

    failure: Failure
    detail: str | None = None

    def __str__(self) -> str:
        if self.detail is None:
            return self.failure.value
        return f"{self.failure.value} ({self.detail})"


@dataclass(frozen=True, slots=True)
class MatchAttempt:
    """The outcome of evaluating one request against one route.

    ``matches`` holds the raw captures (path groups plus matched server
    fields) and is only populated once the path pattern has matched.
    ``params`` is only populated when every check passed.
    """

    route: Route
    score: int = 0
    failure: Failure | None = None
    debug: tuple[str, ...] = ()
    matches: Mapping[str, str | None] = field(default_factory=lambda: _EMPTY)
    params: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    media_type: str | None = None

    @property
    def matched(self) -> bool:
        return self.failure is None

    def failed_accept(self) -> bool:
        """True when the Accept header was the reason for rejection (406)."""
        return self.failure is Failure.ACCEPT

    def failed_method(self) -> bool:
        """True when the request method was the reason for rejection (405)."""
        return self.failure is Failure.METHOD


class _Scratch:
    """Captures gathered while the chain runs. Never escapes evaluate()."""

    __slots__ = ("matches", "media_type")

    def __init__(self) -> None:
        self.matches: dict[str, str | None] = {}
        self.media_type: str | None = None


# (number of passes, rejection or None)
Verdict: TypeAlias = "tuple[int, Rejection | None]"

Check: TypeAlias = "Callable[[Route, str, Environ, _Scratch], Verdict]"

_PASSED: Verdict = (1, None)
_SKIPPED: Verdict = (0, None)


def _check_routable(route: Route, path: str, environ: Environ, scratch: _Scratch) -> Verdict:
    if route.routable:
        return _PASSED
    return 0, Rejection(Failure.ROUTABLE)


def _check_secure(route: Route, path: str, environ: Environ, scratch: _Scratch) -> Verdict:
    if route.secure is None:
        return _SKIPPED
    if route.secure != _SECURE.get(environ):
        return 0, Rejection(Failure.SECURE)
    return _PASSED


def _check_regex(route: Route, path: str, environ: Environ, scratch: _Scratch) -> Verdict:
    found = route.pattern.search(path)
    if found is None:
        return 0, Rejection(Failure.REGEX)
    scratch.matches.update(found.groupdict())
    return _PASSED


def _check_method(route: Route, path: str, environ: Environ, scratch: _Scratch) -> Verdict:
    if not route.methods:
        return _SKIPPED
    if _METHOD.get(environ) in route.methods:
        return _PASSED
    return 0, Rejection(Failure.METHOD)


def _check_accept(route: Route, path: str, environ: Environ, scratch: _Scratch) -> Verdict:
    if not route.accept:
        return _SKIPPED
    header = _ACCEPT.get(environ)
    if header is None:
        return _PASSED
    media_type = negotiate(str(header), route.accept)
    if media_type is None:
        return 0, Rejection(Failure.ACCEPT)
    scratch.media_type = media_type
    return _PASSED


def _check_server(route: Route, path: str, environ: Environ, scratch: _Scratch) -> Verdict:
    passed = 0
    for name, matcher in route.server_matchers:
        captured = matcher.capture(EnvironInput(name, default="").get(environ))
        if captured is None:
            return passed, Rejection(Failure.SERVER, name)
        scratch.matches[name] = captured
        passed += 1
    return passed, None


def _check_custom(route: Route, path: str, environ: Environ, scratch: _Scratch) -> Verdict:
    if route.predicate is None:
        return _SKIPPED
    if route.predicate(environ, MappingProxyType(scratch.matches)):
        return _PASSED
    return 0, Rejection(Failure.CUSTOM)


CHECKS: tuple[tuple[str, Check], ...] = (
    ("routable", _check_routable),
    ("secure", _check_secure),
    ("regex", _check_regex),
    ("method", _check_method),
    ("accept", _check_accept),
    ("server", _check_server),
    ("custom", _check_custom),
)


def evaluate(route: Route, path: str, environ: Environ) -> MatchAttempt:
    """Run the check chain for ``route`` against a request.

    Never raises for a non-matching request; the rejection is reported
    through ``failure`` and ``debug`` on the returned attempt.
    """
    scratch = _Scratch()
    score = 0

    for check_name, check in CHECKS:
        passed, rejection = check(route, path, environ, scratch)
        score += passed
        if rejection is not None:
            logger.debug(
                "route %s rejected %r at %s: %s",
                route.name or route.path,
                path,
                check_name,
                rejection,
            )
            return MatchAttempt(
                route=route,
                score=score,
                failure=rejection.failure,
                debug=(str(rejection),),
                matches=MappingProxyType(scratch.matches),
            )

    matches = MappingProxyType(scratch.matches)
    params = extract_params(route.values, matches, route.wildcard)
    return MatchAttempt(
        route=route,
        score=score,
        matches=matches,
        params=MappingProxyType(params),
        media_type=scratch.media_type,
    )
