"""Route — an immutable route specification and its builder.

A Route is configured once, through RouteBuilder or directly, and is then
shared read-only by every match attempt. The path template is compiled in
``__post_init__``; the compiled pattern is assigned exactly once and never
recomputed, so concurrent readers need no locking.

Example::

    route = (
        RouteBuilder("/blog/{id}{format}", name="blog.read")
        .tokens({"id": r"\\d+", "format": r"(\\.[^/]+)?"})
        .values({"format": ".html"})
        .methods("GET")
        .build()
    )
    attempt = route.evaluate("/blog/42.json", {"REQUEST_METHOD": "GET"})
    attempt.params  # {'id': '42', 'format': '.json'}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from waypoint._compiler import CompiledPath, compile_path
from waypoint._evaluator import MatchAttempt, evaluate
from waypoint._matchers import RegexMatcher

if TYPE_CHECKING:
    import re2

    from waypoint._types import Environ, Generate, IsMatch


def _as_tuple(items: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(items, str):
        return (items,)
    return tuple(items)


@dataclass(frozen=True, slots=True, eq=False)
class Route:
    """A single route specification.

    Mapping fields are frozen into read-only views at construction.
    ``values`` is normalised to hold every placeholder of the template;
    placeholders without a declared default map to None.

    Raises:
        InvalidPatternError: If the compiled path or a server sub-pattern is
            rejected by RE2.
    """

    path: str
    name: str | None = None
    values: Mapping[str, Any] = field(default_factory=dict)
    tokens: Mapping[str, str] = field(default_factory=dict)
    server: Mapping[str, str] = field(default_factory=dict)
    methods: frozenset[str] = frozenset()
    accept: tuple[str, ...] = ()
    secure: bool | None = None
    routable: bool = True
    wildcard: str | None = None
    predicate: IsMatch | None = None
    generate: Generate | None = None

    _compiled: CompiledPath = field(init=False, repr=False)
    _server_matchers: tuple[tuple[str, RegexMatcher], ...] = field(
        init=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "tokens", MappingProxyType(dict(self.tokens)))
        object.__setattr__(self, "server", MappingProxyType(dict(self.server)))
        object.__setattr__(self, "methods", frozenset(_as_tuple(self.methods)))
        object.__setattr__(self, "accept", _as_tuple(self.accept))

        compiled = compile_path(self.path, self.tokens, self.wildcard)
        object.__setattr__(self, "_compiled", compiled)

        values = dict(self.values)
        for name in compiled.params:
            values.setdefault(name, None)
        object.__setattr__(self, "values", MappingProxyType(values))

        object.__setattr__(
            self,
            "_server_matchers",
            tuple((name, RegexMatcher(p)) for name, p in self.server.items()),
        )

    @property
    def regex(self) -> str:
        """The anchored pattern text the path compiles to."""
        return self._compiled.regex

    @property
    def pattern(self) -> re2.Pattern[str]:
        return self._compiled.pattern

    @property
    def params(self) -> tuple[str, ...]:
        """Placeholder names in template order."""
        return self._compiled.params

    @property
    def server_matchers(self) -> tuple[tuple[str, RegexMatcher], ...]:
        return self._server_matchers

    def evaluate(self, path: str, environ: Environ) -> MatchAttempt:
        """Match a request against this route.

        Each call returns a fresh MatchAttempt; the route is not modified.
        """
        return evaluate(self, path, environ)

    def is_match(self, path: str, environ: Environ) -> bool:
        return evaluate(self, path, environ).matched


class RouteBuilder:
    """Fluent, mutable configuration for a Route.

    ``tokens()``, ``server()`` and ``values()`` merge into what is already
    set; ``methods()`` and ``accept()`` append; the remaining setters
    replace. Call build() to produce an immutable Route. The builder can
    keep being used afterwards; routes already built are unaffected.
    """

    def __init__(self, path: str, name: str | None = None) -> None:
        self._path = path
        self._name = name
        self._values: dict[str, Any] = {}
        self._tokens: dict[str, str] = {}
        self._server: dict[str, str] = {}
        self._methods: list[str] = []
        self._accept: list[str] = []
        self._secure: bool | None = None
        self._routable = True
        self._wildcard: str | None = None
        self._predicate: IsMatch | None = None
        self._generate: Generate | None = None

    def tokens(self, tokens: Mapping[str, str]) -> RouteBuilder:
        """Override the default ``[^/]+`` subpattern for named params."""
        self._tokens.update(tokens)
        return self

    def server(self, server: Mapping[str, str]) -> RouteBuilder:
        """Require request metadata fields to match these patterns."""
        self._server.update(server)
        return self

    def values(self, values: Mapping[str, Any]) -> RouteBuilder:
        """Set default param values."""
        self._values.update(values)
        return self

    def methods(self, methods: str | Iterable[str]) -> RouteBuilder:
        self._methods.extend(_as_tuple(methods))
        return self

    def accept(self, accept: str | Iterable[str]) -> RouteBuilder:
        for media_type in _as_tuple(accept):
            if media_type not in self._accept:
                self._accept.append(media_type)
        return self

    def secure(self, secure: bool | None = True) -> RouteBuilder:
        """Require a secure (True) or insecure (False) transport; None for either."""
        self._secure = secure
        return self

    def routable(self, routable: bool = True) -> RouteBuilder:
        self._routable = routable
        return self

    def wildcard(self, wildcard: str | None) -> RouteBuilder:
        self._wildcard = wildcard
        return self

    def predicate(self, predicate: IsMatch | None) -> RouteBuilder:
        self._predicate = predicate
        return self

    def generate(self, generate: Generate | None) -> RouteBuilder:
        self._generate = generate
        return self

    def build(self) -> Route:
        """Freeze the current configuration into a Route."""
        return Route(
            path=self._path,
            name=self._name,
            values=dict(self._values),
            tokens=dict(self._tokens),
            server=dict(self._server),
            methods=frozenset(self._methods),
            accept=tuple(self._accept),
            secure=self._secure,
            routable=self._routable,
            wildcard=self._wildcard,
            predicate=self._predicate,
            generate=self._generate,
        )
