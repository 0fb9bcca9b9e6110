"""Tests for Route construction, accessors, and RouteBuilder."""

from __future__ import annotations

import dataclasses

import pytest

from waypoint import InvalidPatternError, RegexMatcher, Route, RouteBuilder, RouteError
from waypoint.testing import make_environ


class TestRoute:
    def test_accessors(self) -> None:
        def generate(**params: str) -> str:
            return "/blog/{id}".format(**params)

        route = Route("/blog/{id}", name="blog.read", wildcard="rest", generate=generate)
        assert route.name == "blog.read"
        assert route.path == "/blog/{id}"
        assert route.wildcard == "rest"
        assert route.generate is generate
        assert route.regex == "^/blog/(?P<id>[^/]+)(/(?P<rest>.*))?$"
        assert route.params == ("id",)

    def test_generate_is_not_called(self) -> None:
        def generate(**params: str) -> str:
            raise AssertionError("link generation is not part of matching")

        route = Route("/", generate=generate)
        assert route.is_match("/", make_environ())

    def test_placeholders_get_none_defaults(self) -> None:
        route = Route("/archive/{year}{/month,day}", values={"year": "2024"})
        assert dict(route.values) == {"year": "2024", "month": None, "day": None}

    def test_declared_none_default_is_kept(self) -> None:
        route = Route("/{id}", values={"id": None, "extra": 1})
        assert dict(route.values) == {"id": None, "extra": 1}

    def test_defaults(self) -> None:
        route = Route("/")
        assert route.name is None
        assert route.methods == frozenset()
        assert route.accept == ()
        assert route.secure is None
        assert route.routable is True
        assert route.wildcard is None
        assert route.predicate is None

    def test_single_strings_are_not_split(self) -> None:
        route = Route("/", methods="GET", accept="text/html")  # type: ignore[arg-type]
        assert route.methods == frozenset({"GET"})
        assert route.accept == ("text/html",)

    def test_is_frozen(self) -> None:
        route = Route("/")
        with pytest.raises(dataclasses.FrozenInstanceError):
            route.path = "/other"  # type: ignore[misc]

    def test_mappings_are_read_only(self) -> None:
        route = Route("/", values={"a": 1}, tokens={"id": r"\d+"}, server={"HTTP_HOST": "x"})
        with pytest.raises(TypeError):
            route.values["a"] = 2  # type: ignore[index]
        with pytest.raises(TypeError):
            route.tokens["id"] = "."  # type: ignore[index]
        with pytest.raises(TypeError):
            route.server["HTTP_HOST"] = "y"  # type: ignore[index]

    def test_caller_dict_changes_do_not_leak(self) -> None:
        values = {"a": 1}
        route = Route("/", values=values)
        values["a"] = 2
        assert route.values["a"] == 1

    def test_compiled_once(self) -> None:
        route = Route("/{id}")
        pattern = route.pattern
        route.evaluate("/1", make_environ())
        route.evaluate("/2", make_environ())
        assert route.pattern is pattern

    def test_server_matchers_follow_declaration_order(self) -> None:
        route = Route("/", server={"B": "b", "A": "a"})
        names = [name for name, _ in route.server_matchers]
        assert names == ["B", "A"]
        assert all(isinstance(m, RegexMatcher) for _, m in route.server_matchers)

    def test_invalid_token_fails_at_construction(self) -> None:
        with pytest.raises(InvalidPatternError):
            Route("/{id}", tokens={"id": r"(\d+"})

    def test_invalid_server_pattern_fails_at_construction(self) -> None:
        with pytest.raises(RouteError):
            Route("/", server={"HTTP_HOST": "(?<=www)example"})

    def test_usable_as_dict_key(self) -> None:
        a, b = Route("/"), Route("/")
        assert a != b
        assert len({a: 1, b: 2}) == 2


class TestRouteBuilder:
    def test_build(self) -> None:
        def predicate(environ: object, matches: object) -> bool:
            return True

        route = (
            RouteBuilder("/blog/{id}{format}", name="blog.read")
            .tokens({"id": r"\d+", "format": r"(\.[^/]+)?"})
            .values({"format": ".html"})
            .methods(["GET", "HEAD"])
            .accept(["text/html", "application/json"])
            .server({"HTTP_HOST": "example"})
            .secure(True)
            .routable(True)
            .wildcard("rest")
            .predicate(predicate)
            .build()
        )
        assert route.name == "blog.read"
        assert route.methods == frozenset({"GET", "HEAD"})
        assert route.accept == ("text/html", "application/json")
        assert route.secure is True
        assert route.wildcard == "rest"
        assert route.predicate is predicate
        assert dict(route.tokens) == {"id": r"\d+", "format": r"(\.[^/]+)?"}

    def test_mappings_merge(self) -> None:
        route = (
            RouteBuilder("/{id}")
            .tokens({"id": "[a-z]+"})
            .tokens({"id": r"\d+"})
            .values({"a": 1})
            .values({"b": 2})
            .server({"HTTP_HOST": "x"})
            .server({"HTTP_ACCEPT": "y"})
            .build()
        )
        assert dict(route.tokens) == {"id": r"\d+"}
        assert dict(route.values) == {"a": 1, "b": 2, "id": None}
        assert list(route.server) == ["HTTP_HOST", "HTTP_ACCEPT"]

    def test_methods_and_accept_append(self) -> None:
        route = (
            RouteBuilder("/")
            .methods("GET")
            .methods(["POST", "GET"])
            .accept("text/html")
            .accept(["application/json", "text/html"])
            .build()
        )
        assert route.methods == frozenset({"GET", "POST"})
        assert route.accept == ("text/html", "application/json")

    def test_setters_replace(self) -> None:
        route = RouteBuilder("/").secure(True).secure(None).wildcard("a").wildcard(None).build()
        assert route.secure is None
        assert route.wildcard is None

    def test_not_routable(self) -> None:
        attempt = RouteBuilder("/").routable(False).build().evaluate("/", make_environ())
        assert attempt.failure is not None
        assert attempt.failure.value == "FAILED_ROUTABLE"

    def test_built_routes_are_independent(self) -> None:
        builder = RouteBuilder("/{id}").methods("GET")
        first = builder.build()
        second = builder.methods("POST").values({"id": "0"}).build()
        assert first.methods == frozenset({"GET"})
        assert second.methods == frozenset({"GET", "POST"})
        assert first.values["id"] is None
        assert second.values["id"] == "0"

    def test_builder_route_matches(self) -> None:
        route = (
            RouteBuilder("/blog/{id}{format}")
            .tokens({"id": r"\d+", "format": r"(\.[^/]+)?"})
            .values({"format": ".html"})
            .methods("GET")
            .build()
        )
        attempt = route.evaluate("/blog/42.json", make_environ("GET"))
        assert attempt.params == {"id": "42", "format": ".json"}
