"""Config parsing for route specifications.

Converts a plain dict (the shape produced by ``json.load`` or
``yaml.safe_load``) into a Route:

    path: /blog/{id}{format}        # required
    name: blog.read
    values: {format: .html}
    tokens: {id: '\\d+', format: '(\\.[^/]+)?'}
    server: {HTTP_HOST: '^example\\.com$'}
    methods: [GET, HEAD]            # or a single string
    accept: [text/html, application/json]
    secure: true                    # true, false or null
    routable: true
    wildcard: rest

Callables (the custom predicate and the link generator) cannot come from
config; attach them with RouteBuilder.
"""

from __future__ import annotations

from typing import Any

from waypoint._compiler import RouteError
from waypoint._route import Route, RouteBuilder

MAX_TEMPLATE_LENGTH = 8192
MAX_PATTERN_LENGTH = 4096

_KNOWN_KEYS = frozenset(
    {
        "path",
        "name",
        "values",
        "tokens",
        "server",
        "methods",
        "accept",
        "secure",
        "routable",
        "wildcard",
    }
)


class ConfigParseError(RouteError):
    """Error parsing a config dict into a Route."""


def parse_route_config(data: dict[str, Any]) -> Route:
    """Parse a dict into a Route.

    Raises:
        ConfigParseError: If the dict is malformed or a pattern is too long.
        InvalidPatternError: If RE2 rejects a pattern.
    """
    return parse_route_builder(data).build()


def parse_route_builder(data: dict[str, Any]) -> RouteBuilder:
    """Parse a dict into a RouteBuilder, for callers that add callables."""
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        msg = f"unknown route config keys: {unknown}"
        raise ConfigParseError(msg)

    path = data.get("path")
    if path is None:
        msg = "missing required field 'path'"
        raise ConfigParseError(msg)
    if not isinstance(path, str):
        msg = f"'path' must be a string, got {type(path).__name__}"
        raise ConfigParseError(msg)
    if len(path) > MAX_TEMPLATE_LENGTH:
        msg = f"'path' length {len(path)} exceeds maximum {MAX_TEMPLATE_LENGTH}"
        raise ConfigParseError(msg)

    name = data.get("name")
    if name is not None and not isinstance(name, str):
        msg = f"'name' must be a string, got {type(name).__name__}"
        raise ConfigParseError(msg)

    builder = RouteBuilder(path, name)

    if "values" in data:
        builder.values(_parse_mapping(data["values"], "values"))
    if "tokens" in data:
        builder.tokens(_parse_patterns(data["tokens"], "tokens"))
    if "server" in data:
        builder.server(_parse_patterns(data["server"], "server"))
    if "methods" in data:
        builder.methods(_parse_strings(data["methods"], "methods"))
    if "accept" in data:
        builder.accept(_parse_accept(data["accept"]))
    if "secure" in data:
        builder.secure(_parse_optional_bool(data["secure"], "secure"))
    if "routable" in data:
        routable = data["routable"]
        if not isinstance(routable, bool):
            msg = f"'routable' must be a bool, got {type(routable).__name__}"
            raise ConfigParseError(msg)
        builder.routable(routable)
    if "wildcard" in data:
        wildcard = data["wildcard"]
        if wildcard is not None and not isinstance(wildcard, str):
            msg = f"'wildcard' must be a string, got {type(wildcard).__name__}"
            raise ConfigParseError(msg)
        builder.wildcard(wildcard or None)

    return builder


def _parse_mapping(data: Any, key: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"'{key}' must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)
    return {str(k): v for k, v in data.items()}


def _parse_patterns(data: Any, key: str) -> dict[str, str]:
    patterns: dict[str, str] = {}
    for name, pattern in _parse_mapping(data, key).items():
        if not isinstance(pattern, str):
            msg = f"'{key}.{name}' must be a string, got {type(pattern).__name__}"
            raise ConfigParseError(msg)
        if len(pattern) > MAX_PATTERN_LENGTH:
            msg = (
                f"'{key}.{name}' pattern length {len(pattern)} "
                f"exceeds maximum {MAX_PATTERN_LENGTH}"
            )
            raise ConfigParseError(msg)
        patterns[name] = pattern
    return patterns


def _parse_strings(data: Any, key: str) -> list[str]:
    if data is None:
        return []
    if isinstance(data, str):
        return [data]
    if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
        msg = f"'{key}' must be a string or a list of strings"
        raise ConfigParseError(msg)
    return list(data)


def _parse_accept(data: Any) -> list[str]:
    accept = _parse_strings(data, "accept")
    for media_type in accept:
        type_, slash, subtype = media_type.partition("/")
        if not slash or not type_ or not subtype:
            msg = f"'accept' entry {media_type!r} is not a type/subtype media type"
            raise ConfigParseError(msg)
    return accept


def _parse_optional_bool(data: Any, key: str) -> bool | None:
    if data is not None and not isinstance(data, bool):
        msg = f"'{key}' must be a bool or null, got {type(data).__name__}"
        raise ConfigParseError(msg)
    return data
