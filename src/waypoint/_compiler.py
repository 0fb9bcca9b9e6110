"""Path template compiler.

Rewrites a path template into a single anchored RE2 pattern with named
groups. The rewrite happens in four textual passes over the template:

1. optional params:  ``{/year,month}``  -> ``(/{year}(/{month})?)?``
2. params:           ``{id}``           -> ``(?P<id>[^/]+)`` or the token override
3. wildcard suffix:  trailing ``/`` trimmed, ``(/(?P<name>.*))?`` appended
4. anchoring:        ``^...$``

Placeholder names must match ``[a-z][a-zA-Z0-9_]*``; anything else is left
as literal pattern text. The compiler does not validate the template
beyond what RE2 rejects when the final pattern is compiled.

Only the first optional-params group is expanded. Templates carrying more
than one are unsupported: the later groups stay in the pattern as literal
text.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import re2

logger = logging.getLogger("waypoint")

DEFAULT_SUBPATTERN = "[^/]+"

_OPTIONAL_PARAMS = re2.compile(r"\{/([a-z][a-zA-Z0-9_,]*)\}")
_PARAM = re2.compile(r"\{([a-z][a-zA-Z0-9_]*)\}")


class RouteError(Exception):
    """Base for all waypoint configuration errors."""


class InvalidPatternError(RouteError):
    """RE2 rejected a compiled path pattern or a field sub-pattern."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f'invalid regex pattern "{pattern}": {reason}')


@dataclass(frozen=True, slots=True)
class CompiledPath:
    """The result of compiling a path template.

    ``params`` lists placeholder names in template order (the wildcard is
    not included).
    """

    regex: str
    pattern: re2.Pattern[str]
    params: tuple[str, ...]


def compile_path(
    path: str,
    tokens: Mapping[str, str] | None = None,
    wildcard: str | None = None,
) -> CompiledPath:
    """Compile a path template into an anchored pattern.

    Raises:
        InvalidPatternError: If RE2 rejects the resulting pattern, usually
            because of a token override using unsupported syntax.
    """
    tokens = tokens or {}
    regex = expand_optional_params(path)
    regex, params = expand_params(regex, tokens)
    if wildcard:
        regex = regex.rstrip("/") + f"(/(?P<{wildcard}>.*))?"
    regex = f"^{regex}$"

    try:
        pattern = re2.compile(regex)
    except re2.error as e:
        raise InvalidPatternError(regex, str(e)) from e

    logger.debug("compiled %r -> %s", path, regex)
    return CompiledPath(regex=regex, pattern=pattern, params=params)


def expand_optional_params(regex: str) -> str:
    """Expand the first ``{/a,b,c}`` group into nested optional groups.

    When the group opens the template, the slash before the first name is
    hoisted out of the optional nesting so that ``/`` alone still matches.
    """
    found = _OPTIONAL_PARAMS.search(regex)
    if found is None:
        return regex

    names = found.group(1).split(",")
    head = ""
    if regex.startswith("{/"):
        head = f"/({{{names.pop(0)}}})?"

    tail = ""
    for name in names:
        head += f"(/{{{name}}}"
        tail += ")?"

    return regex.replace(found.group(0), head + tail)


def expand_params(
    regex: str, tokens: Mapping[str, str]
) -> tuple[str, tuple[str, ...]]:
    """Replace every ``{name}`` with a named subpattern.

    Returns the rewritten pattern and the placeholder names found.
    """
    params: list[str] = []
    for found in _PARAM.finditer(regex):
        name = found.group(1)
        if name in params:
            continue
        params.append(name)

    for name in params:
        subpattern = tokens.get(name, DEFAULT_SUBPATTERN)
        regex = regex.replace(f"{{{name}}}", f"(?P<{name}>{subpattern})")

    return regex, tuple(params)
