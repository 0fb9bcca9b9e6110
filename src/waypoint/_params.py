"""Merge route defaults with the captures of a successful match."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

if TYPE_CHECKING:
    from collections.abc import Mapping

    from waypoint._types import Matches


def extract_params(
    values: Mapping[str, Any],
    matches: Matches,
    wildcard: str | None = None,
) -> dict[str, Any]:
    """Build the final params for a matched route.

    Starts from ``values`` and overlays each capture that is a non-empty
    string, percent-decoded. An empty capture counts as not provided, so
    an optional trailing ``{format}`` that matched nothing keeps its
    default.

    Decoding is lenient: byte sequences that are not valid UTF-8 (``%FF``)
    become U+FFFD rather than raising, so a match never fails on decoding.

    The wildcard param, when declared, always ends up as a list: empty
    when nothing followed the matched path, otherwise one decoded entry per
    ``/``-separated segment.
    """
    params = dict(values)
    for key, value in matches.items():
        if value:
            params[key] = unquote(value)

    if wildcard:
        # Split the raw capture so an encoded %2F stays inside its segment.
        raw = matches.get(wildcard) or values.get(wildcard)
        if not raw:
            params[wildcard] = []
        elif isinstance(raw, str):
            params[wildcard] = [unquote(segment) for segment in raw.split("/")]
        else:
            params[wildcard] = list(raw)

    return params
