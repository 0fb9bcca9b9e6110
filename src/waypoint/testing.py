"""Test utilities for waypoint.

Builds environ mappings without spelling out CGI key names in every test.
These are NOT server adapters; a real deployment passes its own WSGI
environ (or an HttpRequest's) to ``Route.evaluate()``.
"""

from __future__ import annotations

from typing import Any


def make_environ(
    method: str | None = "GET",
    *,
    accept: str | None = None,
    https: bool = False,
    port: int | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """Build request metadata for matching.

    >>> from waypoint import Route
    >>> from waypoint.testing import make_environ
    >>> Route("/", methods={"POST"}).is_match("/", make_environ("POST"))
    True

    ``method=None`` leaves ``REQUEST_METHOD`` out entirely; extra keyword
    arguments become raw environ fields.
    """
    environ: dict[str, Any] = {}
    if method is not None:
        environ["REQUEST_METHOD"] = method
    if accept is not None:
        environ["HTTP_ACCEPT"] = accept
    if https:
        environ["HTTPS"] = "on"
    if port is not None:
        environ["SERVER_PORT"] = port
    environ.update(fields)
    return environ
