"""waypoint.http — request adapters.

Provides HttpRequest, which renders the WSGI-style environ the match chain
reads from.
"""

from waypoint.http._request import HttpRequest

__all__ = [
    "HttpRequest",
]
