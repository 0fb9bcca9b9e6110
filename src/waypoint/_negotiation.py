"""Accept header negotiation.

A route declares the media types it can produce. The request's Accept
header is split into media ranges; a declared ``type/subtype`` is accepted
by a range of ``type/subtype``, ``type/*`` or ``*/*``, unless that range
carries a zero quality (``q=0``), which is an explicit refusal. A refusal
naming the declared type exactly wins over any wildcard range accepting it.

Quality values only gate acceptance here. They do not rank the declared
types: the first declared type the header accepts wins.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MediaRange:
    """One entry of an Accept header, lowercased.

    ``quality`` is None when the entry had no ``q`` parameter.
    """

    type: str
    subtype: str
    quality: float | None = None

    @property
    def refused(self) -> bool:
        return self.quality is not None and self.quality == 0.0

    @property
    def name(self) -> str:
        return f"{self.type}/{self.subtype}"

    @property
    def is_wildcard(self) -> bool:
        return self.type == "*" and self.subtype == "*"

    @property
    def has_wildcard(self) -> bool:
        """True for ``type/*`` and ``*/*`` ranges."""
        return "*" in (self.type, self.subtype)

    def accepts(self, media_type: str) -> bool:
        """Check whether this range accepts a concrete ``type/subtype``."""
        if self.refused:
            return False
        type_, _, subtype = media_type.lower().partition("/")
        if self.is_wildcard:
            return True
        return self.type == type_ and self.subtype in (subtype, "*")


def parse_accept(header: str) -> list[MediaRange]:
    """Parse an Accept header into media ranges.

    Whitespace is ignored. Entries that are not ``type/subtype`` or whose
    ``q`` parameter is not a finite number are skipped.
    """
    ranges: list[MediaRange] = []
    compact = "".join(header.split())
    for entry in compact.split(","):
        media, *params = entry.split(";")
        type_, slash, subtype = media.lower().partition("/")
        if not slash or not type_ or not subtype:
            continue

        quality: float | None = None
        malformed = False
        for param in params:
            key, _, value = param.partition("=")
            if key.lower() != "q":
                continue
            try:
                quality = float(value)
            except ValueError:
                malformed = True
                continue
            if not math.isfinite(quality):
                malformed = True
        if malformed:
            continue

        ranges.append(MediaRange(type=type_, subtype=subtype, quality=quality))
    return ranges


def negotiate(header: str, acceptable: Iterable[str]) -> str | None:
    """Return the first acceptable media type the header accepts.

    A declared type refused by a range naming it exactly (``text/html;q=0``)
    is out, whatever ``type/*`` or ``*/*`` ranges say. An accepted ``*/*``
    range short-circuits to the first declared type still in.
    Returns None when the header accepts none of them.
    """
    ranges = parse_accept(header)
    refused = {r.name for r in ranges if r.refused and not r.has_wildcard}
    candidates = [t for t in acceptable if t.lower() not in refused]

    if candidates and any(r.is_wildcard and not r.refused for r in ranges):
        return candidates[0]

    for media_type in candidates:
        if any(r.accepts(media_type) for r in ranges):
            return media_type
    return None
