"""Regex matcher for request metadata fields.

The pattern is compiled at construction time via ``google-re2``, providing
guaranteed linear-time matching against request-controlled values. Uses
search (not fullmatch): a field constraint matches anywhere in the value
unless the pattern anchors itself.

RE2 does not support backreferences or lookahead/lookbehind because they
require backtracking. Patterns using them are rejected at compile time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import re2

from waypoint._compiler import InvalidPatternError

if TYPE_CHECKING:
    from waypoint._types import MatchingData


@dataclass(frozen=True, slots=True)
class RegexMatcher:
    """Regular expression match that reports what it matched.

    Raises:
        InvalidPatternError: If the pattern is not valid RE2 syntax.
    """

    pattern: str
    _compiled: re2.Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        try:
            compiled = re2.compile(self.pattern)
        except re2.error as e:
            raise InvalidPatternError(self.pattern, str(e)) from e
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, value: MatchingData, /) -> bool:
        return self.capture(value) is not None

    def capture(self, value: MatchingData, /) -> str | None:
        """Return the matched substring, or None when there is no match.

        Non-string values never match. A pattern that can match the empty
        string returns ``""`` on a match, which is distinct from None.
        """
        if not isinstance(value, str):
            return None
        found = self._compiled.search(value)
        if found is None:
            return None
        return found.group(0)
