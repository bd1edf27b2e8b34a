"""Multi-part version ordering.

Versions are split into numeric and alphabetic segments ("15.1-150100.3a"
-> 15, 1, 150100, 3, "a"). Numeric segments compare numerically, alphabetic
segments compare lexically and sort before any numeric segment, so
"1.0.beta" < "1.0" < "1.0.1". Missing trailing segments count as 0, which
makes "1.0" == "1".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from itertools import zip_longest

__all__ = ["Version"]


_SEGMENT_RE = re.compile(r"[0-9]+|[A-Za-z]+")

type Segment = int | str


def _split(text: str) -> tuple[Segment, ...]:
    return tuple(int(s) if s.isdigit() else s for s in _SEGMENT_RE.findall(text))


def _compare_segment(a: Segment, b: Segment) -> int:
    if isinstance(a, int) and isinstance(b, int):
        return (a > b) - (a < b)
    if isinstance(a, str) and isinstance(b, str):
        return (a > b) - (a < b)
    # alpha (prerelease) < numeric
    return -1 if isinstance(a, str) else 1


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Version:
    """Comparable version parsed from a free-form version string."""

    text: str
    segments: tuple[Segment, ...]

    @classmethod
    def parse(cls, text: str) -> Version:
        return cls(text=text, segments=_split(text))

    def compare(self, other: Version) -> int:
        """Return -1, 0 or 1 like a classic cmp()."""
        for a, b in zip_longest(self.segments, other.segments, fillvalue=0):
            result = _compare_segment(a, b)
            if result:
                return result
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: Version) -> bool:
        return self.compare(other) < 0

    def __hash__(self) -> int:
        canonical = list(self.segments)
        while canonical and canonical[-1] == 0:
            canonical.pop()
        return hash(tuple(canonical))

    def __str__(self) -> str:
        return self.text
