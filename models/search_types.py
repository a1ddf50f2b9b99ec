"""
Value types shared by the search engine: flags, queries, matches and results.
"""

import enum
from dataclasses import dataclass, field, replace


class FindFlag(enum.Flag):
    """Options controlling how a query is matched and navigated"""
    NONE = 0
    CASE_SENSITIVE = enum.auto()
    WHOLE_WORD = enum.auto()
    REGEX = enum.auto()
    BACKWARD = enum.auto()


class SearchState(enum.Enum):
    """States of the search controller"""
    IDLE = "idle"
    SEARCHING = "searching"
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Query:
    """A single search request.

    The range is half-open, [start, end). An end of None (or a negative
    value) means "to the end of the document".
    """
    pattern: str
    flags: FindFlag = FindFlag.NONE
    start: int = 0
    end: int = None

    @property
    def is_regex(self):
        return bool(self.flags & FindFlag.REGEX)

    @property
    def case_sensitive(self):
        return bool(self.flags & FindFlag.CASE_SENSITIVE)

    @property
    def whole_word(self):
        return bool(self.flags & FindFlag.WHOLE_WORD)

    @property
    def forward(self):
        return not self.flags & FindFlag.BACKWARD

    def signature(self):
        """Key used by the result cache.

        Direction only changes how matches are consumed, so BACKWARD is
        left out and both directions share one cached scan.
        """
        return (self.pattern, self.flags & ~FindFlag.BACKWARD, self.start, self.end)

    def clamped(self, length):
        """Return a copy whose range lies within [0, length]."""
        start = max(0, min(self.start, length))
        if self.end is None or self.end < 0:
            end = length
        else:
            end = max(0, min(self.end, length))
        # An inverted range finds nothing
        end = max(start, end)
        if start == self.start and end == self.end:
            return self
        return replace(self, start=start, end=end)


@dataclass(frozen=True)
class Capture:
    """Text and position of one participating regex group"""
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Match:
    """A half-open document range [start, end) satisfying a query.

    captures[i] holds group i + 1, or None when that group did not take
    part in the match. Literal matches carry no captures.
    """
    start: int
    end: int
    captures: tuple = field(default=())

    @property
    def length(self):
        return self.end - self.start

    def contains(self, pos):
        """Whether pos is at the start of, or strictly inside, this match"""
        return pos == self.start or self.start <= pos < self.end

    def text_range(self):
        return (self.start, self.end)

    def group(self, number):
        """Text of capture group number, or None if it did not participate"""
        if number < 1 or number > len(self.captures):
            return None
        capture = self.captures[number - 1]
        return capture.text if capture is not None else None


@dataclass(frozen=True)
class FindResult:
    """Summary of one find or replace action.

    current_match_index is -1 when nothing is selected. error carries the
    message of an invalid pattern so callers can show it.
    """
    total_matches: int = 0
    current_match_index: int = -1
    wrapped: bool = False
    error: str = None

    @classmethod
    def empty(cls):
        return cls(0, -1, False)

    @property
    def found(self):
        return self.current_match_index >= 0
