"""
Match finder - runs a query against a document snapshot.
"""

import logging
import re

from models.search_types import Capture, Match
from utils.patterns import compile_pattern, match_at

logger = logging.getLogger(__name__)


def is_word_char(ch):
    """Default word-character predicate: letters, digits and underscore"""
    return ch.isalnum() or ch == '_'


class MatchFinder:
    """Produces the ordered, non-overlapping matches of a query.

    Matches are always returned in ascending document order regardless of
    the query direction, so a cached result serves both directions.
    """

    def __init__(self, word_char=None, pattern_cache=None):
        self.word_char = word_char or is_word_char
        self.pattern_cache = pattern_cache

    def find(self, text, query):
        """Find all matches of query in the snapshot text.

        Args:
            text: Full document text
            query: Query whose range is already clamped to the text

        Returns:
            tuple of Match sorted by start

        Raises:
            InvalidPatternError: regex query with a malformed pattern
        """
        if not query.pattern:
            return ()

        query = query.clamped(len(text))
        if query.is_regex:
            matches = self._find_regex(text, query)
        elif query.case_sensitive:
            matches = self._find_literal(text, query)
        else:
            # Scanning with an escaped pattern keeps offsets exact even for
            # characters whose lower-case form has a different length
            matches = self._find_regex(text, query, re.escape(query.pattern))

        logger.debug("Scanned %r in [%d, %d): %d match(es)",
                     query.pattern, query.start, query.end, len(matches))
        return tuple(matches)

    def _compile(self, pattern, case_sensitive):
        if self.pattern_cache is not None:
            return self.pattern_cache.compile(pattern, case_sensitive)
        return compile_pattern(pattern, case_sensitive)

    def _find_literal(self, text, query):
        matches = []
        pattern = query.pattern
        pos = query.start
        while True:
            start = text.find(pattern, pos, query.end)
            if start < 0:
                break
            end = start + len(pattern)
            if query.whole_word and not self._at_word_boundary(text, start, end):
                pos = start + 1
                continue
            matches.append(Match(start, end))
            pos = end
        return matches

    def _find_regex(self, text, query, pattern=None):
        compiled = self._compile(pattern if pattern is not None else query.pattern,
                                 query.case_sensitive)
        keep_captures = pattern is None
        matches = []
        pos = query.start
        while pos <= query.end:
            found = match_at(compiled, text, pos)
            if found is None or found.start() > query.end:
                break
            start, end = found.span()
            if end > query.end or (query.whole_word and not self._at_word_boundary(text, start, end)):
                pos = start + 1
                continue
            captures = self._captures(found) if keep_captures else ()
            matches.append(Match(start, end, captures))
            # Step over zero-width matches to guarantee progress
            pos = end if end > start else end + 1
        return matches

    @staticmethod
    def _captures(found):
        captures = []
        for number in range(1, (found.re.groups or 0) + 1):
            start, end = found.span(number)
            if start < 0:
                captures.append(None)
            else:
                captures.append(Capture(found.group(number), start, end))
        return tuple(captures)

    def _at_word_boundary(self, text, start, end):
        """Both neighbours of [start, end) are absent or non-word characters"""
        if start > 0 and self.word_char(text[start - 1]):
            return False
        if end < len(text) and self.word_char(text[end]):
            return False
        return True
