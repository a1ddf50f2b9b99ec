"""
Regex capability used by the search engine.

Patterns are compiled with Python's re module. Compiled patterns can be
shared between editor sessions through SharedPatternCache, a process-wide
memo whose lifetime follows an explicit reference count.
"""

import logging
import re
from collections import OrderedDict

from constants import PATTERN_CACHE_SIZE
from models.search_errors import InvalidPatternError

logger = logging.getLogger(__name__)


def pattern_flags(case_sensitive):
    """re flags used for document searches.

    MULTILINE makes ^ and $ anchor at line boundaries, like a block-based
    editor document.
    """
    flags = re.MULTILINE
    if not case_sensitive:
        flags |= re.IGNORECASE
    return flags


def compile_pattern(pattern, case_sensitive):
    """Compile pattern for document searching.

    Raises:
        InvalidPatternError: the pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern, pattern_flags(case_sensitive))
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def match_at(compiled, text, pos):
    """Return the first match of compiled in text at or after pos, or None"""
    if pos > len(text):
        return None
    return compiled.search(text, pos)


class SharedPatternCache:
    """Compiled-pattern memo shared by every search controller.

    Controllers call acquire() when created and release() when closed.
    The memo is emptied when the last reference is released.
    """

    _instance = None

    def __init__(self, max_size=PATTERN_CACHE_SIZE):
        self.max_size = max_size
        self._patterns = OrderedDict()
        self._ref_count = 0

    @classmethod
    def instance(cls):
        """Process-wide cache"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def ref_count(self):
        return self._ref_count

    def __len__(self):
        return len(self._patterns)

    def acquire(self):
        self._ref_count += 1
        return self

    def release(self):
        if self._ref_count == 0:
            return
        self._ref_count -= 1
        if self._ref_count == 0:
            logger.debug("Last reference released, dropping %d patterns", len(self._patterns))
            self._patterns.clear()

    def compile(self, pattern, case_sensitive):
        """Compile pattern, reusing an earlier compilation when possible.

        Invalid patterns are not memoized; every attempt raises again.
        """
        key = (pattern, case_sensitive)
        compiled = self._patterns.get(key)
        if compiled is not None:
            self._patterns.move_to_end(key)
            return compiled

        compiled = compile_pattern(pattern, case_sensitive)
        self._patterns[key] = compiled
        if len(self._patterns) > self.max_size:
            self._patterns.popitem(last=False)
        return compiled

    def clear(self):
        self._patterns.clear()
