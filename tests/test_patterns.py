"""
Tests for the regex capability (utils/patterns.py).
"""

import re

import pytest

from models.search_errors import InvalidPatternError
from utils.patterns import SharedPatternCache, compile_pattern, match_at


class TestCompilePattern:
    """Test pattern compilation"""

    def test_case_insensitive(self):
        """Test IGNORECASE is used unless case sensitive"""
        assert compile_pattern("abc", False).flags & re.IGNORECASE
        assert not compile_pattern("abc", True).flags & re.IGNORECASE

    def test_multiline(self):
        """Test anchors work per line"""
        compiled = compile_pattern("^b", True)
        assert match_at(compiled, "a\nb", 0).start() == 2

    def test_invalid(self):
        """Test malformed patterns raise InvalidPatternError"""
        with pytest.raises(InvalidPatternError):
            compile_pattern("a(", True)

    def test_match_at_past_end(self):
        """Test match_at beyond the text finds nothing"""
        assert match_at(compile_pattern("x*", True), "abc", 4) is None


class TestSharedPatternCache:
    """Test the reference-counted pattern cache"""

    def test_reuses_compiled(self):
        """Test the same pattern compiles once"""
        cache = SharedPatternCache()
        assert cache.compile("a+", True) is cache.compile("a+", True)
        assert cache.compile("a+", True) is not cache.compile("a+", False)
        assert len(cache) == 2

    def test_invalid_not_memoized(self):
        """Test invalid patterns raise every time"""
        cache = SharedPatternCache()
        for _ in range(2):
            with pytest.raises(InvalidPatternError):
                cache.compile("[", True)
        assert len(cache) == 0

    def test_bounded(self):
        """Test the oldest pattern is evicted beyond max_size"""
        cache = SharedPatternCache(max_size=2)
        cache.compile("a", True)
        cache.compile("b", True)
        cache.compile("c", True)
        assert len(cache) == 2
        assert list(cache._patterns) == [("b", True), ("c", True)]

    def test_release_clears_at_zero(self):
        """Test the last release empties the cache"""
        cache = SharedPatternCache()
        cache.acquire()
        cache.acquire()
        cache.compile("a", True)
        cache.release()
        assert len(cache) == 1
        cache.release()
        assert cache.ref_count == 0
        assert len(cache) == 0
        cache.release()
        assert cache.ref_count == 0

    def test_instance_is_shared(self):
        """Test the process-wide instance is a singleton"""
        assert SharedPatternCache.instance() is SharedPatternCache.instance()
