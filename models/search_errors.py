"""
Exceptions raised by the search engine.
"""


class SearchError(Exception):
    """Base class for search/replace errors"""


class InvalidPatternError(SearchError):
    """Raised when a regular expression cannot be compiled"""

    def __init__(self, pattern, message):
        super().__init__(f"Invalid pattern {pattern!r}: {message}")
        self.pattern = pattern
        self.message = message


class ReplaceRejectedError(SearchError):
    """Raised when the document refuses an edit (e.g. it is read-only)"""
