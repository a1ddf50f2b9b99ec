"""
Result cache - remembers the last match set keyed by query signature.
"""

import logging

logger = logging.getLogger(__name__)


class ResultCache:
    """Single-entry memo of the most recent scan.

    An entry is only returned for the exact signature it was stored under
    and only while the document version it was stamped with is current.
    """

    def __init__(self):
        self._signature = None
        self._matches = ()
        self._version = None

    @property
    def is_empty(self):
        return self._signature is None

    def lookup(self, signature, version):
        """Return the cached matches, or None on a miss"""
        if self._signature is None:
            return None
        if self._signature != signature or self._version != version:
            logger.debug("Cache miss for %r at version %d", signature[0], version)
            return None
        logger.debug("Cache hit for %r at version %d", signature[0], version)
        return self._matches

    def store(self, signature, matches, version):
        self._signature = signature
        self._matches = tuple(matches)
        self._version = version

    def invalidate(self):
        """Drop the entry; safe to call when already empty"""
        if self._signature is None:
            return
        self._signature = None
        self._matches = ()
        self._version = None
