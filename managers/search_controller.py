"""
Search controller - find, peek, replace and replace-all over a document.

Ties together the match finder, the result cache, cursor navigation and
back-reference resolution. The controller never draws anything; it reports
matched ranges through matchesChanged for the presentation layer.
"""

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from managers.cursor_navigator import select
from managers.match_finder import MatchFinder
from managers.replacement import resolve_for_query
from managers.result_cache import ResultCache
from models.search_errors import InvalidPatternError, ReplaceRejectedError
from models.search_types import FindFlag, FindResult, Query, SearchState
from utils.patterns import SharedPatternCache

logger = logging.getLogger(__name__)


class SearchController(QObject):
    """Incremental search/replace engine for one document.

    States run IDLE -> SEARCHING -> FOUND | NOT_FOUND -> IDLE. peek() sets
    the incremental sub-mode and stays in SEARCHING while it has hits (or
    NOT_FOUND without them) until a committed find() or one of the clear
    methods.
    """

    stateChanged = pyqtSignal(object)
    # (ranges, current index, incremental)
    matchesChanged = pyqtSignal(list, int, bool)
    incrementalSearchCleared = pyqtSignal()
    searchCleared = pyqtSignal()

    def __init__(self, document, settings=None, word_char=None, pattern_cache=None, parent=None):
        super().__init__(parent)
        self.document = document
        self.settings = settings
        if word_char is None and settings is not None:
            word_char = settings.word_char_predicate()

        if pattern_cache is None:
            pattern_cache = SharedPatternCache.instance()
        self._pattern_cache = pattern_cache.acquire()
        self.finder = MatchFinder(word_char, self._pattern_cache)
        self.cache = ResultCache()

        self.cursor_position = 0
        self._state = SearchState.IDLE
        self._incremental = False
        # Signature of the last committed find; a repeat of it skips the current hit
        self._skip_signature = None
        # (signature, version, match) of the selected match
        self._current = None
        self._closed = False

        self.document.versionChanged.connect(self._on_document_changed)

    @property
    def state(self):
        return self._state

    @property
    def incremental(self):
        return self._incremental

    @property
    def current_match(self):
        """Selected match, or None if nothing is selected or it is stale"""
        if self._current is None:
            return None
        _, version, match = self._current
        if version != self.document.current_version():
            return None
        return match

    def set_cursor_position(self, pos):
        """Move the cursor; a moved cursor no longer counts as a repeated find"""
        if pos != self.cursor_position:
            self._skip_signature = None
        self.cursor_position = pos

    def find(self, pattern, flags=None, start=0, end=None):
        """Find and select the next match of pattern relative to the cursor.

        Invoking the same query again advances past the match under the
        cursor; a new query selects the match under the cursor if any.

        Returns:
            FindResult
        """
        query = Query(pattern, self._flags(flags), start, end)
        if not query.pattern:
            return FindResult.empty()

        self._incremental = False
        self._set_state(SearchState.SEARCHING)
        try:
            query, matches = self._matches_for(query)
        except InvalidPatternError as e:
            return self._invalid_pattern(e)

        skip_current = self._skip_signature == query.signature()
        index, wrapped = select(matches, self._cursor(), query.forward, skip_current)
        if self.settings is not None:
            self.settings.add_history(query.pattern)

        if index < 0:
            self._current = None
            self._skip_signature = None
            self._publish(matches, -1, SearchState.NOT_FOUND)
            return FindResult.empty()

        match = matches[index]
        self._current = (query.signature(), self.document.current_version(), match)
        self._skip_signature = query.signature()
        self.cursor_position = match.start
        logger.debug("Selected match %d/%d at %d (wrapped=%s)",
                     index + 1, len(matches), match.start, wrapped)
        self._publish(matches, index, SearchState.FOUND)
        return FindResult(len(matches), index, wrapped)

    def peek(self, pattern, flags=None):
        """Highlight matches of pattern as it is typed.

        Uses the same scan and selection as find() over the whole document
        but leaves the cursor and the committed selection alone. Interim
        hits keep the controller in SEARCHING; an invalid pattern or no hit
        moves it to NOT_FOUND, as find() does.
        """
        query = Query(pattern, self._flags(flags))
        if not query.pattern:
            self.clear_incremental_search()
            return FindResult.empty()

        self._incremental = True
        self._set_state(SearchState.SEARCHING)
        try:
            query, matches = self._matches_for(query)
        except InvalidPatternError as e:
            logger.warning("%s", e)
            self._set_state(SearchState.NOT_FOUND)
            self.matchesChanged.emit([], -1, True)
            return FindResult(0, -1, False, e.message)

        index, wrapped = select(matches, self._cursor(), query.forward, False)
        if index < 0:
            self._set_state(SearchState.NOT_FOUND)
        self.matchesChanged.emit([m.text_range() for m in matches], index, True)
        return FindResult(len(matches), index, wrapped)

    def replace(self, pattern, flags, replacement, start=0, end=None):
        """Replace the selected match (or the first eligible one).

        The document is rescanned after the edit and the next match is
        selected from the end of the inserted text (its start when
        searching backward). Matches overlapping the inserted text are
        never selected.

        Raises:
            ReplaceRejectedError: the document refused the edit
        """
        query = Query(pattern, self._flags(flags), start, end)
        if not query.pattern:
            return FindResult.empty()

        self._incremental = False
        self._set_state(SearchState.SEARCHING)
        try:
            clamped, matches = self._matches_for(query)
        except InvalidPatternError as e:
            return self._invalid_pattern(e)

        if not matches:
            self._current = None
            self._publish(matches, -1, SearchState.NOT_FOUND)
            return FindResult.empty()

        match = self._selected_match(clamped, matches)
        text = resolve_for_query(replacement, match, clamped)
        try:
            self.document.replace_range(match.start, match.end, text)
        except ReplaceRejectedError:
            self._set_state(SearchState.FOUND)
            raise
        self.clear_find_result_cache()
        logger.info("Replaced [%d, %d) with %r", match.start, match.end, text)

        # Offsets after the edit have shifted: always rescan
        if end is not None and end >= 0:
            end += len(text) - match.length
        query = Query(pattern, query.flags, start, end)
        query, matches = self._matches_for(query)

        self._skip_signature = None
        index, wrapped = self._select_after_edit(
            matches, query.forward, match.start, match.start + len(text)
        )
        if index < 0:
            self._current = None
            self.cursor_position = match.start + len(text) if query.forward else match.start
            self._publish(matches, -1, SearchState.NOT_FOUND)
            return FindResult(len(matches), -1, False)

        self._current = (query.signature(), self.document.current_version(), matches[index])
        self.cursor_position = matches[index].start
        self._publish(matches, index, SearchState.FOUND)
        return FindResult(len(matches), index, wrapped)

    def replace_all(self, pattern, flags, replacement, start=0, end=None):
        """Replace every match in one undoable edit.

        Matches are rewritten from the last to the first so earlier edits
        never move the offsets of pending ones.

        Raises:
            ReplaceRejectedError: the document refused the edit
        """
        query = Query(pattern, self._flags(flags), start, end)
        if not query.pattern:
            return FindResult.empty()

        self._incremental = False
        self._set_state(SearchState.SEARCHING)
        try:
            query, matches = self._matches_for(query)
        except InvalidPatternError as e:
            return self._invalid_pattern(e)

        if not matches:
            self._publish(matches, -1, SearchState.NOT_FOUND)
            return FindResult.empty()

        try:
            with self.document.edit_block():
                for match in reversed(matches):
                    text = resolve_for_query(replacement, match, query)
                    self.document.replace_range(match.start, match.end, text)
        except ReplaceRejectedError:
            self._set_state(SearchState.FOUND)
            raise

        self.clear_find_result_cache()
        self._current = None
        self._skip_signature = None
        self.cursor_position = min(self.cursor_position, self.document.length())
        logger.info("Replaced %d occurrence(s) of %r", len(matches), query.pattern)
        self._publish((), -1, SearchState.IDLE)
        return FindResult(len(matches), -1, False)

    def clear_find_result_cache(self):
        """Forget cached matches, e.g. after the document was swapped"""
        self.cache.invalidate()

    def clear_incremental_search(self):
        """Leave incremental mode and drop its interim highlights"""
        if not self._incremental:
            return
        self._incremental = False
        if self._state in (SearchState.SEARCHING, SearchState.NOT_FOUND):
            self._set_state(SearchState.IDLE)
        self.incrementalSearchCleared.emit()

    def clear_search(self):
        """Drop the committed selection and return to IDLE"""
        self._current = None
        self._skip_signature = None
        self._incremental = False
        self._set_state(SearchState.IDLE)
        self.searchCleared.emit()

    def close(self):
        """Release shared resources and stop following the document"""
        if self._closed:
            return
        self._closed = True
        self.document.versionChanged.disconnect(self._on_document_changed)
        self._pattern_cache.release()
        self.cache.invalidate()

    def _flags(self, flags):
        if flags is not None:
            return flags
        if self.settings is not None:
            return self.settings.default_flags()
        return FindFlag.NONE

    def _cursor(self):
        return max(0, min(self.cursor_position, self.document.length()))

    def _matches_for(self, query):
        """Clamp query to the document and return (query, matches)"""
        length = self.document.length()
        query = query.clamped(length)
        signature = query.signature()
        version = self.document.current_version()

        matches = self.cache.lookup(signature, version)
        if matches is None:
            matches = self.finder.find(self.document.read_range(0, length), query)
            self.cache.store(signature, matches, version)
        return query, matches

    def _selected_match(self, query, matches):
        """Committed match if it is still current, else the first eligible one"""
        if self._current is not None:
            signature, version, match = self._current
            if (signature == query.signature()
                    and version == self.document.current_version()
                    and match in matches):
                return match

        index, _ = select(matches, self._cursor(), query.forward, False)
        return matches[index]

    def _select_after_edit(self, matches, forward, edit_start, edit_end):
        """Select the next match around [edit_start, edit_end) outside the rewritten text.

        Returns:
            (index into matches, wrapped); index is -1 if every match
            overlaps the inserted text
        """
        candidates = [i for i, m in enumerate(matches)
                      if m.end <= edit_start or m.start >= edit_end]
        pos = edit_end if forward else edit_start
        index, wrapped = select([matches[i] for i in candidates], pos, forward, False)
        if index < 0:
            return -1, False
        return candidates[index], wrapped

    def _invalid_pattern(self, error):
        logger.warning("%s", error)
        self._current = None
        self._skip_signature = None
        self._publish((), -1, SearchState.NOT_FOUND)
        return FindResult(0, -1, False, error.message)

    def _publish(self, matches, index, state):
        self._set_state(state)
        self.matchesChanged.emit([m.text_range() for m in matches], index, False)

    def _set_state(self, state):
        if state == self._state:
            return
        self._state = state
        self.stateChanged.emit(state)

    def _on_document_changed(self, version):
        self.clear_find_result_cache()
