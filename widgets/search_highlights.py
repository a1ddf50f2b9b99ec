"""
Search highlighting for a text edit widget.
Shows ranges reported by the search controller as extra selections.
"""

from PyQt6.QtWidgets import QTextEdit
from PyQt6.QtGui import QTextCursor, QColor, QBrush, QTextCharFormat

from models.document import to_qt_position
from constants import (
    INCREMENTAL_SEARCH_COLOR, SEARCH_COLOR, SEARCH_UNDER_CURSOR_COLOR,
    CURRENT_MATCH_COLOR
)

INCREMENTAL_SEARCH = 'incremental_search'
SEARCH = 'search'
SEARCH_UNDER_CURSOR = 'search_under_cursor'

SLOTS = (INCREMENTAL_SEARCH, SEARCH, SEARCH_UNDER_CURSOR)


def _background_format(rgb):
    fmt = QTextCharFormat()
    fmt.setBackground(QBrush(QColor(*rgb)))
    return fmt


class SearchHighlights:
    """Owns the search-related extra-selection slots of a text edit.

    Each slot holds a list of (start, end) ranges. Setting a slot redraws
    all of them together since the widget only accepts one list of
    extra selections.
    """

    def __init__(self, text_edit):
        self.text_edit = text_edit
        self._ranges = {slot: [] for slot in SLOTS}
        self._current = {slot: -1 for slot in SLOTS}
        self._formats = {
            INCREMENTAL_SEARCH: _background_format(INCREMENTAL_SEARCH_COLOR),
            SEARCH: _background_format(SEARCH_COLOR),
            SEARCH_UNDER_CURSOR: _background_format(SEARCH_UNDER_CURSOR_COLOR),
        }
        self._current_format = _background_format(CURRENT_MATCH_COLOR)

    def connect_controller(self, controller):
        """Follow the highlights published by a SearchController"""
        controller.matchesChanged.connect(self.on_matches_changed)
        controller.incrementalSearchCleared.connect(self.clear_incremental_search)
        controller.searchCleared.connect(self.clear_search)

    def ranges(self, slot):
        return list(self._ranges[slot])

    def set_ranges(self, slot, ranges, current_index=-1):
        self._ranges[slot] = list(ranges)
        self._current[slot] = current_index
        self._apply()

    def on_matches_changed(self, ranges, current_index, incremental):
        if incremental:
            self.set_ranges(INCREMENTAL_SEARCH, ranges, current_index)
            return
        # A committed search replaces any interim highlighting
        self._ranges[INCREMENTAL_SEARCH] = []
        self._current[INCREMENTAL_SEARCH] = -1
        self.set_ranges(SEARCH, ranges, current_index)

    def clear_incremental_search(self):
        self.set_ranges(INCREMENTAL_SEARCH, [])

    def clear_search(self):
        self.set_ranges(SEARCH, [])

    def highlight_under_cursor(self, ranges):
        self.set_ranges(SEARCH_UNDER_CURSOR, ranges)

    def _apply(self):
        selections = []
        text = self.text_edit.document().toRawText()
        for slot in SLOTS:
            for index, (start, end) in enumerate(self._ranges[slot]):
                # Ranges can outlive an edit until the controller republishes
                if end > len(text):
                    continue
                cursor = self.text_edit.textCursor()
                cursor.setPosition(to_qt_position(text, start))
                cursor.setPosition(to_qt_position(text, end), QTextCursor.MoveMode.KeepAnchor)

                selection = QTextEdit.ExtraSelection()
                if index == self._current[slot]:
                    selection.format = self._current_format
                else:
                    selection.format = self._formats[slot]
                selection.cursor = cursor
                selections.append(selection)
        self.text_edit.setExtraSelections(selections)
