"""
Document collaborator for the search engine.
Wraps a QTextDocument and stamps every accepted edit with a version number.
"""

import logging
from contextlib import contextmanager

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtGui import QTextCursor, QTextDocument

from models.search_errors import ReplaceRejectedError

logger = logging.getLogger(__name__)

# Raw text keeps block boundaries as Unicode separators
PARAGRAPH_SEPARATOR = '\u2029'
LINE_SEPARATOR = '\u2028'


def to_qt_position(text, offset):
    """Convert a code-point offset into text to a Qt (UTF-16) position"""
    return offset + sum(1 for ch in text[:offset] if ord(ch) > 0xFFFF)


class TextDocument(QObject):
    """Addressable, mutable character sequence backed by a QTextDocument.

    Offsets are Python string offsets (code points). Qt counts UTF-16 code
    units, so positions are converted before they reach a QTextCursor.

    The version counter is bumped from QTextDocument.contentsChanged, so
    edits made through this class and edits made by the user in a widget
    sharing the same QTextDocument are counted alike. versionChanged is
    emitted after every bump.
    """

    versionChanged = pyqtSignal(int)

    def __init__(self, text="", qt_document=None, parent=None):
        super().__init__(parent)
        if qt_document is None:
            qt_document = QTextDocument(self)
            qt_document.setPlainText(text)
        self._document = qt_document
        self._version = 0
        self._read_only = False
        # contentsChange is only emitted once a layout exists
        self._document.documentLayout()
        self._document.contentsChanged.connect(self._on_contents_changed)

    @property
    def qt_document(self):
        return self._document

    @property
    def read_only(self):
        return self._read_only

    @read_only.setter
    def read_only(self, value):
        self._read_only = bool(value)

    def current_version(self):
        """Edit counter; increases on every accepted mutation"""
        return self._version

    def length(self):
        """Number of characters (code points) in text()"""
        return len(self.text())

    def text(self):
        """Document text with block separators as newlines.

        Unlike toPlainText, non-breaking spaces are kept as they are.
        """
        text = self._document.toRawText()
        return text.replace(PARAGRAPH_SEPARATOR, '\n').replace(LINE_SEPARATOR, '\n')

    def read_range(self, start, end):
        """Read the text in [start, end), clamped to the document"""
        text = self.text()
        start = max(0, min(start, len(text)))
        end = max(start, min(end, len(text)))
        return text[start:end]

    def replace_range(self, start, end, text):
        """Replace [start, end) with text.

        Returns:
            The document version after the edit

        Raises:
            ReplaceRejectedError: document is read-only or range is invalid
        """
        if self._read_only:
            logger.warning("Rejected edit of [%d, %d): document is read-only", start, end)
            raise ReplaceRejectedError("Document is read-only")

        current = self.text()
        length = len(current)
        if not 0 <= start <= end <= length:
            raise ReplaceRejectedError(
                f"Range [{start}, {end}) is outside the document (length {length})"
            )

        cursor = QTextCursor(self._document)
        cursor.setPosition(to_qt_position(current, start))
        cursor.setPosition(to_qt_position(current, end), QTextCursor.MoveMode.KeepAnchor)
        cursor.insertText(text)
        return self._version

    @contextmanager
    def edit_block(self):
        """Group the edits made inside the block into a single undo step"""
        cursor = QTextCursor(self._document)
        cursor.beginEditBlock()
        try:
            yield self
        finally:
            cursor.endEditBlock()

    def _on_contents_changed(self):
        """Bump the version on every change reported by Qt"""
        self._version += 1
        logger.debug("Document changed, version %d", self._version)
        self.versionChanged.emit(self._version)
