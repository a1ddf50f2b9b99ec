"""
Tests for TextDocument (models/document.py).
"""

import pytest
from PyQt6.QtWidgets import QPlainTextEdit

from models.document import TextDocument
from models.search_errors import ReplaceRejectedError


class TestTextDocument:
    """Tests for the QTextDocument-backed document"""

    def test_read_and_length(self, make_document):
        """Test reading ranges and the document length"""
        doc = make_document("hello world")
        assert doc.length() == 11
        assert doc.read_range(0, 5) == "hello"
        assert doc.read_range(6, 100) == "world"

    def test_empty_document(self, make_document):
        """Test an empty document has length zero"""
        doc = make_document()
        assert doc.length() == 0
        assert doc.read_range(0, 10) == ""

    def test_replace_range_bumps_version(self, make_document):
        """Test edits increase the version and emit versionChanged"""
        doc = make_document("hello world")
        seen = []
        doc.versionChanged.connect(seen.append)

        before = doc.current_version()
        version = doc.replace_range(0, 5, "howdy")

        assert doc.text() == "howdy world"
        assert version > before
        assert version == doc.current_version()
        assert seen and seen[-1] == version

    def test_read_only_rejects(self, make_document):
        """Test a read-only document refuses edits without changing"""
        doc = make_document("hello")
        doc.read_only = True
        before = doc.current_version()

        with pytest.raises(ReplaceRejectedError):
            doc.replace_range(0, 1, "j")

        assert doc.text() == "hello"
        assert doc.current_version() == before

    def test_invalid_range_rejected(self, make_document):
        """Test a range outside the document is refused"""
        doc = make_document("abc")
        with pytest.raises(ReplaceRejectedError):
            doc.replace_range(2, 10, "x")

    def test_edit_block_is_one_undo_step(self, make_document):
        """Test grouped edits undo together"""
        doc = make_document("a b c")
        with doc.edit_block():
            doc.replace_range(4, 5, "C")
            doc.replace_range(0, 1, "A")
        assert doc.text() == "A b C"

        doc.qt_document.undo()
        assert doc.text() == "a b c"

    def test_widget_edits_counted(self, qapp):
        """Test typing into a widget sharing the document bumps the version"""
        edit = QPlainTextEdit()
        edit.setPlainText("abc")
        doc = TextDocument(qt_document=edit.document())
        before = doc.current_version()

        edit.insertPlainText("x")

        assert doc.current_version() > before
        assert "x" in doc.text()

    def test_standalone_document_counts_every_edit(self, make_document):
        """Test a document without a widget bumps its version on each edit"""
        doc = make_document("foo bar")
        doc.replace_range(0, 3, "bar")
        first = doc.current_version()
        doc.replace_range(4, 7, "baz")

        assert first > 0
        assert doc.current_version() > first


class TestWideCharacters:
    """Test offsets are code points even where Qt counts UTF-16 units"""

    def test_length_counts_code_points(self, make_document):
        """Test an emoji counts as one character"""
        doc = make_document("\U0001F600 foo")
        assert doc.length() == 5
        assert doc.read_range(2, 5) == "foo"

    def test_replace_after_emoji(self, make_document):
        """Test replacing text that follows an emoji"""
        doc = make_document("\U0001F600 foo")
        doc.replace_range(2, 5, "bar")
        assert doc.text() == "\U0001F600 bar"

    def test_replace_between_emoji(self, make_document):
        """Test replacing text between two emoji"""
        doc = make_document("\U0001F600a\U0001F680b")
        doc.replace_range(3, 4, "c")
        assert doc.text() == "\U0001F600a\U0001F680c"

    def test_full_range_replace(self, make_document):
        """Test the document end is reachable past an emoji"""
        doc = make_document("x\U0001F600y")
        doc.replace_range(0, doc.length(), "z")
        assert doc.text() == "z"


class TestRawText:
    """Test the text the search engine sees"""

    def test_keeps_non_breaking_space(self, make_document):
        """Test non-breaking spaces are not folded into plain spaces"""
        doc = make_document("a\u00a0b c")
        assert doc.text() == "a\u00a0b c"

    def test_blocks_joined_by_newline(self, make_document):
        """Test paragraph boundaries read back as newlines"""
        doc = make_document("one\ntwo\nthree")
        assert doc.text() == "one\ntwo\nthree"
        assert doc.length() == 13
