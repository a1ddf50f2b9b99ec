"""
Pytest configuration and fixtures for search engine tests.
"""

import pytest
import sys
import os
from pathlib import Path
import tempfile
import shutil

# Add parent directory to path so we can import the modules
sys.path.insert(0, str(Path(__file__).parent.parent))

# Tests create widgets; don't require a display
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from PyQt6.QtWidgets import QApplication

from models.document import TextDocument
from utils.patterns import SharedPatternCache


@pytest.fixture(scope='session')
def qapp():
    """Create QApplication instance for all tests"""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit the app here as it may be used by multiple tests


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_path = tempfile.mkdtemp()
    yield temp_path
    # Cleanup after test
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def settings_file(temp_dir):
    """Path of a search settings file inside the temporary directory"""
    return os.path.join(temp_dir, '.search_settings.json')


@pytest.fixture
def sample_text():
    """Provide sample text for testing"""
    return """The quick brown fox jumps over the lazy dog.
This is a test document with multiple lines.
The Quick Brown Fox is different from the quick brown fox.
Search and replace functionality should work correctly.
"""


@pytest.fixture
def make_document(qapp):
    """Factory for TextDocument instances"""
    def _make(text=""):
        return TextDocument(text)
    return _make


@pytest.fixture
def pattern_cache():
    """A private pattern cache so tests don't share compiled patterns"""
    return SharedPatternCache()
