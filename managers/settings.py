"""
Search settings manager.
Handles loading/saving search options and the query history.
"""

import os
import json
import logging

from constants import MAX_SEARCH_HISTORY
from managers.match_finder import is_word_char
from models.search_types import FindFlag

logger = logging.getLogger(__name__)

# Option keys mapped to the flag they enable
FLAG_KEYS = {
    'case_sensitive': FindFlag.CASE_SENSITIVE,
    'whole_word': FindFlag.WHOLE_WORD,
    'regex': FindFlag.REGEX,
}


class SearchSettingsManager:
    """Persists the search options and query history as a JSON object.

    Known keys: 'case_sensitive', 'whole_word' and 'regex' (booleans
    backing the default FindFlag), 'extra_word_characters' (string of
    characters treated as word characters) and 'history' (recent queries,
    most recent first).
    """

    def __init__(self, settings_file):
        self.settings_file = settings_file
        self._settings = {}

    def load(self):
        """Read the search options from settings_file.

        A missing, unreadable or non-object file leaves the defaults in place.

        Returns:
            dict: The loaded options, or an empty dict
        """
        if not os.path.exists(self.settings_file):
            self._settings = {}
            return {}

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                settings = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load search settings: %s", e)
            self._settings = {}
            return {}

        if not isinstance(settings, dict):
            logger.warning("Ignoring search settings in %s: expected an object, got %s",
                           self.settings_file, type(settings).__name__)
            self._settings = {}
            return {}

        self._settings = settings
        return self._settings

    def save(self, settings=None):
        """Write the search options and history to settings_file.

        Args:
            settings: dict of options to write (defaults to the current ones)
        """
        if settings is None:
            settings = self._settings
        try:
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            self._settings = settings
        except (OSError, TypeError) as e:
            logger.warning("Failed to save search settings: %s", e)

    def get(self, key, default=None):
        """Get a search option.

        Args:
            key: Option key, e.g. 'regex' or 'extra_word_characters'
            default: Value returned when the option is unset

        Returns:
            The option value or default
        """
        return self._settings.get(key, default)

    def set(self, key, value):
        self._settings[key] = value

    def default_flags(self):
        """Build the FindFlag combination stored in the settings"""
        flags = FindFlag.NONE
        for key, flag in FLAG_KEYS.items():
            if self._settings.get(key):
                flags |= flag
        return flags

    def set_flags(self, flags):
        """Store the options of flags (direction is not persisted)"""
        for key, flag in FLAG_KEYS.items():
            self._settings[key] = bool(flags & flag)

    def word_char_predicate(self):
        """Word-character predicate extended with the configured characters"""
        extra = self._settings.get('extra_word_characters', '')
        if not extra:
            return is_word_char
        extra = set(extra)
        return lambda ch: is_word_char(ch) or ch in extra

    def add_history(self, text):
        """Record a query, most recent first, without duplicates"""
        if not text:
            return
        history = [item for item in self._settings.get('history', []) if item != text]
        history.insert(0, text)
        self._settings['history'] = history[:MAX_SEARCH_HISTORY]

    def get_history(self):
        return list(self._settings.get('history', []))
