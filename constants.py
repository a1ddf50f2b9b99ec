"""
Constants used throughout the search engine.
"""

# Maximum number of compiled patterns kept by the shared pattern cache
PATTERN_CACHE_SIZE = 64

# Maximum number of remembered search queries
MAX_SEARCH_HISTORY = 10

# Back-references \1 .. \9 are recognized in replacement text
MAX_BACK_REFERENCE = 9

# Extra-selection highlight colours (RGB)
INCREMENTAL_SEARCH_COLOR = (255, 230, 150)
SEARCH_COLOR = (255, 255, 0)
SEARCH_UNDER_CURSOR_COLOR = (180, 220, 255)
CURRENT_MATCH_COLOR = (255, 165, 0)
