"""
Cursor navigation over an ascending match set.
"""

import bisect


def current_match_index(matches, pos, starts=None):
    """Index of the match the cursor is at or strictly inside, or -1.

    Args:
        matches: Matches sorted by start
        pos: Cursor position
        starts: Precomputed list of match starts (optional)
    """
    if starts is None:
        starts = [m.start for m in matches]
    index = bisect.bisect_right(starts, pos) - 1
    if index < 0 or not matches[index].contains(pos):
        return -1
    # First of several matches sharing this start
    return bisect.bisect_left(starts, matches[index].start)


def select(matches, current_pos, forward, skip_current):
    """Pick the match to activate relative to current_pos.

    Going forward this is the first match starting after the cursor,
    going backward the last match starting before it. With nothing left
    in that direction the selection wraps to the other end of the set.

    A cursor at a match start or inside a match is "on" that match: it is
    selected unless skip_current is set, in which case the cursor is
    treated as sitting at that match's start.

    Args:
        matches: Matches sorted by start
        current_pos: Cursor position
        forward: Search direction
        skip_current: Skip the match under the cursor

    Returns:
        (index, wrapped); index is -1 for an empty match set
    """
    if not matches:
        return -1, False

    starts = [m.start for m in matches]
    pos = current_pos
    on_index = current_match_index(matches, pos, starts)
    if on_index >= 0:
        if not skip_current:
            if not forward:
                # Last of several matches sharing this start
                on_index = bisect.bisect_right(starts, matches[on_index].start) - 1
            return on_index, False
        pos = matches[on_index].start

    if forward:
        index = bisect.bisect_right(starts, pos)
        if index < len(matches):
            return index, False
        return 0, True

    index = bisect.bisect_left(starts, pos) - 1
    if index >= 0:
        return index, False
    return len(matches) - 1, True
