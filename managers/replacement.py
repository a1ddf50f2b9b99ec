"""
Replacement resolver - expands back-references in replacement text.
"""

from constants import MAX_BACK_REFERENCE


def resolve(template, match):
    """Expand back-references in template against match.

    \\1 .. \\9 become the text of that capture group, or nothing if the
    group did not participate. \\\\ is a literal backslash. Any other
    escape, including a trailing backslash, is kept as written.

    Args:
        template: Replacement text
        match: Match carrying the regex captures

    Returns:
        Literal replacement text
    """
    if '\\' not in template:
        return template

    parts = []
    i = 0
    length = len(template)
    while i < length:
        ch = template[i]
        if ch != '\\' or i + 1 >= length:
            parts.append(ch)
            i += 1
            continue

        nxt = template[i + 1]
        if nxt == '\\':
            parts.append('\\')
        elif nxt in '0123456789' and 1 <= int(nxt) <= MAX_BACK_REFERENCE:
            parts.append(match.group(int(nxt)) or '')
        else:
            parts.append(ch + nxt)
        i += 2

    return ''.join(parts)


def resolve_for_query(template, match, query):
    """Replacement text for match; literal queries use the template verbatim"""
    if not query.is_regex:
        return template
    return resolve(template, match)
