"""Safe-text predicate shared by the free-text kinds.

The ``name``, ``description`` and ``safe_text`` kinds reject control
characters through the predicate below, which tolerates newlines, carriage
returns and tabs.
"""

import unicodedata
from typing import Any

NO_CONTROL_CHARS_MESSAGE = "avoid non-printing characters"

_ALLOWED_WHITESPACE = str.maketrans("", "", "\n\r\t")


def contains_unsafe_characters(value: Any) -> bool:
    """Return True if the value holds a control character other than \\n, \\r, \\t.

    None and empty strings never contain unsafe characters.
    """
    if value is None:
        return False
    text = str(value).translate(_ALLOWED_WHITESPACE)
    return any(unicodedata.category(char) == "Cc" for char in text)


def is_safe_text(value: Any) -> bool:
    return not contains_unsafe_characters(value)
