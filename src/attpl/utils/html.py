"""HTML helpers: value escaping and comment stripping.

Escaping is the only injection-safety guarantee the renderer gives, so every
substituted value (parameters, loop fields, loop values) goes through
``html_escape``. There is no ``Markup``-style bypass.

Performance:
    Single-pass escaping via ``str.translate()`` with a precomputed table.
"""

from __future__ import annotations

import re
from typing import Any

# Single quote is the numeric entity &#039;, not &apos;.
_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#039;",
    }
)

# Non-greedy and spanning lines, so two comments never swallow the markup
# between them.
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)


def to_text(value: Any) -> str:
    """Coerce a host value to the string that will be substituted.

    ``None`` becomes the empty string and booleans become ``"1"``/``""``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, str):
        return value
    return str(value)


def html_escape(value: Any) -> str:
    """Escape a value for safe insertion into HTML.

    Example:
        >>> html_escape("A<b>")
        'A&lt;b&gt;'
        >>> html_escape("Tom & \\"Jerry's\\"")
        'Tom &amp; &quot;Jerry&#039;s&quot;'
    """
    return to_text(value).translate(_ESCAPE_TABLE)


def strip_comments(text: str) -> str:
    """Remove every ``<!-- ... -->`` region from rendered output."""
    return _COMMENT_RE.sub("", text)
