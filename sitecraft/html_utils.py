"""HTML utility functions for sitecraft.

Following the Single Responsibility Principle, this module focuses
exclusively on HTML string manipulation.

Functions:
    escape_html: Escape special HTML characters in a string.
    split_list_items: Split comma-separated text into trimmed items.
"""

from __future__ import annotations


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Converts the following characters to their HTML entity equivalents,
    in this order:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &#039;

    Args:
        text: The string to escape.

    Returns:
        The escaped string, safe for inclusion in HTML text and attributes.

    Examples:
        >>> escape_html('<script>alert("XSS")</script>')
        '&lt;script&gt;alert(&quot;XSS&quot;)&lt;/script&gt;'

        >>> escape_html("Tom & Jerry's")
        'Tom &amp; Jerry&#039;s'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def split_list_items(text: str) -> list[str]:
    """Split comma-separated text into trimmed items.

    Args:
        text: Raw list text, e.g. ``"one, two ,three"``.

    Returns:
        Items in order, whitespace stripped. Empty items are kept.

    Examples:
        >>> split_list_items("one, two ,three")
        ['one', 'two', 'three']
    """
    return [item.strip() for item in text.split(",")]
