"""
Utilities for rendering tokens safely on a terminal.
"""

import unicodedata


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def render_token(token: str, max_width: int | None = None) -> str:
    """
    Escape control characters in a token and optionally shorten it.

    Tokens longer than ``max_width`` are cut and end with an ellipsis.
    """
    shown = _escape_ctrl_chars(token)
    if max_width is not None and len(shown) > max_width:
        shown = shown[: max(max_width - 1, 0)] + "…"
    return shown
