"""
HTML sanitization for post content shown to readers.
Keeps a small set of inline formatting tags, drops everything else.
"""

import re
from typing import Optional

import bleach

# Allowed tags (inline formatting only)
ALLOWED_TAGS = [
    "b",
    "strong",
    "i",
    "em",
    "u",
    "br",
]

# No attributes survive, so no event handlers or URLs either
ALLOWED_ATTRIBUTES = {}


def sanitize_html(html: Optional[str]) -> Optional[str]:
    """
    Sanitize stored post content for display.

    Rules:
    - Remove <script> and <style> blocks including their text
    - Remove HTML comments
    - Strip tags outside ALLOWED_TAGS (their text is kept)
    - Strip all attributes
    - Collapse whitespace

    Args:
        html: Stored post content

    Returns:
        Sanitized HTML or None if empty
    """
    if not html:
        return None

    # First pass: remove scripts and styles
    html = re.sub(
        r"<script[^>]*>.*?</script>", "", html, flags=re.DOTALL | re.IGNORECASE
    )
    html = re.sub(
        r"<style[^>]*>.*?</style>", "", html, flags=re.DOTALL | re.IGNORECASE
    )

    # Remove HTML comments
    html = re.sub(r"<!--.*?-->", "", html, flags=re.DOTALL)

    cleaner = bleach.Cleaner(
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True,
        strip_comments=True,
    )

    sanitized = cleaner.clean(html)

    # Clean excessive whitespace
    sanitized = re.sub(r"\s+", " ", sanitized).strip()

    return sanitized if sanitized else None
