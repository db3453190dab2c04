"""
Display labels for rendered tables and card grids.

Titles authored in Contentful may contain a ``[city-state]`` placeholder
that is filled in from the slug of the page being rendered, e.g. the page
``birmingham-al`` turns ``"Resources in [city-state]"`` into
``"Resources in Birmingham, AL"``.  The slug is always passed in by the
caller.
"""

from __future__ import annotations

import re
from typing import Optional

_PLACEHOLDER_RE = re.compile(r"\[ ?city-state ?\]")
_LOWERCASE_RE = re.compile(r"(\[ ?city-state ?\])\s+lowercase", re.IGNORECASE)


def format_header_label(header: str) -> str:
    """``"base_pricing_string"`` → ``"Base Pricing"``."""
    label = re.sub(r"[_-]", " ", header or "")
    label = re.sub(r"\s+string$", "", label, flags=re.IGNORECASE)
    return re.sub(r"(^|\s)(\S)", lambda m: m.group(1) + m.group(2).upper(), label.strip())


def city_state_from_slug(slug: str) -> str:
    """``"birmingham-al"`` → ``"Birmingham, AL"``; no state suffix → city only."""
    parts = (slug or "").split("-")
    state = ""
    if len(parts) >= 2 and len(parts[-1]) == 2 and parts[-1].isalpha():
        state = parts[-1].upper()
        parts = parts[:-1]
    city = " ".join(p[:1].upper() + p[1:] for p in parts)
    return f"{city}, {state}" if state else city


def resolve_title_placeholders(title: str, post_slug: Optional[str]) -> str:
    """Replace ``[city-state]`` / ``[ city-state ]`` in ``title``.

    A trailing ``lowercase`` modifier lower-cases the replacement.  Without
    a post slug the title is returned unchanged.
    """
    if not title or not _PLACEHOLDER_RE.search(title) or not post_slug:
        return title

    replacement = city_state_from_slug(post_slug)
    if _LOWERCASE_RE.search(title):
        title = _LOWERCASE_RE.sub(r"\1", title)
        replacement = replacement.lower()
    return _PLACEHOLDER_RE.sub(lambda m: replacement, title)
