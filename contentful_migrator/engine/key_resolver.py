"""
Heading-to-key resolution.

Tables that carry a key column are embedded several times on the same
page, each time under a heading that implicitly names the rows to show
(``"Area Agency on Aging"`` → ``agency``).  The rich text converter stores
the slug of that heading on the shortcode, and the renderer maps it back
to one of the table's known key values here.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

_WORD_SPLIT = re.compile(r"[\s\-]+")


def slugify_heading(text: str) -> str:
    """Slug used for heading-derived ``key`` attributes.

    ``"Food Assistance Programs!"`` → ``"food-assistance-programs"``
    """
    slug = (text or "").lower()
    slug = re.sub(r"[^a-z0-9\s]", "", slug).strip()
    return re.sub(r"\s+", "-", slug)


def _normalized_keys(known_keys: Iterable[str]) -> List[str]:
    keys = [(k or "").strip().lower() for k in known_keys]
    return [k for k in keys if k]


def resolve_key_from_heading(hint: str, known_keys: Iterable[str] = ()) -> Optional[str]:
    """Map a heading hint to one of ``known_keys``.

    Strategies are tried in order: exact match, whole-word match (words
    split on whitespace and hyphens), prefix match, substring match.  Within
    a strategy the first key in ``known_keys`` order wins.  Returns the
    lower-cased key, or ``None`` when nothing matches.

    With no known keys at all the normalized hint itself is returned, so a
    table without key metadata is still filtered by the literal hint.
    """
    slug = (hint or "").strip().lower()
    raw_keys = list(known_keys or [])
    if not raw_keys:
        return slug

    keys = _normalized_keys(raw_keys)
    words = set(_WORD_SPLIT.split(slug))

    for key in keys:
        if slug == key:
            return key
    for key in keys:
        if key in words:
            return key
    for key in keys:
        if slug.startswith(key):
            return key
    for key in keys:
        if key in slug:
            return key
    return None
