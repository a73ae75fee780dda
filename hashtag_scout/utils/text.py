from __future__ import annotations

import re
from typing import List

HASHTAG_RE = re.compile(r"#([A-Za-z0-9_]+)")


def normalize_tag(tag: str) -> str:
    """Strip the leading ``#`` and lowercase, e.g. ``"#Cats"`` -> ``"cats"``."""

    return tag.strip().lstrip("#").lower()


def scan_hashtags(text: str, exclude: str = "") -> List[str]:
    """Return every hashtag token in ``text`` in order of appearance.

    Tokens are normalized with :func:`normalize_tag`. Duplicates are kept;
    occurrences equal to ``exclude`` (compared after normalization) are dropped.
    """

    if not text:
        return []
    excluded = normalize_tag(exclude) if exclude else ""
    tokens: List[str] = []
    for raw in HASHTAG_RE.findall(text):
        token = raw.lower()
        if token != excluded:
            tokens.append(token)
    return tokens
