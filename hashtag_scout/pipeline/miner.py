from __future__ import annotations

import json
import re
from collections import Counter
from typing import Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup

from ..models import MiningSettings
from ..utils.logging import get_logger
from ..utils.text import normalize_tag, scan_hashtags

VIDEO_ENTRY_MARKER = "videoRenderer"
SHORTS_ENTRY_MARKER = "reelItemRenderer"
MAIN_CONTAINER_TAG = "ytd-page-manager"

_DECODER = json.JSONDecoder()
_CONTAINER_OPEN_RE = re.compile(r"<%s\b" % MAIN_CONTAINER_TAG, re.IGNORECASE)
_CONTAINER_CLOSE_RE = re.compile(r"</%s\s*>" % MAIN_CONTAINER_TAG, re.IGNORECASE)


def _entry_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(r'"%s":\s*\{' % re.escape(marker))


_ENTRY_PATTERNS = {
    VIDEO_ENTRY_MARKER: _entry_pattern(VIDEO_ENTRY_MARKER),
    SHORTS_ENTRY_MARKER: _entry_pattern(SHORTS_ENTRY_MARKER),
}


def iter_entry_blocks(html: str, marker: str, block_extent: str = "balanced") -> Iterator[str]:
    """Yield each ``"<marker>": {...}`` block of ``html``, left to right.

    With ``block_extent="balanced"`` the object after the marker is decoded as
    JSON to find its real end; objects that do not decode (truncated or
    malformed markup) end at the nearest following ``}``, which is also the
    only rule used with ``block_extent="nearest_brace"``. Blocks never overlap.
    """

    pattern = _ENTRY_PATTERNS.get(marker) or _entry_pattern(marker)
    position = 0
    while True:
        match = pattern.search(html, position)
        if not match:
            return
        end = _block_end(html, match.end() - 1, block_extent)
        if end is None:
            return
        yield html[match.start():end]
        position = end


def _block_end(html: str, brace: int, block_extent: str) -> Optional[int]:
    if block_extent == "balanced":
        try:
            _, end = _DECODER.raw_decode(html, brace)
            return end
        except ValueError:
            pass
    closing = html.find("}", brace)
    if closing == -1:
        return None
    return closing + 1


def main_container_markup(html: str) -> Optional[str]:
    """Return the source text of the first main content container, if any.

    The parser only locates the opening tag, so markup inside scripts or
    comments is never taken for the container. The region is the raw source
    up to the first closing tag after it; an unclosed container yields ``None``.
    """

    if not _CONTAINER_OPEN_RE.search(html):
        return None
    soup = BeautifulSoup(html, "html.parser")
    container = soup.find(MAIN_CONTAINER_TAG)
    if container is None or container.sourceline is None:
        return None
    start = _source_offset(html, container.sourceline, container.sourcepos)
    closing = _CONTAINER_CLOSE_RE.search(html, start)
    if closing is None:
        return None
    return html[start:closing.end()]


def _source_offset(html: str, line: int, column: int) -> int:
    position = 0
    for _ in range(line - 1):
        position = html.index("\n", position) + 1
    return position + column


def rank_hashtags(counts: Counter[str]) -> List[str]:
    # most_common keeps first-seen order for equal counts
    return [tag for tag, _ in counts.most_common()]


def mine_related_hashtags(html: str, subject_tag: str, settings: Optional[MiningSettings] = None) -> List[str]:
    """Rank the hashtags that co-occur with ``subject_tag`` on a hashtag page.

    Video entries are scanned first, then short-form entries, both feeding one
    frequency table. When those yield fewer than
    ``settings.fallback_min_distinct`` distinct tags the main content container
    is scanned as well.
    """

    settings = settings or MiningSettings()
    logger = get_logger(__name__)
    subject = normalize_tag(subject_tag)
    excluded = set(settings.excluded_tokens)
    counts: Counter[str] = Counter()

    for marker in (VIDEO_ENTRY_MARKER, SHORTS_ENTRY_MARKER):
        blocks = 0
        for block in iter_entry_blocks(html, marker, settings.block_extent):
            _accumulate(counts, scan_hashtags(block, subject), excluded)
            blocks += 1
        logger.debug("Scanned entry blocks", extra={"marker": marker, "blocks": blocks, "distinct": len(counts)})

    if len(counts) < settings.fallback_min_distinct:
        markup = main_container_markup(html)
        if markup is not None:
            _accumulate(counts, scan_hashtags(markup, subject), excluded)
        logger.debug(
            "Fallback container scan",
            extra={"found": markup is not None, "distinct": len(counts)},
        )

    return rank_hashtags(counts)


def _accumulate(counts: Counter[str], tokens: Iterable[str], excluded: set[str]) -> None:
    for token in tokens:
        if token not in excluded:
            counts[token] += 1
