from __future__ import annotations

import re
from typing import Optional

from ..models import StatsMatch

# "1.5B videos • 80M channels"
STATS_RE = re.compile(
    r"([0-9.,]+[KMB]?)\s+videos\s+•\s+([0-9.,]+[KMB]?)\s+channels",
    re.IGNORECASE,
)


def locate_stats(html: str) -> Optional[StatsMatch]:
    """Return the first usage banner found in ``html``, or ``None``."""

    match = STATS_RE.search(html or "")
    if not match:
        return None
    return StatsMatch(video_usage=match.group(1), channel_usage=match.group(2))
