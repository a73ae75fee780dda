from __future__ import annotations

from typing import Tuple

from ..models import Tier

# Ordered from the most to the least demanding thresholds; the last tier
# accepts everything.
TIERS: Tuple[Tier, ...] = (
    Tier(
        name="Viral",
        min_video_count=10_000_000,
        min_channel_count=500_000,
        meaning="Massive trend. Extremely competitive.",
        action="Use 1–2 for reach.",
    ),
    Tier(
        name="Competitive",
        min_video_count=5_000_000,
        min_channel_count=100_000,
        meaning="Big creators dominate.",
        action="Use 1–2 if relevant.",
    ),
    Tier(
        name="Popular",
        min_video_count=1_000_000,
        min_channel_count=50_000,
        meaning="High reach. Widely used.",
        action="Use 2–3 for visibility.",
    ),
    Tier(
        name="Growing",
        min_video_count=500_000,
        min_channel_count=10_000,
        meaning="Trending upward.",
        action="Use 2–3 for growth.",
    ),
    Tier(
        name="Niche",
        min_video_count=100_000,
        min_channel_count=5_000,
        meaning="Focused audience.",
        action="Use 2–3 to target.",
    ),
    Tier(
        name="Low",
        min_video_count=10_000,
        min_channel_count=1_000,
        meaning="Low competition.",
        action="Use 1–2 to rank.",
    ),
    Tier(
        name="Rare",
        min_video_count=1_000,
        min_channel_count=100,
        meaning="Very lightly used.",
        action="Use 1 for experiments.",
    ),
    Tier(
        name="Untapped",
        min_video_count=0,
        min_channel_count=0,
        meaning="No usage.",
        action="Use only if perfect match.",
    ),
)


def classify(video_count: float, channel_count: float) -> Tier:
    """Return the first tier whose video *and* channel thresholds are both met."""

    for tier in TIERS:
        if video_count >= tier.min_video_count and channel_count >= tier.min_channel_count:
            return tier
    return TIERS[-1]
