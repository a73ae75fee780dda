from __future__ import annotations

import asyncio
import math
from typing import Any, Dict, Iterable, Optional, Tuple

import httpx

from ..exceptions import RetrievalError, StatsNotFound
from ..models import AnalysisResult, Settings, StatsMatch, UsageStats
from ..utils.logging import get_logger
from .fetcher import fetch_hashtag_page
from .miner import mine_related_hashtags
from .normalizer import normalize_magnitude
from .stats import locate_stats
from .tiers import classify

Response = Tuple[int, Dict[str, Any]]


def _usage_stats(stats: StatsMatch) -> UsageStats:
    video = normalize_magnitude(stats.video_usage)
    channel = normalize_magnitude(stats.channel_usage)
    if not (math.isfinite(video) and math.isfinite(channel)):
        raise StatsNotFound()
    return UsageStats(video_count=video, channel_count=channel)


def analyze(html: str, subject_tag: str, settings: Optional[Settings] = None) -> AnalysisResult:
    """Classify the usage banner of a hashtag page and rank its related tags.

    Raises :class:`StatsNotFound` before any mining when the page has no
    usable banner.
    """

    settings = settings or Settings()
    stats = locate_stats(html)
    if stats is None:
        raise StatsNotFound()
    usage = _usage_stats(stats)
    tier = classify(usage.video_count, usage.channel_count)
    related = mine_related_hashtags(html, subject_tag, settings.mining)
    return AnalysisResult(
        hashtag=f"#{subject_tag.strip().lstrip('#')}",
        video_usage=stats.video_usage,
        channel_usage=stats.channel_usage,
        category=tier.name,
        meaning=tier.meaning,
        action=tier.action,
        suggestions=related[: settings.mining.suggestion_limit],
    )


def build_response(html: str, subject_tag: str, settings: Optional[Settings] = None) -> Response:
    """Run :func:`analyze` and map the outcome to ``(status_code, payload)``."""

    try:
        result = analyze(html, subject_tag, settings)
    except StatsNotFound as exc:
        get_logger(__name__).info("No usage stats on page", extra={"hashtag": subject_tag})
        return 404, {"error": str(exc)}
    except Exception as exc:  # pylint: disable=broad-except
        get_logger(__name__).exception("Analysis failed", extra={"hashtag": subject_tag})
        return 500, {"error": str(exc)}
    get_logger(__name__).info(
        "Analysis complete",
        extra={"hashtag": subject_tag, "category": result.category, "suggestions": len(result.suggestions)},
    )
    return 200, result.to_payload()


async def respond(
    tag: str,
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Response:
    settings = settings or Settings()
    try:
        html = await fetch_hashtag_page(tag, settings.fetch, client)
    except RetrievalError as exc:
        return 502, {"error": str(exc)}
    except Exception as exc:  # pylint: disable=broad-except
        get_logger(__name__).exception("Fetch failed", extra={"hashtag": tag})
        return 500, {"error": str(exc)}
    return build_response(html, tag, settings)


async def respond_many(
    tags: Iterable[str],
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Response]:
    """Analyse several tags concurrently, keyed by tag in input order."""

    settings = settings or Settings()
    semaphore = asyncio.Semaphore(settings.fetch.max_concurrency)

    async def _run(tag: str, shared: httpx.AsyncClient) -> Tuple[str, Response]:
        async with semaphore:
            return tag, await respond(tag, settings, shared)

    if client is not None:
        pairs = await asyncio.gather(*(_run(tag, client) for tag in tags))
    else:
        async with httpx.AsyncClient(timeout=float(settings.fetch.timeout_s), follow_redirects=True) as owned:
            pairs = await asyncio.gather(*(_run(tag, owned) for tag in tags))
    return dict(pairs)
