from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote

import httpx

from ..exceptions import RetrievalError
from ..models import FetchSettings
from ..utils.logging import get_logger


def hashtag_url(tag: str, settings: FetchSettings) -> str:
    return f"{settings.base_url}{quote(tag.strip().lstrip('#'), safe='')}"


def _headers(settings: FetchSettings) -> Dict[str, str]:
    return {"User-Agent": settings.user_agent}


async def fetch_hashtag_page(
    tag: str,
    settings: Optional[FetchSettings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """GET the landing page for ``tag`` and return its HTML.

    Raises :class:`RetrievalError` for transport failures and non-2xx answers.
    """

    settings = settings or FetchSettings()
    url = hashtag_url(tag, settings)
    if client is not None:
        return await _fetch(client, url, settings)
    async with httpx.AsyncClient(timeout=float(settings.timeout_s), follow_redirects=True) as owned:
        return await _fetch(owned, url, settings)


async def _fetch(client: httpx.AsyncClient, url: str, settings: FetchSettings) -> str:
    get_logger(__name__).info("Fetching hashtag page", extra={"url": url})
    try:
        response = await client.get(url, headers=_headers(settings))
        response.raise_for_status()
    except httpx.HTTPError as exc:
        get_logger(__name__).warning("HTTP fetch failed", extra={"url": url, "error": str(exc)})
        raise RetrievalError(url, str(exc)) from exc
    return response.text
