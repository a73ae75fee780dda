import asyncio
import json

import httpx
import pytest

from hashtag_scout.exceptions import StatsNotFound
from hashtag_scout.models import MiningSettings, Settings
from hashtag_scout.pipeline import runner
from hashtag_scout.pipeline.runner import analyze, build_response


def make_page(banner: str, tags=()) -> str:
    entries = ", ".join(json.dumps({"videoRenderer": {"title": {"text": f"#{tag}"}}}) for tag in tags)
    return (
        f"<html><body><span>{banner}</span>"
        f"<script>var ytInitialData = {{\"contents\": [{entries}]}};</script></body></html>"
    )


def test_analyze_viral_page():
    html = make_page("1.5B videos • 80M channels", ["cats", "kitten", "pets", "kitten"])
    result = analyze(html, "Cats")
    assert result.hashtag == "#Cats"
    assert result.video_usage == "1.5B"
    assert result.channel_usage == "80M"
    assert result.category == "Viral"
    assert result.meaning == "Massive trend. Extremely competitive."
    assert result.action == "Use 1–2 for reach."
    assert result.suggestions == ["kitten", "pets"]


def test_analyze_keeps_raw_magnitudes():
    result = analyze(make_page("12,345 videos • 6,789 channels"), "cats")
    assert result.video_usage == "12,345"
    assert result.channel_usage == "6,789"


def test_analyze_video_count_alone_does_not_promote():
    result = analyze(make_page("20M videos • 0 channels"), "cats")
    assert result.category == "Untapped"


def test_missing_stats_skips_mining(monkeypatch):
    calls = []
    monkeypatch.setattr(runner, "mine_related_hashtags", lambda *args, **kwargs: calls.append(args) or [])
    html = make_page("no banner", ["dogs"])
    with pytest.raises(StatsNotFound):
        analyze(html, "cats")
    assert calls == []


def test_unparsable_magnitude_is_not_found():
    with pytest.raises(StatsNotFound):
        analyze(make_page(". videos • 5K channels"), "cats")


def test_suggestions_truncated_in_rank_order():
    tags = [f"tag{i:02d}" for i in range(15)]
    result = analyze(make_page("44K videos • 3K channels", tags), "cats")
    assert result.category == "Low"
    assert result.suggestions == tags[:10]


def test_suggestion_limit_is_configurable():
    tags = [f"tag{i:02d}" for i in range(15)]
    settings = Settings(mining=MiningSettings(suggestion_limit=3))
    result = analyze(make_page("44K videos • 3K channels", tags), "cats", settings)
    assert result.suggestions == ["tag00", "tag01", "tag02"]


def test_payload_uses_external_field_names():
    status, payload = build_response(make_page("11K videos • 1.2K channels", ["dogs"]), "cats")
    assert status == 200
    assert payload == {
        "hashtag": "#cats",
        "videoUsage": "11K",
        "channelUsage": "1.2K",
        "category": "Low",
        "meaning": "Low competition.",
        "action": "Use 1–2 to rank.",
        "suggestions": ["dogs"],
    }


def test_build_response_not_found():
    assert build_response("<html></html>", "cats") == (404, {"error": "Stats not found for this hashtag."})


def test_build_response_unexpected_failure(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(runner, "classify", boom)
    assert build_response(make_page("11K videos • 1K channels"), "cats") == (500, {"error": "boom"})


def mock_client(pages, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        tag = request.url.path.rsplit("/", 1)[-1]
        if tag not in pages:
            return httpx.Response(status, text="")
        return httpx.Response(200, text=pages[tag])

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_respond_fetches_and_analyses():
    pages = {"cats": make_page("2M videos • 60K channels", ["kitten"])}

    async def _run():
        async with mock_client(pages) as client:
            return await runner.respond("#cats", Settings(), client)

    status, payload = asyncio.run(_run())
    assert status == 200
    assert payload["category"] == "Popular"
    assert payload["suggestions"] == ["kitten"]


def test_respond_maps_http_errors_to_retrieval_failure():
    async def _run():
        async with mock_client({}, status=503) as client:
            return await runner.respond("cats", Settings(), client)

    status, payload = asyncio.run(_run())
    assert status == 502
    assert "503" in payload["error"]


def test_respond_many_keeps_input_order():
    pages = {
        "cats": make_page("2M videos • 60K channels"),
        "dogs": make_page("500 videos • 20 channels"),
    }

    async def _run():
        async with mock_client(pages, status=404) as client:
            return await runner.respond_many(["dogs", "cats", "birds"], Settings(), client)

    responses = asyncio.run(_run())
    assert list(responses) == ["dogs", "cats", "birds"]
    assert responses["cats"][1]["category"] == "Popular"
    assert responses["dogs"][1]["category"] == "Untapped"
    assert responses["birds"][0] == 502


def test_respond_many_isolates_unexpected_fetch_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/broken"):
            raise RuntimeError("unexpected transport failure")
        return httpx.Response(200, text=make_page("2M videos • 60K channels"))

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await runner.respond_many(["cats", "broken"], Settings(), client)

    responses = asyncio.run(_run())
    assert responses["cats"][0] == 200
    assert responses["broken"] == (500, {"error": "unexpected transport failure"})
