from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from ..config import load_settings
from ..models import Settings
from ..pipeline.runner import Response, build_response, respond, respond_many
from ..utils.logging import configure_logging

app = typer.Typer(add_completion=False, help="Hashtag usage and related-tag analysis")

EXIT_CODES = {200: 0, 404: 1}


def _settings(path: Optional[Path], limit: Optional[int]) -> Settings:
    cfg = load_settings(path)
    if limit is not None:
        cfg.mining.suggestion_limit = limit
    return cfg


def _emit(payload: Dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _finish(response: Response) -> None:
    status, payload = response
    _emit(payload)
    code = EXIT_CODES.get(status, 2)
    if code:
        raise typer.Exit(code=code)


@app.command()
def analyze(
    tag: str = typer.Argument(..., help="Hashtag to look up, with or without '#'"),
    settings: Optional[Path] = typer.Option(None, help="Path to runtime settings"),
    limit: Optional[int] = typer.Option(None, min=0, help="Override the number of suggestions"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
):
    """Fetch a hashtag page and print its tier and related hashtags."""

    configure_logging(log_level)
    cfg = _settings(settings, limit)
    _finish(asyncio.run(respond(tag, cfg)))


@app.command()
def inspect(
    html_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved hashtag page"),
    tag: str = typer.Argument(..., help="Hashtag the page belongs to"),
    settings: Optional[Path] = typer.Option(None, help="Path to runtime settings"),
    limit: Optional[int] = typer.Option(None, min=0, help="Override the number of suggestions"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
):
    """Analyse a previously saved hashtag page without network access."""

    configure_logging(log_level)
    cfg = _settings(settings, limit)
    html = html_file.read_text(encoding="utf-8", errors="replace")
    _finish(build_response(html, tag, cfg))


@app.command()
def batch(
    tags: List[str] = typer.Argument(..., help="Hashtags to look up"),
    settings: Optional[Path] = typer.Option(None, help="Path to runtime settings"),
    limit: Optional[int] = typer.Option(None, min=0, help="Override the number of suggestions"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
):
    """Look up several hashtags concurrently."""

    configure_logging(log_level)
    cfg = _settings(settings, limit)
    responses = asyncio.run(respond_many(tags, cfg))
    _emit({tag: {"status": status, "body": body} for tag, (status, body) in responses.items()})
    if any(status != 200 for status, _ in responses.values()):
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
