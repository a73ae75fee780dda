from __future__ import annotations


class HashtagScoutError(Exception):
    """Base class for errors raised by the analysis pipeline."""


class StatsNotFound(HashtagScoutError):
    """The page carries no usable "N videos • M channels" banner."""

    default_message = "Stats not found for this hashtag."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class RetrievalError(HashtagScoutError):
    """The hashtag page could not be fetched."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason
