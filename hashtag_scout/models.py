from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FetchSettings(BaseModel):
    base_url: str = Field("https://www.youtube.com/hashtag/", description="Hashtag landing page prefix")
    user_agent: str = Field("Mozilla/5.0", description="HTTP User-Agent")
    timeout_s: int = Field(20, ge=1, le=120)
    max_concurrency: int = Field(5, ge=1, le=64)


class MiningSettings(BaseModel):
    fallback_min_distinct: int = Field(
        5, ge=0, description="Scan the main container when fewer distinct tags were found in entry blocks"
    )
    suggestion_limit: int = Field(10, ge=0, description="Maximum number of suggestions returned")
    excluded_tokens: List[str] = Field(default_factory=list, description="Platform chrome tokens never counted")
    block_extent: Literal["balanced", "nearest_brace"] = Field(
        "balanced", description="How far an entry block extends past its marker"
    )

    @field_validator("excluded_tokens")
    @classmethod
    def _normalize_tokens(cls, value: List[str]) -> List[str]:
        return [token.lstrip("#").lower() for token in value if token and token.strip("#")]


class Settings(BaseModel):
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    mining: MiningSettings = Field(default_factory=MiningSettings)


class StatsMatch(BaseModel):
    """Raw magnitude strings captured from the usage banner."""

    model_config = ConfigDict(frozen=True)

    video_usage: str
    channel_usage: str


class UsageStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    video_count: float = Field(..., ge=0)
    channel_count: float = Field(..., ge=0)


class Tier(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    min_video_count: int
    min_channel_count: int
    meaning: str
    action: str


class AnalysisResult(BaseModel):
    """Outcome of analysing one hashtag page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hashtag: str
    video_usage: str = Field(..., alias="videoUsage")
    channel_usage: str = Field(..., alias="channelUsage")
    category: str = Field(..., description="Name of the matched tier")
    meaning: str
    action: str
    suggestions: List[str] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON record exposed to clients (camelCase keys)."""

        return self.model_dump(mode="json", by_alias=True)
