"""Type definitions for the tagging pipeline.

Requests are plain frozen dataclasses; everything decoded from model output is
a Pydantic model so that validation failures can be turned into fallbacks.
"""

import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator

from archivr.config.constants import (
    FALLBACK_CONFIDENCE,
    FALLBACK_MOOD,
    FALLBACK_TAG,
    MAX_TAGS,
)

_TAG_SEPARATORS = re.compile(r"[\s_]+")


def normalize_tag(tag: str) -> str:
    """Lowercase a tag and hyphenate multi-word tags.

    Example:
        >>> normalize_tag("  Dark Academia ")
        'dark-academia'
    """
    tag = _TAG_SEPARATORS.sub("-", tag.strip().lower())
    return re.sub(r"-{2,}", "-", tag).strip("-")


@dataclass(frozen=True)
class AnalysisRequest:
    """One post to tag."""

    url: str
    caption: str | None = None


class AnalysisResult(BaseModel):
    """Structured tags for one post.

    Field names follow the JSON the model is asked to produce, so
    ``model_dump(by_alias=True)`` round-trips through the decoder.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tags: list[str] = Field(min_length=1)
    suggested_collection: str | None = Field(default=None, alias="suggestedCollection")
    mood: str | None = None
    confidence: float = Field(default=FALLBACK_CONFIDENCE, ge=0.0, le=1.0)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        tags: list[str] = []
        for raw in value:
            tag = normalize_tag(raw)
            if tag and tag not in tags:
                tags.append(tag)
        if not tags:
            raise ValueError("no usable tags")
        return tags[:MAX_TAGS]

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return min(max(float(value), 0.0), 1.0)
        return value

    @classmethod
    def fallback(cls) -> "AnalysisResult":
        """The low-confidence result used when model output cannot be understood."""
        return cls(tags=[FALLBACK_TAG], mood=FALLBACK_MOOD, confidence=FALLBACK_CONFIDENCE)

    @property
    def is_fallback(self) -> bool:
        return self == self.fallback()


class CollectionSuggestion(BaseModel):
    """A proposed collection grouping related tags."""

    name: str = Field(min_length=1)
    emoji: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return [t for t in (normalize_tag(v) for v in value) if t]


class SearchIntent(BaseModel):
    """Tags and keywords matching a free-text search query."""

    model_config = ConfigDict(populate_by_name=True)

    matching_tags: list[str] = Field(default_factory=list, alias="matchingTags")
    keywords: list[str] = Field(default_factory=list)
