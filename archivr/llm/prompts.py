"""Prompt templates for tagging, collection suggestions and search."""

from collections.abc import Mapping, Sequence

from archivr.config.constants import MAX_SUGGESTION_TAGS, MAX_TAGS, MIN_TAGS


def build_tagging_prompt(url: str, caption: str | None = None) -> str:
    """Build the prompt asking for tags of one saved post.

    The caller guarantees ``url`` is non-empty.
    """
    caption_line = f'Caption: "{caption}"' if caption else ""
    return f"""
You are analyzing an Instagram saved post.

Post URL: {url}
{caption_line}

Return ONLY a valid JSON object with this exact structure, no other text:
{{
  "tags": ["tag1", "tag2", "tag3", "tag4", "tag5"],
  "suggestedCollection": "Collection Name",
  "mood": "one word mood",
  "confidence": 0.85
}}

Rules for tags:
- {MIN_TAGS}-{MAX_TAGS} tags total
- Lowercase, hyphenated if multi-word (e.g., "dark-academia")
- Cover: content type, aesthetic, subject, use-case
- Examples: "recipe", "travel", "interior-design", "outfit-inspo", "architecture", "workout", "quote", "dark-moody", "minimalist", "colorful"
"""


def build_collection_suggestion_prompt(tag_counts: Mapping[str, int]) -> str:
    """Build the prompt asking for collections that group the most used tags."""
    # Stable sort keeps insertion order among equal counts
    top_tags = sorted(tag_counts.items(), key=lambda item: item[1], reverse=True)
    tag_lines = "\n".join(
        f'- "{tag}": {count} posts' for tag, count in top_tags[:MAX_SUGGESTION_TAGS]
    )
    return f"""
Analyze these tags and their usage counts from a user's Instagram saved posts collection:

{tag_lines}

Suggest 3-5 collection names that would help organize these posts. Each collection should group related tags.

Return ONLY a valid JSON array, no other text:
[
  {{ "name": "Collection Name", "emoji": "🍕", "tags": ["tag1", "tag2"] }},
  {{ "name": "Another Collection", "emoji": "✈️", "tags": ["tag3", "tag4"] }}
]
"""


def build_search_prompt(query: str, available_tags: Sequence[str]) -> str:
    """Build the prompt mapping a search query onto the user's existing tags."""
    return f"""
A user is searching their Instagram saved posts with this query: "{query}"

Available tags in their collection: {", ".join(available_tags)}

Return ONLY a valid JSON object with tags that match the search intent:
{{
  "matchingTags": ["tag1", "tag2"],
  "keywords": ["keyword1", "keyword2"]
}}
"""
