"""Best-effort extraction of structured data from free-form model output.

Every decoder here is total: model output that cannot be understood degrades to
a fixed fallback value instead of raising, so one bad completion never blocks a
batch.
"""

import json
import re
from typing import Any, Literal

from pydantic import ValidationError

from archivr.llm.types import AnalysisResult, CollectionSuggestion, SearchIntent
from archivr.utils.logging import get_logger

log = get_logger(__name__)

_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")
_FENCE_PATTERN = re.compile(r"```[a-zA-Z]*\s*\n?([\s\S]*?)```")

_json_decoder = json.JSONDecoder()

# Bounds the fallback scan on long garbage output
_MAX_SCAN_ATTEMPTS = 64


def _candidate_texts(raw: str) -> list[str]:
    """Full text first, then the body of the first markdown code block."""
    match = _FENCE_PATTERN.search(raw)
    if match is None:
        return [raw]
    return [raw, match.group(1)]


def _loads(span: str) -> Any | None:
    try:
        return json.loads(span)
    except (ValueError, RecursionError):
        return None


def _scan(text: str, opener: str) -> Any | None:
    """Parse the first JSON value that starts at an ``opener`` character."""
    start = text.find(opener)
    attempts = 0
    while start != -1 and attempts < _MAX_SCAN_ATTEMPTS:
        attempts += 1
        try:
            value, _ = _json_decoder.raw_decode(text, start)
            return value
        except (ValueError, RecursionError):
            start = text.find(opener, start + 1)
    return None


def _extract(text: str, pattern: re.Pattern[str], opener: str) -> Any | None:
    match = pattern.search(text)
    if match is None:
        return None
    # Widest span first; narrower candidates when prose or several groups surround it
    value = _loads(match.group(0))
    if value is None:
        value = _scan(match.group(0), opener)
    return value


def extract_json(raw: str | None, prefer: Literal["object", "array"] = "object") -> Any | None:
    """Pull the first JSON object or array out of ``raw``.

    Args:
        raw: Raw completion text
        prefer: Which shape wins when the text contains both

    Returns:
        The parsed ``dict`` or ``list``, or None if nothing parses
    """
    if not raw:
        return None

    extractors = [(_OBJECT_PATTERN, "{"), (_ARRAY_PATTERN, "[")]
    if prefer == "array":
        extractors.reverse()

    for text in _candidate_texts(raw):
        for pattern, opener in extractors:
            value = _extract(text, pattern, opener)
            if value is not None:
                return value
    return None


def decode_analysis(raw: str | None) -> AnalysisResult:
    """Decode tagging output into an AnalysisResult, falling back when unusable."""
    data = extract_json(raw)
    if not isinstance(data, dict):
        log.warning("No JSON object in model output, using fallback tags", raw=raw or "")
        return AnalysisResult.fallback()

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        log.warning(
            "Model output failed validation, using fallback tags",
            errors=e.error_count(),
            raw=raw or "",
        )
        return AnalysisResult.fallback()


def decode_collection_suggestions(raw: str | None) -> list[CollectionSuggestion]:
    """Decode a JSON array of collection suggestions, skipping malformed entries."""
    data = extract_json(raw, prefer="array")
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        log.warning("No JSON array in collection suggestion output", raw=raw or "")
        return []

    suggestions: list[CollectionSuggestion] = []
    for entry in data:
        try:
            suggestions.append(CollectionSuggestion.model_validate(entry))
        except ValidationError:
            log.debug("Skipping malformed collection suggestion", entry=str(entry))
    return suggestions


def decode_search_intent(raw: str | None) -> SearchIntent:
    """Decode search intent output; an empty intent when unusable."""
    data = extract_json(raw)
    if isinstance(data, dict):
        try:
            return SearchIntent.model_validate(data)
        except ValidationError:
            pass
    log.warning("Unusable search intent output", raw=raw or "")
    return SearchIntent()
