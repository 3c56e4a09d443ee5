"""LLM integration module for Archivr."""

from archivr.llm.base import BaseGateway, LLMMessage, LLMResponse, TokenUsage
from archivr.llm.decoder import (
    decode_analysis,
    decode_collection_suggestions,
    decode_search_intent,
    extract_json,
)
from archivr.llm.openrouter import OpenRouterGateway
from archivr.llm.prompts import (
    build_collection_suggestion_prompt,
    build_search_prompt,
    build_tagging_prompt,
)
from archivr.llm.types import AnalysisRequest, AnalysisResult, CollectionSuggestion, SearchIntent

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "BaseGateway",
    "CollectionSuggestion",
    "LLMMessage",
    "LLMResponse",
    "OpenRouterGateway",
    "SearchIntent",
    "TokenUsage",
    "build_collection_suggestion_prompt",
    "build_search_prompt",
    "build_tagging_prompt",
    "decode_analysis",
    "decode_collection_suggestions",
    "decode_search_intent",
    "extract_json",
]
