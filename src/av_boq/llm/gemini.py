"""Thin async wrapper over the google-genai SDK.

One entry point for every model call the BOQ pipeline makes, so tests can swap
in a fake and transport errors surface from a single place.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

from av_boq.core.logging import get_logger
from av_boq.core.schemas import TokenUsage

logger = get_logger(__name__)


@dataclass
class LlmResponse:
    text: Optional[str]
    usage: TokenUsage = field(default_factory=TokenUsage)
    grounding_chunks: List[Any] = field(default_factory=list)


def _usage_from(response: Any) -> TokenUsage:
    meta = getattr(response, "usage_metadata", None)
    if meta is None:
        return TokenUsage()
    return TokenUsage(
        prompt_tokens=meta.prompt_token_count or 0,
        response_tokens=meta.candidates_token_count or 0,
        total_tokens=meta.total_token_count or 0,
    )


def _grounding_chunks_from(response: Any) -> List[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    grounding = getattr(candidates[0], "grounding_metadata", None)
    if grounding is None:
        return []
    return list(grounding.grounding_chunks or [])


class GeminiClient:
    """Gemini calls used by the BOQ pipeline: context caches and generation."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[genai.Client] = None) -> None:
        if client is None:
            if not api_key:
                raise ValueError("GEMINI_API_KEY required")
            client = genai.Client(api_key=api_key)
        self._client = client

    async def create_cache(
        self, model: str, system_instruction: str, context_text: str, ttl_seconds: int
    ) -> str:
        """Create a server-side cached context and return its handle."""
        cache = await self._client.aio.caches.create(
            model=model,
            config=types.CreateCachedContentConfig(
                system_instruction=system_instruction,
                contents=[
                    types.Content(role="user", parts=[types.Part.from_text(text=context_text)])
                ],
                ttl=f"{ttl_seconds}s",
            ),
        )
        if not cache.name:
            raise RuntimeError(f"Cache creation for {model} returned no name")
        return cache.name

    async def generate(
        self,
        model: str,
        prompt: str,
        *,
        cached_content: Optional[str] = None,
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
        temperature: Optional[float] = None,
        web_search: bool = False,
    ) -> LlmResponse:
        """Single-turn generation.

        Args:
            model: Gemini model id
            prompt: User turn text
            cached_content: Handle from ``create_cache``; the cached system
                instruction applies, so ``system_instruction`` must be None
            system_instruction: System instruction for uncached calls
            response_schema: Constrains output to JSON matching this schema
            temperature: Sampling temperature
            web_search: Attach the Google Search grounding tool

        Returns:
            LlmResponse with text, token usage and grounding chunks
        """
        options: Dict[str, Any] = {
            "cached_content": cached_content,
            "system_instruction": system_instruction,
            "temperature": temperature,
        }
        if response_schema is not None:
            options["response_mime_type"] = "application/json"
            options["response_schema"] = response_schema
        if web_search:
            options["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        config = types.GenerateContentConfig(**options)

        response = await self._client.aio.models.generate_content(
            model=model,
            contents=[types.Content(role="user", parts=[types.Part.from_text(text=prompt)])],
            config=config,
        )
        usage = _usage_from(response)
        logger.info(
            f"Gemini call to {model} completed",
            extra={
                "model": model,
                "cached": bool(cached_content),
                "web_search": web_search,
                "prompt_tokens": usage.prompt_tokens,
                "response_tokens": usage.response_tokens,
                "total_tokens": usage.total_tokens,
            },
        )
        return LlmResponse(
            text=response.text,
            usage=usage,
            grounding_chunks=_grounding_chunks_from(response),
        )
