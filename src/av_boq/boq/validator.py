"""Advisory BOQ audit. Never raises: any failure yields a fixed degraded result."""

from typing import List, Mapping

from av_boq.core.logging import get_logger
from av_boq.core.schemas import VALIDATION_RESPONSE_SCHEMA, BoqItem, ValidationResult
from av_boq.llm.gemini import GeminiClient

from .context_cache import ContextCacheManager
from .decoding import decode_validation
from .prompting import compose, fallback_system_instruction, serialize_boq

logger = get_logger(__name__)

VALIDATION_FAILED_WARNING = "AI validation failed to run. Please check the BOQ manually."


def degraded_result() -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        warnings=[VALIDATION_FAILED_WARNING],
        suggestions=[],
        missing_components=[],
    )


class BoqValidator:
    def __init__(
        self,
        llm: GeminiClient,
        cache: ContextCacheManager,
        prompts: Mapping[str, str],
        *,
        model: str,
    ) -> None:
        self.llm = llm
        self.cache = cache
        self.prompts = prompts
        self.model = model

    def build_prompt(self, boq: List[BoqItem], requirements: str, cache_handle) -> str:
        body = self.prompts["validation"].format(
            requirements=requirements, current_boq=serialize_boq(boq)
        )
        # The audit does not need the catalog inlined when uncached
        return compose(self.prompts, body, cache_handle)

    async def validate(self, boq: List[BoqItem], requirements: str) -> ValidationResult:
        try:
            handle = await self.cache.get_or_refresh(self.model)
            response = await self.llm.generate(
                self.model,
                self.build_prompt(boq, requirements, handle),
                cached_content=handle,
                system_instruction=fallback_system_instruction(self.prompts, handle),
                response_schema=VALIDATION_RESPONSE_SCHEMA,
            )
            result = decode_validation(response.text)
        except Exception as e:
            logger.warning(f"BOQ validation degraded: {e}", exc_info=True)
            return degraded_result()
        logger.info(
            f"BOQ validation is_valid={result.is_valid} warnings={len(result.warnings)} "
            f"missing={len(result.missing_components)}"
        )
        return result
