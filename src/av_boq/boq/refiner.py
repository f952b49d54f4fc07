"""BOQ refinement: a free-text change request produces a complete replacement BOQ."""

from typing import List, Mapping, Optional

from av_boq.core.logging import get_logger
from av_boq.core.schemas import BOQ_RESPONSE_SCHEMA, BoqItem, GenerationOutcome
from av_boq.llm.gemini import GeminiClient

from .context_cache import ContextCacheManager
from .decoding import decode_boq
from .prompting import compose, fallback_system_instruction, serialize_boq

logger = get_logger(__name__)


class BoqRefiner:
    def __init__(
        self,
        llm: GeminiClient,
        cache: ContextCacheManager,
        prompts: Mapping[str, str],
        catalog_text: str,
        *,
        model: str,
    ) -> None:
        self.llm = llm
        self.cache = cache
        self.prompts = prompts
        self.catalog_text = catalog_text
        self.model = model

    def build_prompt(self, boq: List[BoqItem], instruction: str, cache_handle: Optional[str]) -> str:
        body = self.prompts["refinement"].format(
            current_boq=serialize_boq(boq), instruction=instruction
        )
        return compose(self.prompts, body, cache_handle, self.catalog_text)

    async def refine(self, boq: List[BoqItem], instruction: str) -> GenerationOutcome:
        """Return the refined BOQ; it supersedes ``boq`` entirely (no merge)."""
        handle = await self.cache.get_or_refresh(self.model)
        prompt = self.build_prompt(boq, instruction, handle)
        logger.info(f"Refining BOQ of {len(boq)} items: {instruction!r}")

        try:
            response = await self.llm.generate(
                self.model,
                prompt,
                cached_content=handle,
                system_instruction=fallback_system_instruction(self.prompts, handle),
                response_schema=BOQ_RESPONSE_SCHEMA,
            )
            refined = decode_boq(response.text)
        except Exception as e:
            logger.error(f"Error refining BOQ: {e}", exc_info=True)
            raise
        logger.info(f"Refined BOQ has {len(refined)} items", extra={"items": len(refined)})
        return GenerationOutcome(boq=refined, usage=response.usage)
