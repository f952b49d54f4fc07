"""BOQ generation from questionnaire answers."""

from typing import Any, Dict, Mapping, Optional

from av_boq.core.logging import get_logger
from av_boq.core.schemas import BOQ_RESPONSE_SCHEMA, GenerationOutcome
from av_boq.llm.gemini import GeminiClient

from .context_cache import ContextCacheManager
from .decoding import decode_boq
from .encoder import encode
from .prompting import brand_preferences, compose, fallback_system_instruction

logger = get_logger(__name__)


class BoqGenerator:
    def __init__(
        self,
        llm: GeminiClient,
        cache: ContextCacheManager,
        prompts: Mapping[str, str],
        catalog_text: str,
        *,
        model: str,
        temperature: Optional[float] = 0.1,
    ) -> None:
        self.llm = llm
        self.cache = cache
        self.prompts = prompts
        self.catalog_text = catalog_text
        self.model = model
        self.temperature = temperature

    def build_prompt(self, answers: Mapping[str, Any], cache_handle: Optional[str]) -> str:
        requirements, categories = encode(answers)
        variables: Dict[str, str] = {
            "requirements": requirements,
            "categories": ", ".join(categories),
            **brand_preferences(answers),
        }
        body = self.prompts["generation"].format(**variables)
        return compose(self.prompts, body, cache_handle, self.catalog_text)

    async def generate(self, answers: Mapping[str, Any]) -> GenerationOutcome:
        """Generate a priced BOQ.

        Raises:
            EmptyRequirementsError: before any network call
            GenerationDecodeError: response is not a schema-valid JSON array
        """
        encode(answers)  # fail before any network call

        handle = await self.cache.get_or_refresh(self.model)
        prompt = self.build_prompt(answers, handle)
        logger.info(f"Generating BOQ with {'cache' if handle else 'inline catalog'}")

        try:
            response = await self.llm.generate(
                self.model,
                prompt,
                cached_content=handle,
                system_instruction=fallback_system_instruction(self.prompts, handle),
                response_schema=BOQ_RESPONSE_SCHEMA,
                temperature=self.temperature,
            )
            boq = decode_boq(response.text)
        except Exception as e:
            logger.error(f"Error generating BOQ: {e}", exc_info=True)
            raise
        logger.info(f"Generated BOQ with {len(boq)} items", extra={"items": len(boq)})
        return GenerationOutcome(boq=boq, usage=response.usage)
