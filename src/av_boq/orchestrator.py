"""Orchestrator: single entry point for the four exposed BOQ operations.

Wires settings, the Gemini client, the durable cache store, the catalog and the
prompt templates into generation, refinement, validation and product lookups.
"""

from typing import Any, List, Mapping, Optional

from av_boq.boq.context_cache import ContextCacheManager
from av_boq.boq.details import ProductDetailsFetcher
from av_boq.boq.generator import BoqGenerator
from av_boq.boq.refiner import BoqRefiner
from av_boq.boq.validator import BoqValidator
from av_boq.config.settings import Settings, settings as default_settings
from av_boq.core.cache import JsonFileStore, KeyValueStore
from av_boq.core.circuit_breaker import CircuitBreaker
from av_boq.core.logging import get_logger
from av_boq.core.metrics import metrics
from av_boq.core.schemas import BoqItem, GenerationOutcome, ProductDetails, ValidationResult
from av_boq.data.catalog import load_catalog, serialize_catalog
from av_boq.llm.gemini import GeminiClient
from av_boq.prompts_loader import load_prompt

logger = get_logger(__name__)


class BoqService:
    def __init__(
        self,
        llm: GeminiClient,
        store: KeyValueStore,
        config: Optional[Settings] = None,
    ) -> None:
        config = config or default_settings
        prompts = load_prompt(config.prompt_profile)
        catalog_text = serialize_catalog(load_catalog(config.catalog_path))

        self.cache = ContextCacheManager(
            llm,
            store,
            prompts["system"],
            prompts["catalog_context"].format(catalog=catalog_text),
            server_ttl_seconds=config.cache.server_ttl_seconds,
            local_ttl_seconds=config.cache.local_ttl_seconds,
            breaker=CircuitBreaker(
                failure_threshold=config.cache.failure_threshold,
                recovery_timeout=config.cache.recovery_timeout,
            ),
        )
        model = config.models.boq_model
        self.generator = BoqGenerator(
            llm,
            self.cache,
            prompts,
            catalog_text,
            model=model,
            temperature=config.models.generation_temperature,
        )
        self.refiner = BoqRefiner(llm, self.cache, prompts, catalog_text, model=model)
        self.validator = BoqValidator(llm, self.cache, prompts, model=model)
        self.details = ProductDetailsFetcher(llm, prompts, model=config.models.details_model)
        logger.info(f"BOQ service ready | model={model} profile={config.prompt_profile}")

    async def generate(self, answers: Mapping[str, Any]) -> GenerationOutcome:
        outcome = await self.generator.generate(answers)
        metrics.record_tokens(outcome.usage)
        return outcome

    async def refine(self, boq: List[BoqItem], instruction: str) -> GenerationOutcome:
        outcome = await self.refiner.refine(boq, instruction)
        metrics.record_tokens(outcome.usage)
        return outcome

    async def validate(self, boq: List[BoqItem], requirements: str) -> ValidationResult:
        return await self.validator.validate(boq, requirements)

    async def fetch_product_details(self, product_name: str) -> ProductDetails:
        return await self.details.fetch(product_name)


def build_service(config: Optional[Settings] = None) -> BoqService:
    config = config or default_settings
    return BoqService(
        GeminiClient(api_key=config.gemini_api_key),
        JsonFileStore(config.cache.store_path),
        config,
    )
