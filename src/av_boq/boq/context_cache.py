"""
Lazily created, locally tracked Gemini context cache.
Why: the system instruction and product catalog are large and identical on every
call; send them once per hour instead of once per request.
"""

import asyncio
import time
from typing import Callable, Optional

from av_boq.core.cache import KeyValueStore
from av_boq.core.circuit_breaker import CircuitBreaker
from av_boq.core.logging import get_logger
from av_boq.llm.gemini import GeminiClient

logger = get_logger(__name__)

NAME_KEY = "gemini_boq_cache_name"
EXPIRY_KEY = "gemini_boq_cache_expiry"


class ContextCacheManager:
    """Hands out a cached-context handle per model, or None to signal the inline path.

    Local expiry is always shorter than the server TTL: a returned handle
    outlives the call that uses it.
    """

    def __init__(
        self,
        llm: GeminiClient,
        store: KeyValueStore,
        system_instruction: str,
        context_text: str,
        *,
        server_ttl_seconds: int = 3600,
        local_ttl_seconds: int = 3000,
        breaker: Optional[CircuitBreaker] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if local_ttl_seconds >= server_ttl_seconds:
            raise ValueError(
                f"local_ttl_seconds ({local_ttl_seconds}) must be below server_ttl_seconds ({server_ttl_seconds})"
            )
        self.llm = llm
        self.store = store
        self.system_instruction = system_instruction
        self.context_text = context_text
        self.server_ttl_seconds = server_ttl_seconds
        self.local_ttl_seconds = local_ttl_seconds
        self.breaker = breaker or CircuitBreaker()
        self._clock = clock
        self._lock = asyncio.Lock()

    def _keys(self, model: str):
        return f"{NAME_KEY}:{model}", f"{EXPIRY_KEY}:{model}"

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _stored_handle(self, model: str) -> Optional[str]:
        name_key, expiry_key = self._keys(model)
        name = self.store.get(name_key)
        expiry = self.store.get(expiry_key)
        if not name or not expiry:
            return None
        try:
            expires_at = int(expiry)
        except ValueError:
            expires_at = 0
        if self._now_ms() < expires_at:
            return name
        logger.info(f"Context cache expired for {model}: {name}")
        self.clear(model)
        return None

    def clear(self, model: str) -> None:
        for key in self._keys(model):
            self.store.remove(key)

    async def get_or_refresh(self, model: str) -> Optional[str]:
        """Return a live handle for ``model``; None means use the inline fallback.

        Never raises: creation failures only degrade to the inline path.
        """
        async with self._lock:
            handle = self._stored_handle(model)
            if handle:
                logger.info(f"Using existing context cache: {handle}")
                return handle

            if not self.breaker.allow():
                logger.info(f"Context cache creation paused after repeated failures ({model})")
                return None

            logger.info(f"Creating new context cache for {model}")
            try:
                handle = await self.llm.create_cache(
                    model,
                    self.system_instruction,
                    self.context_text,
                    self.server_ttl_seconds,
                )
            except Exception as e:
                self.breaker.record_failure()
                self.clear(model)
                logger.warning(
                    f"Failed to create context cache (content too short or API limit), "
                    f"falling back to inline context: {e}"
                )
                return None

            self.breaker.record_success()
            name_key, expiry_key = self._keys(model)
            self.store.set(name_key, handle)
            self.store.set(expiry_key, str(self._now_ms() + self.local_ttl_seconds * 1000))
            logger.info(f"Context cache created: {handle}", extra={"model": model, "cache_name": handle})
            return handle
