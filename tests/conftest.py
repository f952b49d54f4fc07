"""Shared fixtures: a scripted Gemini fake and in-memory cache store."""

import json
from typing import Any, Dict, List, Optional

import pytest

from av_boq.core.cache import MemoryStore
from av_boq.core.schemas import TokenUsage
from av_boq.llm.gemini import LlmResponse
from av_boq.prompts_loader import load_prompt


class FakeGemini:
    """Stands in for GeminiClient; records every call and replays scripted results."""

    def __init__(self) -> None:
        self.cache_calls: List[Dict[str, Any]] = []
        self.generate_calls: List[Dict[str, Any]] = []
        self.cache_names: List[str] = []
        self.cache_error: Optional[Exception] = None
        self.responses: List[Any] = []

    def queue(self, payload: Any, usage: Optional[TokenUsage] = None, grounding_chunks=None) -> None:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        self.responses.append(
            LlmResponse(text=text, usage=usage or TokenUsage(), grounding_chunks=grounding_chunks or [])
        )

    def fail_next(self, error: Exception) -> None:
        self.responses.append(error)

    async def create_cache(self, model, system_instruction, context_text, ttl_seconds) -> str:
        self.cache_calls.append(
            {
                "model": model,
                "system_instruction": system_instruction,
                "context_text": context_text,
                "ttl_seconds": ttl_seconds,
            }
        )
        if self.cache_error is not None:
            raise self.cache_error
        name = f"cachedContents/test-{len(self.cache_calls)}"
        self.cache_names.append(name)
        return name

    async def generate(self, model, prompt, **kwargs) -> LlmResponse:
        self.generate_calls.append({"model": model, "prompt": prompt, **kwargs})
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_item(**overrides: Any) -> Dict[str, Any]:
    item = {
        "category": "Display",
        "itemDescription": "75-inch 4K commercial display",
        "keyRemarks": "Sized for a 12-seat room",
        "brand": "Samsung",
        "model": "QM75C",
        "quantity": 1,
        "unitPrice": 2350,
        "totalPrice": 2350,
        "source": "database",
        "priceSource": "database",
    }
    item.update(overrides)
    return item


@pytest.fixture
def fake_llm() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def prompts() -> Dict[str, str]:
    return load_prompt("v1_avixa")


@pytest.fixture
def item_factory():
    return make_item
