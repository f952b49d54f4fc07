"""Web-grounded product overview lookups."""

import re
from typing import Any, List, Mapping, Tuple

from av_boq.core.errors import ProductDetailsError
from av_boq.core.logging import get_logger
from av_boq.core.schemas import GroundingSource, ProductDetails
from av_boq.llm.gemini import GeminiClient

logger = get_logger(__name__)

_IMAGE_URL_LINE = re.compile(r"(?:^|\n)IMAGE_URL:[ \t]*(.*)")


def split_description(text: str) -> Tuple[str, str]:
    """Split model text into (description, image_url) at the IMAGE_URL: line."""
    match = _IMAGE_URL_LINE.search(text)
    if not match:
        return text.strip(), ""
    return text[: match.start()].strip(), match.group(1).strip()


def grounding_sources(chunks: List[Any]) -> List[GroundingSource]:
    """Keep only citations that carry a web reference."""
    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None or not getattr(web, "uri", None):
            continue
        sources.append(GroundingSource(uri=web.uri, title=getattr(web, "title", None) or ""))
    return sources


class ProductDetailsFetcher:
    def __init__(self, llm: GeminiClient, prompts: Mapping[str, str], *, model: str) -> None:
        self.llm = llm
        self.prompts = prompts
        self.model = model

    async def fetch(self, product_name: str) -> ProductDetails:
        prompt = self.prompts["product_details"].format(product_name=product_name)
        try:
            response = await self.llm.generate(self.model, prompt, web_search=True)
        except Exception as e:
            logger.error(f'Error fetching product details for "{product_name}": {e}', exc_info=True)
            raise ProductDetailsError(product_name) from e

        description, image_url = split_description(response.text or "")
        return ProductDetails(
            description=description,
            image_url=image_url,
            sources=grounding_sources(response.grounding_chunks),
        )
