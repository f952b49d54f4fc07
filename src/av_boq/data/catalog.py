"""Reference product catalog used to ground BOQ generation."""

import json
from pathlib import Path
from typing import List, Optional, Union

from av_boq.core.schemas import CatalogProduct

DEFAULT_CATALOG_PATH = Path(__file__).parent / "products.json"


def load_catalog(path: Optional[Union[str, Path]] = None) -> List[CatalogProduct]:
    """Load catalog rows in file order.

    Args:
        path: JSON file holding an array of {brand, model, description, category, price}.
              Defaults to the catalog bundled with the package.

    Returns:
        Validated catalog products
    """
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    with open(catalog_path, "r", encoding="utf-8") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"Catalog {catalog_path} must contain a JSON array")
    return [CatalogProduct(**row) for row in rows]


def serialize_catalog(products: List[CatalogProduct]) -> str:
    """Compact JSON text embedded in the cached context or inlined in prompts."""
    return json.dumps(
        [p.model_dump() for p in products], ensure_ascii=False, separators=(",", ":")
    )
