"""
Pydantic models for the BOQ document, model outputs and API boundaries.
Why: contract-first design; model output is untrusted until it fits these shapes.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

_WIRE = ConfigDict(populate_by_name=True, extra="ignore")


class BoqItem(BaseModel):
    """One priced line. ``totalPrice`` is always derived, never stored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", validate_assignment=True)

    category: str
    item_description: str = Field(alias="itemDescription")
    key_remarks: str = Field(alias="keyRemarks")
    brand: str
    model: str
    quantity: float = Field(ge=0, allow_inf_nan=False)
    unit_price: float = Field(alias="unitPrice", ge=0, allow_inf_nan=False)
    source: Literal["database", "web"]
    price_source: Literal["database", "estimated"] = Field(alias="priceSource")
    margin: Optional[float] = Field(default=None, allow_inf_nan=False)

    @field_validator("margin")
    @classmethod
    def _clamp_margin(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            return 0.0
        return value

    @computed_field(alias="totalPrice")  # type: ignore[prop-decorator]
    @property
    def total_price(self) -> float:
        return self.quantity * self.unit_price

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class TokenUsage(BaseModel):
    model_config = _WIRE

    prompt_tokens: int = Field(default=0, alias="promptTokens", ge=0)
    response_tokens: int = Field(default=0, alias="responseTokens", ge=0)
    total_tokens: int = Field(default=0, alias="totalTokens", ge=0)


class ValidationResult(BaseModel):
    model_config = _WIRE

    is_valid: bool = Field(alias="isValid")
    warnings: List[str]
    suggestions: List[str]
    missing_components: List[str] = Field(alias="missingComponents")


class GenerationOutcome(BaseModel):
    model_config = _WIRE

    boq: List[BoqItem]
    usage: TokenUsage


class GroundingSource(BaseModel):
    uri: str
    title: str = ""


class ProductDetails(BaseModel):
    model_config = _WIRE

    description: str
    image_url: str = Field(default="", alias="imageUrl")
    sources: List[GroundingSource] = []


class CatalogProduct(BaseModel):
    """Reference catalog row (read-only input to prompt construction)."""

    brand: str
    model: str
    description: str
    category: str
    price: float = Field(ge=0, allow_inf_nan=False)


# --- API request bodies ---


class GenerateRequest(BaseModel):
    answers: Dict[str, Any]


class RefineRequest(BaseModel):
    boq: List[BoqItem]
    instruction: str = Field(..., min_length=1)


class ValidateRequest(BaseModel):
    boq: List[BoqItem]
    requirements: str


class ProductDetailsRequest(BaseModel):
    model_config = _WIRE

    product_name: str = Field(..., alias="productName", min_length=1)


# --- Gemini response schemas (OpenAPI subset accepted by responseSchema) ---

BOQ_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "category": {"type": "STRING"},
            "itemDescription": {"type": "STRING"},
            "keyRemarks": {"type": "STRING"},
            "brand": {"type": "STRING"},
            "model": {"type": "STRING"},
            "quantity": {"type": "NUMBER"},
            "unitPrice": {"type": "NUMBER"},
            "totalPrice": {"type": "NUMBER"},
            "source": {"type": "STRING", "enum": ["database", "web"]},
            "priceSource": {"type": "STRING", "enum": ["database", "estimated"]},
        },
        "required": [
            "category",
            "itemDescription",
            "keyRemarks",
            "brand",
            "model",
            "quantity",
            "unitPrice",
            "source",
            "priceSource",
        ],
    },
}

VALIDATION_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "isValid": {"type": "BOOLEAN"},
        "warnings": {"type": "ARRAY", "items": {"type": "STRING"}},
        "suggestions": {"type": "ARRAY", "items": {"type": "STRING"}},
        "missingComponents": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["isValid", "warnings", "suggestions", "missingComponents"],
}
