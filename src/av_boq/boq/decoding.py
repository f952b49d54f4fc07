"""
Strict decoding of model output into BOQ models.
Why: the response schema is a request, not a guarantee; nothing partial gets through.
"""

from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from av_boq.core.errors import GenerationDecodeError
from av_boq.core.schemas import BoqItem, ValidationResult

_BOQ_ADAPTER = TypeAdapter(List[BoqItem])


def decode_boq(text: Optional[str]) -> List[BoqItem]:
    """Parse a JSON array of BOQ items; totals are derived from quantity and unit price."""
    if not text or not text.strip():
        raise GenerationDecodeError("Model returned an empty response", raw_text=text)
    try:
        return _BOQ_ADAPTER.validate_json(text.strip(), strict=True)
    except ValidationError as e:
        raise GenerationDecodeError(
            f"Model response does not match the BOQ schema: {e.error_count()} error(s)",
            raw_text=text,
        ) from e


def decode_validation(text: Optional[str]) -> ValidationResult:
    if not text or not text.strip():
        raise GenerationDecodeError("Model returned an empty response", raw_text=text)
    try:
        return ValidationResult.model_validate_json(text.strip(), strict=True)
    except ValidationError as e:
        raise GenerationDecodeError(
            f"Model response does not match the validation schema: {e.error_count()} error(s)",
            raw_text=text,
        ) from e
