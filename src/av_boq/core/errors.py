"""
Error taxonomy for the BOQ pipeline.
Why: callers tell input, decode and lookup failures apart without string matching.
"""

from typing import Optional


class BoqError(Exception):
    """Base class for errors raised by the BOQ pipeline."""


class EmptyRequirementsError(BoqError):
    def __init__(self, message: str = "Please fill out the questionnaire before generating.") -> None:
        super().__init__(message)


class GenerationDecodeError(BoqError):
    """Model output did not parse as JSON or did not match the response schema."""

    def __init__(self, message: str, raw_text: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ProductDetailsError(BoqError):
    def __init__(self, product_name: str) -> None:
        super().__init__(f'Failed to fetch product details for "{product_name}".')
        self.product_name = product_name
