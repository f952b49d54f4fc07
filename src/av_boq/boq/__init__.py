"""BOQ pipeline: encode answers, generate, refine, validate and enrich."""

from .context_cache import ContextCacheManager
from .details import ProductDetailsFetcher
from .encoder import encode
from .generator import BoqGenerator
from .refiner import BoqRefiner
from .session import RoomDocument
from .validator import BoqValidator

__all__ = [
    "BoqGenerator",
    "BoqRefiner",
    "BoqValidator",
    "ContextCacheManager",
    "ProductDetailsFetcher",
    "RoomDocument",
    "encode",
]
