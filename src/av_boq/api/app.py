"""FastAPI backend exposing BOQ generation, refinement, validation and product lookups."""

from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from av_boq.core.errors import EmptyRequirementsError, GenerationDecodeError, ProductDetailsError
from av_boq.core.logging import get_logger, setup_logging
from av_boq.core.metrics import metrics
from av_boq.core.middleware import ObservabilityMiddleware
from av_boq.core.schemas import (
    GenerateRequest,
    ProductDetailsRequest,
    RefineRequest,
    ValidateRequest,
)
from av_boq.orchestrator import BoqService, build_service

setup_logging()
logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_service() -> BoqService:
    return build_service()


app = FastAPI(title="AV BOQ Generator", version="1.0.0")
app.add_middleware(ObservabilityMiddleware)


@app.exception_handler(EmptyRequirementsError)
async def empty_requirements_handler(request: Request, exc: EmptyRequirementsError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": str(exc)})


@app.exception_handler(GenerationDecodeError)
async def decode_error_handler(request: Request, exc: GenerationDecodeError) -> JSONResponse:
    logger.error(f"Undecodable model response on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"error": str(exc)})


@app.exception_handler(ProductDetailsError)
async def product_details_handler(request: Request, exc: ProductDetailsError) -> JSONResponse:
    return JSONResponse(
        status_code=502, content={"error": str(exc), "productName": exc.product_name}
    )


@app.get("/health")
async def health() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok", "service": "av-boq"})


@app.get("/metrics")
async def get_metrics() -> JSONResponse:
    """Metrics endpoint."""
    return JSONResponse(metrics.snapshot())


@app.post("/boq/generate")
async def generate_boq(body: GenerateRequest, service: BoqService = Depends(get_service)):
    outcome = await service.generate(body.answers)
    return outcome.model_dump(by_alias=True, exclude_none=True)


@app.post("/boq/refine")
async def refine_boq(body: RefineRequest, service: BoqService = Depends(get_service)):
    outcome = await service.refine(body.boq, body.instruction)
    return outcome.model_dump(by_alias=True, exclude_none=True)


@app.post("/boq/validate")
async def validate_boq(body: ValidateRequest, service: BoqService = Depends(get_service)):
    result = await service.validate(body.boq, body.requirements)
    return result.model_dump(by_alias=True)


@app.post("/products/details")
async def product_details(body: ProductDetailsRequest, service: BoqService = Depends(get_service)):
    details = await service.fetch_product_details(body.product_name)
    return details.model_dump(by_alias=True)
