"""FastAPI application: middleware, error mapping, routers and lifecycle."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from src.pricebook.api.http.app_data import ApplicationDependencies
from src.pricebook.api.http.routers import health
from src.pricebook.api.http.routers.service import exchange_rate, lookup, product
from src.pricebook.api.utils.app_startup import configure_logging
from src.pricebook.core.exceptions import (
    ConflictError,
    DuplicateKeyError,
    NotFoundError,
    PricebookError,
    StorageError,
    ValidationError,
)
from src.pricebook.core.services import DbManageService, DbSessionService, PricingEngine
from src.pricebook.runtime.context import get_config

configure_logging()

# Checked in order; the first matching class wins
ERROR_STATUS_CODES: list[tuple[type[PricebookError], int]] = [
    (ValidationError, 422),
    (DuplicateKeyError, 409),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StorageError, 503),
]


async def startup() -> None:
    """Build the shared services and prepare the schema."""
    config = get_config()
    logger.info("Starting pricebook ({})", config.app.environment)

    database_service = DbSessionService()
    pricing_engine = PricingEngine(config.pricing.default_exchange_rate)

    if config.database.create_tables:
        manager = DbManageService(database_service)
        manager.create_all()
        if config.database.seed_on_startup:
            manager.seed_products(pricing_engine, config.pricing.seed_products)

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        pricing_engine=pricing_engine,
    )
    logger.info(
        "Default exchange rate: {} {} per {}",
        pricing_engine.default_exchange_rate,
        config.pricing.secondary_currency,
        config.pricing.reference_currency,
    )


async def shutdown() -> None:
    logger.info("Stopping pricebook")
    deps: ApplicationDependencies = app.state.app_dependencies
    deps.database_service.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


def _cors_origins() -> list[str]:
    cors = get_config().app.cors
    if get_config().app.environment == "production" and "*" in cors.origins:
        raise RuntimeError(
            "CORS misconfigured: wildcard origin is not allowed with credentials in production"
        )
    return cors.origins


_docs_enabled = get_config().app.environment != "production"

app = FastAPI(
    title="Pricebook",
    description="Barcode price lookup with a shared exchange rate",
    lifespan=lifespan,
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with a correlation id and echo it in ``X-Request-ID``."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        client_ip = forwarded.split(",")[0].strip()
    else:
        client_ip = request.client.host if request.client else "unknown"

    started = time.perf_counter()
    with logger.contextualize(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        client_ip=client_ip,
    ):
        logger.info("{} {}", request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.bind(
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
                error_type=type(exc).__name__,
            ).exception("Unhandled error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        logger.bind(
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        ).info("{} {} -> {}", request.method, request.url.path, response.status_code)
        response.headers.setdefault("X-Request-ID", request_id)
        return response


@app.exception_handler(PricebookError)
async def handle_pricebook_error(request: Request, exc: PricebookError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES if isinstance(exc, error_type)),
        500,
    )
    bound = logger.bind(status_code=status_code, error_type=type(exc).__name__)
    if status_code >= 500:
        bound.error("Request failed: {}", exc)
    else:
        bound.info("Request rejected: {}", exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


app.include_router(health.router)
app.include_router(product.router, prefix="/api/products", tags=["products"])
app.include_router(lookup.router, prefix="/api/product", tags=["lookup"])
app.include_router(exchange_rate.router, prefix="/api/exchange-rate", tags=["exchange-rate"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,
    )
