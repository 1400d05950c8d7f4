import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from symbol_vault.api.v1.routes import api_router
from symbol_vault.api.v1.routes.auth import limiter
from symbol_vault.config import LogFormat, get_settings
from symbol_vault.db.database import dispose_engine, get_engine
from symbol_vault.dependencies import s3_config_from_settings
from symbol_vault.exceptions import InvalidRequest, VaultError
from symbol_vault.structlog_config import configure_structlog, get_logger
from symbol_vault.utils.validation import describe_validation_errors

logger = get_logger(__name__)


def validate_config_on_startup(settings):
    """Checks that object storage is fully configured after basic settings are loaded."""
    if s3_config_from_settings(settings) is None:
        missing = [
            var
            for var in (
                "S3_ENDPOINT_URL",
                "S3_ACCESS_KEY_ID",
                "S3_SECRET_ACCESS_KEY",
                "S3_BUCKET_NAME",
            )
            if not getattr(settings, var, None)
        ]
        logging.critical(f"Missing required object storage config: {', '.join(missing)}")
        raise RuntimeError(f"Missing required object storage config: {', '.join(missing)}")


@asynccontextmanager
async def lifespan(app):

    logging.info("Starting application...")

    logging.info("Loading settings...")
    try:
        settings = get_settings()
    except ValidationError as e:
        logging.critical(f"Configuration error:\n{e}")
        raise RuntimeError(f"Configuration error: {e}")
    logging.info("Loading settings complete.")

    configure_structlog(
        log_level=settings.LOG_LEVEL,
        development_mode=settings.LOG_FORMAT == LogFormat.CONSOLE,
    )
    logger.info("Log level set", log_level=logging.getLevelName(settings.LOG_LEVEL))

    validate_config_on_startup(settings)

    # Connection pool lives for the whole process
    get_engine()
    logger.info("Application startup complete.")
    yield

    dispose_engine()
    logger.info("Application shutdown complete.")


app = FastAPI(
    title="Symbol Vault API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Configure rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(VaultError)
async def vault_error_handler(request: Request, exc: VaultError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            error_type=exc.kind,
            error_message=exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = InvalidRequest(describe_validation_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


app.include_router(api_router, prefix="/v1")
