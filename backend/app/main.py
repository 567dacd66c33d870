from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text

from app.core.config import settings
from app.core.database import get_session_local, init_db, close_db
from app.core.exceptions import ICMSError
from app.core.logging_config import logger
from app.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from app.api.v1.router import api_router
from app.schemas.response import ApiResponse
from app.services.cache_service import dashboard_cache
import app.models  # Import models so metadata knows about them


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if not settings.SECRET_KEY or settings.SECRET_KEY == "CHANGE_ME":
        errors.append("SECRET_KEY is not set or using default value")

    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if not settings.S3_ENDPOINT_URL and not settings.AWS_ACCESS_KEY_ID:
        warnings.append("No S3 credentials or endpoint configured - relying on IAM role for media uploads")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Configuration validated")


async def check_database() -> bool:
    """Verify the database answers; create tables in development"""
    try:
        if settings.is_dev_mode():
            await init_db()

        async with get_session_local()() as session:
            await session.execute(text("SELECT 1"))
        logger.info("[Startup] Database connection OK")
        return True

    except Exception as e:
        logger.error(f"[Startup] Database check failed: {e}")
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info("=" * 60)

    await validate_critical_config()

    if not await check_database():
        logger.warning("[Startup] Database not ready - dashboard metrics will fall back to zero")

    await dashboard_cache.start()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")
    await dashboard_cache.stop()
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Back-office API for the ICMS content management system",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Add middleware (order matters - last added runs first)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(ICMSError)
async def icms_exception_handler(request: Request, exc: ICMSError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    else:
        logger.warning(f"{exc.code}: {exc.message} ({request.method} {request.url.path})")
    return JSONResponse(status_code=exc.status_code, content=ApiResponse.from_exception(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"VALIDATION_ERROR: {len(exc.errors())} invalid field(s) ({request.method} {request.url.path})")
    return JSONResponse(
        status_code=422,
        content=ApiResponse.error(
            "VALIDATION_ERROR",
            "Request validation failed",
            {"errors": jsonable_encoder(exc.errors())},
        )
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ApiResponse.error(
            "INTERNAL_ERROR",
            str(exc) if settings.DEBUG else "An error occurred",
        )
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


# Include API router
app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )
