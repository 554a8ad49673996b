"""
Main FastAPI Application

API server for brand visibility analysis across LLM providers.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agents.ai_providers import get_provider_descriptors
from config.settings import settings
from src.routes import health_routes, brand_analysis_routes
from utils.errors import VisibilityError
from utils.rate_limiter import RateLimiter, create_rate_limiter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)

logger = logging.getLogger(__name__)

ERROR_CODE_HEADER = "X-Error-Code"


def _format_validation_errors(exc: RequestValidationError) -> list:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        details.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy to JSON responses."""

    @app.exception_handler(VisibilityError)
    async def visibility_error_handler(request: Request, exc: VisibilityError):
        logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers={ERROR_CODE_HEADER: exc.code}
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        if any(error.get("type") == "json_invalid" for error in exc.errors()):
            logger.error(f"Malformed request body on {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": brand_analysis_routes.ANALYSIS_FAILED_MESSAGE}
            )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation failed", "details": _format_validation_errors(exc)}
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"}
        )


def create_app(rate_limiter: Optional[RateLimiter] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        rate_limiter: Limiter to inject (default: built from settings)
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="API for scoring brand visibility across AI models",
        debug=settings.DEBUG
    )

    app.state.rate_limiter = rate_limiter or create_rate_limiter(
        backend=settings.RATE_LIMIT_BACKEND,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_minutes=settings.RATE_LIMIT_WINDOW_MINUTES
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_routes.router)
    app.include_router(brand_analysis_routes.router)

    @app.on_event("startup")
    async def startup_event():
        """Report provider configuration on startup."""
        providers = get_provider_descriptors(settings)
        enabled = [p.display_name for p in providers if p.enabled]

        if enabled:
            logger.info(f"✅ AI providers enabled: {', '.join(enabled)}")
        else:
            logger.warning("⚠️  No AI provider credentials configured - serving demo data")

        if settings.RATE_LIMIT_BACKEND.lower() == "redis":
            from config.database import check_redis

            redis_status = check_redis()
            if redis_status["connected"]:
                logger.info("✅ Redis: Connected")
            else:
                logger.warning(f"⚠️  Redis: Not connected - {redis_status['error']}")

    @app.on_event("shutdown")
    async def shutdown_event():
        if settings.RATE_LIMIT_BACKEND.lower() == "redis":
            from config.database import close_redis
            close_redis()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
