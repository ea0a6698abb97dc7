# FastAPI Main Application
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from app.config import Settings, get_settings
from app.core.logging_config import bind_request_context, clear_context, configure_logging, get_logger
from app.core.rate_limiter import create_limiter, rate_limit_exceeded_handler
from app.routes import receipts
from app.schemas import HealthResponse
from app.services.ocr import OCRService, create_vision_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one Vision client per process, reused across requests
    if app.state.ocr_service is None:
        logger.info("application_startup", status="creating_vision_client")
        app.state.ocr_service = OCRService(create_vision_client())
    logger.info("application_startup", status="ready")

    yield

    logger.info("application_shutdown")


def create_app(ocr_service: Optional[OCRService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        ocr_service: Pre-built OCR service. When omitted, a Google Vision
            backed one is created during startup.
        settings: Override for the environment-derived settings.
    """
    settings = settings or get_settings()
    configure_logging(
        log_level=settings.LOG_LEVEL,
        json_output=settings.JSON_LOGS,
        app_name=settings.APP_NAME,
        version=settings.VERSION,
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Receipt OCR: upload an image, get back date, amount and notes",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.ocr_service = ocr_service

    # Initialize Rate Limiter
    limiter = create_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- REQUEST CONTEXT MIDDLEWARE ---
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Tag every log line emitted while serving a request with its id."""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        clear_context()
        bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_context()
        response.headers["X-Request-ID"] = request_id
        return response

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(receipts.create_router(limiter, settings.RATE_LIMIT))

    @app.get("/")
    def root():
        return {
            "status": "online",
            "service": settings.APP_NAME,
            "version": settings.VERSION,
            "endpoints": [
                "/health",
                "/api/receipts/ocr",
                "/api/receipts/parse",
            ]
        }

    @app.get("/health", response_model=HealthResponse)
    def health_check(request: Request):
        return {
            "status": "online",
            "service": settings.APP_NAME,
            "version": settings.VERSION,
            "ocr_ready": request.app.state.ocr_service is not None,
        }

    return app


app = create_app()
