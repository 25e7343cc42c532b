"""FastAPI application for the notification engine."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter
from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.services import get_settings

logger = get_module_logger()

CORRELATION_HEADER = "X-Correlation-ID"


def create_app() -> FastAPI:
    """Build the FastAPI handler with CORS, rate limiting and request logging."""
    settings = get_settings()
    app = FastAPI(title="Notification Engine", version=settings.GIT_SHA)
    setup_rate_limiter(app)

    allow_origins = ["*"] if settings.is_production else settings.server.CORS_ALLOW_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        with bind_request_context(
            correlation_id=request.headers.get(CORRELATION_HEADER),
            request_path=request.url.path,
            request_method=request.method,
        ) as correlation_id:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            logger.info("request_completed", status_code=response.status_code)
            return response

    app.include_router(api_router)
    return app


handler = create_app()
