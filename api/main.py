"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from google import genai
from redis import asyncio as aioredis

from core.config import Settings, get_settings
from core.integrations.question_generation import GeminiQuestionGenerator
from core.middleware import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    StructuredLoggingMiddleware,
    setup_logging,
)
from database.engine import close_db, create_db_engine, create_session_factory
from api.routes import health
from api.routes.v1 import interviews
from api.services.interviews import build_interview_engine
from api.services.interviews.notifications import NotificationService

logger = logging.getLogger(__name__)


def build_lifespan(settings: Settings):
    """Lifespan that owns the process-wide engine, clients and interview engine."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")

        db_engine = create_db_engine(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        session_factory = create_session_factory(db_engine)
        redis_client = aioredis.from_url(str(settings.redis_url))

        generator = None
        if settings.google_api_key:
            generator = GeminiQuestionGenerator(
                client=genai.Client(api_key=settings.google_api_key),
                model=settings.question_generation_model,
            )
        else:
            logger.info("GOOGLE_API_KEY not set, AI question generation disabled")

        app.state.db_engine = db_engine
        app.state.redis = redis_client
        app.state.interview_engine = build_interview_engine(
            settings,
            session_factory,
            generator=generator,
            notifications=NotificationService(),
        )

        yield

        logger.info(f"Shutting down {settings.app_name}")
        await redis_client.aclose()
        await close_db(db_engine)

    return lifespan


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Settings override, loaded from the environment when None

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Interview auto-scheduling and lifecycle engine",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=build_lifespan(settings),
    )

    # Setup error handlers (before middleware)
    setup_error_handlers(app)

    # Middleware executes in reverse order of registration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        StructuredLoggingMiddleware,
        log_request_body=settings.log_request_body,
        log_response_body=settings.log_response_body,
        max_body_size=settings.log_max_body_size,
    )
    # Outermost: catches everything the inner layers let through
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.debug)

    app.include_router(health.router, tags=["Health"])
    app.include_router(interviews.router, prefix=settings.api_v1_prefix)

    return app


settings = get_settings()

# Setup structured logging before the app is built
setup_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
)

app = create_app(settings)


def main():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
