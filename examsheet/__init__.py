"""
Exam Sheet Evaluation Service

This module serves as the main entry point for the driving-school exam sheet
backend. The service:
1. Serves the read-only exam templates seeded per licence category
2. Scores and records the mistake sheet of a lesson, once per lesson
3. Authorizes every read by role, ownership and school
4. Lists a student's evaluation history with date filters and paging
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from examsheet.common.logger import app_logger, configure_logger

logger = app_logger.getChild("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI application lifespan context manager.

    Opens the database engine on startup and disposes of it on shutdown.
    """
    from examsheet.config import settings
    from examsheet.common.db.connection import get_database_settings
    from examsheet.database.init_db import close_database, create_schema, get_session_factory, initialize_database

    logger.info("Application startup sequence initiated.")
    await initialize_database(
        database_url=settings.DATABASE_URL or get_database_settings()["database_url"],
        echo=settings.SQL_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )

    if settings.SEED_ON_STARTUP:
        from examsheet.evaluations.seed import seed_templates

        logger.warning("SEED_ON_STARTUP is enabled; creating schema and seeding templates")
        await create_schema()
        async with get_session_factory()() as session:
            await seed_templates(session)

    logger.info("Application startup sequence complete.")
    yield

    logger.info("Application shutdown sequence initiated.")
    await close_database()
    logger.info("Application shutdown sequence complete.")


def create_app(
    app_name: str = "Exam Sheet Evaluations",
    app_description: str = "Scoring, access control and history of driving lesson exam sheets",
) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        app_name: The name of the application
        app_description: Description of the application

    Returns:
        Configured FastAPI application
    """
    from fastapi.middleware.cors import CORSMiddleware

    from examsheet.api import main_router, register_exception_handlers
    from examsheet.config import settings
    from examsheet.middleware import RequestLoggingMiddleware

    configure_logger(
        name=app_logger.name,
        level=settings.LOG_LEVEL,
        format_string=settings.LOG_FORMAT,
        use_json=settings.LOG_JSON,
    )

    app = FastAPI(
        title=app_name,
        description=app_description,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(main_router, prefix=settings.API_V1_STR)
    register_exception_handlers(app)

    logger.info(f"Application created with {len(app.routes)} routes")
    return app
