"""
FastAPI application serving the usergraph GraphQL endpoint
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import is_production, settings
from ..database.connection import dispose_database, init_database
from ..graphql.schema import create_graphql_router, validate_schema
from ..logging import configure_logging, get_logger
from ..middleware import RequestLoggingMiddleware
from ..validation import (
    ValidationError,
    get_startup_recommendations,
    validate_startup_configuration,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared pool, check it, and close it on shutdown.

    Failed checks stop startup in production; elsewhere the API still starts
    and affected fields return errors.
    """
    init_database()
    report = await validate_startup_configuration()

    for recommendation in get_startup_recommendations(report):
        logger.warning("Startup recommendation", recommendation=recommendation)
    if not report["overall_valid"] and is_production():
        await dispose_database()
        raise ValidationError("Startup validation failed in production")

    try:
        yield
    finally:
        await dispose_database()


def create_app() -> FastAPI:
    configure_logging(debug=settings.debug)
    validate_schema()

    app = FastAPI(
        title="usergraph",
        description="Read-only GraphQL API over users, profiles, posts and member types",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:  # pyright: ignore [reportUnusedFunction]
        return {"status": "healthy", "version": __version__}

    app.include_router(create_graphql_router())
    logger.info("usergraph API ready", environment=settings.environment)
    return app
