"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from grubprint_api.api.routes import foods, nutrients, weights
from grubprint_api.core.config import Settings, get_settings
from grubprint_api.core.exceptions import APIError
from grubprint_api.db.mongo import MongoConnection
from grubprint_api.db.stores import MemoryRecordStore, MongoRecordStore, RecordStore
from grubprint_api.loader import load_dataset
from grubprint_api.search.engine import FoodSearchEngine

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def init_store(settings: Settings) -> tuple[RecordStore, MongoConnection | None]:
    """
    Build and publish the record store before any request is served.

    Loading and indexing finish completely before publish(); a failure
    here aborts startup instead of surfacing on the first request.

    Returns:
        The ready store and the Mongo connection to close on shutdown, if any
    """
    if settings.is_mongo:
        logger.info(f"Connecting to MongoDB at {settings.mongo_uri[:20]}...")
        connection = MongoConnection(settings.mongo_uri, settings.db_name)
        await connection.ping()
        store = MongoRecordStore(connection.get_database())
        if settings.data_dir:
            await store.publish(load_dataset(settings.data_dir))
        else:
            await store.open()
        return store, connection

    store = MemoryRecordStore()
    if settings.data_dir:
        await store.publish(load_dataset(settings.data_dir))
    else:
        logger.warning("No data_dir configured; food index will not be available")
    return store, None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events. A store already placed on
    app.state (e.g. by tests) is used as-is.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.api_version}")

    connection = None
    if getattr(app.state, "store", None) is None:
        app.state.store, connection = await init_store(settings)
    app.state.engine = FoodSearchEngine(
        app.state.store,
        threshold=settings.search_threshold,
        max_results=settings.search_max_results,
    )
    logger.info(
        f"Record store '{app.state.store.backend_name}' ready={app.state.store.is_ready}"
    )

    yield

    logger.info("Shutting down...")
    await app.state.store.close()
    if connection is not None:
        connection.close()
        logger.info("MongoDB connection closed")


def create_app(store: RecordStore | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Pre-built record store; when omitted one is built at startup

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        description="USDA nutrient database with fuzzy food search",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.store = store
    if store is not None:
        app.state.engine = FoodSearchEngine(
            store,
            threshold=settings.search_threshold,
            max_results=settings.search_max_results,
        )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle custom API errors."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.message,
                "details": exc.details,
            },
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        store: RecordStore | None = request.app.state.store
        ready = store is not None and store.is_ready
        return {
            "status": "healthy" if ready else "degraded",
            "service": settings.app_name,
            "version": settings.api_version,
            "store": store.backend_name if store is not None else None,
            "index_ready": ready,
        }

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    # Include routers
    app.include_router(foods.router, prefix="/foods", tags=["Foods"])
    app.include_router(weights.router, prefix="/weights", tags=["Weights"])
    app.include_router(nutrients.router, prefix="/nutrients", tags=["Nutrients"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("grubprint_api.main:app", host="0.0.0.0", port=8000, reload=False)
