"""FastAPI dependency injection factories."""

from typing import Annotated

from fastapi import Depends, Request

from grubprint_api.core.config import Settings, get_settings
from grubprint_api.db.stores.base import RecordStore
from grubprint_api.search.engine import FoodSearchEngine
from grubprint_api.services.foods import FoodService


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_store(request: Request) -> RecordStore:
    """
    Get the record store created at startup.

    Returns:
        RecordStore stored on app.state by the lifespan
    """
    return request.app.state.store


def get_search_engine(request: Request) -> FoodSearchEngine:
    """Get the search engine created at startup."""
    return request.app.state.engine


StoreDep = Annotated[RecordStore, Depends(get_store)]


def get_food_service(
    store: RecordStore = Depends(get_store),
    engine: FoodSearchEngine = Depends(get_search_engine),
) -> FoodService:
    """
    Get FoodService instance.

    Args:
        store: Injected record store
        engine: Injected search engine

    Returns:
        FoodService instance
    """
    return FoodService(store, engine)


FoodServiceDep = Annotated[FoodService, Depends(get_food_service)]
