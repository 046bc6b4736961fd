"""Food search and lookup API routes.

Search matches foods by trigram overlap with their long description and
returns them best match first.
"""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, Request, Response, status
from pydantic import BaseModel, Field

from grubprint_api.api.dependencies import FoodServiceDep, SettingsDep
from grubprint_api.api.http_cache import (
    is_not_modified,
    not_modified_response,
    set_cache_headers,
)
from grubprint_api.models.food import FoodMatch, FoodRecord

router = APIRouter()
logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Error response body."""

    error: str = Field(..., description="Error message")
    details: dict | None = Field(None, description="Error details")


SEARCH_RESPONSES = {
    200: {"description": "Matching foods, best match first"},
    503: {"description": "Index not built or store unavailable", "model": ErrorResponse},
    504: {"description": "Search timed out"},
}


async def _run_search(
    query: str,
    request: Request,
    response: Response,
    service: FoodServiceDep,
    settings: SettingsDep,
) -> list[FoodMatch] | Response:
    if is_not_modified(request, service.store):
        return not_modified_response(service.store)

    logger.info(f"Food search request: q='{query}'")
    try:
        matches = await asyncio.wait_for(
            service.search(query),
            timeout=settings.request_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning(f"Food search timed out: q='{query}'")
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail={
                "error": "Search timed out",
                "error_code": "TIMEOUT",
            },
        )

    logger.info(f"Food search returned {len(matches)} results for '{query}'")
    set_cache_headers(response, service.store)
    return matches


@router.get(
    "/search",
    response_model=list[FoodMatch],
    responses=SEARCH_RESPONSES,
    summary="Search foods by description",
)
async def search_foods(
    request: Request,
    response: Response,
    service: FoodServiceDep,
    settings: SettingsDep,
    q: Annotated[str | None, Query(max_length=200, description="Free-text food query")] = None,
):
    """
    Search foods, query given as a query-string parameter.

    Without q this route shadows /foods/{q} for the word "search", so
    that word is searched instead.
    """
    query = q if q is not None else "search"
    return await _run_search(query, request, response, service, settings)


@router.get(
    "/id/{food_id}",
    response_model=FoodRecord,
    responses={
        404: {"description": "Food not found", "model": ErrorResponse},
        503: {"description": "Index not built or store unavailable", "model": ErrorResponse},
    },
    summary="Get food by USDA id",
)
async def get_food(
    food_id: str,
    request: Request,
    response: Response,
    service: FoodServiceDep,
):
    """Get a single food by its nutrient databank number."""
    if is_not_modified(request, service.store):
        return not_modified_response(service.store)
    food = await service.get_food(food_id)
    set_cache_headers(response, service.store)
    return food


@router.get(
    "/{q}",
    response_model=list[FoodMatch],
    responses=SEARCH_RESPONSES,
    summary="Search foods by description",
)
async def search_foods_by_path(
    q: Annotated[str, Path(max_length=200, description="Free-text food query")],
    request: Request,
    response: Response,
    service: FoodServiceDep,
    settings: SettingsDep,
):
    """Search foods, query given as the last path segment."""
    return await _run_search(q, request, response, service, settings)
