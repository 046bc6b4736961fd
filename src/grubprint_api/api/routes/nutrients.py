"""Nutrient API routes."""

from fastapi import APIRouter, Request, Response

from grubprint_api.api.dependencies import FoodServiceDep
from grubprint_api.api.http_cache import (
    is_not_modified,
    not_modified_response,
    set_cache_headers,
)
from grubprint_api.models.food import Nutrient

router = APIRouter()


@router.get("/{food_id}", response_model=list[Nutrient], summary="Get nutrients for a food")
async def get_nutrients(
    food_id: str,
    request: Request,
    response: Response,
    service: FoodServiceDep,
):
    """Nutrient values for a food in the standard USDA report order."""
    if is_not_modified(request, service.store):
        return not_modified_response(service.store)
    nutrients = await service.nutrients(food_id)
    set_cache_headers(response, service.store)
    return nutrients
