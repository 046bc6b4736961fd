"""Gram weight API routes."""

from fastapi import APIRouter, Request, Response

from grubprint_api.api.dependencies import FoodServiceDep
from grubprint_api.api.http_cache import (
    is_not_modified,
    not_modified_response,
    set_cache_headers,
)
from grubprint_api.models.food import Weight

router = APIRouter()


@router.get("/{food_id}", response_model=list[Weight], summary="Get gram weights for a food")
async def get_weights(
    food_id: str,
    request: Request,
    response: Response,
    service: FoodServiceDep,
):
    """Household measures for a food, in sequence order. Empty if none."""
    if is_not_modified(request, service.store):
        return not_modified_response(service.store)
    weights = await service.weights(food_id)
    set_cache_headers(response, service.store)
    return weights
