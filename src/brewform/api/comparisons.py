"""Recipe comparison endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder

from brewform.api.dependencies import get_container
from brewform.api.models import ComparisonRequest

router = APIRouter(prefix="/comparisons", tags=["comparisons"])


@router.post("")
async def create_comparison(
    payload: ComparisonRequest, request: Request
) -> dict[str, object]:
    """Return the comparison for two public recipes, creating it if needed."""
    comparison = get_container(request).comparison_service.create_comparison(
        payload.recipe_a_id, payload.recipe_b_id
    )
    return jsonable_encoder({"comparison": comparison})


@router.get("/{token}")
async def get_comparison(token: str, request: Request) -> dict[str, object]:
    view = get_container(request).comparison_service.get_comparison_by_token(token)
    return jsonable_encoder(
        {
            "comparison": view.comparison,
            "recipe_a": view.recipe_a,
            "recipe_b": view.recipe_b,
        }
    )
