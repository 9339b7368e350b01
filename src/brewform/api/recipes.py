"""Recipe endpoints."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder

from brewform.api.dependencies import get_container, optional_user_id, require_user_id
from brewform.api.models import CreateRecipeRequest
from brewform.domain.recipes import (
    BrewMethod,
    DrinkType,
    RecipeFilters,
    RecipeUpdate,
    RecipeVersionInput,
    SortKey,
    SortOrder,
    Visibility,
)

router = APIRouter(prefix="/recipes", tags=["recipes"])

ViewerId = Annotated[UUID | None, Depends(optional_user_id)]
UserId = Annotated[UUID, Depends(require_user_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: CreateRecipeRequest, request: Request, user_id: UserId
) -> dict[str, object]:
    """Create a recipe with its first version."""
    saved = get_container(request).recipe_service.create_recipe(
        owner_id=user_id,
        visibility=payload.visibility,
        version_input=payload.version_input(),
    )
    return jsonable_encoder({"recipe": saved.recipe, "warnings": saved.warnings})


@router.get("")
async def list_recipes(  # noqa: PLR0913
    request: Request,
    viewer_id: ViewerId,
    search: Annotated[str | None, Query(max_length=200)] = None,
    brew_method: BrewMethod | None = None,
    drink_type: DrinkType | None = None,
    coffee_id: UUID | None = None,
    grinder_id: UUID | None = None,
    brewer_id: UUID | None = None,
    user_id: UUID | None = None,
    visibility: Visibility | None = None,
    min_rating: Annotated[int | None, Query(ge=1, le=10)] = None,
    tags: str | None = None,
    sort_by: SortKey = "created_at",
    sort_order: SortOrder = "desc",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> dict[str, object]:
    """List recipes matching the filters."""
    filters = RecipeFilters(
        search=search,
        brew_method=brew_method,
        drink_type=drink_type,
        coffee_id=coffee_id,
        grinder_id=grinder_id,
        brewer_id=brewer_id,
        user_id=user_id,
        visibility=visibility,
        min_rating=min_rating,
        tags=[tag.strip() for tag in (tags or "").split(",") if tag.strip()],
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    result = get_container(request).recipe_service.list_recipes(filters, viewer_id)
    return jsonable_encoder({"items": result.items, "pagination": result.pagination})


@router.get("/latest")
async def latest_recipes(
    request: Request, limit: Annotated[int, Query(ge=1, le=100)] = 10
) -> dict[str, object]:
    items = get_container(request).recipe_service.latest_recipes(limit)
    return jsonable_encoder({"items": items})


@router.get("/popular")
async def popular_recipes(
    request: Request, limit: Annotated[int, Query(ge=1, le=100)] = 10
) -> dict[str, object]:
    items = get_container(request).recipe_service.popular_recipes(limit)
    return jsonable_encoder({"items": items})


@router.get("/slug/{slug}")
async def get_recipe_by_slug(
    slug: str, request: Request, viewer_id: ViewerId
) -> dict[str, object]:
    recipe = get_container(request).recipe_service.get_recipe_by_slug(slug, viewer_id)
    return jsonable_encoder({"recipe": recipe})


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: UUID, request: Request, viewer_id: ViewerId
) -> dict[str, object]:
    recipe = get_container(request).recipe_service.get_recipe_by_id(
        recipe_id, viewer_id
    )
    return jsonable_encoder({"recipe": recipe})


@router.patch("/{recipe_id}")
async def update_recipe(
    recipe_id: UUID, payload: RecipeUpdate, request: Request, user_id: UserId
) -> dict[str, object]:
    """Change visibility or featured flag."""
    recipe = get_container(request).recipe_service.update_recipe(
        recipe_id, user_id, payload
    )
    return jsonable_encoder({"recipe": recipe})


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(recipe_id: UUID, request: Request, user_id: UserId) -> Response:
    get_container(request).recipe_service.delete_recipe(recipe_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{recipe_id}/versions")
async def list_versions(
    recipe_id: UUID, request: Request, viewer_id: ViewerId
) -> dict[str, object]:
    versions = get_container(request).recipe_service.list_versions(
        recipe_id, viewer_id
    )
    return jsonable_encoder({"items": versions})


@router.post("/{recipe_id}/versions", status_code=status.HTTP_201_CREATED)
async def create_version(
    recipe_id: UUID,
    payload: RecipeVersionInput,
    request: Request,
    user_id: UserId,
) -> dict[str, object]:
    """Append a new version and make it current."""
    saved = get_container(request).recipe_service.create_version(
        recipe_id, user_id, payload
    )
    return jsonable_encoder({"version": saved.version, "warnings": saved.warnings})


@router.post("/{recipe_id}/fork", status_code=status.HTTP_201_CREATED)
async def fork_recipe(
    recipe_id: UUID, request: Request, user_id: UserId
) -> dict[str, object]:
    recipe = get_container(request).recipe_service.fork_recipe(recipe_id, user_id)
    return jsonable_encoder({"recipe": recipe})
