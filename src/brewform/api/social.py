"""Favourite and comment endpoints."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder

from brewform.api.dependencies import get_container, optional_user_id, require_user_id
from brewform.api.models import CommentRequest, CommentUpdateRequest

router = APIRouter(tags=["social"])

ViewerId = Annotated[UUID | None, Depends(optional_user_id)]
UserId = Annotated[UUID, Depends(require_user_id)]


@router.get("/recipes/{recipe_id}/favourite")
async def check_favourite(
    recipe_id: UUID, request: Request, user_id: UserId
) -> dict[str, object]:
    """Report whether the caller has favourited the recipe."""
    favourited = get_container(request).social_service.is_favourited(
        user_id, recipe_id
    )
    return {"favourited": favourited}


@router.post("/recipes/{recipe_id}/favourite")
async def add_favourite(
    recipe_id: UUID, request: Request, user_id: UserId
) -> dict[str, object]:
    added = get_container(request).social_service.add_favourite(user_id, recipe_id)
    return {"favourited": True, "changed": added}


@router.delete("/recipes/{recipe_id}/favourite")
async def remove_favourite(
    recipe_id: UUID, request: Request, user_id: UserId
) -> dict[str, object]:
    removed = get_container(request).social_service.remove_favourite(
        user_id, recipe_id
    )
    return {"favourited": False, "changed": removed}


@router.get("/recipes/{recipe_id}/comments")
async def list_comments(
    recipe_id: UUID,
    request: Request,
    viewer_id: ViewerId,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> dict[str, object]:
    """Return top-level comments, newest first."""
    result = get_container(request).social_service.list_comments(
        recipe_id, viewer_id, page=page, limit=limit
    )
    return jsonable_encoder({"items": result.items, "pagination": result.pagination})


@router.post("/recipes/{recipe_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    recipe_id: UUID, payload: CommentRequest, request: Request, user_id: UserId
) -> dict[str, object]:
    comment = get_container(request).social_service.add_comment(
        user_id, recipe_id, payload.content, parent_id=payload.parent_id
    )
    return jsonable_encoder({"comment": comment})


@router.patch("/comments/{comment_id}")
async def update_comment(
    comment_id: UUID, payload: CommentUpdateRequest, request: Request, user_id: UserId
) -> dict[str, object]:
    comment = get_container(request).social_service.update_comment(
        comment_id, user_id, payload.content
    )
    return jsonable_encoder({"comment": comment})


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: UUID, request: Request, user_id: UserId
) -> Response:
    get_container(request).social_service.delete_comment(comment_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
