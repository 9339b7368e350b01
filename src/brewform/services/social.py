"""Favourites and comments on recipes."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from brewform.domain.errors import (
    FieldError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from brewform.domain.recipes import PaginationMeta, Recipe
from brewform.domain.social import Comment, CommentPage
from brewform.services.audit import AuditService
from brewform.services.cache import Cache, CacheKeys
from brewform.services.recipes import RecipeRepository
from brewform.services.visibility import can_mutate, can_view

_logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 2000


class SocialRepository(Protocol):
    """Persistence interface for favourites and comments.

    Every write adjusts the matching recipe counter in the same transaction.
    """

    def add_favourite(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Insert a favourite; return False when it already existed."""

    def remove_favourite(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Delete a favourite; return False when there was none."""

    def is_favourited(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return True when the user has favourited the recipe."""

    def get_comment(self, comment_id: UUID) -> Comment | None:
        """Return a live comment, if present."""

    def add_comment(
        self,
        recipe_id: UUID,
        user_id: UUID,
        content: str,
        parent_id: UUID | None,
    ) -> Comment:
        """Insert a comment and bump the recipe comment count."""

    def update_comment(
        self, comment_id: UUID, content: str, updated_at: datetime
    ) -> Comment:
        """Replace a comment body and mark it edited."""

    def delete_comment(self, comment_id: UUID, deleted_at: datetime) -> None:
        """Soft-delete a comment and decrement the recipe comment count."""

    def list_comments(
        self, recipe_id: UUID, offset: int, limit: int
    ) -> tuple[list[Comment], int]:
        """Return live top-level comments newest first and their total."""

    def list_replies(self, parent_ids: list[UUID]) -> list[Comment]:
        """Return live replies to the given comments, oldest first."""


@dataclass
class SocialService:
    """Application service for favourites and comments."""

    repository: SocialRepository
    recipes: RecipeRepository
    cache: Cache
    audit_service: AuditService
    default_page_size: int = 20
    max_page_size: int = 100

    def add_favourite(self, user_id: UUID, recipe_id: UUID) -> bool:
        recipe = self._require_social(recipe_id, user_id)
        added = self.repository.add_favourite(user_id, recipe.id)
        if added:
            self._after_write(recipe, user_id, "favourite_added")
        return added

    def remove_favourite(self, user_id: UUID, recipe_id: UUID) -> bool:
        recipe = self._require_visible(recipe_id, user_id)
        removed = self.repository.remove_favourite(user_id, recipe.id)
        if removed:
            self._after_write(recipe, user_id, "favourite_removed")
        return removed

    def is_favourited(self, user_id: UUID, recipe_id: UUID) -> bool:
        return self.repository.is_favourited(user_id, recipe_id)

    def add_comment(
        self,
        user_id: UUID,
        recipe_id: UUID,
        content: str,
        parent_id: UUID | None = None,
    ) -> Comment:
        """Comment on a recipe, optionally replying to another comment."""
        text = _clean_content(content)
        recipe = self._require_social(recipe_id, user_id)
        if parent_id is not None:
            parent = self.repository.get_comment(parent_id)
            if parent is None or parent.recipe_id != recipe.id:
                raise NotFoundError("Parent comment")
            if parent.parent_id is not None:
                parent_id = parent.parent_id

        comment = self.repository.add_comment(
            recipe_id=recipe.id,
            user_id=user_id,
            content=text,
            parent_id=parent_id,
        )
        _logger.info("Comment added: comment_id=%s recipe_id=%s", comment.id, recipe.id)
        self._after_write(
            recipe, user_id, "comment_added", {"comment_id": str(comment.id)}
        )
        return comment

    def update_comment(
        self, comment_id: UUID, requester_id: UUID, content: str
    ) -> Comment:
        """Edit a comment body; only its author may do so."""
        text = _clean_content(content)
        comment = self.repository.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("Comment")
        if comment.user_id != requester_id:
            raise ForbiddenError("You can only edit your own comments")

        updated = self.repository.update_comment(
            comment.id, text, updated_at=datetime.now(tz=UTC)
        )
        recipe = self.recipes.get_recipe(comment.recipe_id)
        if recipe is not None:
            self._after_write(
                recipe, requester_id, "comment_updated", {"comment_id": str(comment.id)}
            )
        return updated

    def delete_comment(self, comment_id: UUID, requester_id: UUID) -> None:
        """Soft-delete a comment; only its author may do so."""
        comment = self.repository.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("Comment")
        if comment.user_id != requester_id:
            raise ForbiddenError("You can only delete your own comments")

        self.repository.delete_comment(comment.id, deleted_at=datetime.now(tz=UTC))
        recipe = self.recipes.get_recipe(comment.recipe_id)
        if recipe is not None:
            self._after_write(
                recipe, requester_id, "comment_deleted", {"comment_id": str(comment.id)}
            )

    def list_comments(
        self,
        recipe_id: UUID,
        viewer_id: UUID | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> CommentPage:
        """Return top-level comments newest first, each with its replies."""
        recipe = self._require_visible(recipe_id, viewer_id)
        page = max(page, 1)
        size = min(limit or self.default_page_size, self.max_page_size)
        items, total = self.repository.list_comments(
            recipe.id, offset=(page - 1) * size, limit=size
        )
        replies: dict[UUID, list[Comment]] = {}
        if items:
            for reply in self.repository.list_replies([item.id for item in items]):
                if reply.parent_id is not None:
                    replies.setdefault(reply.parent_id, []).append(reply)
        threaded = [
            replace(item, replies=tuple(replies.get(item.id, ()))) for item in items
        ]
        return CommentPage(
            items=threaded, pagination=PaginationMeta.build(page, size, total)
        )

    def _require_visible(self, recipe_id: UUID, viewer_id: UUID | None) -> Recipe:
        recipe = self.recipes.get_recipe(recipe_id)
        if recipe is None or not can_view(recipe, viewer_id):
            raise NotFoundError()
        return recipe

    def _require_social(self, recipe_id: UUID, user_id: UUID) -> Recipe:
        recipe = self._require_visible(recipe_id, user_id)
        if not can_mutate(recipe, user_id, social=True):
            raise ForbiddenError("Recipe is not open for interaction")
        return recipe

    def _after_write(
        self,
        recipe: Recipe,
        actor_id: UUID,
        event_type: str,
        details: dict[str, object] | None = None,
    ) -> None:
        for key in (CacheKeys.recipe(recipe.id), CacheKeys.recipe_by_slug(recipe.slug)):
            try:
                self.cache.delete(key)
            except Exception:
                _logger.exception("Failed to invalidate cache key %s", key)
        if event_type.startswith("favourite"):
            try:
                self.cache.delete(CacheKeys.popular_recipes())
            except Exception:
                _logger.exception("Failed to invalidate popular recipes cache")
        try:
            self.audit_service.record_event(
                user_id=actor_id,
                entity_type="recipe",
                entity_id=recipe.id,
                event_type=event_type,
                details=details,
            )
        except Exception:
            _logger.exception(
                "Failed to record audit event %s for recipe %s", event_type, recipe.id
            )


def _clean_content(content: str) -> str:
    text = content.strip()
    if not text or len(text) > MAX_COMMENT_LENGTH:
        raise ValidationFailedError(
            [
                FieldError(
                    field="content",
                    message=(
                        "Comment must be between 1 and "
                        f"{MAX_COMMENT_LENGTH} characters."
                    ),
                )
            ]
        )
    return text
