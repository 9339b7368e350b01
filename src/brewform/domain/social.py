"""Domain models for social interactions on recipes."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from brewform.domain.recipes import PaginationMeta, Recipe


@dataclass(frozen=True)
class Comment:
    """Comment left on a recipe.

    Top-level comments returned by a listing carry their live replies,
    oldest first. Replies themselves never nest further.
    """

    id: UUID
    recipe_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    parent_id: UUID | None = None
    is_edited: bool = False
    deleted_at: datetime | None = None
    replies: tuple["Comment", ...] = ()


@dataclass(frozen=True)
class CommentPage:
    """One page of top-level comments."""

    items: list[Comment]
    pagination: PaginationMeta


@dataclass(frozen=True)
class Comparison:
    """Shareable pairing of two public recipes."""

    id: UUID
    recipe_a_id: UUID
    recipe_b_id: UUID
    share_token: str
    created_at: datetime


@dataclass(frozen=True)
class ComparisonView:
    comparison: Comparison
    recipe_a: Recipe
    recipe_b: Recipe
