"""Shareable side-by-side comparisons of two public recipes."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from brewform.domain.errors import ConflictError, InvalidRequestError, NotFoundError
from brewform.domain.recipes import Recipe, Visibility
from brewform.domain.social import Comparison, ComparisonView
from brewform.services.recipes import RecipeRepository
from brewform.services.slugs import comparison_token

_logger = logging.getLogger(__name__)


class ComparisonRepository(Protocol):
    """Persistence interface for recipe comparisons."""

    def find_comparison(
        self, recipe_a_id: UUID, recipe_b_id: UUID
    ) -> Comparison | None:
        """Return the comparison of this pair in either order, if any."""

    def create_comparison(
        self, recipe_a_id: UUID, recipe_b_id: UUID, share_token: str
    ) -> Comparison:
        """Insert a comparison; ConflictError when the pair already exists."""

    def get_comparison_by_token(self, share_token: str) -> Comparison | None:
        """Return the comparison behind a share token, if any."""


@dataclass
class ComparisonService:
    """Application service for recipe comparisons."""

    repository: ComparisonRepository
    recipes: RecipeRepository

    def create_comparison(self, recipe_a_id: UUID, recipe_b_id: UUID) -> Comparison:
        """Return the comparison of two public recipes, creating it once."""
        recipe_a = self.recipes.get_recipe(recipe_a_id)
        recipe_b = self.recipes.get_recipe(recipe_b_id)
        if recipe_a is None or recipe_b is None:
            raise NotFoundError("One or both recipes")
        if not _both_public(recipe_a, recipe_b):
            raise InvalidRequestError("Both recipes must be public to compare")

        existing = self.repository.find_comparison(recipe_a.id, recipe_b.id)
        if existing is not None:
            return existing

        try:
            comparison = self.repository.create_comparison(
                recipe_a.id, recipe_b.id, share_token=comparison_token()
            )
        except ConflictError:
            existing = self.repository.find_comparison(recipe_a.id, recipe_b.id)
            if existing is None:
                raise
            return existing

        _logger.info(
            "Comparison created: comparison_id=%s recipes=%s,%s",
            comparison.id,
            recipe_a.id,
            recipe_b.id,
        )
        return comparison

    def get_comparison_by_token(self, token: str) -> ComparisonView:
        comparison = self.repository.get_comparison_by_token(token)
        if comparison is None:
            raise NotFoundError("Comparison")
        recipe_a = self.recipes.get_recipe(comparison.recipe_a_id)
        recipe_b = self.recipes.get_recipe(comparison.recipe_b_id)
        if recipe_a is None or recipe_b is None:
            raise NotFoundError("Comparison")
        if not _both_public(recipe_a, recipe_b):
            raise InvalidRequestError("One or both recipes are no longer public")
        return ComparisonView(comparison=comparison, recipe_a=recipe_a, recipe_b=recipe_b)


def _both_public(recipe_a: Recipe, recipe_b: Recipe) -> bool:
    return (
        recipe_a.visibility == Visibility.PUBLIC
        and recipe_b.visibility == Visibility.PUBLIC
    )
