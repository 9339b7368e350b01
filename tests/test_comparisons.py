"""Tests for recipe comparisons."""

from uuid import uuid4

import pytest

from brewform.domain.errors import InvalidRequestError, NotFoundError
from brewform.domain.recipes import Recipe, RecipeUpdate, Visibility
from brewform.services.comparisons import ComparisonService
from brewform.services.recipes import RecipeService
from tests.conftest import InMemoryComparisonRepository, espresso_input

OWNER = uuid4()


def _recipe(
    recipe_service: RecipeService,
    visibility: Visibility = Visibility.PUBLIC,
    title: str = "Morning Shot",
) -> Recipe:
    return recipe_service.create_recipe(
        OWNER, visibility, espresso_input(title=title)
    ).recipe


def test_comparison_gets_share_token(
    recipe_service: RecipeService, comparison_service: ComparisonService
) -> None:
    first = _recipe(recipe_service)
    second = _recipe(recipe_service, title="Evening Shot")

    comparison = comparison_service.create_comparison(first.id, second.id)

    assert len(comparison.share_token) == 16
    view = comparison_service.get_comparison_by_token(comparison.share_token)
    assert view.recipe_a.id == first.id
    assert view.recipe_b.id == second.id
    assert view.recipe_b.current_version.snapshot.title == "Evening Shot"


def test_existing_pair_is_reused_in_either_order(
    recipe_service: RecipeService,
    comparison_service: ComparisonService,
    comparison_repository: InMemoryComparisonRepository,
) -> None:
    first = _recipe(recipe_service)
    second = _recipe(recipe_service, title="Evening Shot")

    created = comparison_service.create_comparison(first.id, second.id)
    reversed_pair = comparison_service.create_comparison(second.id, first.id)

    assert reversed_pair == created
    assert len(comparison_repository.comparisons) == 1


def test_concurrent_creation_returns_the_winner(
    recipe_service: RecipeService,
    comparison_service: ComparisonService,
    comparison_repository: InMemoryComparisonRepository,
) -> None:
    first = _recipe(recipe_service)
    second = _recipe(recipe_service, title="Evening Shot")
    winner = comparison_service.create_comparison(first.id, second.id)
    comparison_repository.hide_next_lookup = True

    assert comparison_service.create_comparison(second.id, first.id) == winner


def test_only_public_recipes_can_be_compared(
    recipe_service: RecipeService, comparison_service: ComparisonService
) -> None:
    public = _recipe(recipe_service)
    unlisted = _recipe(recipe_service, Visibility.UNLISTED, title="Secret")

    with pytest.raises(InvalidRequestError, match="must be public"):
        comparison_service.create_comparison(public.id, unlisted.id)
    with pytest.raises(NotFoundError, match="One or both recipes not found"):
        comparison_service.create_comparison(public.id, uuid4())


def test_comparison_breaks_when_a_recipe_is_hidden(
    recipe_service: RecipeService, comparison_service: ComparisonService
) -> None:
    first = _recipe(recipe_service)
    second = _recipe(recipe_service, title="Evening Shot")
    comparison = comparison_service.create_comparison(first.id, second.id)

    recipe_service.update_recipe(
        second.id, OWNER, RecipeUpdate(visibility=Visibility.PRIVATE)
    )

    with pytest.raises(InvalidRequestError, match="no longer public"):
        comparison_service.get_comparison_by_token(comparison.share_token)


def test_comparison_is_gone_when_a_recipe_is_deleted(
    recipe_service: RecipeService, comparison_service: ComparisonService
) -> None:
    first = _recipe(recipe_service)
    second = _recipe(recipe_service, title="Evening Shot")
    comparison = comparison_service.create_comparison(first.id, second.id)

    recipe_service.delete_recipe(first.id, OWNER)

    with pytest.raises(NotFoundError, match="Comparison not found"):
        comparison_service.get_comparison_by_token(comparison.share_token)
    with pytest.raises(NotFoundError, match="Comparison not found"):
        comparison_service.get_comparison_by_token("unknown-token")
