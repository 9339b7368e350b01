"""Recipe lifecycle: creation, versioning, forking, deletion and listing."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from brewform.domain.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from brewform.domain.recipes import (
    MOST_RESTRICTED_VISIBILITY,
    BrewSnapshot,
    PaginationMeta,
    Recipe,
    RecipeFilters,
    RecipePage,
    RecipeQuery,
    RecipeUpdate,
    RecipeVersion,
    RecipeVersionInput,
    SavedRecipe,
    SavedVersion,
    Visibility,
)
from brewform.services.audit import AuditService
from brewform.services.cache import Cache, CacheKeys
from brewform.services.slugs import unique_slug
from brewform.services.validation import validate
from brewform.services.visibility import (
    can_mutate,
    can_view,
    is_forkable,
    is_owner,
    listable_visibilities,
)

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes and their versions.

    Reads exclude soft-deleted rows. Multi-row writes (recipe plus first
    version, version plus pointer, fork plus source counter) are atomic.
    """

    def create_recipe(
        self,
        user_id: UUID,
        slug: str,
        visibility: Visibility,
        snapshot: BrewSnapshot,
    ) -> Recipe:
        """Create a recipe with version 1 and point at it."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a live recipe with its current version, if present."""

    def get_recipe_by_slug(self, slug: str) -> Recipe | None:
        """Return a live recipe by slug, if present."""

    def get_max_version_number(self, recipe_id: UUID) -> int:
        """Return the highest version number ever assigned, or 0."""

    def append_version(
        self,
        recipe_id: UUID,
        user_id: UUID,
        version_number: int,
        snapshot: BrewSnapshot,
    ) -> RecipeVersion:
        """Insert a version and repoint the recipe; ConflictError on duplicates."""

    def list_versions(self, recipe_id: UUID) -> list[RecipeVersion]:
        """Return live versions, newest first."""

    def update_recipe(self, recipe_id: UUID, changes: dict[str, object]) -> Recipe:
        """Patch recipe header fields and return the recipe."""

    def soft_delete_recipe(self, recipe_id: UUID, deleted_at: datetime) -> None:
        """Mark a recipe deleted."""

    def create_fork(
        self,
        source_id: UUID,
        user_id: UUID,
        slug: str,
        visibility: Visibility,
        snapshot: BrewSnapshot,
    ) -> Recipe:
        """Create a forked recipe and bump the source fork count together."""

    def increment_view_count(self, recipe_id: UUID) -> None:
        """Add one to the recipe view counter."""

    def list_recipes(self, query: RecipeQuery) -> tuple[list[Recipe], int]:
        """Return a page of recipes and the total match count."""


@dataclass
class RecipeService:
    """Application service for the recipe lifecycle."""

    repository: RecipeRepository
    cache: Cache
    audit_service: AuditService
    default_page_size: int = 20
    max_page_size: int = 100
    list_cache_ttl_seconds: int = 300
    version_retry_attempts: int = 5

    def create_recipe(
        self,
        owner_id: UUID,
        visibility: Visibility,
        version_input: RecipeVersionInput,
    ) -> SavedRecipe:
        """Validate and create a recipe together with its first version."""
        result = validate(version_input)
        if not result.valid:
            raise ValidationFailedError(result.errors)

        recipe = self.repository.create_recipe(
            user_id=owner_id,
            slug=unique_slug(version_input.title),
            visibility=visibility,
            snapshot=snapshot_from_input(version_input),
        )
        _logger.info("Recipe created: recipe_id=%s user_id=%s", recipe.id, owner_id)
        self._after_write(recipe, owner_id, "recipe_created")
        return SavedRecipe(recipe=recipe, warnings=result.warnings)

    def get_recipe_by_id(self, recipe_id: UUID, viewer_id: UUID | None = None) -> Recipe:
        """Return a recipe the viewer is allowed to see."""
        recipe = _require_visible(self.repository.get_recipe(recipe_id), viewer_id)
        if not is_owner(recipe, viewer_id):
            self._record_view(recipe.id)
        return recipe

    def get_recipe_by_slug(self, slug: str, viewer_id: UUID | None = None) -> Recipe:
        """Return a recipe by slug if the viewer is allowed to see it."""
        recipe = _require_visible(self.repository.get_recipe_by_slug(slug), viewer_id)
        if not is_owner(recipe, viewer_id):
            self._record_view(recipe.id)
        return recipe

    def update_recipe(
        self, recipe_id: UUID, requester_id: UUID, update: RecipeUpdate
    ) -> Recipe:
        """Patch visibility or featured flag; versions are untouched."""
        recipe = _require_visible(self.repository.get_recipe(recipe_id), requester_id)
        if not can_mutate(recipe, requester_id):
            raise ForbiddenError("You can only update your own recipes")

        changes = update.model_dump(exclude_none=True)
        if not changes:
            return recipe
        updated = self.repository.update_recipe(recipe_id, changes)
        self._after_write(updated, requester_id, "recipe_updated", changes)
        return updated

    def create_version(
        self,
        recipe_id: UUID,
        author_id: UUID,
        version_input: RecipeVersionInput,
    ) -> SavedVersion:
        """Append a validated version and make it current."""
        recipe = _require_visible(self.repository.get_recipe(recipe_id), author_id)
        if not can_mutate(recipe, author_id):
            raise ForbiddenError("You can only update your own recipes")

        result = validate(version_input)
        if not result.valid:
            raise ValidationFailedError(result.errors)

        version = self._append_with_retry(
            recipe.id, author_id, snapshot_from_input(version_input)
        )
        _logger.info(
            "Recipe version created: recipe_id=%s version=%s",
            recipe.id,
            version.version_number,
        )
        self._after_write(
            recipe,
            author_id,
            "recipe_version_created",
            {"version_id": str(version.id), "version_number": version.version_number},
        )
        return SavedVersion(version=version, warnings=result.warnings)

    def list_versions(
        self, recipe_id: UUID, viewer_id: UUID | None = None
    ) -> list[RecipeVersion]:
        """Return the visible version history, newest first."""
        recipe = _require_visible(self.repository.get_recipe(recipe_id), viewer_id)
        return self.repository.list_versions(recipe.id)

    def fork_recipe(self, source_id: UUID, new_owner_id: UUID) -> Recipe:
        """Derive a private draft from another recipe's current version."""
        source = _require_visible(self.repository.get_recipe(source_id), new_owner_id)
        if not is_forkable(source):
            raise ForbiddenError("Cannot fork private recipes")
        if source.current_version is None:
            raise NotFoundError()

        current = source.current_version.snapshot
        forked = self.repository.create_fork(
            source_id=source.id,
            user_id=new_owner_id,
            slug=unique_slug(f"{current.title} fork"),
            visibility=MOST_RESTRICTED_VISIBILITY,
            snapshot=fork_snapshot(current),
        )
        _logger.info(
            "Recipe forked: source_id=%s fork_id=%s user_id=%s",
            source.id,
            forked.id,
            new_owner_id,
        )
        self._invalidate(source)
        self._after_write(
            forked, new_owner_id, "recipe_forked", {"source_id": str(source.id)}
        )
        return forked

    def delete_recipe(self, recipe_id: UUID, requester_id: UUID) -> None:
        """Soft-delete a recipe; its versions stay for history."""
        recipe = _require_visible(self.repository.get_recipe(recipe_id), requester_id)
        if not can_mutate(recipe, requester_id):
            raise ForbiddenError("You can only delete your own recipes")

        self.repository.soft_delete_recipe(recipe.id, deleted_at=datetime.now(tz=UTC))
        _logger.info("Recipe deleted: recipe_id=%s", recipe.id)
        self._after_write(recipe, requester_id, "recipe_deleted")

    def list_recipes(
        self, filters: RecipeFilters, viewer_id: UUID | None = None
    ) -> RecipePage:
        """List recipes; only public ones unless viewers list their own."""
        limit = min(filters.limit or self.default_page_size, self.max_page_size)
        visibilities = listable_visibilities(
            filters.user_id, filters.visibility, viewer_id
        )
        if not visibilities:
            return RecipePage(
                items=[], pagination=PaginationMeta.build(filters.page, limit, 0)
            )

        items, total = self.repository.list_recipes(
            RecipeQuery(
                visibilities=visibilities,
                filters=filters,
                offset=(filters.page - 1) * limit,
                limit=limit,
            )
        )
        return RecipePage(
            items=items, pagination=PaginationMeta.build(filters.page, limit, total)
        )

    def latest_recipes(self, limit: int = 10) -> list[Recipe]:
        """Return the newest public recipes."""
        return self._cached_public_list(
            CacheKeys.latest_recipes(), "created_at", limit
        )

    def popular_recipes(self, limit: int = 10) -> list[Recipe]:
        """Return public recipes with the most favourites."""
        return self._cached_public_list(
            CacheKeys.popular_recipes(), "favourite_count", limit
        )

    def _cached_public_list(self, key: str, sort_by: str, limit: int) -> list[Recipe]:
        cached = self.cache.get(key)
        if isinstance(cached, list):
            return cached[:limit]

        items, _total = self.repository.list_recipes(
            RecipeQuery(
                visibilities=frozenset({Visibility.PUBLIC}),
                filters=RecipeFilters(sort_by=sort_by, sort_order="desc"),
                offset=0,
                limit=self.max_page_size,
            )
        )
        self.cache.set(key, items, ttl_seconds=self.list_cache_ttl_seconds)
        return items[:limit]

    def _append_with_retry(
        self, recipe_id: UUID, author_id: UUID, snapshot: BrewSnapshot
    ) -> RecipeVersion:
        """Assign max+1 and retry when a concurrent writer took the number."""
        attempt = 0
        while True:
            version_number = self.repository.get_max_version_number(recipe_id) + 1
            try:
                return self.repository.append_version(
                    recipe_id=recipe_id,
                    user_id=author_id,
                    version_number=version_number,
                    snapshot=snapshot,
                )
            except ConflictError:
                attempt += 1
                if attempt >= self.version_retry_attempts:
                    raise
                _logger.info(
                    "Version %s of recipe %s already taken (attempt %s/%s)",
                    version_number,
                    recipe_id,
                    attempt,
                    self.version_retry_attempts,
                )

    def _record_view(self, recipe_id: UUID) -> None:
        try:
            self.repository.increment_view_count(recipe_id)
        except Exception:
            _logger.warning(
                "Failed to increment view count: recipe_id=%s", recipe_id, exc_info=True
            )

    def _after_write(
        self,
        recipe: Recipe,
        actor_id: UUID,
        event_type: str,
        details: dict[str, object] | None = None,
    ) -> None:
        """Run post-commit side effects; their failures never fail the write."""
        self._invalidate(recipe)
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

    def _invalidate(self, recipe: Recipe) -> None:
        keys = [
            CacheKeys.recipe(recipe.id),
            CacheKeys.recipe_by_slug(recipe.slug),
            CacheKeys.latest_recipes(),
            CacheKeys.popular_recipes(),
        ]
        for key in keys:
            try:
                self.cache.delete(key)
            except Exception:
                _logger.exception("Failed to invalidate cache key %s", key)


def snapshot_from_input(version_input: RecipeVersionInput) -> BrewSnapshot:
    """Build the stored snapshot, computing derived brew metrics."""
    dose = float(version_input.dose_grams or 0.0)
    return BrewSnapshot(
        title=version_input.title,
        description=version_input.description,
        brew_method=version_input.brew_method,
        drink_type=version_input.drink_type,
        coffee_id=version_input.coffee_id,
        coffee_name=version_input.coffee_name,
        roast_date=version_input.roast_date,
        grind_date=version_input.grind_date,
        grinder_id=version_input.grinder_id,
        brewer_id=version_input.brewer_id,
        portafilter_id=version_input.portafilter_id,
        basket_id=version_input.basket_id,
        puck_screen_id=version_input.puck_screen_id,
        paper_filter_id=version_input.paper_filter_id,
        tamper_id=version_input.tamper_id,
        grind_size=version_input.grind_size,
        dose_grams=dose,
        yield_ml=version_input.yield_ml,
        yield_grams=version_input.yield_grams,
        brew_time_sec=version_input.brew_time_sec,
        temp_celsius=version_input.temp_celsius,
        pressure=version_input.pressure,
        brew_ratio=calculate_brew_ratio(dose, version_input.yield_grams),
        flow_rate=calculate_flow_rate(
            version_input.yield_ml, version_input.brew_time_sec
        ),
        preparations=tuple(
            prep.model_dump(exclude_none=True) for prep in version_input.preparations
        ),
        tasting_notes=version_input.tasting_notes,
        rating=version_input.rating,
        emoji_rating=version_input.emoji_rating,
        is_favourite=version_input.is_favourite,
        tags=tuple(version_input.tags),
        taste_note_ids=tuple(version_input.taste_note_ids),
    )


def fork_snapshot(source: BrewSnapshot) -> BrewSnapshot:
    """Copy a snapshot for a fork, dropping the source owner's verdicts."""
    return replace(
        source,
        title=f"{source.title} (Fork)",
        tasting_notes=None,
        rating=None,
        emoji_rating=None,
        is_favourite=False,
    )


def calculate_brew_ratio(dose_grams: float, yield_grams: float | None) -> float | None:
    """Yield weight divided by dose, when both are known."""
    if not yield_grams or dose_grams <= 0:
        return None
    return yield_grams / dose_grams


def calculate_flow_rate(yield_ml: float | None, brew_time_sec: int | None) -> float | None:
    """Millilitres per second, when volume and time are known."""
    if not yield_ml or not brew_time_sec:
        return None
    return yield_ml / brew_time_sec


def _require_visible(recipe: Recipe | None, viewer_id: UUID | None) -> Recipe:
    """Treat missing and hidden recipes the same way."""
    if recipe is None or not can_view(recipe, viewer_id):
        raise NotFoundError()
    return recipe
