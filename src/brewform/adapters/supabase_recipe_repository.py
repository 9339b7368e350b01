"""Supabase repository for recipes and recipe versions."""

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from supabase import Client

from brewform.adapters.supabase_support import (
    first_row,
    live,
    parse_datetime,
    translate_conflicts,
)
from brewform.domain.recipes import (
    BrewMethod,
    BrewSnapshot,
    DrinkType,
    EmojiRating,
    Recipe,
    RecipeQuery,
    RecipeVersion,
    Visibility,
)
from brewform.services.recipes import RecipeRepository

_RECIPE_COLUMNS = (
    "id, user_id, slug, visibility, current_version_id, is_featured, "
    "view_count, favourite_count, comment_count, fork_count, forked_from_id, "
    "created_at, updated_at, deleted_at, current_version"
)
_SORT_COLUMNS = {
    "created_at": "created_at",
    "rating": "rating",
    "favourite_count": "favourite_count",
    "view_count": "view_count",
}
_SEARCH_UNSAFE = re.compile(r"[,()%*\\]")


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipes.

    Multi-row writes go through SQL functions so that each runs in a single
    transaction. Reads use the ``recipe_listing`` view, which joins every
    recipe with its current version.
    """

    client: Client

    def create_recipe(
        self,
        user_id: UUID,
        slug: str,
        visibility: Visibility,
        snapshot: BrewSnapshot,
    ) -> Recipe:
        """Create a recipe with its first version."""
        response = translate_conflicts(
            lambda: self.client.rpc(
                "create_recipe_with_version",
                {
                    "p_user_id": str(user_id),
                    "p_slug": slug,
                    "p_visibility": visibility.value,
                    "p_version": _snapshot_payload(snapshot),
                },
            ).execute(),
            "Recipe slug already taken",
        )
        return self._reload(response.data, "Failed to create recipe")

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a live recipe by id."""
        response = (
            live(
                self.client.table("recipe_listing")
                .select(_RECIPE_COLUMNS)
                .eq("id", str(recipe_id))
            )
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def get_recipe_by_slug(self, slug: str) -> Recipe | None:
        """Return a live recipe by slug."""
        response = (
            live(
                self.client.table("recipe_listing")
                .select(_RECIPE_COLUMNS)
                .eq("slug", slug)
            )
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def get_max_version_number(self, recipe_id: UUID) -> int:
        """Return the highest version number, counting deleted versions."""
        response = (
            self.client.table("recipe_versions")
            .select("version_number")
            .eq("recipe_id", str(recipe_id))
            .order("version_number", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return 0
        return int(response.data[0]["version_number"])

    def append_version(
        self,
        recipe_id: UUID,
        user_id: UUID,
        version_number: int,
        snapshot: BrewSnapshot,
    ) -> RecipeVersion:
        """Insert a version and repoint the recipe at it."""
        response = translate_conflicts(
            lambda: self.client.rpc(
                "append_recipe_version",
                {
                    "p_recipe_id": str(recipe_id),
                    "p_user_id": str(user_id),
                    "p_version_number": version_number,
                    "p_version": _snapshot_payload(snapshot),
                },
            ).execute(),
            f"Version {version_number} already exists",
        )
        row = first_row(response.data)
        if row is None:
            raise RuntimeError("Failed to create recipe version")
        return _parse_version(row)

    def list_versions(self, recipe_id: UUID) -> list[RecipeVersion]:
        """Return live versions, newest first."""
        response = (
            live(
                self.client.table("recipe_versions")
                .select("*")
                .eq("recipe_id", str(recipe_id))
            )
            .order("version_number", desc=True)
            .execute()
        )
        return [_parse_version(row) for row in response.data or []]

    def update_recipe(self, recipe_id: UUID, changes: dict[str, object]) -> Recipe:
        """Patch header fields."""
        payload: dict[str, object] = {
            key: value.value if isinstance(value, Enum) else value
            for key, value in changes.items()
        }
        payload["updated_at"] = datetime.now(tz=UTC).isoformat()
        live(
            self.client.table("recipes").update(payload).eq("id", str(recipe_id))
        ).execute()
        recipe = self.get_recipe(recipe_id)
        if recipe is None:
            raise RuntimeError("Failed to update recipe")
        return recipe

    def soft_delete_recipe(self, recipe_id: UUID, deleted_at: datetime) -> None:
        """Mark a recipe deleted."""
        self.client.table("recipes").update(
            {"deleted_at": deleted_at.isoformat(), "updated_at": deleted_at.isoformat()}
        ).eq("id", str(recipe_id)).execute()

    def create_fork(
        self,
        source_id: UUID,
        user_id: UUID,
        slug: str,
        visibility: Visibility,
        snapshot: BrewSnapshot,
    ) -> Recipe:
        """Create a fork and bump the source fork count."""
        response = translate_conflicts(
            lambda: self.client.rpc(
                "fork_recipe",
                {
                    "p_source_id": str(source_id),
                    "p_user_id": str(user_id),
                    "p_slug": slug,
                    "p_visibility": visibility.value,
                    "p_version": _snapshot_payload(snapshot),
                },
            ).execute(),
            "Recipe slug already taken",
        )
        return self._reload(response.data, "Failed to fork recipe")

    def increment_view_count(self, recipe_id: UUID) -> None:
        self.client.rpc(
            "increment_view_count", {"p_recipe_id": str(recipe_id)}
        ).execute()

    def list_recipes(self, query: RecipeQuery) -> tuple[list[Recipe], int]:
        """Return one page of recipes and the total match count."""
        filters = query.filters
        request = live(
            self.client.table("recipe_listing")
            .select(_RECIPE_COLUMNS, count="exact")
            .in_("visibility", sorted(item.value for item in query.visibilities))
        )
        if filters.search:
            term = _SEARCH_UNSAFE.sub(" ", filters.search).strip()
            if term:
                request = request.or_(
                    f"title.ilike.*{term}*,description.ilike.*{term}*,"
                    f"coffee_name.ilike.*{term}*"
                )
        if filters.brew_method is not None:
            request = request.eq("brew_method", filters.brew_method.value)
        if filters.drink_type is not None:
            request = request.eq("drink_type", filters.drink_type.value)
        for column in ("coffee_id", "grinder_id", "brewer_id", "user_id"):
            value = getattr(filters, column)
            if value is not None:
                request = request.eq(column, str(value))
        if filters.min_rating is not None:
            request = request.gte("rating", filters.min_rating)
        if filters.tags:
            request = request.ov("tags", filters.tags)

        response = (
            request.order(
                _SORT_COLUMNS[filters.sort_by], desc=filters.sort_order == "desc"
            )
            .range(query.offset, query.offset + query.limit - 1)
            .execute()
        )
        items = [_parse_recipe(row) for row in response.data or []]
        total = response.count if response.count is not None else len(items)
        return items, total

    def _reload(self, data: object, failure: str) -> Recipe:
        recipe_id = data if isinstance(data, str) else None
        if recipe_id is None:
            row = first_row(data)
            recipe_id = row.get("id") if row else None
        if not recipe_id:
            raise RuntimeError(failure)
        recipe = self.get_recipe(UUID(str(recipe_id)))
        if recipe is None:
            raise RuntimeError(failure)
        return recipe


def _snapshot_payload(snapshot: BrewSnapshot) -> dict[str, Any]:
    return {
        "title": snapshot.title,
        "description": snapshot.description,
        "brew_method": snapshot.brew_method.value,
        "drink_type": snapshot.drink_type.value,
        "coffee_id": _uuid_str(snapshot.coffee_id),
        "coffee_name": snapshot.coffee_name,
        "roast_date": _iso(snapshot.roast_date),
        "grind_date": _iso(snapshot.grind_date),
        "grinder_id": _uuid_str(snapshot.grinder_id),
        "brewer_id": _uuid_str(snapshot.brewer_id),
        "portafilter_id": _uuid_str(snapshot.portafilter_id),
        "basket_id": _uuid_str(snapshot.basket_id),
        "puck_screen_id": _uuid_str(snapshot.puck_screen_id),
        "paper_filter_id": _uuid_str(snapshot.paper_filter_id),
        "tamper_id": _uuid_str(snapshot.tamper_id),
        "grind_size": snapshot.grind_size,
        "dose_grams": snapshot.dose_grams,
        "yield_ml": snapshot.yield_ml,
        "yield_grams": snapshot.yield_grams,
        "brew_time_sec": snapshot.brew_time_sec,
        "temp_celsius": snapshot.temp_celsius,
        "pressure": snapshot.pressure,
        "brew_ratio": snapshot.brew_ratio,
        "flow_rate": snapshot.flow_rate,
        "preparations": list(snapshot.preparations),
        "tasting_notes": snapshot.tasting_notes,
        "rating": snapshot.rating,
        "emoji_rating": snapshot.emoji_rating.value if snapshot.emoji_rating else None,
        "is_favourite": snapshot.is_favourite,
        "tags": list(snapshot.tags),
        "taste_note_ids": [str(note_id) for note_id in snapshot.taste_note_ids],
    }


def _parse_recipe(row: dict[str, Any]) -> Recipe:
    version_row = row.get("current_version")
    return Recipe(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        slug=str(row["slug"]),
        visibility=Visibility(row["visibility"]),
        current_version_id=_uuid(row.get("current_version_id")),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        is_featured=bool(row.get("is_featured", False)),
        view_count=int(row.get("view_count") or 0),
        favourite_count=int(row.get("favourite_count") or 0),
        comment_count=int(row.get("comment_count") or 0),
        fork_count=int(row.get("fork_count") or 0),
        forked_from_id=_uuid(row.get("forked_from_id")),
        deleted_at=parse_datetime(row.get("deleted_at")),
        current_version=_parse_version(version_row) if version_row else None,
    )


def _parse_version(row: dict[str, Any]) -> RecipeVersion:
    return RecipeVersion(
        id=UUID(row["id"]),
        recipe_id=UUID(row["recipe_id"]),
        user_id=UUID(row["user_id"]),
        version_number=int(row["version_number"]),
        snapshot=_parse_snapshot(row),
        created_at=datetime.fromisoformat(row["created_at"]),
        deleted_at=parse_datetime(row.get("deleted_at")),
    )


def _parse_snapshot(row: dict[str, Any]) -> BrewSnapshot:
    return BrewSnapshot(
        title=str(row["title"]),
        description=row.get("description"),
        brew_method=BrewMethod(row["brew_method"]),
        drink_type=DrinkType(row["drink_type"]),
        coffee_id=_uuid(row.get("coffee_id")),
        coffee_name=row.get("coffee_name"),
        roast_date=parse_datetime(row.get("roast_date")),
        grind_date=parse_datetime(row.get("grind_date")),
        grinder_id=_uuid(row.get("grinder_id")),
        brewer_id=_uuid(row.get("brewer_id")),
        portafilter_id=_uuid(row.get("portafilter_id")),
        basket_id=_uuid(row.get("basket_id")),
        puck_screen_id=_uuid(row.get("puck_screen_id")),
        paper_filter_id=_uuid(row.get("paper_filter_id")),
        tamper_id=_uuid(row.get("tamper_id")),
        grind_size=row.get("grind_size"),
        dose_grams=float(row["dose_grams"]),
        yield_ml=_float(row.get("yield_ml")),
        yield_grams=_float(row.get("yield_grams")),
        brew_time_sec=int(row["brew_time_sec"]) if row.get("brew_time_sec") else None,
        temp_celsius=_float(row.get("temp_celsius")),
        pressure=row.get("pressure"),
        brew_ratio=_float(row.get("brew_ratio")),
        flow_rate=_float(row.get("flow_rate")),
        preparations=tuple(row.get("preparations") or ()),
        tasting_notes=row.get("tasting_notes"),
        rating=int(row["rating"]) if row.get("rating") is not None else None,
        emoji_rating=EmojiRating(row["emoji_rating"]) if row.get("emoji_rating") else None,
        is_favourite=bool(row.get("is_favourite", False)),
        tags=tuple(row.get("tags") or ()),
        taste_note_ids=tuple(UUID(str(item)) for item in row.get("taste_note_ids") or ()),
    )


def _uuid(value: object) -> UUID | None:
    return UUID(str(value)) if value else None


def _uuid_str(value: UUID | None) -> str | None:
    return str(value) if value else None


def _float(value: object) -> float | None:
    return float(value) if value is not None else None


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
