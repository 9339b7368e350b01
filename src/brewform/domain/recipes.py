"""Domain models for recipes and their version history."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Visibility(str, Enum):
    """Access-control state of a recipe."""

    DRAFT = "DRAFT"
    PRIVATE = "PRIVATE"
    UNLISTED = "UNLISTED"
    PUBLIC = "PUBLIC"


MOST_RESTRICTED_VISIBILITY = Visibility.DRAFT
RESTRICTED_VISIBILITIES = frozenset({Visibility.DRAFT, Visibility.PRIVATE})


class BrewMethod(str, Enum):
    """Apparatus or technique used to extract coffee."""

    ESPRESSO_MACHINE = "ESPRESSO_MACHINE"
    MOKA_POT = "MOKA_POT"
    FRENCH_PRESS = "FRENCH_PRESS"
    POUR_OVER_V60 = "POUR_OVER_V60"
    POUR_OVER_CHEMEX = "POUR_OVER_CHEMEX"
    POUR_OVER_KALITA = "POUR_OVER_KALITA"
    AEROPRESS = "AEROPRESS"
    COLD_BREW = "COLD_BREW"
    DRIP_COFFEE = "DRIP_COFFEE"
    TURKISH_CEZVE = "TURKISH_CEZVE"
    SIPHON = "SIPHON"
    VIETNAMESE_PHIN = "VIETNAMESE_PHIN"
    IBRIK = "IBRIK"
    PERCOLATOR = "PERCOLATOR"
    OTHER = "OTHER"


class DrinkType(str, Enum):
    """Resulting beverage category."""

    ESPRESSO = "ESPRESSO"
    RISTRETTO = "RISTRETTO"
    LUNGO = "LUNGO"
    AMERICANO = "AMERICANO"
    LATTE = "LATTE"
    CAPPUCCINO = "CAPPUCCINO"
    FLAT_WHITE = "FLAT_WHITE"
    CORTADO = "CORTADO"
    MACCHIATO = "MACCHIATO"
    MOCHA = "MOCHA"
    POUR_OVER = "POUR_OVER"
    FRENCH_PRESS = "FRENCH_PRESS"
    COLD_BREW = "COLD_BREW"
    ICED_COFFEE = "ICED_COFFEE"
    TURKISH_COFFEE = "TURKISH_COFFEE"
    AFFOGATO = "AFFOGATO"
    IRISH_COFFEE = "IRISH_COFFEE"
    VIETNAMESE_COFFEE = "VIETNAMESE_COFFEE"
    OTHER = "OTHER"


class EmojiRating(str, Enum):
    """Quick emoji verdict on a brew."""

    SUPER_GOOD = "SUPER_GOOD"
    GOOD = "GOOD"
    OKAY = "OKAY"
    BAD = "BAD"
    HORRIBLE = "HORRIBLE"


class Preparation(BaseModel):
    """Additional preparation step, e.g. steamed milk."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=100)
    type: str | None = Field(default=None, max_length=100)
    input: str | None = Field(default=None, max_length=200)
    method: str | None = Field(default=None, max_length=100)


class RecipeVersionInput(BaseModel):
    """Candidate payload for a recipe version.

    Only structural limits live here. Brewing rules, including the dose
    requirement, are checked by the validation engine so that all of them
    are reported together.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)

    brew_method: BrewMethod
    drink_type: DrinkType

    coffee_id: UUID | None = None
    coffee_name: str | None = Field(default=None, max_length=200)
    roast_date: datetime | None = None
    grind_date: datetime | None = None

    grinder_id: UUID | None = None
    brewer_id: UUID | None = None
    portafilter_id: UUID | None = None
    basket_id: UUID | None = None
    puck_screen_id: UUID | None = None
    paper_filter_id: UUID | None = None
    tamper_id: UUID | None = None

    grind_size: str | None = Field(default=None, max_length=100)

    dose_grams: float | None = Field(default=None, le=100)
    yield_ml: float | None = Field(default=None, gt=0, le=1000)
    yield_grams: float | None = Field(default=None, gt=0, le=1000)
    brew_time_sec: int | None = Field(default=None, gt=0, le=86400)
    temp_celsius: float | None = Field(default=None, ge=0, le=100)
    pressure: str | None = Field(default=None, max_length=50)

    preparations: list[Preparation] = Field(default_factory=list)

    tasting_notes: str | None = Field(default=None, max_length=10000)
    rating: int | None = Field(default=None, ge=1, le=10)
    emoji_rating: EmojiRating | None = None
    is_favourite: bool = False
    tags: list[Annotated[str, Field(max_length=50)]] = Field(
        default_factory=list, max_length=20
    )
    taste_note_ids: list[UUID] = Field(default_factory=list, max_length=20)


@dataclass(frozen=True)
class BrewSnapshot:
    """Immutable body of a recipe version."""

    title: str
    brew_method: BrewMethod
    drink_type: DrinkType
    dose_grams: float
    description: str | None = None
    coffee_id: UUID | None = None
    coffee_name: str | None = None
    roast_date: datetime | None = None
    grind_date: datetime | None = None
    grinder_id: UUID | None = None
    brewer_id: UUID | None = None
    portafilter_id: UUID | None = None
    basket_id: UUID | None = None
    puck_screen_id: UUID | None = None
    paper_filter_id: UUID | None = None
    tamper_id: UUID | None = None
    grind_size: str | None = None
    yield_ml: float | None = None
    yield_grams: float | None = None
    brew_time_sec: int | None = None
    temp_celsius: float | None = None
    pressure: str | None = None
    brew_ratio: float | None = None
    flow_rate: float | None = None
    preparations: tuple[dict[str, object], ...] = ()
    tasting_notes: str | None = None
    rating: int | None = None
    emoji_rating: EmojiRating | None = None
    is_favourite: bool = False
    tags: tuple[str, ...] = ()
    taste_note_ids: tuple[UUID, ...] = ()


@dataclass(frozen=True)
class RecipeVersion:
    """Append-only snapshot of a recipe at a point in time."""

    id: UUID
    recipe_id: UUID
    user_id: UUID
    version_number: int
    snapshot: BrewSnapshot
    created_at: datetime
    deleted_at: datetime | None = None


@dataclass(frozen=True)
class Recipe:
    """Mutable recipe header pointing at its current version."""

    id: UUID
    user_id: UUID
    slug: str
    visibility: Visibility
    current_version_id: UUID | None
    created_at: datetime
    updated_at: datetime
    is_featured: bool = False
    view_count: int = 0
    favourite_count: int = 0
    comment_count: int = 0
    fork_count: int = 0
    forked_from_id: UUID | None = None
    deleted_at: datetime | None = None
    current_version: RecipeVersion | None = None


@dataclass(frozen=True)
class SavedRecipe:
    """Recipe returned from a successful create with advisory warnings."""

    recipe: Recipe
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SavedVersion:
    """Version returned from a successful append with advisory warnings."""

    version: RecipeVersion
    warnings: list[str] = field(default_factory=list)


class RecipeUpdate(BaseModel):
    """Owner-only metadata patch."""

    visibility: Visibility | None = None
    is_featured: bool | None = None


SortKey = Literal["created_at", "rating", "favourite_count", "view_count"]
SortOrder = Literal["asc", "desc"]


class RecipeFilters(BaseModel):
    """Filters accepted by recipe listing."""

    search: str | None = Field(default=None, max_length=200)
    brew_method: BrewMethod | None = None
    drink_type: DrinkType | None = None
    coffee_id: UUID | None = None
    grinder_id: UUID | None = None
    brewer_id: UUID | None = None
    user_id: UUID | None = None
    visibility: Visibility | None = None
    min_rating: int | None = Field(default=None, ge=1, le=10)
    tags: list[str] = Field(default_factory=list)
    sort_by: SortKey = "created_at"
    sort_order: SortOrder = "desc"
    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1, le=100)


@dataclass(frozen=True)
class RecipeQuery:
    """Resolved listing query handed to persistence."""

    visibilities: frozenset[Visibility]
    filters: RecipeFilters
    offset: int
    limit: int


@dataclass(frozen=True)
class PaginationMeta:
    """Pagination details for list responses."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


@dataclass(frozen=True)
class RecipePage:
    """One page of recipes."""

    items: list[Recipe]
    pagination: PaginationMeta
