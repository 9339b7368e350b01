"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from brewform.adapters.supabase_audit_repository import SupabaseAuditRepository
from brewform.adapters.supabase_comparison_repository import (
    SupabaseComparisonRepository,
)
from brewform.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from brewform.adapters.supabase_social_repository import SupabaseSocialRepository
from brewform.config import Settings
from brewform.services.audit import AuditService
from brewform.services.cache import InMemoryCache
from brewform.services.comparisons import ComparisonService
from brewform.services.recipes import RecipeService
from brewform.services.social import SocialService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    recipe_service: RecipeService
    social_service: SocialService
    comparison_service: ComparisonService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    social_repository = SupabaseSocialRepository(supabase_client)
    audit_service = AuditService(SupabaseAuditRepository(supabase_client))
    cache = InMemoryCache()
    recipe_service = RecipeService(
        repository=recipe_repository,
        cache=cache,
        audit_service=audit_service,
        default_page_size=resolved_settings.default_page_size,
        max_page_size=resolved_settings.max_page_size,
        list_cache_ttl_seconds=resolved_settings.list_cache_ttl_seconds,
        version_retry_attempts=resolved_settings.version_retry_attempts,
    )
    social_service = SocialService(
        repository=social_repository,
        recipes=recipe_repository,
        cache=cache,
        audit_service=audit_service,
        default_page_size=resolved_settings.default_page_size,
        max_page_size=resolved_settings.max_page_size,
    )

    comparison_service = ComparisonService(
        repository=SupabaseComparisonRepository(supabase_client),
        recipes=recipe_repository,
    )

    async def close_resources() -> None:
        cache.clear()

    return AppContainer(
        settings=resolved_settings,
        recipe_service=recipe_service,
        social_service=social_service,
        comparison_service=comparison_service,
        close_resources=close_resources,
    )
