"""Supabase repository for recipe comparisons."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from supabase import Client

from brewform.adapters.supabase_support import first_row, translate_conflicts
from brewform.domain.social import Comparison
from brewform.services.comparisons import ComparisonRepository


@dataclass
class SupabaseComparisonRepository(ComparisonRepository):
    """Supabase implementation for comparisons."""

    client: Client

    def find_comparison(
        self, recipe_a_id: UUID, recipe_b_id: UUID
    ) -> Comparison | None:
        """Look the pair up in both orders."""
        a, b = str(recipe_a_id), str(recipe_b_id)
        response = (
            self.client.table("comparisons")
            .select("*")
            .or_(
                f"and(recipe_a_id.eq.{a},recipe_b_id.eq.{b}),"
                f"and(recipe_a_id.eq.{b},recipe_b_id.eq.{a})"
            )
            .limit(1)
            .execute()
        )
        row = first_row(response.data)
        return _parse_comparison(row) if row else None

    def create_comparison(
        self, recipe_a_id: UUID, recipe_b_id: UUID, share_token: str
    ) -> Comparison:
        payload = {
            "recipe_a_id": str(recipe_a_id),
            "recipe_b_id": str(recipe_b_id),
            "share_token": share_token,
        }
        response = translate_conflicts(
            lambda: self.client.table("comparisons").insert(payload).execute(),
            "Comparison already exists",
        )
        row = first_row(response.data)
        if row is None:
            raise RuntimeError("Failed to create comparison")
        return _parse_comparison(row)

    def get_comparison_by_token(self, share_token: str) -> Comparison | None:
        response = (
            self.client.table("comparisons")
            .select("*")
            .eq("share_token", share_token)
            .limit(1)
            .execute()
        )
        row = first_row(response.data)
        return _parse_comparison(row) if row else None


def _parse_comparison(row: dict[str, Any]) -> Comparison:
    return Comparison(
        id=UUID(row["id"]),
        recipe_a_id=UUID(row["recipe_a_id"]),
        recipe_b_id=UUID(row["recipe_b_id"]),
        share_token=str(row["share_token"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )
