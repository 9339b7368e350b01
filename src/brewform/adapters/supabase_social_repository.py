"""Supabase repository for favourites and comments."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from supabase import Client

from brewform.adapters.supabase_support import first_row, live, parse_datetime
from brewform.domain.social import Comment
from brewform.services.social import SocialRepository


@dataclass
class SupabaseSocialRepository(SocialRepository):
    """Supabase implementation for social actions.

    Writes call SQL functions that keep the recipe counters in step.
    """

    client: Client

    def add_favourite(self, user_id: UUID, recipe_id: UUID) -> bool:
        response = self.client.rpc(
            "add_favourite",
            {"p_user_id": str(user_id), "p_recipe_id": str(recipe_id)},
        ).execute()
        return bool(response.data)

    def remove_favourite(self, user_id: UUID, recipe_id: UUID) -> bool:
        response = self.client.rpc(
            "remove_favourite",
            {"p_user_id": str(user_id), "p_recipe_id": str(recipe_id)},
        ).execute()
        return bool(response.data)

    def is_favourited(self, user_id: UUID, recipe_id: UUID) -> bool:
        response = (
            self.client.table("user_favourites")
            .select("id")
            .eq("user_id", str(user_id))
            .eq("recipe_id", str(recipe_id))
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def get_comment(self, comment_id: UUID) -> Comment | None:
        """Return a live comment by id."""
        response = (
            live(self.client.table("comments").select("*").eq("id", str(comment_id)))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_comment(response.data[0])

    def add_comment(
        self,
        recipe_id: UUID,
        user_id: UUID,
        content: str,
        parent_id: UUID | None,
    ) -> Comment:
        """Insert a comment through the counting SQL function."""
        response = self.client.rpc(
            "add_comment",
            {
                "p_recipe_id": str(recipe_id),
                "p_user_id": str(user_id),
                "p_content": content,
                "p_parent_id": str(parent_id) if parent_id else None,
            },
        ).execute()
        row = first_row(response.data)
        if row is None:
            raise RuntimeError("Failed to create comment")
        return _parse_comment(row)

    def update_comment(
        self, comment_id: UUID, content: str, updated_at: datetime
    ) -> Comment:
        response = (
            live(
                self.client.table("comments")
                .update(
                    {
                        "content": content,
                        "is_edited": True,
                        "updated_at": updated_at.isoformat(),
                    }
                )
                .eq("id", str(comment_id))
            )
            .execute()
        )
        row = first_row(response.data)
        if row is None:
            raise RuntimeError("Failed to update comment")
        return _parse_comment(row)

    def delete_comment(self, comment_id: UUID, deleted_at: datetime) -> None:
        self.client.rpc(
            "delete_comment",
            {"p_comment_id": str(comment_id), "p_deleted_at": deleted_at.isoformat()},
        ).execute()

    def list_comments(
        self, recipe_id: UUID, offset: int, limit: int
    ) -> tuple[list[Comment], int]:
        """Return top-level comments newest first."""
        response = (
            live(
                self.client.table("comments")
                .select("*", count="exact")
                .eq("recipe_id", str(recipe_id))
                .is_("parent_id", "null")
            )
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        items = [_parse_comment(row) for row in response.data or []]
        total = response.count if response.count is not None else len(items)
        return items, total

    def list_replies(self, parent_ids: list[UUID]) -> list[Comment]:
        """Return replies to the given comments, oldest first."""
        if not parent_ids:
            return []
        response = (
            live(
                self.client.table("comments")
                .select("*")
                .in_("parent_id", [str(parent_id) for parent_id in parent_ids])
            )
            .order("created_at")
            .execute()
        )
        return [_parse_comment(row) for row in response.data or []]


def _parse_comment(row: dict[str, Any]) -> Comment:
    return Comment(
        id=UUID(row["id"]),
        recipe_id=UUID(row["recipe_id"]),
        user_id=UUID(row["user_id"]),
        content=str(row["content"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        parent_id=UUID(row["parent_id"]) if row.get("parent_id") else None,
        is_edited=bool(row.get("is_edited", False)),
        deleted_at=parse_datetime(row.get("deleted_at")),
    )
