"""Shared request dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import Header, HTTPException, Request, status

if TYPE_CHECKING:
    from brewform.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def optional_user_id(
    x_user_id: UUID | None = Header(default=None),
) -> UUID | None:
    """Identity of the caller, if any.

    Authentication happens upstream; the gateway forwards the verified user
    id in ``X-User-Id``.
    """
    return x_user_id


async def require_user_id(
    x_user_id: UUID | None = Header(default=None),
) -> UUID:
    """Ensure write requests carry a caller identity."""
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id
