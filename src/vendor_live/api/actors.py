"""Resolve the current actor from headers set by the auth layer."""

from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status

from vendor_live.domain.actors import Actor, Role, require_role
from vendor_live.domain.vendors import VendorRecord


async def current_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
) -> Actor:
    """Return the authenticated actor or reject the request."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return Actor(id=UUID(x_actor_id), role=Role(x_actor_role.strip().lower()))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc


async def current_vendor(
    request: Request, actor: Actor = Depends(current_actor)
) -> VendorRecord:
    """Return the vendor profile owned by the current vendor actor."""
    require_role(actor, Role.VENDOR)
    container = request.app.state.container
    return container.vendor_status_service.get_vendor_for_user(actor.id)
