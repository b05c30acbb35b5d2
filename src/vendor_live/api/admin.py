"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from vendor_live.api.actors import current_actor
from vendor_live.api.schemas import ForceStartRequest, RejectVendorRequest
from vendor_live.domain.actors import Actor  # noqa: TC001
from vendor_live.domain.vendors import VendorStatus  # noqa: TC001
from vendor_live.services.serializers import serialize_session, serialize_vendor

if TYPE_CHECKING:
    from vendor_live.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/vendors", dependencies=[Depends(require_admin)])
async def list_vendors(
    request: Request,
    status: VendorStatus | None = None,
    actor: Actor = Depends(current_actor),
) -> dict[str, object]:
    """Return vendors with their current live session."""
    container: AppContainer = request.app.state.container
    return {"vendors": container.admin_service.list_vendors(actor, status)}


@router.get("/vendors/stats", dependencies=[Depends(require_admin)])
async def vendor_stats(
    request: Request, actor: Actor = Depends(current_actor)
) -> dict[str, int]:
    """Return vendor counts by status and the live count."""
    container: AppContainer = request.app.state.container
    return container.admin_service.vendor_stats(actor)


@router.post("/vendors/{vendor_id}/approve", dependencies=[Depends(require_admin)])
async def approve_vendor(
    vendor_id: UUID, request: Request, actor: Actor = Depends(current_actor)
) -> dict[str, object]:
    """Approve a vendor."""
    container: AppContainer = request.app.state.container
    vendor = container.admin_service.approve_with_audit(actor, vendor_id)
    return {"vendor": serialize_vendor(vendor)}


@router.post("/vendors/{vendor_id}/reject", dependencies=[Depends(require_admin)])
async def reject_vendor(
    vendor_id: UUID,
    request: Request,
    payload: RejectVendorRequest | None = None,
    actor: Actor = Depends(current_actor),
) -> dict[str, object]:
    """Reject a vendor and end any live session it has."""
    container: AppContainer = request.app.state.container
    outcome = container.admin_service.reject_with_audit(
        actor, vendor_id, payload.reason if payload else None
    )
    return {
        "vendor": serialize_vendor(outcome.vendor),
        "closed_session": serialize_session(outcome.closed_session)
        if outcome.closed_session
        else None,
    }


@router.post(
    "/vendors/{vendor_id}/live",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def force_start(
    vendor_id: UUID,
    payload: ForceStartRequest,
    request: Request,
    actor: Actor = Depends(current_actor),
) -> dict[str, object]:
    """Start a test session for a vendor regardless of approval."""
    container: AppContainer = request.app.state.container
    session = await container.admin_service.force_start(
        actor, vendor_id, payload.coordinates(), payload.duration_minutes
    )
    return {"session": serialize_session(session)}


@router.delete("/vendors/{vendor_id}/live", dependencies=[Depends(require_admin)])
async def force_stop(
    vendor_id: UUID, request: Request, actor: Actor = Depends(current_actor)
) -> dict[str, object]:
    """End a vendor's live session."""
    container: AppContainer = request.app.state.container
    session = container.admin_service.force_stop(actor, vendor_id)
    return {"session": serialize_session(session)}


@router.get("/vendors/{vendor_id}/sessions", dependencies=[Depends(require_admin)])
async def session_history(
    vendor_id: UUID,
    request: Request,
    limit: int = 20,
    actor: Actor = Depends(current_actor),
) -> dict[str, object]:
    """Return a vendor's session history, newest first."""
    container: AppContainer = request.app.state.container
    sessions = container.admin_service.session_history(actor, vendor_id, limit)
    return {"sessions": [serialize_session(session) for session in sessions]}
