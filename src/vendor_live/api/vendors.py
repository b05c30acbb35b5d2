"""Vendor self-service and customer discovery endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from vendor_live.api.actors import current_vendor
from vendor_live.api.schemas import StartLiveSessionRequest
from vendor_live.domain.live_sessions import Bounds
from vendor_live.domain.vendors import VendorRecord  # noqa: TC001
from vendor_live.errors import InvalidArgument
from vendor_live.services.serializers import serialize_countdown, serialize_session

if TYPE_CHECKING:
    from vendor_live.containers import AppContainer

router = APIRouter(tags=["vendors"])


@router.post("/vendor/live", status_code=status.HTTP_201_CREATED)
async def start_live_session(
    payload: StartLiveSessionRequest,
    request: Request,
    vendor: VendorRecord = Depends(current_vendor),
) -> dict[str, object]:
    """Go live at the given location."""
    container: AppContainer = request.app.state.container
    service = container.live_session_service
    session = await service.start(
        vendor.id, payload.coordinates(), payload.duration_minutes
    )
    return {
        "session": serialize_session(session),
        "countdown": serialize_countdown(session, service.clock()),
    }


@router.delete("/vendor/live")
async def stop_live_session(
    request: Request, vendor: VendorRecord = Depends(current_vendor)
) -> dict[str, object]:
    """End the current vendor's live session."""
    container: AppContainer = request.app.state.container
    session = container.live_session_service.stop(vendor.id)
    return {"session": serialize_session(session)}


@router.get("/vendors/live")
async def list_live_vendors(
    request: Request,
    south: float | None = None,
    west: float | None = None,
    north: float | None = None,
    east: float | None = None,
) -> dict[str, object]:
    """Return live sessions for the discovery map."""
    container: AppContainer = request.app.state.container
    service = container.live_session_service
    sessions = service.list_live_sessions(_parse_bounds(south, west, north, east))
    now = service.clock()
    return {
        "sessions": [
            {
                **serialize_session(session),
                "countdown": serialize_countdown(session, now),
            }
            for session in sessions
        ],
        "live_count": len({session.vendor_id for session in sessions}),
        "timestamp": now.isoformat(),
    }


@router.get("/vendors/{vendor_id}/status")
async def vendor_status(vendor_id: UUID, request: Request) -> dict[str, object]:
    """Return the vendor's approval status and current session."""
    container: AppContainer = request.app.state.container
    vendor = container.vendor_status_service.get_vendor(vendor_id)
    service = container.live_session_service
    session = service.current_session(vendor_id)
    return {
        "vendor_id": str(vendor.id),
        "status": vendor.status.value,
        "rejection_reason": vendor.rejection_reason,
        "session": serialize_session(session) if session else None,
        "countdown": serialize_countdown(session, service.clock())
        if session
        else None,
    }


def _parse_bounds(
    south: float | None, west: float | None, north: float | None, east: float | None
) -> Bounds | None:
    values = (south, west, north, east)
    if all(value is None for value in values):
        return None
    if south is None or west is None or north is None or east is None:
        raise InvalidArgument("Bounds require south, west, north and east")
    return Bounds(south=south, west=west, north=north, east=east)
