"""JSON-ready views of vendors and live sessions."""

from datetime import datetime

from vendor_live.domain.live_sessions import LiveSession
from vendor_live.domain.vendors import VendorRecord
from vendor_live.services.countdown import build_countdown


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_vendor(vendor: VendorRecord) -> dict[str, object]:
    """Return the vendor's approval state as a dict."""
    return {
        "id": str(vendor.id),
        "business_name": vendor.business_name,
        "status": vendor.status.value,
        "rejection_reason": vendor.rejection_reason,
        "approved_by": str(vendor.approved_by) if vendor.approved_by else None,
        "approved_at": _isoformat(vendor.approved_at),
        "rejected_by": str(vendor.rejected_by) if vendor.rejected_by else None,
        "rejected_at": _isoformat(vendor.rejected_at),
    }


def serialize_session(session: LiveSession) -> dict[str, object]:
    """Return a live session row as a dict."""
    return {
        "id": str(session.id),
        "vendor_id": str(session.vendor_id),
        "latitude": session.latitude,
        "longitude": session.longitude,
        "address": session.address,
        "start_time": session.start_time.isoformat(),
        "end_time": _isoformat(session.end_time),
        "auto_end_time": _isoformat(session.auto_end_time),
        "is_active": session.is_active,
        "ended_by": session.ended_by.value if session.ended_by else None,
        "scheduled_duration_minutes": session.scheduled_duration_minutes,
    }


def serialize_countdown(
    session: LiveSession | None, now: datetime
) -> dict[str, object]:
    """Return the display countdown for a session."""
    countdown = build_countdown(session, now)
    return {
        "has_timer": countdown.has_timer,
        "seconds_remaining": countdown.seconds_remaining,
        "display": countdown.display,
        "presence": countdown.presence,
    }
