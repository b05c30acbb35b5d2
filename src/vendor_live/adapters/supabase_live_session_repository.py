"""Supabase-backed live session repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from vendor_live.domain.live_sessions import Coordinates, EndedBy, LiveSession
from vendor_live.domain.vendors import VendorStatus
from vendor_live.errors import Conflict
from vendor_live.services.live_sessions import LiveSessionRepository

_TABLE = "vendor_live_sessions"
_COLUMNS = (
    "id, vendor_id, latitude, longitude, address, start_time, end_time, "
    "auto_end_time, is_active, ended_by, was_scheduled_duration"
)
_UNIQUE_VIOLATION = "23505"


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO timestamp column, tolerating nulls."""
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def row_to_session(row: dict[str, object]) -> LiveSession:
    """Build a LiveSession from a ``vendor_live_sessions`` row."""
    ended_by = row.get("ended_by")
    duration = row.get("was_scheduled_duration")
    return LiveSession(
        id=UUID(str(row["id"])),
        vendor_id=UUID(str(row["vendor_id"])),
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
        address=row.get("address"),
        start_time=datetime.fromisoformat(str(row["start_time"])),
        end_time=parse_timestamp(row.get("end_time")),
        auto_end_time=parse_timestamp(row.get("auto_end_time")),
        is_active=bool(row["is_active"]),
        ended_by=EndedBy(ended_by) if ended_by else None,
        scheduled_duration_minutes=int(duration) if duration is not None else None,
    )


@dataclass
class SupabaseLiveSessionRepository(LiveSessionRepository):
    """Supabase implementation for live sessions.

    Exclusivity relies on the partial unique index
    ``vendor_live_sessions_one_active_per_vendor``.
    """

    client: Client

    def get_active_session(self, vendor_id: UUID) -> LiveSession | None:
        """Return the vendor's active session, if present."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("vendor_id", str(vendor_id))
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return row_to_session(response.data[0])

    def create_session(  # noqa: PLR0913
        self,
        vendor_id: UUID,
        coordinates: Coordinates,
        address: str | None,
        start_time: datetime,
        auto_end_time: datetime | None,
        scheduled_duration_minutes: int | None,
        allowed_statuses: frozenset[VendorStatus] | None = None,
    ) -> LiveSession | None:
        """Insert an active session via ``open_live_session``.

        The function locks the vendor row, so the status check and the insert
        cannot interleave with ``reject_vendor``.
        """
        try:
            response = self.client.rpc(
                "open_live_session",
                {
                    "p_vendor_id": str(vendor_id),
                    "p_latitude": coordinates.latitude,
                    "p_longitude": coordinates.longitude,
                    "p_address": address,
                    "p_start_time": start_time.isoformat(),
                    "p_auto_end_time": auto_end_time.isoformat()
                    if auto_end_time
                    else None,
                    "p_scheduled_duration": scheduled_duration_minutes,
                    "p_allowed_statuses": sorted(
                        status.value for status in allowed_statuses
                    )
                    if allowed_statuses is not None
                    else None,
                },
            ).execute()
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise Conflict(
                    f"Vendor {vendor_id} already has an active session"
                ) from exc
            raise
        payload = response.data
        if isinstance(payload, list):
            payload = payload[0] if payload else None
        if not payload:
            return None
        return row_to_session(payload)

    def close_session(
        self, session_id: UUID, ended_by: EndedBy, ended_at: datetime
    ) -> LiveSession | None:
        """Close the session only if it is still active."""
        response = (
            self.client.table(_TABLE)
            .update(
                {
                    "is_active": False,
                    "end_time": ended_at.isoformat(),
                    "ended_by": ended_by.value,
                }
            )
            .eq("id", str(session_id))
            .eq("is_active", True)
            .execute()
        )
        if not response.data:
            return None
        return row_to_session(response.data[0])

    def list_active_sessions(self) -> list[LiveSession]:
        """Return every active session, newest first."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("is_active", True)
            .order("start_time", desc=True)
            .execute()
        )
        return [row_to_session(row) for row in response.data or []]

    def list_sessions(self, vendor_id: UUID, limit: int) -> list[LiveSession]:
        """Return a vendor's sessions, newest first."""
        response = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("vendor_id", str(vendor_id))
            .order("start_time", desc=True)
            .limit(limit)
            .execute()
        )
        return [row_to_session(row) for row in response.data or []]
