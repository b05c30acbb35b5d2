"""Live-session lifecycle with lazy auto-expiry."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from vendor_live.adapters.geocoder import Geocoder
from vendor_live.domain.live_sessions import (
    Bounds,
    Coordinates,
    EndedBy,
    LiveSession,
    is_expired,
)
from vendor_live.domain.vendors import VendorStatus
from vendor_live.errors import (
    Conflict,
    InvalidArgument,
    NoActiveSession,
    NotApproved,
    NotFound,
    SessionAlreadyActive,
    UpstreamUnavailable,
)
from vendor_live.services.vendor_status import VendorStatusService

_logger = logging.getLogger(__name__)

MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0


class LiveSessionRepository(Protocol):
    """Persistence interface for live sessions.

    Implementations must reject a second active row for the same vendor by
    raising ``Conflict``. The vendor status check in ``create_session`` must
    happen atomically with the insert.
    """

    def get_active_session(self, vendor_id: UUID) -> LiveSession | None:
        """Return the vendor's active session, if present."""

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
        """Insert an active session and return it.

        Returns None when the vendor is missing or its status is not in
        ``allowed_statuses``. None skips the status check.
        """

    def close_session(
        self, session_id: UUID, ended_by: EndedBy, ended_at: datetime
    ) -> LiveSession | None:
        """Close the session if it is still active and return the closed row.

        Returns None when the session was already closed.
        """

    def list_active_sessions(self) -> list[LiveSession]:
        """Return every active session."""

    def list_sessions(self, vendor_id: UUID, limit: int) -> list[LiveSession]:
        """Return a vendor's sessions, newest first."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class LiveSessionService:
    """Starts, stops and expires vendor live sessions."""

    repository: LiveSessionRepository
    vendor_status_service: VendorStatusService
    geocoder: Geocoder
    approval_required: bool = True
    geocode_timeout_seconds: float = 3.0
    max_duration_minutes: int = 1440
    clock: Callable[[], datetime] = field(default=_utc_now)

    async def start(
        self,
        vendor_id: UUID,
        coordinates: Coordinates,
        duration_minutes: int | None = None,
    ) -> LiveSession:
        """Start a live session for an approved vendor.

        The status is checked up front for a fast error and again by the store
        at insert time, so a rejection that lands while the address is being
        resolved still prevents the session.
        """
        vendor = self.vendor_status_service.get_vendor(vendor_id)
        if not self.can_go_live(vendor.status):
            raise NotApproved(
                f"Cannot go live. Your vendor status is {vendor.status.value}."
            )
        return await self._open(
            vendor_id, coordinates, duration_minutes, self.live_statuses()
        )

    async def open_session(
        self,
        vendor_id: UUID,
        coordinates: Coordinates,
        duration_minutes: int | None = None,
    ) -> LiveSession:
        """Open a session without checking approval status.

        Exclusivity is still enforced. Callers own the status precondition.
        """
        return await self._open(vendor_id, coordinates, duration_minutes, None)

    async def _open(
        self,
        vendor_id: UUID,
        coordinates: Coordinates,
        duration_minutes: int | None,
        allowed_statuses: frozenset[VendorStatus] | None,
    ) -> LiveSession:
        self._validate(coordinates, duration_minutes)
        if self.current_session(vendor_id) is not None:
            raise SessionAlreadyActive(
                "You already have an active live session. Stop it first."
            )
        address = await self._resolve_address(coordinates)
        start_time = self.clock()
        auto_end_time = (
            start_time + timedelta(minutes=duration_minutes)
            if duration_minutes
            else None
        )
        try:
            session = self.repository.create_session(
                vendor_id=vendor_id,
                coordinates=coordinates,
                address=address,
                start_time=start_time,
                auto_end_time=auto_end_time,
                scheduled_duration_minutes=duration_minutes,
                allowed_statuses=allowed_statuses,
            )
        except Conflict as exc:
            raise SessionAlreadyActive(
                "You already have an active live session. Stop it first."
            ) from exc
        if session is None:
            if allowed_statuses is None:
                raise NotFound(f"Vendor {vendor_id} not found")
            status = self.vendor_status_service.get_status(vendor_id)
            raise NotApproved(f"Cannot go live. Your vendor status is {status.value}.")
        _logger.info(
            "Live session started: vendor_id=%s session_id=%s auto_end_time=%s",
            vendor_id,
            session.id,
            auto_end_time.isoformat() if auto_end_time else None,
        )
        return session

    def stop(
        self, vendor_id: UUID, ended_by: EndedBy = EndedBy.VENDOR
    ) -> LiveSession:
        """Close the vendor's active session."""
        self.vendor_status_service.get_vendor(vendor_id)
        current = self.current_session(vendor_id)
        if current is None:
            raise NoActiveSession("No active live session to stop")
        closed = self.repository.close_session(current.id, ended_by, self.clock())
        if closed is None:
            raise NoActiveSession("No active live session to stop")
        _logger.info(
            "Live session stopped: vendor_id=%s session_id=%s ended_by=%s",
            vendor_id,
            closed.id,
            ended_by.value,
        )
        return closed

    def is_expired(self, session: LiveSession, now: datetime | None = None) -> bool:
        """Return True when the session's auto-end deadline has passed."""
        return is_expired(session, now or self.clock())

    def current_session(self, vendor_id: UUID) -> LiveSession | None:
        """Return the active session after applying lazy expiry."""
        session = self.repository.get_active_session(vendor_id)
        if session is None:
            return None
        return self._expire_if_due(session)

    def list_live_sessions(self, bounds: Bounds | None = None) -> list[LiveSession]:
        """Return active sessions for discovery, expiring stale ones first."""
        live = []
        for session in self.repository.list_active_sessions():
            current = self._expire_if_due(session)
            if current is None:
                continue
            if bounds and not bounds.contains(current.latitude, current.longitude):
                continue
            live.append(current)
        return live

    def count_live_vendors(self) -> int:
        """Return the number of vendors that are currently live."""
        return len({session.vendor_id for session in self.list_live_sessions()})

    def session_history(self, vendor_id: UUID, limit: int = 20) -> list[LiveSession]:
        """Return a vendor's sessions, newest first."""
        self.vendor_status_service.get_vendor(vendor_id)
        self.current_session(vendor_id)
        return self.repository.list_sessions(vendor_id, limit)

    def live_statuses(self) -> frozenset[VendorStatus]:
        """Return the vendor statuses that may start a session."""
        if self.approval_required:
            return frozenset({VendorStatus.APPROVED})
        return frozenset({VendorStatus.APPROVED, VendorStatus.PENDING})

    def can_go_live(self, status: VendorStatus) -> bool:
        """Return True when a vendor with this status may start a session."""
        return status in self.live_statuses()

    def _expire_if_due(self, session: LiveSession) -> LiveSession | None:
        now = self.clock()
        if not is_expired(session, now):
            return session
        closed = self.repository.close_session(session.id, EndedBy.SYSTEM, now)
        if closed is not None:
            _logger.info(
                "Live session expired: vendor_id=%s session_id=%s",
                session.vendor_id,
                session.id,
            )
        return None

    async def _resolve_address(self, coordinates: Coordinates) -> str | None:
        try:
            return await asyncio.wait_for(
                self.geocoder.resolve_address(
                    coordinates.latitude, coordinates.longitude
                ),
                timeout=self.geocode_timeout_seconds,
            )
        except (TimeoutError, UpstreamUnavailable) as exc:
            _logger.warning(
                "Geocoder unavailable, starting without address: lat=%s lng=%s (%s)",
                coordinates.latitude,
                coordinates.longitude,
                type(exc).__name__,
            )
            return None

    def _validate(
        self, coordinates: Coordinates, duration_minutes: int | None
    ) -> None:
        if not -MAX_LATITUDE <= coordinates.latitude <= MAX_LATITUDE:
            raise InvalidArgument("Latitude must be between -90 and 90")
        if not -MAX_LONGITUDE <= coordinates.longitude <= MAX_LONGITUDE:
            raise InvalidArgument("Longitude must be between -180 and 180")
        if duration_minutes is None:
            return
        if isinstance(duration_minutes, bool) or duration_minutes <= 0:
            raise InvalidArgument("Duration must be a positive number of minutes")
        if duration_minutes > self.max_duration_minutes:
            raise InvalidArgument(
                f"Duration cannot exceed {self.max_duration_minutes} minutes"
            )
