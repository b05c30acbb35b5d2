"""Privileged vendor and live-session overrides."""

import logging
from dataclasses import dataclass
from uuid import UUID

from vendor_live.domain.actors import Actor, Role, require_role
from vendor_live.domain.live_sessions import Coordinates, EndedBy, LiveSession
from vendor_live.domain.vendors import VendorRecord, VendorRejection, VendorStatus
from vendor_live.services.audit import AuditService
from vendor_live.services.live_sessions import LiveSessionService
from vendor_live.services.serializers import serialize_session, serialize_vendor
from vendor_live.services.vendor_status import VendorStatusService

_logger = logging.getLogger(__name__)


@dataclass
class AdminService:
    """Admin operations that bypass vendor-side preconditions."""

    vendor_status_service: VendorStatusService
    live_session_service: LiveSessionService
    audit_service: AuditService
    force_start_duration_minutes: int = 120

    async def force_start(
        self,
        actor: Actor,
        vendor_id: UUID,
        coordinates: Coordinates,
        duration_minutes: int | None = None,
    ) -> LiveSession:
        """Start a session for any vendor regardless of approval status."""
        require_role(actor, Role.ADMIN)
        self.vendor_status_service.get_vendor(vendor_id)
        session = await self.live_session_service.open_session(
            vendor_id,
            coordinates,
            duration_minutes or self.force_start_duration_minutes,
        )
        self.audit_service.record(
            actor,
            action="live_session.force_start",
            target_type="live_session",
            target_id=session.id,
            after=serialize_session(session),
        )
        _logger.info(
            "Admin force-started session: vendor_id=%s session_id=%s admin_id=%s",
            vendor_id,
            session.id,
            actor.id,
        )
        return session

    def force_stop(self, actor: Actor, vendor_id: UUID) -> LiveSession:
        """Close the vendor's active session on behalf of an admin."""
        require_role(actor, Role.ADMIN)
        closed = self.live_session_service.stop(vendor_id, ended_by=EndedBy.ADMIN)
        self.audit_service.record(
            actor,
            action="live_session.force_stop",
            target_type="live_session",
            target_id=closed.id,
            after=serialize_session(closed),
        )
        return closed

    def approve_with_audit(self, actor: Actor, vendor_id: UUID) -> VendorRecord:
        """Approve a vendor and record the action."""
        require_role(actor, Role.ADMIN)
        before = self.vendor_status_service.get_vendor(vendor_id)
        updated = self.vendor_status_service.approve(vendor_id, approved_by=actor.id)
        self.audit_service.record(
            actor,
            action="vendor.approve",
            target_type="vendor",
            target_id=vendor_id,
            before=serialize_vendor(before),
            after=serialize_vendor(updated),
        )
        return updated

    def reject_with_audit(
        self, actor: Actor, vendor_id: UUID, reason: str | None
    ) -> VendorRejection:
        """Reject a vendor, closing any live session, and record the action."""
        require_role(actor, Role.ADMIN)
        before = self.vendor_status_service.get_vendor(vendor_id)
        outcome = self.vendor_status_service.reject(
            vendor_id, reason, rejected_by=actor.id
        )
        after = serialize_vendor(outcome.vendor)
        if outcome.closed_session is not None:
            after["closed_session_id"] = str(outcome.closed_session.id)
        self.audit_service.record(
            actor,
            action="vendor.reject",
            target_type="vendor",
            target_id=vendor_id,
            before=serialize_vendor(before),
            after=after,
        )
        return outcome

    def list_vendors(
        self, actor: Actor, status: VendorStatus | None = None
    ) -> list[dict[str, object]]:
        """Return vendors with their current live session."""
        require_role(actor, Role.ADMIN)
        summaries = []
        for vendor in self.vendor_status_service.list_vendors(status):
            session = self.live_session_service.current_session(vendor.id)
            summary = serialize_vendor(vendor)
            summary["session"] = serialize_session(session) if session else None
            summaries.append(summary)
        return summaries

    def vendor_stats(self, actor: Actor) -> dict[str, int]:
        """Return vendor counts by status and the number currently live."""
        require_role(actor, Role.ADMIN)
        counts = self.vendor_status_service.count_by_status()
        stats = {status.value: count for status, count in counts.items()}
        stats["total"] = sum(counts.values())
        stats["live"] = self.live_session_service.count_live_vendors()
        return stats

    def session_history(
        self, actor: Actor, vendor_id: UUID, limit: int = 20
    ) -> list[LiveSession]:
        """Return a vendor's session history, newest first."""
        require_role(actor, Role.ADMIN)
        return self.live_session_service.session_history(vendor_id, limit)
