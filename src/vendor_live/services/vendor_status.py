"""Vendor approval state machine."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from vendor_live.domain.vendors import VendorRecord, VendorRejection, VendorStatus
from vendor_live.errors import Conflict, InvalidArgument, NotFound

_logger = logging.getLogger(__name__)

_APPROVABLE_FROM = {VendorStatus.PENDING, VendorStatus.REJECTED}
_REJECTABLE_FROM = {VendorStatus.PENDING, VendorStatus.APPROVED}


class VendorRepository(Protocol):
    """Persistence interface for vendor approval state."""

    def get_vendor(self, vendor_id: UUID) -> VendorRecord | None:
        """Return a vendor by id, if present."""

    def get_vendor_by_user(self, user_id: UUID) -> VendorRecord | None:
        """Return the vendor owned by a user account, if present."""

    def approve_vendor(
        self,
        vendor_id: UUID,
        expected_status: VendorStatus,
        approved_by: UUID,
        approved_at: datetime,
    ) -> VendorRecord | None:
        """Set status to approved if the status is still ``expected_status``.

        Returns None when another writer changed the status first.
        """

    def reject_vendor(
        self,
        vendor_id: UUID,
        expected_status: VendorStatus,
        reason: str,
        rejected_by: UUID,
        rejected_at: datetime,
    ) -> VendorRejection | None:
        """Reject the vendor and close its active session in one transaction.

        Returns None when another writer changed the status first.
        """

    def list_vendors(self, status: VendorStatus | None) -> list[VendorRecord]:
        """Return vendors, optionally filtered by status."""

    def count_by_status(self) -> dict[VendorStatus, int]:
        """Return the number of vendors in each status."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class VendorStatusService:
    """Owns vendor approval transitions and rejection bookkeeping."""

    repository: VendorRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get_vendor(self, vendor_id: UUID) -> VendorRecord:
        """Return a vendor or raise NotFound."""
        vendor = self.repository.get_vendor(vendor_id)
        if vendor is None:
            raise NotFound(f"Vendor {vendor_id} not found")
        return vendor

    def get_vendor_for_user(self, user_id: UUID) -> VendorRecord:
        """Return the vendor profile owned by a user or raise NotFound."""
        vendor = self.repository.get_vendor_by_user(user_id)
        if vendor is None:
            raise NotFound("Vendor profile not found")
        return vendor

    def get_status(self, vendor_id: UUID) -> VendorStatus:
        """Return the vendor's approval status."""
        return self.get_vendor(vendor_id).status

    def approve(self, vendor_id: UUID, approved_by: UUID) -> VendorRecord:
        """Approve a pending or rejected vendor. Approving twice is a no-op."""
        vendor = self.get_vendor(vendor_id)
        if vendor.status is VendorStatus.APPROVED:
            return vendor
        if vendor.status not in _APPROVABLE_FROM:
            raise InvalidArgument(
                f"Cannot approve a vendor with status {vendor.status.value}"
            )
        updated = self.repository.approve_vendor(
            vendor_id,
            expected_status=vendor.status,
            approved_by=approved_by,
            approved_at=self.clock(),
        )
        if updated is None:
            raise Conflict(f"Vendor {vendor_id} status changed concurrently")
        _logger.info(
            "Vendor approved: vendor_id=%s from=%s by=%s",
            vendor_id,
            vendor.status.value,
            approved_by,
        )
        return updated

    def reject(
        self, vendor_id: UUID, reason: str | None, rejected_by: UUID
    ) -> VendorRejection:
        """Reject a vendor and force-close its active session, if any."""
        cleaned = (reason or "").strip()
        if not cleaned:
            raise InvalidArgument("A rejection reason is required")
        vendor = self.get_vendor(vendor_id)
        if vendor.status not in _REJECTABLE_FROM:
            raise InvalidArgument(
                f"Cannot reject a vendor with status {vendor.status.value}"
            )
        outcome = self.repository.reject_vendor(
            vendor_id,
            expected_status=vendor.status,
            reason=cleaned,
            rejected_by=rejected_by,
            rejected_at=self.clock(),
        )
        if outcome is None:
            raise Conflict(f"Vendor {vendor_id} status changed concurrently")
        _logger.info(
            "Vendor rejected: vendor_id=%s from=%s by=%s",
            vendor_id,
            vendor.status.value,
            rejected_by,
        )
        if outcome.closed_session is not None:
            _logger.info(
                "Closed live session on rejection: vendor_id=%s session_id=%s",
                vendor_id,
                outcome.closed_session.id,
            )
        return outcome

    def list_vendors(self, status: VendorStatus | None = None) -> list[VendorRecord]:
        """Return vendors, optionally filtered by status."""
        return self.repository.list_vendors(status)

    def count_by_status(self) -> dict[VendorStatus, int]:
        """Return vendor counts for every status, zero-filled."""
        counts = self.repository.count_by_status()
        return {status: counts.get(status, 0) for status in VendorStatus}
