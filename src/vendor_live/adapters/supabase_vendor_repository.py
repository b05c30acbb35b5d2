"""Supabase-backed vendor repository."""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from vendor_live.adapters.supabase_live_session_repository import (
    parse_timestamp,
    row_to_session,
)
from vendor_live.domain.vendors import VendorRecord, VendorRejection, VendorStatus
from vendor_live.services.vendor_status import VendorRepository

_COLUMNS = (
    "id, user_id, business_name, status, rejection_reason, approved_by, approved_at, "
    "rejected_by, rejected_at"
)


def row_to_vendor(row: dict[str, object]) -> VendorRecord:
    """Build a VendorRecord from a ``vendors`` row."""
    user_id = row.get("user_id")
    approved_by = row.get("approved_by")
    rejected_by = row.get("rejected_by")
    return VendorRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(user_id)) if user_id else None,
        status=VendorStatus(str(row["status"]).strip().lower()),
        rejection_reason=row.get("rejection_reason"),
        approved_by=UUID(str(approved_by)) if approved_by else None,
        approved_at=parse_timestamp(row.get("approved_at")),
        rejected_by=UUID(str(rejected_by)) if rejected_by else None,
        rejected_at=parse_timestamp(row.get("rejected_at")),
        business_name=row.get("business_name"),
    )


@dataclass
class SupabaseVendorRepository(VendorRepository):
    """Supabase implementation for vendor approval state."""

    client: Client

    def get_vendor(self, vendor_id: UUID) -> VendorRecord | None:
        """Return a vendor by id, if present."""
        response = (
            self.client.table("vendors")
            .select(_COLUMNS)
            .eq("id", str(vendor_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return row_to_vendor(response.data[0])

    def get_vendor_by_user(self, user_id: UUID) -> VendorRecord | None:
        """Return the vendor owned by a user, if present."""
        response = (
            self.client.table("vendors")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return row_to_vendor(response.data[0])

    def approve_vendor(
        self,
        vendor_id: UUID,
        expected_status: VendorStatus,
        approved_by: UUID,
        approved_at: datetime,
    ) -> VendorRecord | None:
        """Compare-and-set the vendor status to approved."""
        response = (
            self.client.table("vendors")
            .update(
                {
                    "status": VendorStatus.APPROVED.value,
                    "rejection_reason": None,
                    "approved_by": str(approved_by),
                    "approved_at": approved_at.isoformat(),
                    "rejected_by": None,
                    "rejected_at": None,
                    "updated_at": approved_at.isoformat(),
                }
            )
            .eq("id", str(vendor_id))
            .eq("status", expected_status.value)
            .execute()
        )
        if not response.data:
            return None
        return row_to_vendor(response.data[0])

    def reject_vendor(
        self,
        vendor_id: UUID,
        expected_status: VendorStatus,
        reason: str,
        rejected_by: UUID,
        rejected_at: datetime,
    ) -> VendorRejection | None:
        """Reject the vendor and close its active session via ``reject_vendor``."""
        response = self.client.rpc(
            "reject_vendor",
            {
                "p_vendor_id": str(vendor_id),
                "p_expected_status": expected_status.value,
                "p_reason": reason,
                "p_rejected_by": str(rejected_by),
                "p_rejected_at": rejected_at.isoformat(),
            },
        ).execute()
        payload = response.data
        if isinstance(payload, list):
            payload = payload[0] if payload else None
        if not payload or not payload.get("vendor"):
            return None
        closed = payload.get("closed_session")
        return VendorRejection(
            vendor=row_to_vendor(payload["vendor"]),
            closed_session=row_to_session(closed) if closed else None,
        )

    def list_vendors(self, status: VendorStatus | None) -> list[VendorRecord]:
        """Return vendors, newest first, optionally filtered by status."""
        query = self.client.table("vendors").select(_COLUMNS)
        if status is not None:
            query = query.eq("status", status.value)
        response = query.order("created_at", desc=True).execute()
        return [row_to_vendor(row) for row in response.data or []]

    def count_by_status(self) -> dict[VendorStatus, int]:
        """Return vendor counts per status."""
        response = self.client.table("vendors").select("status").execute()
        counts = Counter(
            VendorStatus(str(row["status"]).strip().lower())
            for row in response.data or []
        )
        return dict(counts)
