"""Domain models for vendor approval state."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from vendor_live.domain.live_sessions import LiveSession


class VendorStatus(str, Enum):
    """Approval status of a vendor."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


@dataclass(frozen=True)
class VendorRecord:
    """Represents a vendor's persisted approval state."""

    id: UUID
    user_id: UUID | None
    status: VendorStatus
    rejection_reason: str | None = None
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    rejected_by: UUID | None = None
    rejected_at: datetime | None = None
    business_name: str | None = None


@dataclass(frozen=True)
class VendorRejection:
    """Outcome of a rejection, including any session it force-closed."""

    vendor: VendorRecord
    closed_session: LiveSession | None
