"""Shared test fixtures."""

import asyncio
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from vendor_live.adapters.geocoder import Geocoder
from vendor_live.config import Settings
from vendor_live.containers import AppContainer
from vendor_live.domain.actors import Actor, Role
from vendor_live.domain.audit import AuditEntry
from vendor_live.domain.live_sessions import Coordinates, EndedBy, LiveSession
from vendor_live.domain.vendors import VendorRecord, VendorRejection, VendorStatus
from vendor_live.errors import Conflict, UpstreamUnavailable
from vendor_live.services.admin import AdminService
from vendor_live.services.audit import AuditRepository, AuditService
from vendor_live.services.live_sessions import LiveSessionRepository, LiveSessionService
from vendor_live.services.vendor_status import VendorRepository, VendorStatusService

START = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
MARKET_STREET = Coordinates(latitude=37.7749, longitude=-122.4194)


@dataclass
class FrozenClock:
    """Deterministic clock that only moves when told to."""

    now: datetime = START

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class InMemoryDatabase:
    """Shared tables with the constraints the real schema enforces."""

    vendors: dict[UUID, VendorRecord] = field(default_factory=dict)
    sessions: dict[UUID, LiveSession] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)
    fail_session_close: bool = False

    def add_vendor(
        self,
        status: VendorStatus = VendorStatus.PENDING,
        user_id: UUID | None = None,
        rejection_reason: str | None = None,
    ) -> VendorRecord:
        vendor = VendorRecord(
            id=uuid4(),
            user_id=user_id or uuid4(),
            status=status,
            rejection_reason=rejection_reason,
            business_name="Taco Truck",
        )
        self.vendors[vendor.id] = vendor
        return vendor

    def active_sessions(self, vendor_id: UUID) -> list[LiveSession]:
        return [
            session
            for session in self.sessions.values()
            if session.vendor_id == vendor_id and session.is_active
        ]


@dataclass
class InMemoryVendorRepository(VendorRepository):
    """In-memory vendor repository for tests."""

    database: InMemoryDatabase

    def get_vendor(self, vendor_id: UUID) -> VendorRecord | None:
        return self.database.vendors.get(vendor_id)

    def get_vendor_by_user(self, user_id: UUID) -> VendorRecord | None:
        for vendor in self.database.vendors.values():
            if vendor.user_id == user_id:
                return vendor
        return None

    def approve_vendor(
        self,
        vendor_id: UUID,
        expected_status: VendorStatus,
        approved_by: UUID,
        approved_at: datetime,
    ) -> VendorRecord | None:
        with self.database.lock:
            vendor = self.database.vendors.get(vendor_id)
            if vendor is None or vendor.status is not expected_status:
                return None
            updated = replace(
                vendor,
                status=VendorStatus.APPROVED,
                rejection_reason=None,
                approved_by=approved_by,
                approved_at=approved_at,
                rejected_by=None,
                rejected_at=None,
            )
            self.database.vendors[vendor_id] = updated
            return updated

    def reject_vendor(
        self,
        vendor_id: UUID,
        expected_status: VendorStatus,
        reason: str,
        rejected_by: UUID,
        rejected_at: datetime,
    ) -> VendorRejection | None:
        with self.database.lock:
            vendor = self.database.vendors.get(vendor_id)
            if vendor is None or vendor.status is not expected_status:
                return None
            active = self.database.active_sessions(vendor_id)
            if active and self.database.fail_session_close:
                raise RuntimeError("Failed to close live session")
            updated = replace(
                vendor,
                status=VendorStatus.REJECTED,
                rejection_reason=reason,
                approved_by=None,
                approved_at=None,
                rejected_by=rejected_by,
                rejected_at=rejected_at,
            )
            closed = None
            for session in active:
                closed = replace(
                    session,
                    is_active=False,
                    end_time=rejected_at,
                    ended_by=EndedBy.ADMIN,
                )
                self.database.sessions[session.id] = closed
            self.database.vendors[vendor_id] = updated
            return VendorRejection(vendor=updated, closed_session=closed)

    def list_vendors(self, status: VendorStatus | None) -> list[VendorRecord]:
        return [
            vendor
            for vendor in self.database.vendors.values()
            if status is None or vendor.status is status
        ]

    def count_by_status(self) -> dict[VendorStatus, int]:
        counts: dict[VendorStatus, int] = {}
        for vendor in self.database.vendors.values():
            counts[vendor.status] = counts.get(vendor.status, 0) + 1
        return counts


@dataclass
class InMemoryLiveSessionRepository(LiveSessionRepository):
    """In-memory live session repository enforcing one active row per vendor."""

    database: InMemoryDatabase

    def get_active_session(self, vendor_id: UUID) -> LiveSession | None:
        active = self.database.active_sessions(vendor_id)
        return active[0] if active else None

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
        with self.database.lock:
            vendor = self.database.vendors.get(vendor_id)
            if vendor is None:
                return None
            if allowed_statuses and vendor.status not in allowed_statuses:
                return None
            if self.database.active_sessions(vendor_id):
                raise Conflict("duplicate key value violates unique constraint")
            session = LiveSession(
                id=uuid4(),
                vendor_id=vendor_id,
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
                address=address,
                start_time=start_time,
                end_time=None,
                auto_end_time=auto_end_time,
                is_active=True,
                scheduled_duration_minutes=scheduled_duration_minutes,
            )
            self.database.sessions[session.id] = session
            return session

    def close_session(
        self, session_id: UUID, ended_by: EndedBy, ended_at: datetime
    ) -> LiveSession | None:
        with self.database.lock:
            session = self.database.sessions.get(session_id)
            if session is None or not session.is_active:
                return None
            closed = replace(
                session, is_active=False, end_time=ended_at, ended_by=ended_by
            )
            self.database.sessions[session_id] = closed
            return closed

    def list_active_sessions(self) -> list[LiveSession]:
        return [
            session for session in self.database.sessions.values() if session.is_active
        ]

    def list_sessions(self, vendor_id: UUID, limit: int) -> list[LiveSession]:
        sessions = [
            session
            for session in self.database.sessions.values()
            if session.vendor_id == vendor_id
        ]
        return sorted(sessions, key=lambda session: session.start_time, reverse=True)[
            :limit
        ]


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit sink for tests."""

    entries: list[AuditEntry] = field(default_factory=list)

    def create_entry(self, entry: AuditEntry) -> None:
        self.entries.append(entry)


@dataclass
class FakeGeocoder(Geocoder):
    """Geocoder returning a fixed address."""

    address: str | None = "Market St, San Francisco, California"
    calls: list[tuple[float, float]] = field(default_factory=list)

    async def resolve_address(self, latitude: float, longitude: float) -> str | None:
        self.calls.append((latitude, longitude))
        await asyncio.sleep(0)
        return self.address


class FailingGeocoder(Geocoder):
    """Geocoder whose upstream is down."""

    async def resolve_address(self, latitude: float, longitude: float) -> str | None:
        raise UpstreamUnavailable("geocoder returned 502")


class SlowGeocoder(Geocoder):
    """Geocoder that never answers within the timeout."""

    async def resolve_address(self, latitude: float, longitude: float) -> str | None:
        await asyncio.sleep(5)
        return "too late"


def build_services(
    database: InMemoryDatabase,
    clock: FrozenClock,
    geocoder: Geocoder | None = None,
    approval_required: bool = True,
) -> tuple[VendorStatusService, LiveSessionService, AdminService]:
    """Wire services against the in-memory database."""
    vendor_status_service = VendorStatusService(
        InMemoryVendorRepository(database), clock=clock
    )
    live_session_service = LiveSessionService(
        repository=InMemoryLiveSessionRepository(database),
        vendor_status_service=vendor_status_service,
        geocoder=geocoder or FakeGeocoder(),
        approval_required=approval_required,
        geocode_timeout_seconds=0.05,
        clock=clock,
    )
    admin_service = AdminService(
        vendor_status_service=vendor_status_service,
        live_session_service=live_session_service,
        audit_service=AuditService(InMemoryAuditRepository(), clock=clock),
    )
    return vendor_status_service, live_session_service, admin_service


def make_actor(role: Role, actor_id: UUID | None = None) -> Actor:
    return Actor(id=actor_id or uuid4(), role=role)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        admin_token="admin-token",
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def admin() -> Actor:
    return make_actor(Role.ADMIN)


@pytest.fixture
def container(
    settings: Settings,
    database: InMemoryDatabase,
    clock: FrozenClock,
    geocoder: FakeGeocoder,
) -> AppContainer:
    vendor_status_service, live_session_service, admin_service = build_services(
        database, clock, geocoder
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        geocoder=geocoder,
        vendor_status_service=vendor_status_service,
        live_session_service=live_session_service,
        audit_service=admin_service.audit_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
