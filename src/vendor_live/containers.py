"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from vendor_live.adapters.geocoder import Geocoder, MapboxGeocoder
from vendor_live.adapters.supabase_audit_repository import SupabaseAuditRepository
from vendor_live.adapters.supabase_live_session_repository import (
    SupabaseLiveSessionRepository,
)
from vendor_live.adapters.supabase_vendor_repository import SupabaseVendorRepository
from vendor_live.config import Settings, resolve_approval_required
from vendor_live.services.admin import AdminService
from vendor_live.services.audit import AuditService
from vendor_live.services.live_sessions import LiveSessionService
from vendor_live.services.vendor_status import VendorStatusService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    geocoder: Geocoder
    vendor_status_service: VendorStatusService
    live_session_service: LiveSessionService
    audit_service: AuditService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    vendor_repository = SupabaseVendorRepository(supabase_client)
    live_session_repository = SupabaseLiveSessionRepository(supabase_client)
    audit_repository = SupabaseAuditRepository(supabase_client)
    geocoder = MapboxGeocoder.create(
        access_token=resolved_settings.mapbox_access_token,
        base_url=resolved_settings.mapbox_base_url,
        timeout_seconds=resolved_settings.geocoder_timeout_seconds,
    )
    vendor_status_service = VendorStatusService(vendor_repository)
    live_session_service = LiveSessionService(
        repository=live_session_repository,
        vendor_status_service=vendor_status_service,
        geocoder=geocoder,
        approval_required=resolve_approval_required(resolved_settings),
        geocode_timeout_seconds=resolved_settings.geocoder_timeout_seconds,
        max_duration_minutes=resolved_settings.max_session_duration_minutes,
    )
    audit_service = AuditService(audit_repository)
    admin_service = AdminService(
        vendor_status_service=vendor_status_service,
        live_session_service=live_session_service,
        audit_service=audit_service,
        force_start_duration_minutes=resolved_settings.force_start_duration_minutes,
    )

    async def close_resources() -> None:
        await geocoder.close()

    return AppContainer(
        settings=resolved_settings,
        geocoder=geocoder,
        vendor_status_service=vendor_status_service,
        live_session_service=live_session_service,
        audit_service=audit_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
