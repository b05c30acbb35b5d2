"""Supabase repository for audit events."""

from dataclasses import dataclass

from supabase import Client

from vendor_live.domain.audit import AuditEntry
from vendor_live.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed append-only audit sink."""

    client: Client

    def create_entry(self, entry: AuditEntry) -> None:
        """Insert an audit event row."""
        self.client.table("audit_events").insert(
            {
                "actor_id": str(entry.actor_id),
                "action": entry.action,
                "target_type": entry.target_type,
                "target_id": str(entry.target_id),
                "before_json": entry.before,
                "after_json": entry.after,
                "created_at": entry.occurred_at.isoformat(),
            }
        ).execute()
