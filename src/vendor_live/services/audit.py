"""Audit logging service."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from vendor_live.domain.actors import Actor
from vendor_live.domain.audit import AuditEntry


class AuditRepository(Protocol):
    """Append-only sink for audit entries."""

    def create_entry(self, entry: AuditEntry) -> None:
        """Persist an audit entry."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AuditService:
    """Service for recording privileged actions."""

    repository: AuditRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def record(  # noqa: PLR0913
        self,
        actor: Actor,
        action: str,
        target_type: str,
        target_id: UUID,
        before: dict[str, object] | None = None,
        after: dict[str, object] | None = None,
    ) -> AuditEntry:
        """Append an audit entry and return it."""
        entry = AuditEntry(
            actor_id=actor.id,
            action=action,
            target_type=target_type,
            target_id=target_id,
            occurred_at=self.clock(),
            before=before,
            after=after,
        )
        self.repository.create_entry(entry)
        return entry
