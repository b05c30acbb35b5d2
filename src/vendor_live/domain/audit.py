"""Audit domain models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class AuditEntry:
    """A single append-only record of a privileged action."""

    actor_id: UUID
    action: str
    target_type: str
    target_id: UUID
    occurred_at: datetime
    before: dict[str, object] | None = None
    after: dict[str, object] | None = None
