"""Actor identity supplied by the authentication layer."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from vendor_live.errors import PermissionDenied


class Role(str, Enum):
    """Role claim carried by the current actor."""

    CUSTOMER = "customer"
    VENDOR = "vendor"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of an operation."""

    id: UUID
    role: Role


def require_role(actor: Actor, role: Role) -> None:
    """Raise PermissionDenied unless the actor holds the given role."""
    if actor.role is not role:
        raise PermissionDenied(f"Operation requires the {role.value} role")
