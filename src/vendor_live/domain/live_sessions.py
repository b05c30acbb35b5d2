"""Domain models for vendor live sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class EndedBy(str, Enum):
    """Who closed a live session."""

    VENDOR = "vendor"
    ADMIN = "admin"
    SYSTEM = "system"


@dataclass(frozen=True)
class Coordinates:
    """A geographic point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Bounds:
    """Bounding box used to filter the discovery feed."""

    south: float
    west: float
    north: float
    east: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Return True when the point lies inside the box, edges included."""
        return (
            self.south <= latitude <= self.north
            and self.west <= longitude <= self.east
        )


@dataclass(frozen=True)
class LiveSession:
    """A vendor's geolocated broadcast of availability.

    ``is_active`` is authoritative. ``end_time`` is only an audit timestamp.
    """

    id: UUID
    vendor_id: UUID
    latitude: float
    longitude: float
    address: str | None
    start_time: datetime
    end_time: datetime | None
    auto_end_time: datetime | None
    is_active: bool
    ended_by: EndedBy | None = None
    scheduled_duration_minutes: int | None = None


def is_expired(session: LiveSession, now: datetime) -> bool:
    """Return True when an active session has reached its auto-end deadline."""
    return (
        session.is_active
        and session.auto_end_time is not None
        and now >= session.auto_end_time
    )
