"""Pydantic models for request payloads."""

from pydantic import BaseModel

from vendor_live.domain.live_sessions import Coordinates


class StartLiveSessionRequest(BaseModel):
    """Payload for going live at a location."""

    latitude: float
    longitude: float
    duration_minutes: int | None = None

    def coordinates(self) -> Coordinates:
        """Return the request location as domain coordinates."""
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class ForceStartRequest(StartLiveSessionRequest):
    """Payload for an admin test session."""


class RejectVendorRequest(BaseModel):
    """Payload for rejecting a vendor."""

    reason: str | None = None
