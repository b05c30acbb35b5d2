"""Reverse-geocoding client backed by the Mapbox places API."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from vendor_live.errors import UpstreamUnavailable


class Geocoder(Protocol):
    """Interface for resolving coordinates to a street address."""

    async def resolve_address(self, latitude: float, longitude: float) -> str | None:
        """Return a human-readable address, or None when nothing matches."""


@dataclass
class MapboxGeocoder(Geocoder):
    """HTTPX-backed Mapbox reverse geocoder."""

    access_token: str | None
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 3.0

    @classmethod
    def create(
        cls, access_token: str | None, base_url: str, timeout_seconds: float = 3.0
    ) -> "MapboxGeocoder":
        """Create a geocoder with a managed httpx session."""
        return cls(
            access_token=access_token,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def resolve_address(self, latitude: float, longitude: float) -> str | None:
        """Look up the nearest place name for the coordinates."""
        if not self.access_token:
            return None
        url = f"{self.base_url}/{longitude},{latitude}.json"
        try:
            response = await self.http_client.get(
                url,
                params={"access_token": self.access_token, "limit": 1},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"Geocoder request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailable("Geocoder returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise UpstreamUnavailable("Geocoder returned an unexpected payload")
        features = payload.get("features") or []
        if not isinstance(features, list):
            raise UpstreamUnavailable("Geocoder returned malformed features")
        if not features:
            return None
        if not isinstance(features[0], dict):
            raise UpstreamUnavailable("Geocoder returned a malformed feature")
        place_name = features[0].get("place_name")
        return place_name if isinstance(place_name, str) and place_name else None

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
