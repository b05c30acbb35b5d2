"""Tests for admin endpoints."""

from uuid import UUID, uuid4

from fastapi.testclient import TestClient

from vendor_live.api.app import create_app
from vendor_live.domain.vendors import VendorStatus

ADMIN_ID = uuid4()
ADMIN_HEADERS = {
    "X-Admin-Token": "admin-token",
    "X-Actor-Id": str(ADMIN_ID),
    "X-Actor-Role": "admin",
}
LOCATION = {"latitude": 37.7749, "longitude": -122.4194}


def test_admin_approve_endpoint(container, database) -> None:
    client = TestClient(create_app(container))
    vendor = database.add_vendor()

    response = client.post(
        f"/admin/vendors/{vendor.id}/approve", headers=ADMIN_HEADERS
    )

    assert response.status_code == 200
    data = response.json()["vendor"]
    assert data["status"] == "approved"
    assert UUID(data["approved_by"]) == ADMIN_ID


def test_admin_reject_endpoint_closes_session(container, database) -> None:
    client = TestClient(create_app(container))
    vendor = database.add_vendor(status=VendorStatus.APPROVED)
    client.post(
        "/vendor/live",
        json=LOCATION,
        headers={"X-Actor-Id": str(vendor.user_id), "X-Actor-Role": "vendor"},
    )

    response = client.post(
        f"/admin/vendors/{vendor.id}/reject",
        json={"reason": "Expired permit"},
        headers=ADMIN_HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["vendor"]["rejection_reason"] == "Expired permit"
    assert data["vendor"]["rejected_by"] == str(ADMIN_ID)
    assert data["closed_session"]["ended_by"] == "admin"
    assert database.active_sessions(vendor.id) == []


def test_admin_reject_requires_reason(container, database) -> None:
    client = TestClient(create_app(container))
    vendor = database.add_vendor()

    response = client.post(
        f"/admin/vendors/{vendor.id}/reject",
        json={"reason": "  "},
        headers=ADMIN_HEADERS,
    )

    assert response.status_code == 400
    assert database.vendors[vendor.id].status is VendorStatus.PENDING


def test_admin_force_start_and_stop(container, database) -> None:
    client = TestClient(create_app(container))
    vendor = database.add_vendor()

    started = client.post(
        f"/admin/vendors/{vendor.id}/live", json=LOCATION, headers=ADMIN_HEADERS
    )
    stopped = client.delete(
        f"/admin/vendors/{vendor.id}/live", headers=ADMIN_HEADERS
    )
    history = client.get(
        f"/admin/vendors/{vendor.id}/sessions", headers=ADMIN_HEADERS
    )

    assert started.status_code == 201
    assert started.json()["session"]["scheduled_duration_minutes"] == 120
    assert stopped.json()["session"]["ended_by"] == "admin"
    assert len(history.json()["sessions"]) == 1


def test_admin_vendor_list_and_stats(container, database) -> None:
    client = TestClient(create_app(container))
    database.add_vendor()
    database.add_vendor(status=VendorStatus.APPROVED)

    listed = client.get(
        "/admin/vendors", params={"status": "pending"}, headers=ADMIN_HEADERS
    )
    stats = client.get("/admin/vendors/stats", headers=ADMIN_HEADERS)

    assert len(listed.json()["vendors"]) == 1
    assert stats.json()["total"] == 2
    assert stats.json()["live"] == 0


def test_admin_routes_reject_non_admin_actor(container, database) -> None:
    client = TestClient(create_app(container))
    vendor = database.add_vendor()

    response = client.post(
        f"/admin/vendors/{vendor.id}/approve",
        headers={**ADMIN_HEADERS, "X-Actor-Role": "vendor"},
    )

    assert response.status_code == 403
    assert response.json()["error"] == "permission_denied"
    assert database.vendors[vendor.id].status is VendorStatus.PENDING
