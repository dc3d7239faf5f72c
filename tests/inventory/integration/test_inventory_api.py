"""Integration tests for Inventory API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from inventory.api import inventory_router, register_exception_handlers, user_router
from inventory.item.item import InventoryItem
from protean import current_domain

MISSING_ID = "9f0e5a4c-3b1d-4c8e-a2f7-6d5b4c3a2e10"


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(inventory_router)
    app.include_router(user_router)
    register_exception_handlers(app)
    return TestClient(app)


def _register(client, username="owner", role="user"):
    response = client.post(
        "/users",
        json={"username": username, "email": f"{username}@example.com", "role": role},
    )
    assert response.status_code == 201
    return response.json()["data"]["user"]["id"]


def _headers(user_id):
    return {"X-User-Id": user_id}


def _create_item(client, user_id, **overrides):
    """Helper: POST /inventory and return the created item."""
    defaults = {
        "name": "Wireless Mouse",
        "category": "Electronics",
        "sku": "wm-001",
        "quantity": 10,
        "min_stock_level": 5,
        "price": 19.99,
    }
    defaults.update(overrides)
    response = client.post("/inventory", json=defaults, headers=_headers(user_id))
    assert response.status_code == 201
    return response.json()["data"]["inventory_item"]


@pytest.fixture()
def owner_id(client):
    return _register(client, "owner")


class TestCreateItemEndpoint:
    def test_create_item(self, client, owner_id):
        item = _create_item(client, owner_id)
        assert item["sku"] == "WM-001"
        assert item["stock_status"] == "in_stock"
        assert item["added_by"]["id"] == owner_id
        assert item["added_by"]["username"] == "owner"

        stored = current_domain.repository_for(InventoryItem).get(item["id"])
        assert stored.quantity == 10

    def test_response_format(self, client, owner_id):
        response = client.post(
            "/inventory",
            json={"name": "Desk", "category": "Furniture", "sku": "DESK-1"},
            headers=_headers(owner_id),
        )
        body = response.json()
        assert response.status_code == 201
        assert body["status"] == "success"
        assert body["message"] == "Inventory item created successfully"
        assert body["data"]["inventory_item"]["quantity"] == 0
        assert body["data"]["inventory_item"]["min_stock_level"] == 10

    def test_duplicate_sku(self, client, owner_id):
        _create_item(client, owner_id, sku="DUP-1")
        response = client.post(
            "/inventory",
            json={"name": "Again", "category": "Other", "sku": "dup-1"},
            headers=_headers(owner_id),
        )
        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": "SKU already exists"}

    def test_invalid_category(self, client, owner_id):
        response = client.post(
            "/inventory",
            json={"name": "Toy", "category": "Toys", "sku": "TOY-1"},
            headers=_headers(owner_id),
        )
        assert response.status_code == 400
        assert response.json()["status"] == "error"

    def test_missing_name(self, client, owner_id):
        response = client.post(
            "/inventory",
            json={"category": "Other", "sku": "NONAME"},
            headers=_headers(owner_id),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"
        assert any(error["field"] == "name" for error in response.json()["errors"])

    def test_requires_identity(self, client):
        response = client.post("/inventory", json={"name": "X", "category": "Other", "sku": "X-1"})
        assert response.status_code == 401
        assert response.json()["status"] == "error"

    def test_unknown_identity(self, client):
        response = client.post(
            "/inventory",
            json={"name": "X", "category": "Other", "sku": "X-1"},
            headers=_headers(MISSING_ID),
        )
        assert response.status_code == 401


class TestListItemsEndpoint:
    def test_pagination(self, client, owner_id):
        for index in range(3):
            _create_item(client, owner_id, sku=f"PG-{index}")

        response = client.get("/inventory?page=2&limit=2", headers=_headers(owner_id))
        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["inventory_items"]) == 1
        assert data["pagination"] == {
            "current_page": 2,
            "total_pages": 2,
            "total_items": 3,
            "items_per_page": 2,
        }

    def test_default_page_size(self, client, owner_id):
        response = client.get("/inventory", headers=_headers(owner_id))
        assert response.json()["data"]["pagination"]["items_per_page"] == 10

    def test_filters(self, client, owner_id):
        _create_item(client, owner_id, sku="BK-1", category="Books", name="Field Guide")
        _create_item(client, owner_id, sku="FD-1", category="Food", name="Granola")

        response = client.get("/inventory?category=Books", headers=_headers(owner_id))
        assert [item["sku"] for item in response.json()["data"]["inventory_items"]] == ["BK-1"]

        response = client.get("/inventory?search=granola", headers=_headers(owner_id))
        assert [item["sku"] for item in response.json()["data"]["inventory_items"]] == ["FD-1"]

    def test_status_filter(self, client, owner_id):
        _create_item(client, owner_id, sku="AC-1")
        _create_item(client, owner_id, sku="DC-1", status="discontinued")

        response = client.get("/inventory?status=discontinued", headers=_headers(owner_id))
        assert [item["sku"] for item in response.json()["data"]["inventory_items"]] == ["DC-1"]

    def test_unknown_category_rejected(self, client, owner_id):
        response = client.get("/inventory?category=Bogus", headers=_headers(owner_id))
        assert response.status_code == 400
        assert response.json()["status"] == "error"
        assert response.json()["errors"][0]["field"] == "category"

    def test_unknown_status_rejected(self, client, owner_id):
        response = client.get("/inventory?status=gone", headers=_headers(owner_id))
        assert response.status_code == 400
        assert response.json()["status"] == "error"
        assert response.json()["errors"][0]["field"] == "status"

    def test_limit_above_maximum(self, client, owner_id):
        response = client.get("/inventory?limit=101", headers=_headers(owner_id))
        assert response.status_code == 400

    def test_page_must_be_positive(self, client, owner_id):
        response = client.get("/inventory?page=0", headers=_headers(owner_id))
        assert response.status_code == 400


class TestGetItemEndpoint:
    def test_get_item(self, client, owner_id):
        item = _create_item(client, owner_id)
        response = client.get(f"/inventory/{item['id']}", headers=_headers(owner_id))
        assert response.status_code == 200
        assert response.json()["data"]["inventory_item"]["name"] == "Wireless Mouse"

    def test_not_found(self, client, owner_id):
        response = client.get(f"/inventory/{MISSING_ID}", headers=_headers(owner_id))
        assert response.status_code == 404
        assert response.json() == {"status": "error", "message": "Inventory item not found"}

    def test_malformed_id(self, client, owner_id):
        response = client.get("/inventory/not-a-uuid", headers=_headers(owner_id))
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid inventory item ID"


class TestUpdateItemEndpoint:
    def test_owner_updates(self, client, owner_id):
        item = _create_item(client, owner_id)
        response = client.put(
            f"/inventory/{item['id']}",
            json={"price": 24.5, "location": {"warehouse": "Main", "aisle": "A1"}},
            headers=_headers(owner_id),
        )
        assert response.status_code == 200
        updated = response.json()["data"]["inventory_item"]
        assert updated["price"] == 24.5
        assert updated["location"]["warehouse"] == "Main"
        assert updated["name"] == "Wireless Mouse"
        assert updated["revision"] == 1

    def test_other_user_forbidden(self, client, owner_id):
        item = _create_item(client, owner_id)
        other_id = _register(client, "other")
        response = client.put(f"/inventory/{item['id']}", json={"price": 1.0}, headers=_headers(other_id))
        assert response.status_code == 403
        assert "Access denied" in response.json()["message"]

    def test_admin_allowed(self, client, owner_id):
        item = _create_item(client, owner_id)
        admin_id = _register(client, "admin", role="admin")
        response = client.put(f"/inventory/{item['id']}", json={"price": 1.0}, headers=_headers(admin_id))
        assert response.status_code == 200
        assert response.json()["data"]["inventory_item"]["last_updated_by"]["username"] == "admin"

    def test_empty_body_rejected(self, client, owner_id):
        item = _create_item(client, owner_id)
        response = client.put(f"/inventory/{item['id']}", json={}, headers=_headers(owner_id))
        assert response.status_code == 400

    def test_not_found(self, client, owner_id):
        response = client.put(f"/inventory/{MISSING_ID}", json={"price": 1.0}, headers=_headers(owner_id))
        assert response.status_code == 404


class TestDeleteItemEndpoint:
    def test_owner_deletes(self, client, owner_id):
        item = _create_item(client, owner_id)
        response = client.delete(f"/inventory/{item['id']}", headers=_headers(owner_id))
        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Inventory item deleted successfully"}

        response = client.get(f"/inventory/{item['id']}", headers=_headers(owner_id))
        assert response.status_code == 404

    def test_other_user_forbidden(self, client, owner_id):
        item = _create_item(client, owner_id)
        other_id = _register(client, "other")
        response = client.delete(f"/inventory/{item['id']}", headers=_headers(other_id))
        assert response.status_code == 403


class TestLowStockEndpoint:
    def test_low_stock_alerts(self, client, owner_id):
        _create_item(client, owner_id, sku="LOW-3", quantity=3, min_stock_level=5)
        _create_item(client, owner_id, sku="LOW-0", quantity=0, min_stock_level=5)
        _create_item(client, owner_id, sku="PLENTY", quantity=50, min_stock_level=5)

        response = client.get("/inventory/alerts/low-stock", headers=_headers(owner_id))
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["count"] == 2
        assert [item["sku"] for item in data["low_stock_items"]] == ["LOW-0", "LOW-3"]
        assert data["low_stock_items"][0]["stock_status"] == "out_of_stock"
