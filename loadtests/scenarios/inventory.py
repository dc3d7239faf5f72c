"""Inventory load test scenarios.

Two workloads: a stateful SequentialTaskSet journey through the full item
lifecycle, and a contention user that concentrates stock adjustments on a
handful of shared items to exercise the revision compare-and-swap.
"""

import random
import threading

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import item_data, stock_adjustment, user_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import InventoryState, StaffState

API = "/api"


def register_staff(client, role: str = "user") -> StaffState:
    """Register a staff member and return its state, or an empty state on failure."""
    staff = StaffState(role=role)
    with client.post(
        f"{API}/users",
        json=user_data(role=role),
        catch_response=True,
        name="POST /users",
    ) as resp:
        if resp.status_code == 201:
            staff.user_id = resp.json()["data"]["user"]["id"]
        else:
            resp.failure(f"Register user failed: {resp.status_code} — {extract_error_detail(resp)}")
    return staff


class ItemLifecycleJourney(SequentialTaskSet):
    """Create -> Read -> Edit -> Restock -> Sell -> Count -> Alerts -> Delete.

    Models a store clerk adding a new product, adjusting its stock as
    deliveries and sales happen, and finally retiring it.
    """

    def on_start(self):
        self.staff = register_staff(self.client)
        self.state = InventoryState()
        if not self.staff.user_id:
            self.interrupt()

    @task
    def create_item(self):
        payload = item_data(quantity=50, min_stock_level=10)
        with self.client.post(
            f"{API}/inventory",
            json=payload,
            headers=self.staff.headers,
            catch_response=True,
            name="POST /inventory",
        ) as resp:
            if resp.status_code == 201:
                item = resp.json()["data"]["inventory_item"]
                self.state.item_id = item["id"]
                self.state.sku = item["sku"]
                self.state.expected_quantity = item["quantity"]
            else:
                resp.failure(f"Create item failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def get_item(self):
        with self.client.get(
            f"{API}/inventory/{self.state.item_id}",
            headers=self.staff.headers,
            catch_response=True,
            name="GET /inventory/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def update_item(self):
        with self.client.put(
            f"{API}/inventory/{self.state.item_id}",
            json={"price": round(random.uniform(1, 500), 2), "description": "Repriced during load test"},
            headers=self.staff.headers,
            catch_response=True,
            name="PUT /inventory/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def restock(self):
        self._adjust("add", random.randint(10, 50))

    @task
    def sell(self):
        self._adjust("subtract", random.randint(1, 80))

    @task
    def stock_count(self):
        self._adjust("set", random.randint(0, 20))

    @task
    def low_stock_alerts(self):
        with self.client.get(
            f"{API}/inventory/alerts/low-stock",
            headers=self.staff.headers,
            catch_response=True,
            name="GET /inventory/alerts/low-stock",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Low stock alerts failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def delete_item(self):
        with self.client.delete(
            f"{API}/inventory/{self.state.item_id}",
            headers=self.staff.headers,
            catch_response=True,
            name="DELETE /inventory/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Delete item failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()

    def _adjust(self, operation: str, quantity: int):
        with self.client.patch(
            f"{API}/inventory/{self.state.item_id}/stock",
            json={"operation": operation, "quantity": quantity},
            headers=self.staff.headers,
            catch_response=True,
            name="PATCH /inventory/{id}/stock",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Adjust stock failed: {resp.status_code} — {extract_error_detail(resp)}")
                return
            new_quantity = resp.json()["data"]["inventory_item"]["quantity"]
            if new_quantity < 0:
                resp.failure(f"Negative quantity returned: {new_quantity}")
            self.state.expected_quantity = new_quantity


class InventoryUser(HttpUser):
    """A clerk walking items through their full lifecycle."""

    tasks = [ItemLifecycleJourney]
    wait_time = between(0.5, 2)


class StockContentionUser(HttpUser):
    """Many users adjusting the same few items at once.

    409 responses are the expected outcome of losing the compare-and-swap
    race repeatedly and are counted as successes; any negative quantity or
    other error is a failure.
    """

    wait_time = between(0.05, 0.3)

    _shared_item_ids: list[str] = []
    _lock = threading.Lock()
    SHARED_ITEMS = 3

    def on_start(self):
        self.staff = register_staff(self.client)
        with self._lock:
            while len(self._shared_item_ids) < self.SHARED_ITEMS:
                item_id = self._create_shared_item()
                if item_id is None:
                    break
                self._shared_item_ids.append(item_id)

    def _create_shared_item(self):
        with self.client.post(
            f"{API}/inventory",
            json=item_data(quantity=100, min_stock_level=10),
            headers=self.staff.headers,
            catch_response=True,
            name="POST /inventory (shared)",
        ) as resp:
            if resp.status_code == 201:
                return resp.json()["data"]["inventory_item"]["id"]
            resp.failure(f"Create shared item failed: {resp.status_code} — {extract_error_detail(resp)}")
            return None

    @task(10)
    def adjust_shared_stock(self):
        if not self._shared_item_ids or not self.staff.user_id:
            return
        item_id = random.choice(self._shared_item_ids)
        with self.client.patch(
            f"{API}/inventory/{item_id}/stock",
            json=stock_adjustment(),
            headers=self.staff.headers,
            catch_response=True,
            name="PATCH /inventory/{id}/stock (contended)",
        ) as resp:
            if resp.status_code == 409:
                resp.success()
            elif resp.status_code != 200:
                resp.failure(f"Contended adjust failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif resp.json()["data"]["inventory_item"]["quantity"] < 0:
                resp.failure("Negative quantity returned under contention")

    @task(2)
    def list_inventory(self):
        with self.client.get(
            f"{API}/inventory",
            params={"page": 1, "limit": 20},
            headers=self.staff.headers,
            catch_response=True,
            name="GET /inventory",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List inventory failed: {resp.status_code} — {extract_error_detail(resp)}")
