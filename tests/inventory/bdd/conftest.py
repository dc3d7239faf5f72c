"""Shared BDD fixtures and step definitions for the Inventory domain."""

import pytest
from inventory.exceptions import StaleItemError
from inventory.item.item import InventoryItem
from inventory.item.registration import AddInventoryItem
from inventory.item.repository import InventoryItemRepository
from inventory.users.registration import RegisterUser
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


def _item(item_id):
    return current_domain.repository_for(InventoryItem).get(item_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered staff member", target_fixture="staff_id")
def _():
    return current_domain.process(
        RegisterUser(username="stocker", email="stocker@example.com"),
        asynchronous=False,
    )


@given(
    parsers.cfparse("an item with {on_hand:d} units and a minimum stock level of {minimum:d}"),
    target_fixture="item_id",
)
def _(staff_id, on_hand, minimum):
    return current_domain.process(
        AddInventoryItem(
            name="Paper Towels",
            category="Other",
            sku="PT-6",
            quantity=on_hand,
            min_stock_level=minimum,
            price=6.0,
            added_by=staff_id,
        ),
        asynchronous=False,
    )


@given("every write to the item is pre-empted by another request")
def _(monkeypatch):
    monkeypatch.setattr(InventoryItemRepository, "claim_revision", lambda self, item_id, revision: False)


# ---------------------------------------------------------------------------
# Then steps: shared assertions
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the quantity is {qty:d}"))
def _(item_id, qty):
    assert _item(item_id).quantity == qty


@then(parsers.cfparse('the stock status is "{status}"'))
def _(item_id, status):
    assert _item(item_id).stock_status == status


@then(parsers.cfparse("a {event_type} event is recorded"))
def _(item_id, event_type):
    messages = current_domain.event_store.store.read(f"inventory::inventory_item-{item_id}")
    assert any(event_type in message.metadata.headers.type for message in messages)


@then("the item was last updated by the staff member")
def _(item_id, staff_id):
    assert _item(item_id).last_updated_by == staff_id


@then("the adjustment fails with a validation error")
def _(outcome):
    assert isinstance(outcome, ValidationError)


@then("the adjustment fails with a conflict")
def _(outcome):
    assert isinstance(outcome, StaleItemError)


@pytest.fixture()
def outcome():
    return None
