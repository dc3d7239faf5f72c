"""InventoryItem aggregate (CQRS) — the core of the inventory domain.

An InventoryItem is one stocked product: its descriptive fields, pricing,
supplier and storage location, and its on-hand quantity. Quantities never go
negative. Every persisted mutation stamps the acting user as
``last_updated_by`` and bumps ``revision``, which the repository uses as a
compare-and-swap token so that concurrent writers cannot silently overwrite
each other.

Stock status is derived, never stored:
    out_of_stock: quantity is zero
    low_stock:    quantity at or below min_stock_level
    in_stock:     anything above
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, ValueObject

from inventory.domain import inventory
from inventory.exceptions import AccessDeniedError
from inventory.item.events import ItemAdded, ItemDetailsUpdated, ItemRemoved, LowStockDetected, StockAdjusted

SKU_PATTERN = re.compile(r"^[A-Z0-9-]+$")
_EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
_PHONE_PATTERN = re.compile(r"^[\d\s\-+()]+$")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class Category(Enum):
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    FOOD = "Food"
    BOOKS = "Books"
    FURNITURE = "Furniture"
    SPORTS = "Sports"
    OTHER = "Other"


class ItemStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"


class StockStatus(Enum):
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


class StockOperation(Enum):
    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"


# ---------------------------------------------------------------------------
# Stock arithmetic
# ---------------------------------------------------------------------------
def compute_new_quantity(current, quantity, operation=StockOperation.SET.value):
    """Return the quantity an item holds after applying ``operation``.

    ``set`` replaces the current quantity, ``add`` increases it, and
    ``subtract`` decreases it but never below zero: over-subtraction is
    absorbed rather than rejected.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        raise ValidationError({"quantity": ["Quantity must be a non-negative integer"]})

    try:
        mode = StockOperation(operation or StockOperation.SET.value)
    except ValueError:
        raise ValidationError({"operation": ["Operation must be set, add, or subtract"]}) from None

    if mode == StockOperation.SET:
        return quantity
    if mode == StockOperation.ADD:
        return current + quantity
    return max(0, current - quantity)


def stock_status_for(quantity, min_stock_level):
    """Classify a quantity against its minimum stock level."""
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK.value
    if quantity <= min_stock_level:
        return StockStatus.LOW_STOCK.value
    return StockStatus.IN_STOCK.value


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@inventory.value_object(part_of="InventoryItem")
class Supplier:
    """Who the item is sourced from."""

    name: String(max_length=100)
    email: String(max_length=254)
    phone: String(max_length=30)

    @invariant.post
    def contact_details_must_be_valid(self):
        if self.email and not _EMAIL_PATTERN.match(self.email):
            raise ValidationError({"supplier_email": ["Please enter a valid supplier email"]})
        if self.phone and not _PHONE_PATTERN.match(self.phone):
            raise ValidationError({"supplier_phone": ["Please enter a valid phone number"]})


@inventory.value_object(part_of="InventoryItem")
class Location:
    """Where the item is stored."""

    warehouse: String(max_length=50)
    aisle: String(max_length=20)
    shelf: String(max_length=20)


def _clean(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def build_supplier(data):
    """Build a Supplier from a plain mapping, or None when nothing is given."""
    if not data:
        return None
    values = {key: _clean(data.get(key)) for key in ("name", "email", "phone")}
    if values["email"]:
        values["email"] = values["email"].lower()
    if not any(values.values()):
        return None
    return Supplier(**values)


def build_location(data):
    """Build a Location from a plain mapping, or None when nothing is given."""
    if not data:
        return None
    values = {key: _clean(data.get(key)) for key in ("warehouse", "aisle", "shelf")}
    if not any(values.values()):
        return None
    return Location(**values)


def normalize_sku(sku):
    return sku.strip().upper() if isinstance(sku, str) else sku


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@inventory.aggregate
class InventoryItem:
    """A stocked product and its on-hand quantity."""

    name: String(required=True, max_length=100)
    description: String(max_length=500, default="")
    category: String(required=True, choices=Category)
    sku: String(required=True, unique=True, max_length=50)
    quantity: Integer(default=0, min_value=0)
    min_stock_level: Integer(default=10, min_value=0)
    price: Float(default=0.0, min_value=0.0)
    supplier: ValueObject(Supplier)
    location: ValueObject(Location)
    status: String(choices=ItemStatus, default=ItemStatus.ACTIVE.value)

    # Audit
    added_by: Identifier(required=True)
    last_updated_by: Identifier()
    revision: Integer(default=0, min_value=0)
    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        category,
        sku,
        added_by,
        quantity=0,
        min_stock_level=10,
        price=0.0,
        description=None,
        supplier=None,
        location=None,
        status=None,
    ):
        now = datetime.now(UTC)
        item = cls(
            name=_clean(name),
            description=_clean(description) or "",
            category=category,
            sku=normalize_sku(sku),
            quantity=quantity,
            min_stock_level=min_stock_level,
            price=price,
            supplier=build_supplier(supplier),
            location=build_location(location),
            status=status or ItemStatus.ACTIVE.value,
            added_by=str(added_by),
            last_updated_by=str(added_by),
            revision=0,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            ItemAdded(
                item_id=str(item.id),
                sku=item.sku,
                name=item.name,
                category=item.category,
                quantity=item.quantity,
                min_stock_level=item.min_stock_level,
                added_by=str(added_by),
                added_at=now,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def stock_status(self):
        return stock_status_for(self.quantity or 0, self.min_stock_level or 0)

    # -------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------
    def is_editable_by(self, user):
        return user.is_admin or str(self.added_by) == str(user.id)

    def ensure_editable_by(self, user, action="edit"):
        if not self.is_editable_by(user):
            raise AccessDeniedError(f"Access denied. You can only {action} items you added or if you are an admin.")

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def _touch(self, modified_by, at):
        self.last_updated_by = str(modified_by)
        self.updated_at = at
        self.revision = (self.revision or 0) + 1

    def update_details(self, changes, updated_by):
        """Apply a partial update.

        ``changes`` holds only the fields the caller supplied. Supplier and
        location are replaced as a whole.
        """
        if not changes:
            raise ValidationError({"item": ["At least one field must be provided"]})

        for field_name, value in changes.items():
            if field_name == "supplier":
                self.supplier = build_supplier(value)
            elif field_name == "location":
                self.location = build_location(value)
            elif field_name == "sku":
                self.sku = normalize_sku(value)
            elif field_name == "description":
                self.description = _clean(value) or ""
            elif field_name == "name":
                self.name = _clean(value)
            elif field_name in ("category", "quantity", "min_stock_level", "price", "status"):
                setattr(self, field_name, value)
            else:
                raise ValidationError({field_name: ["Unknown field"]})

        now = datetime.now(UTC)
        self._touch(updated_by, now)

        self.raise_(
            ItemDetailsUpdated(
                item_id=str(self.id),
                changed_fields=json.dumps(sorted(changes)),
                updated_by=str(updated_by),
                updated_at=now,
            )
        )

    def adjust_stock(self, quantity, operation, adjusted_by):
        """Set, increase or decrease the on-hand quantity."""
        operation = operation or StockOperation.SET.value
        previous = self.quantity or 0
        new_quantity = compute_new_quantity(previous, quantity, operation)

        self.quantity = new_quantity
        now = datetime.now(UTC)
        self._touch(adjusted_by, now)

        self.raise_(
            StockAdjusted(
                item_id=str(self.id),
                sku=self.sku,
                operation=operation,
                requested_quantity=quantity,
                previous_quantity=previous,
                new_quantity=new_quantity,
                adjusted_by=str(adjusted_by),
                adjusted_at=now,
            )
        )

        status = self.stock_status
        if status != StockStatus.IN_STOCK.value:
            self.raise_(
                LowStockDetected(
                    item_id=str(self.id),
                    sku=self.sku,
                    quantity=new_quantity,
                    min_stock_level=self.min_stock_level,
                    stock_status=status,
                    detected_at=now,
                )
            )
        return new_quantity

    def mark_removed(self, removed_by):
        """Record that the item is leaving the inventory."""
        self.raise_(
            ItemRemoved(
                item_id=str(self.id),
                sku=self.sku,
                removed_by=str(removed_by),
                removed_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def name_must_not_be_blank(self):
        if self.name is not None and not self.name.strip():
            raise ValidationError({"name": ["Product name is required"]})

    @invariant.post
    def sku_must_use_allowed_characters(self):
        if self.sku and not SKU_PATTERN.match(self.sku):
            raise ValidationError({"sku": ["SKU must contain only uppercase letters, numbers, and hyphens"]})
