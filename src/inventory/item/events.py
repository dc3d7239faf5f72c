"""Domain events for the InventoryItem aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from inventory.domain import inventory


@inventory.event(part_of="InventoryItem")
class ItemAdded:
    """A new item was added to the inventory."""

    __version__ = 1

    item_id = Identifier(required=True)
    sku = String(required=True)
    name = String(required=True)
    category = String(required=True)
    quantity = Integer(required=True)
    min_stock_level = Integer(required=True)
    added_by = Identifier(required=True)
    added_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class ItemDetailsUpdated:
    """Descriptive fields, pricing or quantities of an item were edited."""

    __version__ = 1

    item_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON list of field names
    updated_by = Identifier(required=True)
    updated_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class StockAdjusted:
    """The stock quantity of an item was set, increased or decreased."""

    __version__ = 1

    item_id = Identifier(required=True)
    sku = String(required=True)
    operation = String(required=True)
    requested_quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    adjusted_by = Identifier(required=True)
    adjusted_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class LowStockDetected:
    """An adjustment left the item at or below its minimum stock level."""

    __version__ = 1

    item_id = Identifier(required=True)
    sku = String(required=True)
    quantity = Integer(required=True)
    min_stock_level = Integer(required=True)
    stock_status = String(required=True)
    detected_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class ItemRemoved:
    """An item was deleted from the inventory."""

    __version__ = 1

    item_id = Identifier(required=True)
    sku = String(required=True)
    removed_by = Identifier(required=True)
    removed_at = DateTime(required=True)
