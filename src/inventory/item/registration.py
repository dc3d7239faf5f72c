"""Adding items to the inventory — command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.item.item import InventoryItem, normalize_sku


@inventory.command(part_of="InventoryItem")
class AddInventoryItem:
    """Create a new inventory record on behalf of a staff member."""

    name = String(required=True, max_length=100)
    category = String(required=True)
    sku = String(required=True, max_length=50)
    quantity = Integer(default=0)
    min_stock_level = Integer(default=10)
    price = Float(default=0.0)
    description = String(max_length=500)
    supplier = Text()  # JSON object: name, email, phone
    location = Text()  # JSON object: warehouse, aisle, shelf
    status = String()
    added_by = Identifier(required=True)


@inventory.command_handler(part_of=InventoryItem)
class AddInventoryItemHandler:
    @handle(AddInventoryItem)
    def add_item(self, command):
        repo = current_domain.repository_for(InventoryItem)

        sku = normalize_sku(command.sku)
        if repo.find_by_sku(sku) is not None:
            raise ValidationError({"sku": ["SKU already exists"]})

        item = InventoryItem.create(
            name=command.name,
            category=command.category,
            sku=sku,
            added_by=command.added_by,
            quantity=command.quantity if command.quantity is not None else 0,
            min_stock_level=command.min_stock_level if command.min_stock_level is not None else 10,
            price=command.price if command.price is not None else 0.0,
            description=command.description,
            supplier=json.loads(command.supplier) if command.supplier else None,
            location=json.loads(command.location) if command.location else None,
            status=command.status,
        )
        repo.add(item)
        return str(item.id)
