"""Editing item details — command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from inventory.domain import inventory, logger
from inventory.exceptions import StaleItemError
from inventory.item.item import InventoryItem, normalize_sku
from inventory.users.user import User


@inventory.command(part_of="InventoryItem")
class UpdateInventoryItem:
    """Apply a partial update to an item."""

    item_id = Identifier(required=True)
    changes = Text(required=True)  # JSON object of the supplied fields only
    updated_by = Identifier(required=True)


@inventory.command_handler(part_of=InventoryItem)
class UpdateInventoryItemHandler:
    @handle(UpdateInventoryItem)
    def update_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.fetch(command.item_id)

        user = current_domain.repository_for(User).get(command.updated_by)
        item.ensure_editable_by(user, action="edit")

        changes = json.loads(command.changes)
        if "sku" in changes:
            existing = repo.find_by_sku(normalize_sku(changes["sku"]))
            if existing is not None and str(existing.id) != str(item.id):
                raise ValidationError({"sku": ["SKU already exists"]})

        expected_revision = item.revision
        item.update_details(changes, updated_by=user.id)

        if not repo.save_if_unchanged(item, expected_revision):
            logger.warning("item_update_conflict", item_id=str(item.id), revision=expected_revision)
            raise StaleItemError("Inventory item was modified by another request. Reload and try again.")

        return str(item.id)
