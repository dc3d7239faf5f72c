"""Removing items from the inventory — command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from inventory.domain import inventory, logger
from inventory.item.item import InventoryItem
from inventory.users.user import User


@inventory.command(part_of="InventoryItem")
class RemoveInventoryItem:
    item_id = Identifier(required=True)
    removed_by = Identifier(required=True)


@inventory.command_handler(part_of=InventoryItem)
class RemoveInventoryItemHandler:
    @handle(RemoveInventoryItem)
    def remove_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.fetch(command.item_id)

        user = current_domain.repository_for(User).get(command.removed_by)
        item.ensure_editable_by(user, action="delete")

        item.mark_removed(user.id)
        repo.remove(item)
        logger.info(
            "inventory_item_removed",
            item_id=str(item.id),
            sku=item.sku,
            removed_by=str(user.id),
            role=user.role,
        )
