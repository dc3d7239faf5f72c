"""Stock adjustment — command and handler.

The new quantity depends on the quantity read, so the write is guarded by a
compare-and-swap on the item's revision. When another request wrote the
item in between, the adjustment is recomputed from fresh state; after a
bounded number of attempts the request fails with a conflict instead of
overwriting the other write.
"""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain
from pydantic import field_validator

from inventory.domain import inventory, logger
from inventory.exceptions import StaleItemError
from inventory.item.item import InventoryItem, StockOperation
from inventory.utils.settings import setting


@inventory.command(part_of="InventoryItem")
class AdjustStock:
    """Set, increase or decrease an item's on-hand quantity."""

    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)
    operation = String(choices=StockOperation, default=StockOperation.SET.value)
    adjusted_by = Identifier(required=True)

    @field_validator("quantity", mode="before", check_fields=False)
    @classmethod
    def quantity_must_be_whole(cls, value):
        # Plain int fields would coerce True, 2.0 or "5".
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValueError("Quantity must be a non-negative integer")
        return value


@inventory.command_handler(part_of=InventoryItem)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(InventoryItem)
        max_attempts = max(1, int(setting("STOCK_ADJUSTMENT_MAX_ATTEMPTS")))
        operation = command.operation or StockOperation.SET.value

        for attempt in range(1, max_attempts + 1):
            item = repo.fetch(command.item_id)
            expected_revision = item.revision
            previous_quantity = item.quantity

            new_quantity = item.adjust_stock(
                quantity=command.quantity,
                operation=operation,
                adjusted_by=command.adjusted_by,
            )

            if repo.save_if_unchanged(item, expected_revision):
                logger.info(
                    "stock_adjusted",
                    item_id=str(item.id),
                    sku=item.sku,
                    operation=operation,
                    requested_quantity=command.quantity,
                    previous_quantity=previous_quantity,
                    new_quantity=new_quantity,
                    adjusted_by=str(command.adjusted_by),
                    attempt=attempt,
                )
                return str(item.id)

            logger.warning(
                "stock_adjustment_conflict",
                item_id=str(item.id),
                revision=expected_revision,
                attempt=attempt,
                max_attempts=max_attempts,
            )

        raise StaleItemError(
            f"Stock for inventory item {command.item_id} is being changed concurrently. Please retry."
        )
