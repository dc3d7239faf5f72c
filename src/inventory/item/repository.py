"""Repository for the InventoryItem aggregate."""

from protean.utils.query import Q

from inventory.domain import inventory
from inventory.item.item import InventoryItem

LOW_STOCK_SCAN_PAGE_SIZE = 100


@inventory.repository(part_of=InventoryItem)
class InventoryItemRepository:
    """Queries and guarded writes for inventory items.

    Writes that depend on previously read state go through
    ``save_if_unchanged``: the record is first claimed with a conditional
    update on ``revision`` and only then written in full. Within a
    transactional provider the claim holds the row until the unit of work
    commits, so a competing writer that read the same revision fails its
    own claim instead of overwriting this one.
    """

    def fetch(self, item_id) -> InventoryItem:
        """Load the stored record, bypassing any copy cached in the unit of work."""
        return self._dao.get(str(item_id))

    def find_by_sku(self, sku: str) -> InventoryItem | None:
        return self._dao.query.filter(sku=sku).all().first

    def search(self, category=None, status=None, search=None, offset=0, limit=10):
        """Return one page of items, newest first, as a ResultSet."""
        query = self._dao.query
        if category:
            query = query.filter(category=category)
        if status:
            query = query.filter(status=status)
        if search:
            query = query.filter(
                Q(name__icontains=search) | Q(sku__icontains=search) | Q(description__icontains=search)
            )
        return query.order_by("-created_at").offset(offset).limit(limit).all()

    def find_low_stock(self) -> list[InventoryItem]:
        """All items at or below their minimum stock level, lowest quantity first.

        The comparison is between two fields of the same record, which the
        query layer cannot express, so records are scanned page by page.
        """
        low_stock = []
        offset = 0
        while True:
            page = self._dao.query.order_by("quantity").offset(offset).limit(LOW_STOCK_SCAN_PAGE_SIZE).all()
            low_stock.extend(item for item in page.items if item.quantity <= item.min_stock_level)
            offset += LOW_STOCK_SCAN_PAGE_SIZE
            if not page.items or offset >= page.total:
                break
        return sorted(low_stock, key=lambda item: item.quantity)

    def claim_revision(self, item_id, expected_revision: int) -> bool:
        """Atomically move ``revision`` forward if it still holds the expected value."""
        claimed = self._dao._update_all(
            Q(id=str(item_id), revision=expected_revision),
            {"revision": expected_revision + 1},
        )
        return claimed == 1

    def save_if_unchanged(self, item: InventoryItem, expected_revision: int) -> bool:
        """Persist ``item`` only if nobody else wrote it since it was read."""
        if not self.claim_revision(item.id, expected_revision):
            return False
        self.add(item)
        return True

    def remove(self, item: InventoryItem) -> None:
        """Delete ``item``; events it raised are stored when the unit of work commits."""
        self._dao._track_in_uow(item)
        self._dao.delete(item)
