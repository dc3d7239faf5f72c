"""Inventory bounded context — items, stock adjustments and the staff directory.

Handles inventory item records (CQRS), stock quantity adjustments guarded by
a revision compare-and-swap, low-stock alerts, and the minimal staff
directory used to stamp and resolve creator/modifier references.
"""

from protean.domain import Domain

from inventory.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
inventory = Domain(name="inventory")
