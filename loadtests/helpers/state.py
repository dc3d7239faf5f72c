"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class StaffState:
    """Tracks the registered staff identity used in the X-User-Id header."""

    user_id: str | None = None
    role: str = "user"

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.user_id} if self.user_id else {}


@dataclass
class InventoryState:
    """Tracks state for a single simulated inventory item lifecycle."""

    item_id: str | None = None
    sku: str | None = None
    expected_quantity: int = 0
    conflicts: int = 0
    created_item_ids: list[str] = field(default_factory=list)
