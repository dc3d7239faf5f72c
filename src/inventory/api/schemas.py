"""Pydantic request/response schemas for the Inventory API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class SupplierSchema(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    email: str | None = None
    phone: str | None = None


class LocationSchema(BaseModel):
    warehouse: str | None = Field(default=None, max_length=50)
    aisle: str | None = Field(default=None, max_length=20)
    shelf: str | None = Field(default=None, max_length=20)


class UserReference(BaseModel):
    id: str
    username: str | None = None
    email: str | None = None


# ---------------------------------------------------------------------------
# Inventory Request Schemas
# ---------------------------------------------------------------------------
class CreateInventoryItemRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    category: str
    sku: str = Field(min_length=1, max_length=50)
    quantity: int = Field(default=0, ge=0, strict=True)
    min_stock_level: int = Field(default=10, ge=0, strict=True)
    price: float = Field(default=0.0, ge=0)
    supplier: SupplierSchema | None = None
    location: LocationSchema | None = None
    status: str | None = None


class UpdateInventoryItemRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    category: str | None = None
    sku: str | None = Field(default=None, min_length=1, max_length=50)
    quantity: int | None = Field(default=None, ge=0, strict=True)
    min_stock_level: int | None = Field(default=None, ge=0, strict=True)
    price: float | None = Field(default=None, ge=0)
    supplier: SupplierSchema | None = None
    location: LocationSchema | None = None
    status: str | None = None


class AdjustStockRequest(BaseModel):
    quantity: int = Field(ge=0, strict=True, description="Target or delta, depending on operation")
    operation: Literal["set", "add", "subtract"] = "set"


# ---------------------------------------------------------------------------
# User Request Schemas
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    username: str = Field(min_length=3, max_length=30)
    email: str = Field(max_length=254)
    role: Literal["admin", "user"] = "user"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class InventoryItemResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    category: str
    sku: str
    quantity: int
    min_stock_level: int
    price: float
    supplier: SupplierSchema | None = None
    location: LocationSchema | None = None
    status: str
    stock_status: str
    added_by: UserReference | None = None
    last_updated_by: UserReference | None = None
    revision: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class InventoryItemData(BaseModel):
    inventory_item: InventoryItemResponse


class InventoryItemEnvelope(BaseModel):
    status: str = "success"
    message: str | None = None
    data: InventoryItemData


class PaginationSchema(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class InventoryListData(BaseModel):
    inventory_items: list[InventoryItemResponse]
    pagination: PaginationSchema


class InventoryListEnvelope(BaseModel):
    status: str = "success"
    data: InventoryListData


class LowStockData(BaseModel):
    low_stock_items: list[InventoryItemResponse]
    count: int


class LowStockEnvelope(BaseModel):
    status: str = "success"
    data: LowStockData


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    created_at: datetime | None = None


class UserData(BaseModel):
    user: UserResponse


class UserEnvelope(BaseModel):
    status: str = "success"
    message: str | None = None
    data: UserData


class MessageResponse(BaseModel):
    status: str = "success"
    message: str
