"""FastAPI routes for the Inventory service: items, stock and users."""

import json
import math

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from inventory.api.dependencies import current_user, parse_identifier
from inventory.api.schemas import (
    AdjustStockRequest,
    CreateInventoryItemRequest,
    InventoryItemEnvelope,
    InventoryItemResponse,
    InventoryListEnvelope,
    LowStockEnvelope,
    MessageResponse,
    RegisterUserRequest,
    UpdateInventoryItemRequest,
    UserEnvelope,
    UserReference,
    UserResponse,
)
from inventory.item.adjustment import AdjustStock
from inventory.item.details import UpdateInventoryItem
from inventory.item.item import Category, InventoryItem, ItemStatus
from inventory.item.registration import AddInventoryItem
from inventory.item.removal import RemoveInventoryItem
from inventory.users.registration import RegisterUser
from inventory.users.user import User
from inventory.utils.settings import setting


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------
def _user_reference(user_id, known_users: dict) -> UserReference | None:
    if not user_id:
        return None
    user_id = str(user_id)
    if user_id not in known_users:
        try:
            known_users[user_id] = current_domain.repository_for(User).get(user_id)
        except ObjectNotFoundError:
            known_users[user_id] = None
    user = known_users[user_id]
    if user is None:
        return UserReference(id=user_id)
    return UserReference(id=user_id, username=user.username, email=user.email)


def _item_response(item: InventoryItem, known_users: dict | None = None) -> InventoryItemResponse:
    known_users = {} if known_users is None else known_users
    return InventoryItemResponse(
        id=str(item.id),
        name=item.name,
        description=item.description,
        category=item.category,
        sku=item.sku,
        quantity=item.quantity,
        min_stock_level=item.min_stock_level,
        price=item.price,
        supplier=item.supplier.to_dict() if item.supplier else None,
        location=item.location.to_dict() if item.location else None,
        status=item.status,
        stock_status=item.stock_status,
        added_by=_user_reference(item.added_by, known_users),
        last_updated_by=_user_reference(item.last_updated_by, known_users),
        revision=item.revision,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def _item_envelope(item_id: str, message: str | None = None) -> InventoryItemEnvelope:
    item = current_domain.repository_for(InventoryItem).fetch(item_id)
    return InventoryItemEnvelope(message=message, data={"inventory_item": _item_response(item)})


# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


@inventory_router.get("", response_model=InventoryListEnvelope)
async def list_items(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    category: Category | None = Query(default=None),
    status: ItemStatus | None = Query(default=None),
    search: str | None = None,
    user: User = Depends(current_user),
) -> InventoryListEnvelope:
    max_page_size = int(setting("MAX_PAGE_SIZE"))
    limit = limit or int(setting("DEFAULT_PAGE_SIZE"))
    if limit > max_page_size:
        raise ValidationError({"limit": [f"Limit must be between 1 and {max_page_size}"]})

    results = current_domain.repository_for(InventoryItem).search(
        category=category.value if category else None,
        status=status.value if status else None,
        search=search.strip() if search else None,
        offset=(page - 1) * limit,
        limit=limit,
    )
    known_users: dict = {}
    return InventoryListEnvelope(
        data={
            "inventory_items": [_item_response(item, known_users) for item in results.items],
            "pagination": {
                "current_page": page,
                "total_pages": math.ceil(results.total / limit),
                "total_items": results.total,
                "items_per_page": limit,
            },
        }
    )


# Declared before the item routes so "alerts" is not read as an item id.
@inventory_router.get("/alerts/low-stock", response_model=LowStockEnvelope)
async def low_stock_alerts(user: User = Depends(current_user)) -> LowStockEnvelope:
    items = current_domain.repository_for(InventoryItem).find_low_stock()
    known_users: dict = {}
    return LowStockEnvelope(
        data={
            "low_stock_items": [_item_response(item, known_users) for item in items],
            "count": len(items),
        }
    )


@inventory_router.get("/{item_id}", response_model=InventoryItemEnvelope)
async def get_item(item_id: str, user: User = Depends(current_user)) -> InventoryItemEnvelope:
    return _item_envelope(parse_identifier(item_id))


@inventory_router.post("", status_code=201, response_model=InventoryItemEnvelope)
async def add_item(body: CreateInventoryItemRequest, user: User = Depends(current_user)) -> InventoryItemEnvelope:
    command = AddInventoryItem(
        name=body.name,
        category=body.category,
        sku=body.sku,
        quantity=body.quantity,
        min_stock_level=body.min_stock_level,
        price=body.price,
        description=body.description,
        supplier=json.dumps(body.supplier.model_dump()) if body.supplier else None,
        location=json.dumps(body.location.model_dump()) if body.location else None,
        status=body.status,
        added_by=str(user.id),
    )
    item_id = current_domain.process(command, asynchronous=False)
    return _item_envelope(item_id, "Inventory item created successfully")


@inventory_router.put("/{item_id}", response_model=InventoryItemEnvelope)
async def update_item(
    item_id: str, body: UpdateInventoryItemRequest, user: User = Depends(current_user)
) -> InventoryItemEnvelope:
    item_id = parse_identifier(item_id)
    command = UpdateInventoryItem(
        item_id=item_id,
        changes=json.dumps(body.model_dump(exclude_unset=True)),
        updated_by=str(user.id),
    )
    current_domain.process(command, asynchronous=False)
    return _item_envelope(item_id, "Inventory item updated successfully")


@inventory_router.delete("/{item_id}", response_model=MessageResponse)
async def remove_item(item_id: str, user: User = Depends(current_user)) -> MessageResponse:
    command = RemoveInventoryItem(item_id=parse_identifier(item_id), removed_by=str(user.id))
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Inventory item deleted successfully")


@inventory_router.patch("/{item_id}/stock", response_model=InventoryItemEnvelope)
async def adjust_stock(
    item_id: str, body: AdjustStockRequest, user: User = Depends(current_user)
) -> InventoryItemEnvelope:
    item_id = parse_identifier(item_id)
    command = AdjustStock(
        item_id=item_id,
        quantity=body.quantity,
        operation=body.operation,
        adjusted_by=str(user.id),
    )
    current_domain.process(command, asynchronous=False)
    return _item_envelope(item_id, "Stock quantity updated successfully")


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        username=user.username,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
    )


@user_router.post("", status_code=201, response_model=UserEnvelope)
async def register_user(body: RegisterUserRequest) -> UserEnvelope:
    command = RegisterUser(username=body.username, email=body.email, role=body.role)
    user_id = current_domain.process(command, asynchronous=False)
    user = current_domain.repository_for(User).get(user_id)
    return UserEnvelope(message="User registered successfully", data={"user": _user_response(user)})


@user_router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(user_id: str) -> UserEnvelope:
    user = current_domain.repository_for(User).get(parse_identifier(user_id, label="user"))
    return UserEnvelope(data={"user": _user_response(user)})
