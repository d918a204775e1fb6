"""
Inventory routes.
"""
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.realtime import commit_and_publish
from garagehub.schemas.inventory import (
    InventoryItem, InventoryItemCreate, InventoryItemUpdate, InventoryList, InventoryValue, RestockRequest,
)
from garagehub.services import inventory as service

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/", response_model=InventoryList)
async def get_inventory(
    available_only: bool = True,
    low_stock_only: bool = False,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get inventory items by name, in stock only unless ``available_only`` is false.
    """
    return await service.list_items(db, garage.id, available_only, low_stock_only, skip, limit)


@router.get("/value", response_model=InventoryValue)
async def get_inventory_value(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get the total value of the stock on hand.
    """
    return await service.inventory_value(db, garage.id)


@router.get("/low-stock", response_model=List[InventoryItem])
async def get_low_stock(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get items at or below their minimum stock level.
    """
    return await service.low_stock_items(db, garage.id)


@router.get("/parts-to-order")
async def get_parts_to_order(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get parts flagged for purchase on open job cards.
    """
    return await service.parts_to_order(db, garage.id)


@router.get("/{item_id}", response_model=InventoryItem)
async def get_inventory_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get a specific inventory item by ID.
    """
    return await service.get_item(db, garage.id, item_id)


@router.post("/", response_model=InventoryItem, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    item: InventoryItemCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Add an inventory item. The opening stock is booked as a purchase expense.
    """
    return await service.create_item(db, garage.id, item)


@router.post("/{item_id}/restock", response_model=InventoryItem)
async def restock_inventory_item(
    item_id: str,
    restock: RestockRequest,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Add stock to an item and book the purchase.
    """
    return await service.restock_item(db, garage.id, item_id, restock.quantity, restock.unit_cost)


@router.put("/{item_id}", response_model=InventoryItem)
async def update_inventory_item(
    item_id: str,
    item_update: InventoryItemUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Update an inventory item.
    """
    item = await service.get_item(db, garage.id, item_id)

    # Update only provided fields
    for field, value in item_update.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(item, field, value)

    await commit_and_publish(db)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Delete an inventory item.
    """
    item = await service.get_item(db, garage.id, item_id)
    await db.delete(item)
    await commit_and_publish(db)
    return None
