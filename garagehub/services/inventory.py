"""
Inventory queries and stock movements.
"""
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub import metrics
from garagehub.cache import query_cache
from garagehub.models.inventory import InventoryItem
from garagehub.models.job_card import JobCard
from garagehub.models.ledger import Expense, ExpenseType
from garagehub.realtime import commit_and_publish
from garagehub.schemas.inventory import InventoryItem as InventoryItemSchema
from garagehub.schemas.inventory import InventoryItemCreate
from garagehub.services import get_owned

logger = logging.getLogger(__name__)


async def get_item(db: AsyncSession, garage_id: str, item_id: str) -> InventoryItem:
    return await get_owned(db, InventoryItem, garage_id, item_id, "Inventory item")


async def list_items(
    db: AsyncSession,
    garage_id: str,
    available_only: bool = True,
    low_stock_only: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> dict:
    """Page of inventory items ordered by name, with the exact filtered count."""

    async def load():
        conditions = [InventoryItem.garage_id == garage_id]
        if available_only:
            conditions.append(InventoryItem.quantity > 0)
        if low_stock_only:
            conditions.append(InventoryItem.quantity <= InventoryItem.min_stock_level)
        result = await db.execute(
            select(InventoryItem).where(*conditions).order_by(InventoryItem.item_name).offset(skip).limit(limit)
        )
        count = (await db.execute(select(func.count()).select_from(InventoryItem).where(*conditions))).scalar_one()
        items = [InventoryItemSchema.model_validate(item).model_dump() for item in result.scalars().all()]
        return {"items": items, "count": count}

    key = ("inventory", garage_id, available_only, low_stock_only, skip, limit)
    return await query_cache.get_or_load(key, load)


def _purchase_expense(item: InventoryItem, quantity: int, unit_cost: float, description: str) -> Expense:
    return Expense(
        garage_id=item.garage_id,
        type=ExpenseType.PURCHASE.value,
        item_name=item.item_name,
        quantity=quantity,
        unit_cost=unit_cost,
        total_cost=quantity * unit_cost,
        related_id=item.id,
        description=description,
    )


async def create_item(db: AsyncSession, garage_id: str, data: InventoryItemCreate) -> InventoryItem:
    """Add an item and book its opening stock as a purchase."""
    item = InventoryItem(garage_id=garage_id, **data.model_dump())
    db.add(item)
    await db.flush()
    if item.quantity > 0:
        db.add(_purchase_expense(item, item.quantity, item.unit_price, f"Inventory item added: {item.item_name}"))
    await commit_and_publish(db)
    return item


async def restock_item(
    db: AsyncSession, garage_id: str, item_id: str, quantity: int, unit_cost: Optional[float] = None
) -> InventoryItem:
    """Add stock to an item and book the purchase."""
    item = await get_item(db, garage_id, item_id)
    cost = item.unit_price if unit_cost is None else unit_cost
    item.quantity += quantity
    db.add(_purchase_expense(item, quantity, cost, f"Restocked: {item.item_name}"))
    await commit_and_publish(db)
    logger.info("Restocked %s with %d units", item.item_name, quantity)
    return item


async def inventory_value(db: AsyncSession, garage_id: str) -> dict:
    """Live total stock value of the garage."""

    async def load():
        result = await db.execute(select(InventoryItem).where(InventoryItem.garage_id == garage_id))
        items = result.scalars().all()
        return {"total_value": round(metrics.inventory_value(items), 2), "item_count": len(items)}

    return await query_cache.get_or_load(("inventory_value", garage_id), load)


async def low_stock_items(db: AsyncSession, garage_id: str) -> list[InventoryItem]:
    result = await db.execute(
        select(InventoryItem)
        .where(InventoryItem.garage_id == garage_id, InventoryItem.quantity <= InventoryItem.min_stock_level)
        .order_by(InventoryItem.quantity, InventoryItem.item_name)
    )
    return list(result.scalars().all())


async def parts_to_order(db: AsyncSession, garage_id: str) -> list[dict]:
    async def load():
        result = await db.execute(
            select(JobCard).where(
                JobCard.garage_id == garage_id, JobCard.status.in_(metrics.PURCHASE_PENDING_STATUSES)
            )
        )
        return metrics.parts_to_order(result.scalars().all())

    return await query_cache.get_or_load(("parts_to_order", garage_id), load)
