"""
Dashboard queries. Each one fetches the rows it needs and folds them with
``garagehub.metrics``.
"""
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub import metrics
from garagehub.cache import query_cache
from garagehub.converters import to_app_job_card
from garagehub.database import utcnow
from garagehub.models.inventory import InventoryItem
from garagehub.models.job_card import JobCard
from garagehub.models.ledger import AccountEntry, Expense
from garagehub.models.staff import Staff
from garagehub.schemas.inventory import InventoryItem as InventoryItemSchema
from garagehub.services.ledger import sync_revenue_cached


async def _rows(db: AsyncSession, model, garage_id: str):
    result = await db.execute(select(model).where(model.garage_id == garage_id))
    return result.scalars().all()


async def dashboard_stats(db: AsyncSession, garage_id: str) -> dict:
    """Headline metrics. Missing revenue entries are reconciled first."""
    await sync_revenue_cached(db, garage_id)

    async def load():
        return metrics.dashboard_metrics(
            await _rows(db, AccountEntry, garage_id),
            await _rows(db, Expense, garage_id),
            await _rows(db, JobCard, garage_id),
            await _rows(db, InventoryItem, garage_id),
        )

    return await query_cache.get_or_load(("dashboard_stats", garage_id), load)


async def revenue_tabs(db: AsyncSession, garage_id: str, today: Optional[date] = None) -> dict:
    """Revenue tabs for the given day, by default the current UTC day."""
    today = today or utcnow().date()

    async def load():
        return metrics.revenue_tabs(await _rows(db, JobCard, garage_id), today)

    return await query_cache.get_or_load(("revenue_tabs", garage_id, today), load)


async def revenue_chart(db: AsyncSession, garage_id: str, time_range: str = "month") -> dict:
    async def load():
        return metrics.revenue_chart(await _rows(db, AccountEntry, garage_id), time_range)

    return await query_cache.get_or_load(("revenue_chart", garage_id, time_range), load)


async def recent_job_cards(db: AsyncSession, garage_id: str, limit: int = 5) -> list[dict]:
    result = await db.execute(
        select(JobCard).where(JobCard.garage_id == garage_id).order_by(JobCard.created_at.desc()).limit(limit)
    )
    return [to_app_job_card(job) for job in result.scalars().all()]


async def staff_performance(db: AsyncSession, garage_id: str) -> list[dict]:
    async def load():
        result = await db.execute(select(Staff).where(Staff.garage_id == garage_id).order_by(Staff.name))
        return metrics.staff_performance(result.scalars().all(), await _rows(db, JobCard, garage_id))

    return await query_cache.get_or_load(("staff_performance", garage_id), load)


async def inventory_alerts(db: AsyncSession, garage_id: str) -> list[dict]:
    """Low-stock items, emptiest first."""
    items = sorted(metrics.low_stock(await _rows(db, InventoryItem, garage_id)), key=lambda i: (i.quantity, i.item_name))
    return [InventoryItemSchema.model_validate(item).model_dump() for item in items]
