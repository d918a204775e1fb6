"""
Expenses, the accounts ledger and revenue reconciliation.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub import metrics
from garagehub.cache import query_cache
from garagehub.config import get_settings
from garagehub.models.job_card import JobCard, JobStatus
from garagehub.models.ledger import AccountEntry, AccountType, Expense, ExpenseType
from garagehub.realtime import commit_and_publish
from garagehub.schemas.ledger import AccountEntryCreate, ExpenseCreate
from garagehub.schemas.ledger import Expense as ExpenseSchema
from garagehub.services import get_owned

logger = logging.getLogger(__name__)


# ==================== EXPENSES ====================

async def list_expenses(db: AsyncSession, garage_id: str) -> dict:
    """All expenses of the garage, newest first, with the per-type summary."""

    async def load():
        result = await db.execute(
            select(Expense).where(Expense.garage_id == garage_id).order_by(Expense.created_at.desc())
        )
        expenses = result.scalars().all()
        return {
            "expenses": [ExpenseSchema.model_validate(e).model_dump() for e in expenses],
            "summary": metrics.expense_summary(expenses),
        }

    return await query_cache.get_or_load(("expenses", garage_id), load)


async def add_manual_expense(db: AsyncSession, garage_id: str, data: ExpenseCreate) -> Expense:
    expense = Expense(
        garage_id=garage_id,
        type=ExpenseType.MANUAL.value,
        item_name=data.item_name,
        quantity=data.quantity,
        unit_cost=data.unit_cost,
        total_cost=data.quantity * data.unit_cost,
        description=data.description or f"Manual expense: {data.item_name}",
    )
    db.add(expense)
    await commit_and_publish(db)
    return expense


# ==================== ACCOUNTS ====================

async def list_entries(
    db: AsyncSession,
    garage_id: str,
    entry_type: Optional[AccountType] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[AccountEntry]:
    query = select(AccountEntry).where(AccountEntry.garage_id == garage_id)
    if entry_type is not None:
        query = query.where(AccountEntry.type == entry_type)
    if start is not None:
        query = query.where(AccountEntry.date >= start)
    if end is not None:
        query = query.where(AccountEntry.date <= end)
    result = await db.execute(query.order_by(AccountEntry.date.desc()))
    return list(result.scalars().all())


async def create_entry(db: AsyncSession, garage_id: str, data: AccountEntryCreate) -> AccountEntry:
    values = data.model_dump(exclude_none=True)
    entry = AccountEntry(garage_id=garage_id, **values)
    db.add(entry)
    await commit_and_publish(db)
    return entry


async def delete_entry(db: AsyncSession, garage_id: str, entry_id: str):
    entry = await get_owned(db, AccountEntry, garage_id, entry_id, "Account entry")
    await db.delete(entry)
    await commit_and_publish(db)


# ==================== REVENUE RECONCILIATION ====================

def revenue_description(job: JobCard) -> str:
    return f"Revenue from job card {job.id} - {job.customer_name}"


async def _book_missing_revenue(db: AsyncSession, garage_id: str) -> int:
    result = await db.execute(
        select(JobCard).where(JobCard.garage_id == garage_id, JobCard.status == JobStatus.COMPLETED)
    )
    jobs = result.scalars().all()

    incomes = await db.execute(
        select(func.lower(AccountEntry.description), AccountEntry.job_card_id).where(
            AccountEntry.garage_id == garage_id, AccountEntry.type == AccountType.INCOME
        )
    )
    descriptions = []
    booked = set()
    for description, job_card_id in incomes.all():
        if description:
            descriptions.append(description)
        if job_card_id:
            booked.add(job_card_id)

    synced = 0
    for job in jobs:
        amount = metrics.job_total(job)
        if amount <= 0:
            continue
        needle = f"job card {job.id}".lower()
        if job.id in booked or any(needle in description for description in descriptions):
            continue
        db.add(AccountEntry(
            garage_id=garage_id,
            type=AccountType.INCOME,
            amount=round(amount, 2),
            date=job.actual_completion_date or job.created_at,
            description=revenue_description(job),
            job_card_id=job.id,
        ))
        booked.add(job.id)
        synced += 1

    if synced:
        await commit_and_publish(db)
    return synced


async def sync_revenue(db: AsyncSession, garage_id: str) -> dict:
    """
    Make sure every completed job with a positive total has an income entry.

    An entry counts as present when it is linked to the job card or when an
    income description mentions ``job card <id>`` in any case. Running it
    twice creates nothing new. Overlapping runs are settled by the unique
    job card link: the run that loses rolls back and books what is left.
    """
    try:
        synced = await _book_missing_revenue(db, garage_id)
    except IntegrityError:
        await db.rollback()
        logger.info("Revenue sync for garage %s overlapped another run, retrying", garage_id)
        synced = await _book_missing_revenue(db, garage_id)
    if synced:
        logger.info("Created %d missing revenue entries for garage %s", synced, garage_id)
    return {"synced": synced}


async def sync_revenue_cached(db: AsyncSession, garage_id: str) -> dict:
    """``sync_revenue`` at most once per ``cache_ttl_revenue_sync`` seconds."""
    return await query_cache.get_or_load(
        ("revenue_sync", garage_id),
        lambda: sync_revenue(db, garage_id),
        ttl=get_settings().cache_ttl_revenue_sync,
    )
