"""
Expense and accounts-ledger routes.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.models.ledger import AccountType
from garagehub.schemas.ledger import (
    AccountEntry, AccountEntryCreate, Expense, ExpenseCreate, ExpenseList, RevenueSyncResult,
)
from garagehub.services import ledger as service

expenses_router = APIRouter(prefix="/expenses", tags=["expenses"])
accounts_router = APIRouter(prefix="/accounts", tags=["accounts"])


@expenses_router.get("/", response_model=ExpenseList)
async def get_expenses(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get all expenses with totals per type.
    """
    return await service.list_expenses(db, garage.id)


@expenses_router.post("/", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Record a manual expense.
    """
    return await service.add_manual_expense(db, garage.id, expense)


@accounts_router.get("/", response_model=List[AccountEntry])
async def get_account_entries(
    type_filter: Optional[AccountType] = Query(default=None, alias="type"),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get ledger entries, newest first.
    """
    return await service.list_entries(db, garage.id, type_filter, start, end)


@accounts_router.post("/", response_model=AccountEntry, status_code=status.HTTP_201_CREATED)
async def create_account_entry(
    entry: AccountEntryCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Create a ledger entry.
    """
    return await service.create_entry(db, garage.id, entry)


@accounts_router.post("/revenue-sync", response_model=RevenueSyncResult)
async def sync_revenue(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Create the missing income entries of completed job cards.
    """
    return await service.sync_revenue(db, garage.id)


@accounts_router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account_entry(
    entry_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Delete a ledger entry.
    """
    await service.delete_entry(db, garage.id, entry_id)
    return None
