"""
Pydantic schemas for Expenses and the Accounts ledger.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from garagehub.models.ledger import AccountType
from garagehub.sanitize import Money, Quantity


class ExpenseCreate(BaseModel):
    """Schema for recording a manual expense."""
    item_name: str = Field(min_length=1)
    quantity: Quantity = 1
    unit_cost: Money
    description: Optional[str] = None


class Expense(BaseModel):
    """Schema for expense responses."""
    id: str
    type: str
    item_name: str
    quantity: float
    unit_cost: float
    total_cost: float
    related_id: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ExpenseSummary(BaseModel):
    purchases: float
    cogs: float
    manual: float
    balance: float
    total: float


class ExpenseList(BaseModel):
    expenses: list[Expense]
    summary: ExpenseSummary


class AccountEntryCreate(BaseModel):
    """Schema for creating a ledger entry."""
    type: AccountType
    amount: Money
    date: Optional[datetime] = None
    description: Optional[str] = None


class AccountEntry(BaseModel):
    """Schema for ledger entry responses."""
    id: str
    type: AccountType
    amount: float
    date: datetime
    description: Optional[str] = None
    job_card_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RevenueSyncResult(BaseModel):
    synced: int
