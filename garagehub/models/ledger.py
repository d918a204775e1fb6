"""
Expense and accounts-ledger models for database.
"""
from sqlalchemy import Column, String, Float, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from garagehub.database import Base, new_id, utcnow
import enum


class ExpenseType(str, enum.Enum):
    """Expense type enumeration."""
    PURCHASE = "purchase"
    INVENTORY_PURCHASE = "inventory_purchase"  # legacy spelling of PURCHASE
    COGS = "cogs"
    MANUAL = "manual"


class AccountType(str, enum.Enum):
    """Ledger entry type."""
    INCOME = "income"
    EXPENSE = "expense"


class Expense(Base):
    """Expense database model."""

    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(32), nullable=False, index=True)
    item_name = Column(String, nullable=False)
    quantity = Column(Float, nullable=False, default=1)
    unit_cost = Column(Float, nullable=False, default=0)
    total_cost = Column(Float, nullable=False, default=0)
    related_id = Column(String(36), nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class AccountEntry(Base):
    """Accounts ledger entry database model."""

    __tablename__ = "accounts"
    __table_args__ = (
        # At most one reconciled revenue entry per job card
        UniqueConstraint("garage_id", "job_card_id", name="uq_accounts_job_card"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(
        SQLEnum(AccountType, values_callable=lambda e: [m.value for m in e], name="account_type"),
        nullable=False,
    )
    amount = Column(Float, nullable=False)
    date = Column(DateTime, default=utcnow, nullable=False, index=True)
    description = Column(String, nullable=True)
    job_card_id = Column(String(36), nullable=True)
