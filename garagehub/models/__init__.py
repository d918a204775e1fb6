"""
SQLAlchemy database models.
"""
from garagehub.models.user import User, UserRole
from garagehub.models.garage import Garage
from garagehub.models.gst_slab import GstSlab
from garagehub.models.job_card import JobCard, JobPhoto, JobStatus
from garagehub.models.inventory import InventoryItem
from garagehub.models.ledger import AccountEntry, AccountType, Expense, ExpenseType
from garagehub.models.invoice import Invoice, InvoiceItem, InvoiceStatus, ItemType
from garagehub.models.garage_service import GarageService
from garagehub.models.staff import Attendance, Staff
from garagehub.models.promotions import LoyaltyPoints, Promotion, PromotionsSettings, ServiceReminder
from garagehub.models.lead import Lead, LeadStatus
from garagehub.models.setting import Setting

__all__ = [
    "User", "UserRole", "Garage", "GstSlab",
    "JobCard", "JobPhoto", "JobStatus", "InventoryItem",
    "AccountEntry", "AccountType", "Expense", "ExpenseType",
    "Invoice", "InvoiceItem", "InvoiceStatus", "ItemType",
    "GarageService", "Attendance", "Staff",
    "LoyaltyPoints", "Promotion", "PromotionsSettings", "ServiceReminder",
    "Lead", "LeadStatus", "Setting",
]
