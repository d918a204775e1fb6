"""
Pydantic schemas for request/response validation.
"""
from garagehub.schemas.user import UserBase, UserCreate, User, Token, LoginRequest
from garagehub.schemas.garage import Garage, GarageUpdate
from garagehub.schemas.job_card import (
    JobCard, JobCardCreate, JobCardUpdate, JobCardList, JobCardMove, JobCardPart,
    JobPhoto, JobPhotoCreate, Pipeline,
)
from garagehub.schemas.inventory import (
    InventoryItem, InventoryItemCreate, InventoryItemUpdate, InventoryList, InventoryValue, RestockRequest,
)
from garagehub.schemas.ledger import (
    AccountEntry, AccountEntryCreate, Expense, ExpenseCreate, ExpenseList, ExpenseSummary, RevenueSyncResult,
)
from garagehub.schemas.gst_slab import GstSlab, GstSlabCreate, GstSlabUpdate
from garagehub.schemas.invoice import (
    Invoice, InvoiceCreate, InvoiceItem, InvoiceItemInput, InvoiceItemsReplace, InvoiceList, InvoicePreview,
    InvoiceUpdate,
)
from garagehub.schemas.garage_service import GarageService, GarageServiceCreate, GarageServiceUpdate
from garagehub.schemas.staff import Attendance, ClockRequest, Staff, StaffCreate, StaffUpdate
from garagehub.schemas.promotions import (
    LoyaltyMember, Promotion, PromotionCreate, PromotionUpdate, PromotionsSettings,
    PromotionsSettingsUpdate, ReminderRun, ReminderStatusUpdate, ServiceReminder,
)
from garagehub.schemas.lead import (
    FollowUpCreate, Lead, LeadConversion, LeadConvert, LeadCreate, LeadNoteCreate, LeadUpdate,
)

__all__ = [
    "UserBase", "UserCreate", "User", "Token", "LoginRequest",
    "Garage", "GarageUpdate",
    "JobCard", "JobCardCreate", "JobCardUpdate", "JobCardList", "JobCardMove", "JobCardPart",
    "JobPhoto", "JobPhotoCreate", "Pipeline",
    "InventoryItem", "InventoryItemCreate", "InventoryItemUpdate", "InventoryList", "InventoryValue",
    "RestockRequest",
    "AccountEntry", "AccountEntryCreate", "Expense", "ExpenseCreate", "ExpenseList", "ExpenseSummary",
    "RevenueSyncResult",
    "GstSlab", "GstSlabCreate", "GstSlabUpdate",
    "Invoice", "InvoiceCreate", "InvoiceItem", "InvoiceItemInput", "InvoiceItemsReplace", "InvoiceList", "InvoicePreview",
    "InvoiceUpdate",
    "GarageService", "GarageServiceCreate", "GarageServiceUpdate",
    "Attendance", "ClockRequest", "Staff", "StaffCreate", "StaffUpdate",
    "LoyaltyMember", "Promotion", "PromotionCreate", "PromotionUpdate", "PromotionsSettings",
    "PromotionsSettingsUpdate", "ReminderRun", "ReminderStatusUpdate", "ServiceReminder",
    "FollowUpCreate", "Lead", "LeadConversion", "LeadConvert", "LeadCreate", "LeadNoteCreate", "LeadUpdate",
]
