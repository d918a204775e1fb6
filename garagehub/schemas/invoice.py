"""
Pydantic schemas for Invoice.

Invoices are returned as camelCase view-models built by
``converters.to_app_invoice``.
"""
from datetime import date
from typing import Optional

from pydantic import Field

from garagehub.models.invoice import InvoiceStatus, ItemType
from garagehub.sanitize import Hours, Money, Percent, Quantity
from garagehub.schemas.common import CamelModel


class InvoiceCreate(CamelModel):
    """Schema for generating (or previewing) an invoice from a job card."""
    job_card_id: str
    discount: Money = 0
    tax_rate: Optional[Percent] = None
    invoice_date: Optional[date] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    advisor_name: Optional[str] = None
    mileage: Optional[Quantity] = None
    warranty_info: Optional[str] = None
    notes: Optional[str] = None


class InvoiceUpdate(CamelModel):
    """Schema for updating invoice status and header details."""
    status: Optional[InvoiceStatus] = None
    advisor_name: Optional[str] = None
    mileage: Optional[Quantity] = None
    warranty_info: Optional[str] = None
    notes: Optional[str] = None
    pdf_url: Optional[str] = None


class InvoiceItemInput(CamelModel):
    """Schema for one line when replacing the items of an invoice."""
    description: str = Field(min_length=1)
    quantity: Hours = 1
    unit_price: Money = 0
    item_type: ItemType
    hsn_sac: Optional[str] = None
    cgst_rate: Percent = 0
    sgst_rate: Percent = 0
    igst_rate: Percent = 0


class InvoiceItemsReplace(CamelModel):
    items: list[InvoiceItemInput]


class InvoiceItem(CamelModel):
    id: str
    description: str
    quantity: float
    unit_price: float
    total_price: float
    item_type: Optional[str] = None
    hsn_sac: str
    cgst_rate: float
    sgst_rate: float
    igst_rate: float
    cgst_amount: float
    sgst_amount: float
    igst_amount: float


class Invoice(CamelModel):
    """Schema for invoice responses."""
    id: str
    invoice_number: str
    date: str
    customer_name: str
    customer_phone: str
    car_details: str
    job_card_id: str
    status: str
    items: list[InvoiceItem]
    total_parts_cost: float
    labor_cost: float
    services_cost: float
    subtotal: float
    total_amount: float
    discount: float
    tax: float
    final_amount: float
    cgst_amount: float
    sgst_amount: float
    igst_amount: float
    gst_slab_id: str
    advisor_name: str
    mileage: int
    warranty_info: str
    notes: str
    pdf_url: str
    raw_total_amount: Optional[float] = None
    raw_final_amount: Optional[float] = None


class InvoiceList(CamelModel):
    invoices: list[Invoice]
    count: int


class InvoicePreviewLine(CamelModel):
    position: int
    description: str
    quantity: float
    unit_price: float
    total_price: float
    item_type: str
    hsn_sac: Optional[str] = None
    cgst_rate: float
    sgst_rate: float
    igst_rate: float
    cgst_amount: float
    sgst_amount: float
    igst_amount: float


class InvoicePreview(CamelModel):
    """Totals of an invoice that has not been saved yet."""
    job_card_id: str
    gst_slab_id: str
    cgst_rate: float
    sgst_rate: float
    igst_rate: float
    parts_cost: float
    labor_cost: float
    services_cost: float
    lines: list[InvoicePreviewLine]
    subtotal: float
    discount: float
    taxable_base: float
    cgst_amount: float
    sgst_amount: float
    igst_amount: float
    tax: float
    final_amount: float
