"""
Invoice models for database.
"""
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from garagehub.database import Base, new_id, utcnow
import enum


class InvoiceStatus(str, enum.Enum):
    """Invoice status enumeration."""
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    CANCELLED = "Cancelled"


class ItemType(str, enum.Enum):
    """Invoice line item type."""
    PART = "part"
    LABOR = "labor"
    SERVICE = "service"


class Invoice(Base):
    """Invoice database model."""

    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    job_card_id = Column(String(36), ForeignKey("job_cards.id"), nullable=False, index=True)
    total_amount = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    final_amount = Column(Float, nullable=False, default=0)
    # Stored as text so legacy spellings ("Canceled") survive a round trip
    status = Column(String(20), nullable=False, default=InvoiceStatus.DRAFT.value)
    gst_slab_id = Column(String(36), ForeignKey("gst_slabs.id", ondelete="SET NULL"), nullable=True)
    cgst_amount = Column(Float, nullable=True)
    sgst_amount = Column(Float, nullable=True)
    igst_amount = Column(Float, nullable=True)
    advisor_name = Column(String, nullable=True)
    mileage = Column(Integer, nullable=True)
    warranty_info = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    pdf_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, onupdate=utcnow)

    # Relationships
    items = relationship(
        "InvoiceItem", back_populates="invoice", cascade="all, delete-orphan", lazy="selectin",
        order_by="InvoiceItem.position",
    )


class InvoiceItem(Base):
    """Invoice line item database model."""

    __tablename__ = "invoice_items"

    id = Column(String(36), primary_key=True, default=new_id)
    invoice_id = Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    description = Column(String, nullable=False)
    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    item_type = Column(String(10), nullable=False)
    hsn_sac = Column(String(20), nullable=True)
    cgst_rate = Column(Float, nullable=True)
    sgst_rate = Column(Float, nullable=True)
    igst_rate = Column(Float, nullable=True)
    cgst_amount = Column(Float, nullable=True)
    sgst_amount = Column(Float, nullable=True)
    igst_amount = Column(Float, nullable=True)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")
