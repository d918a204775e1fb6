"""
Lead (sales enquiry) model for database.
"""
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey
from garagehub.database import Base, new_id, utcnow
import enum


class LeadStatus(str, enum.Enum):
    """Lead status enumeration."""
    ACTIVE = "Active"
    CONVERTED = "Converted"
    LOST = "Lost"


class Lead(Base):
    """Lead database model."""

    __tablename__ = "leads"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    vehicle_make = Column(String, nullable=True)
    vehicle_model = Column(String, nullable=True)
    license_plate = Column(String, nullable=True)
    vehicle_info = Column(String, nullable=True)
    enquiry_type = Column(String, nullable=True)
    enquiry_details = Column(Text, nullable=True)
    enquiry_date = Column(Date, nullable=True)
    source = Column(String, nullable=True)
    status = Column(String(20), nullable=False, default=LeadStatus.ACTIVE.value)
    assigned_to = Column(String, nullable=True)
    last_contacted = Column(DateTime, nullable=True)
    last_followup = Column(DateTime, nullable=True)
    next_followup = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    converted_job_card_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, onupdate=utcnow)
