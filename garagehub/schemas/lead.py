"""
Pydantic schemas for Lead.
"""
from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import Optional, Union
from garagehub.models.lead import LeadStatus
from garagehub.schemas.job_card import JobCard


class LeadBase(BaseModel):
    """Base lead schema with common fields."""
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    license_plate: Optional[str] = None
    vehicle_info: Optional[str] = None
    enquiry_type: Optional[str] = None
    enquiry_details: Optional[str] = None
    enquiry_date: Optional[date] = None
    source: Optional[str] = None
    assigned_to: Optional[str] = None
    next_followup: Optional[date] = None
    notes: Optional[str] = None


class LeadCreate(LeadBase):
    """Schema for creating a lead."""
    pass


class LeadUpdate(LeadBase):
    """Schema for updating a lead. Only the fields sent are changed."""
    status: Optional[LeadStatus] = None


class Lead(LeadBase):
    """Schema for lead responses."""
    id: str
    status: LeadStatus
    last_contacted: Optional[datetime] = None
    last_followup: Optional[datetime] = None
    converted_job_card_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class FollowUpCreate(BaseModel):
    """Schema for recording a follow-up call."""
    note: Optional[str] = None
    next_followup: Optional[date] = None


class LeadNoteCreate(BaseModel):
    note: str


class LeadConvert(BaseModel):
    """Overrides applied to the job card created from a lead."""
    customer_phone: Optional[str] = None
    work_description: Optional[str] = None
    assigned_staff: Union[list[str], str, None] = None
    car_make: Optional[str] = None
    car_model: Optional[str] = None
    car_number: Optional[str] = None


class LeadConversion(BaseModel):
    lead: Lead
    job_card: JobCard
