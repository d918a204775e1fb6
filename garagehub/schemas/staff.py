"""
Pydantic schemas for Staff and Attendance.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from garagehub.sanitize import Money


class StaffBase(BaseModel):
    """Base staff schema with common fields."""
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    designation: str = Field(min_length=1)
    hourly_rate: Money = 0


class StaffCreate(StaffBase):
    """Schema for creating a staff member."""
    pass


class StaffUpdate(BaseModel):
    """Schema for updating a staff member."""
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    designation: Optional[str] = None
    hourly_rate: Optional[Money] = None


class Staff(StaffBase):
    """Schema for staff responses."""
    id: str

    model_config = ConfigDict(from_attributes=True)


class ClockRequest(BaseModel):
    """Schema for clock-in / clock-out."""
    device_ip: Optional[str] = None


class Attendance(BaseModel):
    """Schema for attendance responses."""
    id: str
    staff_id: str
    clock_in: datetime
    clock_out: Optional[datetime] = None
    hours_worked: Optional[float] = None
    salary_due: Optional[float] = None
    device_ip: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
