"""
Pydantic schemas for the garage service catalogue.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from garagehub.sanitize import Money


class GarageServiceBase(BaseModel):
    """Base garage service schema with common fields."""
    service_name: str = Field(min_length=1)
    price: Money
    description: Optional[str] = None
    is_active: bool = True


class GarageServiceCreate(GarageServiceBase):
    """Schema for creating a garage service."""
    pass


class GarageServiceUpdate(BaseModel):
    """Schema for updating a garage service."""
    service_name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Money] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class GarageService(GarageServiceBase):
    """Schema for garage service responses."""
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
