"""
Pydantic schemas for GST slabs.
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date
from typing import Optional
from garagehub.sanitize import Percent


class GstSlabBase(BaseModel):
    """Base GST slab schema with common fields."""
    name: str = Field(min_length=1)
    cgst_percent: Percent = 0
    sgst_percent: Percent = 0
    igst_percent: Percent = 0
    effective_from: date
    effective_to: Optional[date] = None

    @model_validator(mode="after")
    def check_window(self):
        if self.effective_to is not None and self.effective_to < self.effective_from:
            raise ValueError("effective_to must not be before effective_from")
        return self


class GstSlabCreate(GstSlabBase):
    """Schema for creating a GST slab."""
    pass


class GstSlabUpdate(BaseModel):
    """Schema for updating a GST slab. The window is re-checked by the service."""
    name: Optional[str] = Field(default=None, min_length=1)
    cgst_percent: Optional[Percent] = None
    sgst_percent: Optional[Percent] = None
    igst_percent: Optional[Percent] = None
    effective_from: Optional[date] = None
    effective_to: Optional[date] = None


class GstSlab(GstSlabBase):
    """Schema for GST slab responses."""
    id: str

    model_config = ConfigDict(from_attributes=True)
