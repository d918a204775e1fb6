"""
Pydantic schemas for Garage.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class GarageUpdate(BaseModel):
    """Schema for renaming a garage."""
    name: str = Field(min_length=1, max_length=200)


class Garage(BaseModel):
    """Schema for garage responses."""
    id: str
    name: str
    owner_user_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
