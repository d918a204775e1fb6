"""
Pydantic schemas for Inventory.
"""
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from datetime import datetime
from typing import Optional
from garagehub.sanitize import Money, Quantity


class InventoryItemBase(BaseModel):
    """Base inventory schema with common fields."""
    item_name: str = Field(min_length=1)
    quantity: Quantity = 0
    unit_price: Money
    min_stock_level: Quantity = 0
    supplier: Optional[str] = None


class InventoryItemCreate(InventoryItemBase):
    """Schema for creating an inventory item."""
    pass


class InventoryItemUpdate(BaseModel):
    """Schema for updating an inventory item."""
    item_name: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[Quantity] = None
    unit_price: Optional[Money] = None
    min_stock_level: Optional[Quantity] = None
    supplier: Optional[str] = None


class InventoryItem(InventoryItemBase):
    """Schema for inventory responses."""
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def low_stock(self) -> bool:
        return self.quantity <= self.min_stock_level

    @computed_field
    @property
    def stock_value(self) -> float:
        return round(self.quantity * self.unit_price, 2)


class InventoryList(BaseModel):
    items: list[InventoryItem]
    count: int


class RestockRequest(BaseModel):
    """Schema for adding stock to an item."""
    quantity: Quantity
    unit_cost: Optional[Money] = None

    @field_validator("quantity")
    @classmethod
    def positive(cls, value):
        if value <= 0:
            raise ValueError("Quantity must be greater than zero")
        return value


class InventoryValue(BaseModel):
    total_value: float
    item_count: int
