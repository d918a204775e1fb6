"""
Pydantic schemas for promotions, loyalty points and service reminders.
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date, datetime
from typing import Literal, Optional
from garagehub.sanitize import Money, Percent, Quantity


class PromotionsSettingsUpdate(BaseModel):
    """Schema for updating promotions settings."""
    reminder_interval_months: Optional[Quantity] = None
    enable_service_reminder: Optional[bool] = None
    reminder_message_template: Optional[str] = Field(default=None, min_length=1)
    enable_promotional_offers: Optional[bool] = None
    membership_point_value: Optional[Quantity] = None


class PromotionsSettings(BaseModel):
    """Schema for promotions settings responses."""
    reminder_interval_months: int
    enable_service_reminder: bool
    reminder_message_template: str
    enable_promotional_offers: bool
    membership_point_value: int

    model_config = ConfigDict(from_attributes=True)


class PromotionBase(BaseModel):
    """Base promotion schema with common fields."""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    discount_amount: Optional[Money] = None
    discount_percent: Optional[Percent] = None
    valid_from: date
    valid_to: date
    is_active: bool = True

    @model_validator(mode="after")
    def check_window(self):
        if self.valid_to < self.valid_from:
            raise ValueError("valid_to must not be before valid_from")
        return self


class PromotionCreate(PromotionBase):
    """Schema for creating a promotion."""
    pass


class PromotionUpdate(BaseModel):
    """Schema for updating a promotion."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    discount_amount: Optional[Money] = None
    discount_percent: Optional[Percent] = None
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    is_active: Optional[bool] = None


class Promotion(PromotionBase):
    """Schema for promotion responses."""
    id: str

    model_config = ConfigDict(from_attributes=True)


class LoyaltyMember(BaseModel):
    """One row of the loyalty leaderboard."""
    customer_id: str
    customer_name: str
    car: str
    total_points: int
    last_updated: datetime


ReminderStatus = Literal["pending", "sent", "dismissed"]


class ServiceReminder(BaseModel):
    """Schema for service reminder responses, with the rendered message."""
    id: str
    customer_id: str
    job_card_id: str
    customer_name: str
    car: str
    due_date: datetime
    status: str
    message: str
    created_at: datetime


class ReminderStatusUpdate(BaseModel):
    status: ReminderStatus


class ReminderRun(BaseModel):
    """Result of a reminder processing run."""
    created: int
    message: str
