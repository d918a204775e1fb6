"""
Promotions, loyalty and service reminder models for database.
"""
from sqlalchemy import Boolean, Column, Integer, String, Float, Text, Date, DateTime, ForeignKey
from garagehub.database import Base, new_id, utcnow


DEFAULT_REMINDER_TEMPLATE = (
    "Hi {customer_name}, your {car} is due for its next service on {due_date}. "
    "Reply to book a slot."
)


class PromotionsSettings(Base):
    """Per-garage promotions and loyalty settings."""

    __tablename__ = "promotions_settings"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, unique=True)
    reminder_interval_months = Column(Integer, nullable=False, default=6)
    enable_service_reminder = Column(Boolean, nullable=False, default=True)
    reminder_message_template = Column(Text, nullable=False, default=DEFAULT_REMINDER_TEMPLATE)
    enable_promotional_offers = Column(Boolean, nullable=False, default=True)
    membership_point_value = Column(Integer, nullable=False, default=10)


class Promotion(Base):
    """Promotional offer database model."""

    __tablename__ = "promotions"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    discount_amount = Column(Float, nullable=True)
    discount_percent = Column(Float, nullable=True)
    valid_from = Column(Date, nullable=False)
    valid_to = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class LoyaltyPoints(Base):
    """Loyalty balance of one customer, keyed by phone number."""

    __tablename__ = "loyalty_points"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(String, nullable=False, index=True)
    job_card_id = Column(String(36), ForeignKey("job_cards.id", ondelete="SET NULL"), nullable=True)
    total_points = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime, default=utcnow, nullable=False)


class ServiceReminder(Base):
    """Reminder that a customer's vehicle is due for service."""

    __tablename__ = "service_reminders"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(String, nullable=False)
    job_card_id = Column(String(36), ForeignKey("job_cards.id", ondelete="CASCADE"), nullable=False, unique=True)
    due_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime, default=utcnow, nullable=False)
