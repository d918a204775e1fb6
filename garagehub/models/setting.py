"""
Key/value garage settings model for database.
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from garagehub.database import Base, new_id, utcnow


class Setting(Base):
    """One garage setting (invoice header fields, default tax rate, ...)."""

    __tablename__ = "settings"
    __table_args__ = (UniqueConstraint("garage_id", "setting_key", name="uq_settings_garage_key"),)

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    setting_key = Column(String(100), nullable=False)
    setting_value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
