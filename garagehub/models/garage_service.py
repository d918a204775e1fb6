"""
Garage service catalogue model for database.
"""
from sqlalchemy import Boolean, Column, String, Float, DateTime, ForeignKey
from garagehub.database import Base, new_id, utcnow


class GarageService(Base):
    """Fixed-price service offered by a garage (e.g. "Oil change")."""

    __tablename__ = "garage_services"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    service_name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
