"""
Garage (tenant) model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from garagehub.database import Base, new_id, utcnow


class Garage(Base):
    """Garage database model. Every other table is scoped by its id."""

    __tablename__ = "garages"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    owner_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
