"""
Inventory model for database.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from garagehub.database import Base, new_id, utcnow


class InventoryItem(Base):
    """Inventory (stock) item database model."""

    __tablename__ = "inventory"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    item_name = Column(String, nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Float, nullable=False)
    min_stock_level = Column(Integer, nullable=False, default=0)
    supplier = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, onupdate=utcnow)
