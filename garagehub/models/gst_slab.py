"""
GST slab model for database.
"""
from sqlalchemy import Column, String, Float, Date, ForeignKey
from garagehub.database import Base, new_id


class GstSlab(Base):
    """GST slab database model: a named CGST/SGST/IGST bundle with an effective window."""

    __tablename__ = "gst_slabs"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    cgst_percent = Column(Float, nullable=False, default=0)
    sgst_percent = Column(Float, nullable=False, default=0)
    igst_percent = Column(Float, nullable=False, default=0)
    effective_from = Column(Date, nullable=False)
    effective_to = Column(Date, nullable=True)
