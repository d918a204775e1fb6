"""
Staff and attendance models for database.
"""
from sqlalchemy import Column, String, Float, DateTime, ForeignKey
from garagehub.database import Base, new_id


class Staff(Base):
    """Staff member database model."""

    __tablename__ = "staff"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False)
    designation = Column(String, nullable=False)
    hourly_rate = Column(Float, nullable=False, default=0)


class Attendance(Base):
    """One clock-in/clock-out shift of a staff member."""

    __tablename__ = "attendance"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    staff_id = Column(String(36), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    clock_in = Column(DateTime, nullable=False)
    clock_out = Column(DateTime, nullable=True)
    hours_worked = Column(Float, nullable=True)
    salary_due = Column(Float, nullable=True)
    device_ip = Column(String, nullable=True)
