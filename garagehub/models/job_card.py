"""
Job card (work order) model for database.
"""
from sqlalchemy import (
    Column, String, Float, Text, Date, DateTime, ForeignKey, JSON, Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from garagehub.database import Base, new_id, utcnow
import enum


class JobStatus(str, enum.Enum):
    """Job card status enumeration, in pipeline order."""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    PARTS_ORDERED = "Parts Ordered"
    READY_FOR_PICKUP = "Ready for Pickup"
    COMPLETED = "Completed"


OPEN_STATUSES = (
    JobStatus.PENDING,
    JobStatus.IN_PROGRESS,
    JobStatus.PARTS_ORDERED,
    JobStatus.READY_FOR_PICKUP,
)

# Only these can be invoiced
INVOICEABLE_STATUSES = (JobStatus.COMPLETED, JobStatus.READY_FOR_PICKUP)


class JobCard(Base):
    """Job card database model."""

    __tablename__ = "job_cards"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False, index=True)
    car_make = Column(String, nullable=False)
    car_model = Column(String, nullable=False)
    car_number = Column(String, nullable=False)
    work_description = Column(Text, nullable=False)
    assigned_staff = Column(JSON, nullable=True)
    status = Column(
        SQLEnum(JobStatus, values_callable=lambda e: [m.value for m in e], name="job_status"),
        default=JobStatus.PENDING,
        nullable=False,
        index=True,
    )
    parts = Column(JSON, nullable=True)
    selected_services = Column(JSON, nullable=True)
    labor_hours = Column(Float, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    manual_labor_cost = Column(Float, nullable=True)
    estimated_completion_date = Column(Date, nullable=True)
    actual_completion_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    job_date = Column(Date, nullable=True)
    gst_slab_id = Column(String(36), ForeignKey("gst_slabs.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, onupdate=utcnow)

    # Relationships
    photos = relationship(
        "JobPhoto", back_populates="job_card", cascade="all, delete-orphan", lazy="selectin",
    )


class JobPhoto(Base):
    """Before/after photo attached to a job card."""

    __tablename__ = "job_photos"

    id = Column(String(36), primary_key=True, default=new_id)
    garage_id = Column(String(36), ForeignKey("garages.id", ondelete="CASCADE"), nullable=False, index=True)
    job_card_id = Column(String(36), ForeignKey("job_cards.id", ondelete="CASCADE"), nullable=False, index=True)
    photo_type = Column(String(10), nullable=False, default="before")
    url = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    job_card = relationship("JobCard", back_populates="photos")
