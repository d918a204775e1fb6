"""
Sales leads: follow-ups, notes and conversion into job cards.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.cache import query_cache
from garagehub.converters import staff_names
from garagehub.database import utcnow
from garagehub.errors import ConflictError
from garagehub.models.job_card import JobCard, JobStatus
from garagehub.models.lead import Lead, LeadStatus
from garagehub.realtime import commit_and_publish
from garagehub.schemas.lead import FollowUpCreate, Lead as LeadSchema, LeadConvert
from garagehub.services import get_owned
from garagehub.services.job_cards import validate_job_card

logger = logging.getLogger(__name__)


async def list_leads(db: AsyncSession, garage_id: str, status: Optional[LeadStatus] = None) -> list[dict]:
    async def load():
        query = select(Lead).where(Lead.garage_id == garage_id)
        if status is not None:
            query = query.where(Lead.status == status.value)
        result = await db.execute(query.order_by(Lead.created_at.desc()))
        return [LeadSchema.model_validate(lead).model_dump() for lead in result.scalars().all()]

    return await query_cache.get_or_load(("leads", garage_id, getattr(status, "value", status)), load)


async def get_lead(db: AsyncSession, garage_id: str, lead_id: str) -> Lead:
    return await get_owned(db, Lead, garage_id, lead_id, "Lead")


def append_note(lead: Lead, note: str):
    """Append a timestamped line (``<iso time>::<note>``) to the lead's notes."""
    entry = f"{utcnow().isoformat()}::{note.strip()}"
    lead.notes = f"{lead.notes}\n{entry}" if lead.notes else entry


async def add_note(db: AsyncSession, garage_id: str, lead_id: str, note: str) -> Lead:
    lead = await get_lead(db, garage_id, lead_id)
    append_note(lead, note)
    await commit_and_publish(db)
    return lead


async def record_follow_up(db: AsyncSession, garage_id: str, lead_id: str, data: FollowUpCreate) -> Lead:
    lead = await get_lead(db, garage_id, lead_id)
    now = utcnow()
    lead.last_followup = now
    lead.last_contacted = now
    if data.next_followup is not None:
        lead.next_followup = data.next_followup
    if data.note:
        append_note(lead, data.note)
    await commit_and_publish(db)
    return lead


async def convert_lead(db: AsyncSession, garage_id: str, lead_id: str, data: LeadConvert) -> tuple[Lead, JobCard]:
    """
    Open a Pending job card pre-filled from the lead and mark the lead Converted.

    The job card must pass the usual required-field check. Details the lead
    lacks come from ``data``; when some are still missing InvalidInputError
    lists them and the lead stays as it was.
    """
    lead = await get_lead(db, garage_id, lead_id)
    if lead.status == LeadStatus.CONVERTED.value:
        raise ConflictError("Lead has already been converted")

    row = {
        "customer_name": lead.customer_name or "",
        "customer_phone": data.customer_phone or lead.phone_number or "",
        "car_make": data.car_make or lead.vehicle_make or "",
        "car_model": data.car_model or lead.vehicle_model or "",
        "car_number": data.car_number or lead.license_plate or lead.vehicle_info or "",
        "work_description": data.work_description or lead.enquiry_details or lead.enquiry_type or "",
        "assigned_staff": staff_names(data.assigned_staff or lead.assigned_to),
    }
    validate_job_card(row)

    job = JobCard(
        garage_id=garage_id,
        status=JobStatus.PENDING,
        parts=[],
        selected_services=[],
        job_date=utcnow().date(),
        **row,
    )
    db.add(job)
    await db.flush()

    lead.status = LeadStatus.CONVERTED.value
    lead.converted_job_card_id = job.id
    await commit_and_publish(db)
    logger.info("Converted lead %s into job card %s", lead.id, job.id)
    return lead, job
