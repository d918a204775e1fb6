"""
Lead routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.converters import to_app_job_card
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.models.lead import Lead, LeadStatus
from garagehub.realtime import commit_and_publish
from garagehub.schemas.lead import (
    FollowUpCreate, Lead as LeadSchema, LeadConversion, LeadConvert, LeadCreate, LeadNoteCreate, LeadUpdate,
)
from garagehub.services import leads as service

router = APIRouter(prefix="/leads", tags=["leads"])


@router.get("/", response_model=List[LeadSchema])
async def get_leads(
    status_filter: Optional[LeadStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get leads, newest first.
    """
    return await service.list_leads(db, garage.id, status_filter)


@router.get("/{lead_id}", response_model=LeadSchema)
async def get_lead(lead_id: str, db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get a specific lead by ID.
    """
    return await service.get_lead(db, garage.id, lead_id)


@router.post("/", response_model=LeadSchema, status_code=status.HTTP_201_CREATED)
async def create_lead(
    lead: LeadCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Record a new enquiry.
    """
    db_lead = Lead(garage_id=garage.id, **lead.model_dump())
    db.add(db_lead)
    await commit_and_publish(db)
    return db_lead


@router.put("/{lead_id}", response_model=LeadSchema)
async def update_lead(
    lead_id: str,
    lead_update: LeadUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Update a lead.
    """
    db_lead = await service.get_lead(db, garage.id, lead_id)

    for field, value in lead_update.model_dump(exclude_unset=True).items():
        if field == "status":
            if value is not None:
                db_lead.status = value.value
        else:
            setattr(db_lead, field, value)

    await commit_and_publish(db)
    return db_lead


@router.delete("/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lead(lead_id: str, db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Delete a lead.
    """
    db_lead = await service.get_lead(db, garage.id, lead_id)
    await db.delete(db_lead)
    await commit_and_publish(db)
    return None


@router.post("/{lead_id}/follow-up", response_model=LeadSchema)
async def record_follow_up(
    lead_id: str,
    follow_up: FollowUpCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Record a follow-up call and schedule the next one.
    """
    return await service.record_follow_up(db, garage.id, lead_id, follow_up)


@router.post("/{lead_id}/notes", response_model=LeadSchema)
async def add_note(
    lead_id: str,
    note: LeadNoteCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Append a timestamped note to a lead.
    """
    return await service.add_note(db, garage.id, lead_id, note.note)


@router.post("/{lead_id}/convert", response_model=LeadConversion, status_code=status.HTTP_201_CREATED)
async def convert_lead(
    lead_id: str,
    conversion: Optional[LeadConvert] = None,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Turn a lead into a Pending job card.
    """
    lead, job = await service.convert_lead(db, garage.id, lead_id, conversion or LeadConvert())
    return {"lead": LeadSchema.model_validate(lead), "job_card": to_app_job_card(job)}
