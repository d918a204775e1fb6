"""
Job card routes, including the status pipeline and photos.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.converters import to_app_job_card
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.models.job_card import JobStatus
from garagehub.schemas.job_card import (
    JobCard, JobCardCreate, JobCardList, JobCardMove, JobCardUpdate, JobPhoto, JobPhotoCreate, Pipeline,
)
from garagehub.services import job_cards as service

router = APIRouter(prefix="/job-cards", tags=["job-cards"])


def _photo(photo) -> dict:
    return {"id": photo.id, "type": photo.photo_type, "url": photo.url}


@router.get("/", response_model=JobCardList)
async def get_job_cards(
    status_filter: Optional[JobStatus] = Query(default=None, alias="status"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get job cards, newest first, optionally filtered by status.
    """
    return await service.list_job_cards(db, garage.id, status_filter, skip, limit)


@router.get("/pipeline", response_model=Pipeline)
async def get_pipeline(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get open job cards grouped by status, plus a page of completed ones.
    """
    return await service.get_pipeline(db, garage.id, page, page_size)


@router.get("/{job_card_id}", response_model=JobCard)
async def get_job_card(
    job_card_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get a specific job card by ID.
    """
    return to_app_job_card(await service.get_job_card(db, garage.id, job_card_id))


@router.post("/", response_model=JobCard, status_code=status.HTTP_201_CREATED)
async def create_job_card(
    job_card: JobCardCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Create a new job card.
    """
    return to_app_job_card(await service.create_job_card(db, garage.id, job_card))


@router.put("/{job_card_id}", response_model=JobCard)
async def update_job_card(
    job_card_id: str,
    job_card: JobCardUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Save a job card. Completing it books the parts used.
    """
    return to_app_job_card(await service.update_job_card(db, garage.id, job_card_id, job_card))


@router.post("/{job_card_id}/move", response_model=JobCard)
async def move_job_card(
    job_card_id: str,
    move: JobCardMove,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Move a job card to another pipeline column.
    """
    return to_app_job_card(await service.move_job_card(db, garage.id, job_card_id, move.status))


@router.delete("/{job_card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job_card(
    job_card_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Delete a job card that has not been invoiced.
    """
    await service.delete_job_card(db, garage.id, job_card_id)
    return None


@router.get("/{job_card_id}/photos", response_model=List[JobPhoto])
async def get_photos(
    job_card_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get the before/after photos of a job card.
    """
    return [_photo(p) for p in await service.list_photos(db, garage.id, job_card_id)]


@router.post("/{job_card_id}/photos", response_model=JobPhoto, status_code=status.HTTP_201_CREATED)
async def add_photo(
    job_card_id: str,
    photo: JobPhotoCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Attach a photo URL to a job card.
    """
    return _photo(await service.add_photo(db, garage.id, job_card_id, photo.type, photo.url))


@router.delete("/{job_card_id}/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_photo(
    job_card_id: str,
    photo_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Remove a photo from a job card.
    """
    await service.delete_photo(db, garage.id, job_card_id, photo_id)
    return None
