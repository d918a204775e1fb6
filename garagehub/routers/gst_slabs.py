"""
GST slab routes.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db, utcnow
from garagehub.errors import InvalidInputError
from garagehub.models.garage import Garage
from garagehub.models.gst_slab import GstSlab
from garagehub.realtime import commit_and_publish
from garagehub.schemas.gst_slab import GstSlab as GstSlabSchema, GstSlabCreate, GstSlabUpdate
from garagehub.services import get_owned
from garagehub.services import gst as service

router = APIRouter(prefix="/gst-slabs", tags=["gst-slabs"])


@router.get("/", response_model=List[GstSlabSchema])
async def get_slabs(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get all GST slabs, latest first.
    """
    return await service.list_slabs(db, garage.id)


@router.get("/effective", response_model=Optional[GstSlabSchema])
async def get_effective_slab(
    on: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get the slab in effect on a date (today by default), or null.
    """
    return await service.effective_slab(db, garage.id, on or utcnow().date())


@router.get("/{slab_id}", response_model=GstSlabSchema)
async def get_slab(slab_id: str, db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get a specific GST slab by ID.
    """
    return await get_owned(db, GstSlab, garage.id, slab_id, "GST slab")


@router.post("/", response_model=GstSlabSchema, status_code=status.HTTP_201_CREATED)
async def create_slab(
    slab: GstSlabCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Create a GST slab.
    """
    db_slab = GstSlab(garage_id=garage.id, **slab.model_dump())
    db.add(db_slab)
    await commit_and_publish(db)
    return db_slab


@router.put("/{slab_id}", response_model=GstSlabSchema)
async def update_slab(
    slab_id: str,
    slab_update: GstSlabUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Update a GST slab.
    """
    db_slab = await get_owned(db, GstSlab, garage.id, slab_id, "GST slab")
    update_data = slab_update.model_dump(exclude_unset=True)

    # effective_to may be cleared with an explicit null
    for field, value in update_data.items():
        if value is not None or field == "effective_to":
            setattr(db_slab, field, value)

    if db_slab.effective_to is not None and db_slab.effective_to < db_slab.effective_from:
        raise InvalidInputError("effective_to must not be before effective_from")

    await commit_and_publish(db)
    return db_slab


@router.delete("/{slab_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_slab(slab_id: str, db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Delete a GST slab.
    """
    db_slab = await get_owned(db, GstSlab, garage.id, slab_id, "GST slab")
    await db.delete(db_slab)
    await commit_and_publish(db)
    return None
