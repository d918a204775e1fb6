"""
Garage service catalogue routes.
"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.cache import query_cache
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.models.garage_service import GarageService
from garagehub.realtime import commit_and_publish
from garagehub.schemas.garage_service import (
    GarageService as GarageServiceSchema, GarageServiceCreate, GarageServiceUpdate,
)
from garagehub.services import get_owned

router = APIRouter(prefix="/garage-services", tags=["garage-services"])


@router.get("/", response_model=List[GarageServiceSchema])
async def get_services(
    active_only: bool = False,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get the service catalogue by name.
    """
    async def load():
        query = select(GarageService).where(GarageService.garage_id == garage.id)
        if active_only:
            query = query.where(GarageService.is_active.is_(True))
        result = await db.execute(query.order_by(GarageService.service_name))
        return [GarageServiceSchema.model_validate(s).model_dump() for s in result.scalars().all()]

    return await query_cache.get_or_load(("garage_services", garage.id, active_only), load)


@router.get("/{service_id}", response_model=GarageServiceSchema)
async def get_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get a specific garage service by ID.
    """
    return await get_owned(db, GarageService, garage.id, service_id, "Service")


@router.post("/", response_model=GarageServiceSchema, status_code=status.HTTP_201_CREATED)
async def create_service(
    service: GarageServiceCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Add a service to the catalogue.
    """
    db_service = GarageService(garage_id=garage.id, **service.model_dump())
    db.add(db_service)
    await commit_and_publish(db)
    return db_service


@router.put("/{service_id}", response_model=GarageServiceSchema)
async def update_service(
    service_id: str,
    service_update: GarageServiceUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Update a garage service.
    """
    db_service = await get_owned(db, GarageService, garage.id, service_id, "Service")

    # Update only provided fields
    for field, value in service_update.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(db_service, field, value)

    await commit_and_publish(db)
    return db_service


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Remove a service from the catalogue.
    """
    db_service = await get_owned(db, GarageService, garage.id, service_id, "Service")
    await db.delete(db_service)
    await commit_and_publish(db)
    return None
