"""
Garage (tenant) routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.realtime import commit_and_publish
from garagehub.schemas.garage import Garage as GarageSchema, GarageUpdate

router = APIRouter(prefix="/garages", tags=["garages"])


@router.get("/current", response_model=GarageSchema)
async def get_current(garage: Garage = Depends(get_current_garage)):
    """
    Get the garage of the current user.
    """
    return garage


@router.put("/current", response_model=GarageSchema)
async def rename_current(
    garage_update: GarageUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Rename the garage of the current user.
    """
    garage.name = garage_update.name
    await commit_and_publish(db)
    return garage
