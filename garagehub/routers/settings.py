"""
Per-garage key/value settings routes.
"""
from typing import Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.services import garage_settings as service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=Dict[str, Optional[str]])
async def get_settings(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get all settings of the garage.
    """
    return await service.get_all(db, garage.id)


@router.put("/", response_model=Dict[str, Optional[str]])
async def update_settings(
    values: Dict[str, Optional[str]],
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Insert or update settings. Keys not sent are left alone.
    """
    return await service.update_many(db, garage.id, values)
