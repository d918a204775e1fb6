"""
Staff and attendance routes.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.models.staff import Staff
from garagehub.realtime import commit_and_publish
from garagehub.schemas.staff import (
    Attendance, ClockRequest, Staff as StaffSchema, StaffCreate, StaffUpdate,
)
from garagehub.services import staff as service

router = APIRouter(prefix="/staff", tags=["staff"])


def _device_ip(request: Request, clock: Optional[ClockRequest]) -> Optional[str]:
    if clock is not None and clock.device_ip:
        return clock.device_ip
    return request.client.host if request.client else None


@router.get("/", response_model=List[StaffSchema])
async def get_staff_members(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get all staff members by name.
    """
    return await service.list_staff(db, garage.id)


@router.get("/attendance", response_model=List[Attendance])
async def get_attendance(
    staff_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get attendance records, latest shift first.
    """
    return await service.list_attendance(db, garage.id, staff_id, start, end)


@router.get("/{staff_id}", response_model=StaffSchema)
async def get_staff_member(
    staff_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get a specific staff member by ID.
    """
    return await service.get_staff(db, garage.id, staff_id)


@router.post("/", response_model=StaffSchema, status_code=status.HTTP_201_CREATED)
async def create_staff_member(
    member: StaffCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Add a staff member.
    """
    db_member = Staff(garage_id=garage.id, **member.model_dump())
    db.add(db_member)
    await commit_and_publish(db)
    return db_member


@router.put("/{staff_id}", response_model=StaffSchema)
async def update_staff_member(
    staff_id: str,
    member_update: StaffUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Update a staff member.
    """
    db_member = await service.get_staff(db, garage.id, staff_id)

    # Update only provided fields
    for field, value in member_update.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(db_member, field, value)

    await commit_and_publish(db)
    return db_member


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_staff_member(
    staff_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Remove a staff member and their attendance history.
    """
    db_member = await service.get_staff(db, garage.id, staff_id)
    await db.delete(db_member)
    await commit_and_publish(db)
    return None


@router.post("/{staff_id}/clock-in", response_model=Attendance, status_code=status.HTTP_201_CREATED)
async def clock_in(
    staff_id: str,
    request: Request,
    clock: Optional[ClockRequest] = None,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Open a shift for a staff member.
    """
    return await service.clock_in(db, garage.id, staff_id, _device_ip(request, clock))


@router.post("/{staff_id}/clock-out", response_model=Attendance)
async def clock_out(
    staff_id: str,
    request: Request,
    clock: Optional[ClockRequest] = None,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Close the open shift of a staff member.
    """
    return await service.clock_out(db, garage.id, staff_id, _device_ip(request, clock))
