"""
Staff roster and attendance (clock-in / clock-out).
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.cache import query_cache
from garagehub.config import get_settings
from garagehub.database import utcnow
from garagehub.errors import ConflictError
from garagehub.models.staff import Attendance, Staff
from garagehub.realtime import commit_and_publish
from garagehub.schemas.staff import Staff as StaffSchema
from garagehub.services import get_owned

logger = logging.getLogger(__name__)


async def list_staff(db: AsyncSession, garage_id: str) -> list[dict]:
    async def load():
        result = await db.execute(select(Staff).where(Staff.garage_id == garage_id).order_by(Staff.name))
        return [StaffSchema.model_validate(member).model_dump() for member in result.scalars().all()]

    return await query_cache.get_or_load(("staff", garage_id), load, ttl=get_settings().cache_ttl_staff)


async def get_staff(db: AsyncSession, garage_id: str, staff_id: str) -> Staff:
    return await get_owned(db, Staff, garage_id, staff_id, "Staff member")


async def _open_shift(db: AsyncSession, staff_id: str) -> Optional[Attendance]:
    result = await db.execute(
        select(Attendance).where(Attendance.staff_id == staff_id, Attendance.clock_out.is_(None))
    )
    return result.scalars().first()


async def clock_in(db: AsyncSession, garage_id: str, staff_id: str, device_ip: Optional[str] = None) -> Attendance:
    member = await get_staff(db, garage_id, staff_id)
    if await _open_shift(db, member.id) is not None:
        raise ConflictError(f"{member.name} is already clocked in")
    record = Attendance(garage_id=garage_id, staff_id=member.id, clock_in=utcnow(), device_ip=device_ip)
    db.add(record)
    await commit_and_publish(db)
    logger.info("%s clocked in", member.name)
    return record


async def clock_out(db: AsyncSession, garage_id: str, staff_id: str, device_ip: Optional[str] = None) -> Attendance:
    """Close the open shift, computing hours worked and the salary due for it."""
    member = await get_staff(db, garage_id, staff_id)
    record = await _open_shift(db, member.id)
    if record is None:
        raise ConflictError(f"{member.name} is not clocked in")
    record.clock_out = utcnow()
    hours = round((record.clock_out - record.clock_in).total_seconds() / 3600, 2)
    record.hours_worked = hours
    record.salary_due = round(hours * (member.hourly_rate or 0), 2)
    if device_ip:
        record.device_ip = device_ip
    await commit_and_publish(db)
    logger.info("%s clocked out after %.2f hours", member.name, hours)
    return record


async def list_attendance(
    db: AsyncSession,
    garage_id: str,
    staff_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> list[Attendance]:
    query = select(Attendance).where(Attendance.garage_id == garage_id)
    if staff_id is not None:
        query = query.where(Attendance.staff_id == staff_id)
    if start is not None:
        query = query.where(Attendance.clock_in >= start)
    if end is not None:
        query = query.where(Attendance.clock_in <= end)
    result = await db.execute(query.order_by(Attendance.clock_in.desc()))
    return list(result.scalars().all())
