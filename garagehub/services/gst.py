"""
GST slab lookup.
"""
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.cache import query_cache
from garagehub.models.gst_slab import GstSlab
from garagehub.schemas.gst_slab import GstSlab as GstSlabSchema


def is_effective(slab, on_date: date) -> bool:
    """True when ``on_date`` falls inside the slab's window (both ends inclusive)."""
    if slab.effective_from > on_date:
        return False
    return slab.effective_to is None or slab.effective_to >= on_date


def resolve_slab(slabs: Iterable, on_date: date) -> Optional[GstSlab]:
    """
    The slab in effect on ``on_date``. When windows overlap the one that
    started most recently wins.
    """
    candidates = [slab for slab in slabs if is_effective(slab, on_date)]
    if not candidates:
        return None
    return max(candidates, key=lambda slab: slab.effective_from)


async def list_slabs(db: AsyncSession, garage_id: str) -> list[dict]:
    async def load():
        result = await db.execute(
            select(GstSlab).where(GstSlab.garage_id == garage_id).order_by(GstSlab.effective_from.desc())
        )
        return [GstSlabSchema.model_validate(slab).model_dump() for slab in result.scalars().all()]

    return await query_cache.get_or_load(("gst_slabs", garage_id), load)


async def effective_slab(db: AsyncSession, garage_id: str, on_date: date) -> Optional[GstSlab]:
    result = await db.execute(select(GstSlab).where(GstSlab.garage_id == garage_id))
    return resolve_slab(result.scalars().all(), on_date)
