"""
Query and mutation functions behind the routers.

Reads go through ``query_cache``; writes end with ``commit_and_publish`` so
the change feed can invalidate the cached families and notify subscribers.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.errors import NotFoundError


async def get_owned(db: AsyncSession, model, garage_id: str, row_id: str, label: str):
    """Fetch a row of ``model`` belonging to ``garage_id`` or raise NotFoundError."""
    result = await db.execute(select(model).where(model.id == row_id, model.garage_id == garage_id))
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(f"{label} not found")
    return row
