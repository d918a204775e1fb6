"""
Per-garage key/value settings.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.cache import query_cache
from garagehub.config import get_settings
from garagehub.errors import InvalidInputError
from garagehub.models.setting import Setting
from garagehub.realtime import commit_and_publish

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE_KEY = "default_tax_rate"


async def get_all(db: AsyncSession, garage_id: str) -> dict[str, Optional[str]]:
    async def load():
        result = await db.execute(select(Setting).where(Setting.garage_id == garage_id))
        return {s.setting_key: s.setting_value for s in result.scalars().all()}

    return await query_cache.get_or_load(("settings", garage_id), load)


async def update_many(db: AsyncSession, garage_id: str, values: dict[str, Optional[str]]) -> dict[str, Optional[str]]:
    """Insert or update each key of ``values``."""
    if DEFAULT_TAX_RATE_KEY in values and values[DEFAULT_TAX_RATE_KEY] not in (None, ""):
        try:
            rate = float(values[DEFAULT_TAX_RATE_KEY])
        except ValueError:
            raise InvalidInputError("Invalid setting", ["default_tax_rate must be a number"]) from None
        if not 0 <= rate <= 100:
            raise InvalidInputError("Invalid setting", ["default_tax_rate must be between 0 and 100"])

    result = await db.execute(
        select(Setting).where(Setting.garage_id == garage_id, Setting.setting_key.in_(list(values)))
    )
    existing = {s.setting_key: s for s in result.scalars().all()}
    for key, value in values.items():
        setting = existing.get(key)
        if setting is None:
            db.add(Setting(garage_id=garage_id, setting_key=key, setting_value=value))
        else:
            setting.setting_value = value
    await commit_and_publish(db)
    return await get_all(db, garage_id)


async def default_tax_rate(db: AsyncSession, garage_id: str) -> float:
    """The garage's default GST rate, falling back to the application default."""
    value = (await get_all(db, garage_id)).get(DEFAULT_TAX_RATE_KEY)
    if value in (None, ""):
        return get_settings().default_tax_rate
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid default_tax_rate %r for garage %s", value, garage_id)
        return get_settings().default_tax_rate
