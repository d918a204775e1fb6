"""
Promotions settings, offers, loyalty and service reminder routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db
from garagehub.errors import InvalidInputError
from garagehub.models.garage import Garage
from garagehub.models.promotions import Promotion
from garagehub.realtime import commit_and_publish
from garagehub.schemas.promotions import (
    LoyaltyMember, Promotion as PromotionSchema, PromotionCreate, PromotionUpdate, PromotionsSettings,
    PromotionsSettingsUpdate, ReminderRun, ReminderStatus, ReminderStatusUpdate, ServiceReminder,
)
from garagehub.services import get_owned
from garagehub.services import promotions as service

router = APIRouter(prefix="/promotions", tags=["promotions"])


# ==================== SETTINGS ====================

@router.get("/settings", response_model=PromotionsSettings)
async def get_settings(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get the promotions settings, defaults if never saved.
    """
    return await service.get_promotions_settings(db, garage.id)


@router.put("/settings", response_model=PromotionsSettings)
async def update_settings(
    settings_update: PromotionsSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Update the promotions settings.
    """
    return await service.update_promotions_settings(db, garage.id, settings_update)


# ==================== LOYALTY ====================

@router.get("/loyalty", response_model=List[LoyaltyMember])
async def get_loyalty_leaderboard(
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get the loyalty members with the most points.
    """
    return await service.leaderboard(db, garage.id, limit)


# ==================== SERVICE REMINDERS ====================

@router.get("/reminders", response_model=List[ServiceReminder])
async def get_reminders(
    status_filter: Optional[ReminderStatus] = Query(default=None, alias="status"),
    upcoming: bool = False,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get service reminders with their rendered messages.
    """
    return await service.list_reminders(db, garage.id, status_filter, upcoming)


@router.post("/reminders/process", response_model=ReminderRun)
async def process_reminders(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Create reminders for completed jobs that are due for their next service.
    """
    return await service.process_service_reminders(db, garage.id)


@router.put("/reminders/{reminder_id}", response_model=ServiceReminder)
async def update_reminder_status(
    reminder_id: str,
    update: ReminderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Mark a reminder as sent or dismissed.
    """
    return await service.set_reminder_status(db, garage.id, reminder_id, update.status)


# ==================== OFFERS ====================

@router.get("/", response_model=List[PromotionSchema])
async def get_promotions(
    active_only: bool = False,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get promotional offers, optionally only those running today.
    """
    return await service.list_promotions(db, garage.id, active_only)


@router.get("/{promotion_id}", response_model=PromotionSchema)
async def get_promotion(
    promotion_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get a specific promotion by ID.
    """
    return await get_owned(db, Promotion, garage.id, promotion_id, "Promotion")


@router.post("/", response_model=PromotionSchema, status_code=status.HTTP_201_CREATED)
async def create_promotion(
    promotion: PromotionCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Create a promotional offer.
    """
    db_promotion = Promotion(garage_id=garage.id, **promotion.model_dump())
    db.add(db_promotion)
    await commit_and_publish(db)
    return db_promotion


@router.put("/{promotion_id}", response_model=PromotionSchema)
async def update_promotion(
    promotion_id: str,
    promotion_update: PromotionUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Update a promotional offer.
    """
    db_promotion = await get_owned(db, Promotion, garage.id, promotion_id, "Promotion")

    for field, value in promotion_update.model_dump(exclude_unset=True).items():
        if value is not None or field in ("discount_amount", "discount_percent", "description"):
            setattr(db_promotion, field, value)

    if db_promotion.valid_to < db_promotion.valid_from:
        raise InvalidInputError("valid_to must not be before valid_from")

    await commit_and_publish(db)
    return db_promotion


@router.delete("/{promotion_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_promotion(
    promotion_id: str,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Delete a promotional offer.
    """
    db_promotion = await get_owned(db, Promotion, garage.id, promotion_id, "Promotion")
    await db.delete(db_promotion)
    await commit_and_publish(db)
    return None
