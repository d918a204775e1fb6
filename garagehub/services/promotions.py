"""
Promotions settings, offers, loyalty points and service reminders.

``award_loyalty_points`` runs from the change feed whenever a job card row
changes; ``process_service_reminders`` is run on demand through the API.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.cache import query_cache
from garagehub.config import get_settings
from garagehub.converters import format_display_date
from garagehub.database import AsyncSessionLocal, utcnow
from garagehub.errors import NotFoundError
from garagehub.models.job_card import JobCard, JobStatus
from garagehub.models.promotions import (
    DEFAULT_REMINDER_TEMPLATE, LoyaltyPoints, Promotion, PromotionsSettings, ServiceReminder,
)
from garagehub.realtime import ChangeEvent, commit_and_publish
from garagehub.schemas.promotions import PromotionsSettingsUpdate

logger = logging.getLogger(__name__)

COMPLETED = JobStatus.COMPLETED.value


# ==================== SETTINGS ====================

def default_settings(garage_id: str) -> PromotionsSettings:
    return PromotionsSettings(
        garage_id=garage_id,
        reminder_interval_months=6,
        enable_service_reminder=True,
        reminder_message_template=DEFAULT_REMINDER_TEMPLATE,
        enable_promotional_offers=True,
        membership_point_value=get_settings().loyalty_points_per_job,
    )


async def get_settings_row(db: AsyncSession, garage_id: str) -> Optional[PromotionsSettings]:
    result = await db.execute(select(PromotionsSettings).where(PromotionsSettings.garage_id == garage_id))
    return result.scalar_one_or_none()


async def get_promotions_settings(db: AsyncSession, garage_id: str) -> PromotionsSettings:
    """The garage's settings; unsaved defaults when none were stored yet."""
    return await get_settings_row(db, garage_id) or default_settings(garage_id)


async def update_promotions_settings(
    db: AsyncSession, garage_id: str, data: PromotionsSettingsUpdate
) -> PromotionsSettings:
    row = await get_settings_row(db, garage_id)
    if row is None:
        row = default_settings(garage_id)
        db.add(row)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(row, field, value)
    await commit_and_publish(db)
    return row


# ==================== PROMOTIONS ====================

async def list_promotions(db: AsyncSession, garage_id: str, active_only: bool = False, today: Optional[date] = None):
    query = select(Promotion).where(Promotion.garage_id == garage_id)
    if active_only:
        today = today or utcnow().date()
        query = query.where(Promotion.is_active.is_(True), Promotion.valid_from <= today, Promotion.valid_to >= today)
    result = await db.execute(query.order_by(Promotion.valid_from.desc()))
    return list(result.scalars().all())


# ==================== LOYALTY ====================

async def award_loyalty_points(
    db: AsyncSession, job: dict, old_status: Optional[str]
) -> Optional[LoyaltyPoints]:
    """
    Credit the customer of ``job`` when the job has just been completed.

    ``job`` is the job card row as published on the change feed. Customers
    are identified by phone number within the garage. Returns the updated
    balance, or None when this was not a transition into Completed.
    """
    if job.get("status") != COMPLETED or old_status == COMPLETED:
        return None
    phone = job.get("customer_phone")
    if not phone:
        return None
    garage_id = job["garage_id"]

    settings_row = await get_promotions_settings(db, garage_id)
    points = settings_row.membership_point_value or get_settings().loyalty_points_per_job

    result = await db.execute(
        select(LoyaltyPoints).where(LoyaltyPoints.garage_id == garage_id, LoyaltyPoints.customer_id == phone)
    )
    member = result.scalars().first()
    if member is None:
        member = LoyaltyPoints(garage_id=garage_id, customer_id=phone, job_card_id=job["id"], total_points=points)
        db.add(member)
    else:
        member.total_points += points
        member.last_updated = utcnow()
    await commit_and_publish(db)
    logger.info("Awarded %d loyalty points to %s (total %d)", points, phone, member.total_points)
    return member


def loyalty_subscriber(session_factory=AsyncSessionLocal):
    """Change feed callback awarding points on job card completion, in its own session."""

    async def on_job_card_change(change: ChangeEvent):
        if change.record.get("status") != COMPLETED:
            return
        old_status = (change.old_record or {}).get("status")
        async with session_factory() as db:
            await award_loyalty_points(db, change.record, old_status)

    return on_job_card_change


async def leaderboard(db: AsyncSession, garage_id: str, limit: int = 10) -> list[dict]:
    """Members by descending points, described from the job card that enrolled them."""

    async def load():
        result = await db.execute(
            select(LoyaltyPoints, JobCard)
            .outerjoin(JobCard, JobCard.id == LoyaltyPoints.job_card_id)
            .where(LoyaltyPoints.garage_id == garage_id)
            .order_by(LoyaltyPoints.total_points.desc(), LoyaltyPoints.last_updated.desc())
            .limit(limit)
        )
        rows = []
        for member, job in result.all():
            rows.append({
                "customer_id": member.customer_id,
                "customer_name": job.customer_name if job else "",
                "car": f"{job.car_make} {job.car_model}" if job else "",
                "total_points": member.total_points,
                "last_updated": member.last_updated,
            })
        return rows

    return await query_cache.get_or_load(("loyalty", garage_id, limit), load)


# ==================== SERVICE REMINDERS ====================

async def process_service_reminders(db: AsyncSession, garage_id: str, now: Optional[datetime] = None) -> dict:
    """
    Create a pending reminder for every completed job whose next service is
    due within ``reminder_lookahead_days`` (or overdue) and has none yet.
    """
    settings_row = await get_promotions_settings(db, garage_id)
    if not settings_row.enable_service_reminder:
        return {"created": 0, "message": "Service reminders are disabled"}

    now = now or utcnow()
    horizon = now + timedelta(days=get_settings().reminder_lookahead_days)
    interval = relativedelta(months=settings_row.reminder_interval_months)

    jobs = await db.execute(
        select(JobCard)
        .where(JobCard.garage_id == garage_id, JobCard.status == JobStatus.COMPLETED)
        .order_by(JobCard.actual_completion_date.desc())
    )
    existing = await db.execute(select(ServiceReminder.job_card_id).where(ServiceReminder.garage_id == garage_id))
    reminded = set(existing.scalars().all())

    created = 0
    for job in jobs.scalars().all():
        if job.id in reminded or job.actual_completion_date is None:
            continue
        due = job.actual_completion_date + interval
        if due <= horizon:
            db.add(ServiceReminder(garage_id=garage_id, customer_id=job.customer_phone, job_card_id=job.id, due_date=due))
            created += 1

    if created:
        await commit_and_publish(db)
        logger.info("Created %d service reminders for garage %s", created, garage_id)
    return {"created": created, "message": f"Processed service reminders. Created {created} new reminders."}


class _Blank(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def render_reminder(template: str, reminder: ServiceReminder, job: Optional[JobCard]) -> str:
    """Fill ``{customer_name}``, ``{car}`` and ``{due_date}`` into ``template``."""
    values = _Blank(
        customer_name=job.customer_name if job else "",
        car=f"{job.car_make} {job.car_model}" if job else "",
        due_date=format_display_date(reminder.due_date),
    )
    return template.format_map(values)


def reminder_view(reminder: ServiceReminder, job: Optional[JobCard], template: str) -> dict[str, Any]:
    return {
        "id": reminder.id,
        "customer_id": reminder.customer_id,
        "job_card_id": reminder.job_card_id,
        "customer_name": job.customer_name if job else "",
        "car": f"{job.car_make} {job.car_model}" if job else "",
        "due_date": reminder.due_date,
        "status": reminder.status,
        "message": render_reminder(template, reminder, job),
        "created_at": reminder.created_at,
    }


async def list_reminders(
    db: AsyncSession, garage_id: str, status: Optional[str] = None, upcoming: bool = False
) -> list[dict]:
    """
    Reminders with their rendered messages. ``upcoming`` keeps pending ones
    only, soonest first.
    """

    async def load():
        query = (
            select(ServiceReminder, JobCard)
            .outerjoin(JobCard, JobCard.id == ServiceReminder.job_card_id)
            .where(ServiceReminder.garage_id == garage_id)
        )
        if upcoming:
            query = query.where(ServiceReminder.status == "pending").order_by(ServiceReminder.due_date)
        else:
            query = query.order_by(ServiceReminder.due_date.desc())
        if status is not None:
            query = query.where(ServiceReminder.status == status)
        template = (await get_promotions_settings(db, garage_id)).reminder_message_template
        result = await db.execute(query)
        return [reminder_view(reminder, job, template) for reminder, job in result.all()]

    return await query_cache.get_or_load(("reminders", garage_id, status, upcoming), load)


async def set_reminder_status(db: AsyncSession, garage_id: str, reminder_id: str, status: str) -> dict:
    result = await db.execute(
        select(ServiceReminder, JobCard)
        .outerjoin(JobCard, JobCard.id == ServiceReminder.job_card_id)
        .where(ServiceReminder.id == reminder_id, ServiceReminder.garage_id == garage_id)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Service reminder not found")
    reminder, job = row
    reminder.status = status
    template = (await get_promotions_settings(db, garage_id)).reminder_message_template
    await commit_and_publish(db)
    return reminder_view(reminder, job, template)
