"""
Job card queries, the status pipeline and completion side effects.
"""
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.cache import query_cache
from garagehub.converters import to_app_job_card, to_row_job_card
from garagehub.database import utcnow
from garagehub.errors import ConflictError, InvalidInputError, NotFoundError
from garagehub.models.inventory import InventoryItem
from garagehub.models.invoice import Invoice
from garagehub.models.job_card import OPEN_STATUSES, JobCard, JobPhoto, JobStatus
from garagehub.models.ledger import Expense, ExpenseType
from garagehub.realtime import commit_and_publish
from garagehub.schemas.job_card import JobCardBase
from garagehub.services import get_owned

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    ("customer_name", "Customer name is required"),
    ("customer_phone", "Customer phone is required"),
    ("car_make", "Car make is required"),
    ("car_model", "Car model is required"),
    ("car_number", "Car number plate is required"),
    ("work_description", "Work description is required"),
    ("assigned_staff", "Assigned staff is required"),
)


def validate_job_card(row: dict):
    """Raise InvalidInputError listing every missing required field."""
    errors = []
    for field, message in REQUIRED_FIELDS:
        value = row.get(field)
        if isinstance(value, str):
            value = value.strip()
        if not value:
            errors.append(message)
    if errors:
        raise InvalidInputError("Job card is incomplete", errors)


def is_custom_part(part: dict) -> bool:
    """Custom parts are bought in for the job and never come out of inventory."""
    inventory_id = part.get("inventoryId", part.get("inventory_id"))
    return bool(part.get("isCustom") or part.get("is_custom")) or not inventory_id or inventory_id == "custom"


def _row_from_schema(data: JobCardBase) -> dict:
    return to_row_job_card(data.model_dump(by_alias=True))


async def get_job_card(db: AsyncSession, garage_id: str, job_card_id: str) -> JobCard:
    return await get_owned(db, JobCard, garage_id, job_card_id, "Job card")


async def list_job_cards(
    db: AsyncSession,
    garage_id: str,
    status: Optional[JobStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> dict:
    """Newest first page of job cards as view-models, with the total count."""

    async def load():
        query = select(JobCard).where(JobCard.garage_id == garage_id)
        count_query = select(func.count()).select_from(JobCard).where(JobCard.garage_id == garage_id)
        if status is not None:
            query = query.where(JobCard.status == status)
            count_query = count_query.where(JobCard.status == status)
        result = await db.execute(query.order_by(JobCard.created_at.desc()).offset(skip).limit(limit))
        count = (await db.execute(count_query)).scalar_one()
        return {"jobCards": [to_app_job_card(job) for job in result.scalars().all()], "count": count}

    key = ("job_cards", garage_id, getattr(status, "value", status), skip, limit)
    return await query_cache.get_or_load(key, load)


async def apply_completion_effects(db: AsyncSession, job: JobCard):
    """
    Book the parts of a job that has just been completed.

    Inventory parts are booked as cost of goods sold and, when they were
    taken from stock, deducted from inventory (never below zero). Custom
    parts are booked as manual expenses.
    """
    for part in job.parts or []:
        quantity = int(part.get("quantity") or 0)
        name = part.get("name")
        if not name or quantity <= 0:
            continue
        unit_cost = float(part.get("unitPrice", part.get("unit_price")) or 0)

        if is_custom_part(part):
            db.add(Expense(
                garage_id=job.garage_id,
                type=ExpenseType.MANUAL.value,
                item_name=name,
                quantity=quantity,
                unit_cost=unit_cost,
                total_cost=quantity * unit_cost,
                related_id=job.id,
                description=f"Manual expense for custom part used in job card {job.id} - {name}",
            ))
            continue

        if part.get("inStock"):
            result = await db.execute(
                select(InventoryItem).where(
                    InventoryItem.id == part.get("inventoryId"),
                    InventoryItem.garage_id == job.garage_id,
                )
            )
            item = result.scalar_one_or_none()
            if item is not None:
                item.quantity = max(0, item.quantity - quantity)
            else:
                logger.warning("Inventory item %s of job card %s no longer exists", part.get("inventoryId"), job.id)

        db.add(Expense(
            garage_id=job.garage_id,
            type=ExpenseType.COGS.value,
            item_name=name,
            quantity=quantity,
            unit_cost=unit_cost,
            total_cost=quantity * unit_cost,
            related_id=job.id,
            description=f"COGS for job card {job.id} - {name}",
        ))


async def _complete_if_needed(db: AsyncSession, job: JobCard, old_status: Optional[JobStatus]):
    if job.status != JobStatus.COMPLETED:
        return
    if job.actual_completion_date is None:
        job.actual_completion_date = utcnow()
    if old_status != JobStatus.COMPLETED:
        await apply_completion_effects(db, job)
        logger.info("Job card %s completed", job.id)


async def create_job_card(db: AsyncSession, garage_id: str, data: JobCardBase) -> JobCard:
    row = _row_from_schema(data)
    validate_job_card(row)
    job = JobCard(garage_id=garage_id, **row)
    if job.job_date is None:
        job.job_date = utcnow().date()
    db.add(job)
    await db.flush()
    await _complete_if_needed(db, job, None)
    await commit_and_publish(db)
    return job


async def update_job_card(db: AsyncSession, garage_id: str, job_card_id: str, data: JobCardBase) -> JobCard:
    job = await get_job_card(db, garage_id, job_card_id)
    row = _row_from_schema(data)
    validate_job_card(row)
    old_status = job.status
    for field, value in row.items():
        setattr(job, field, value)
    await _complete_if_needed(db, job, old_status)
    await commit_and_publish(db)
    return job


async def move_job_card(db: AsyncSession, garage_id: str, job_card_id: str, status: JobStatus) -> JobCard:
    """Move a job card to another pipeline column."""
    job = await get_job_card(db, garage_id, job_card_id)
    if job.status == status:
        return job
    old_status = job.status
    job.status = status
    await _complete_if_needed(db, job, old_status)
    await commit_and_publish(db)
    logger.info("Job card %s moved from %s to %s", job.id, old_status.value, status.value)
    return job


async def delete_job_card(db: AsyncSession, garage_id: str, job_card_id: str):
    job = await get_job_card(db, garage_id, job_card_id)
    result = await db.execute(select(func.count()).select_from(Invoice).where(Invoice.job_card_id == job.id))
    if result.scalar_one():
        raise ConflictError("Job card has invoices; delete them first")
    await db.delete(job)
    await commit_and_publish(db)


async def get_pipeline(db: AsyncSession, garage_id: str, page: int = 1, page_size: int = 10) -> dict:
    """Open job cards grouped per status column, plus a page of completed ones."""

    async def load():
        result = await db.execute(
            select(JobCard)
            .where(JobCard.garage_id == garage_id, JobCard.status.in_(OPEN_STATUSES))
            .order_by(JobCard.created_at.desc())
        )
        columns = {status.value: [] for status in OPEN_STATUSES}
        for job in result.scalars().all():
            columns[job.status.value].append(to_app_job_card(job))

        completed_filter = (JobCard.garage_id == garage_id, JobCard.status == JobStatus.COMPLETED)
        completed = await db.execute(
            select(JobCard)
            .where(*completed_filter)
            .order_by(JobCard.actual_completion_date.desc(), JobCard.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        count = (await db.execute(select(func.count()).select_from(JobCard).where(*completed_filter))).scalar_one()
        return {
            "columns": columns,
            "completed": [to_app_job_card(job) for job in completed.scalars().all()],
            "completedCount": count,
            "page": page,
            "pageSize": page_size,
        }

    return await query_cache.get_or_load(("pipeline", garage_id, page, page_size), load)


# ==================== PHOTOS ====================

async def add_photo(db: AsyncSession, garage_id: str, job_card_id: str, photo_type: str, url: str) -> JobPhoto:
    job = await get_job_card(db, garage_id, job_card_id)
    photo = JobPhoto(garage_id=garage_id, job_card_id=job.id, photo_type=photo_type, url=url)
    db.add(photo)
    await commit_and_publish(db)
    return photo


async def list_photos(db: AsyncSession, garage_id: str, job_card_id: str) -> list[JobPhoto]:
    job = await get_job_card(db, garage_id, job_card_id)
    result = await db.execute(
        select(JobPhoto).where(JobPhoto.job_card_id == job.id).order_by(JobPhoto.created_at)
    )
    return list(result.scalars().all())


async def delete_photo(db: AsyncSession, garage_id: str, job_card_id: str, photo_id: str):
    result = await db.execute(
        select(JobPhoto).where(
            JobPhoto.id == photo_id, JobPhoto.job_card_id == job_card_id, JobPhoto.garage_id == garage_id
        )
    )
    photo = result.scalar_one_or_none()
    if photo is None:
        raise NotFoundError("Photo not found")
    await db.delete(photo)
    await commit_and_publish(db)
