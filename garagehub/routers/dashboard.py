"""
Dashboard routes.
"""
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.schemas.inventory import InventoryItem
from garagehub.schemas.job_card import JobCard
from garagehub.services import dashboard as service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/")
async def get_dashboard(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get the headline metrics: revenue, expenses, profit, jobs and stock.
    """
    return await service.dashboard_stats(db, garage.id)


@router.get("/revenue-tabs")
async def get_revenue_tabs(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get today's, this week's and this month's revenue from completed jobs.
    """
    return await service.revenue_tabs(db, garage.id)


@router.get("/revenue-chart")
async def get_revenue_chart(
    time_range: Literal["week", "month", "year"] = Query(default="month", alias="range"),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get income and expense series for a period, compared with the previous one.
    """
    return await service.revenue_chart(db, garage.id, time_range)


@router.get("/recent-job-cards", response_model=list[JobCard])
async def get_recent_job_cards(
    limit: int = Query(default=5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get the latest job cards.
    """
    return await service.recent_job_cards(db, garage.id, limit)


@router.get("/staff-performance")
async def get_staff_performance(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get the number of jobs assigned to each staff member.
    """
    return await service.staff_performance(db, garage.id)


@router.get("/inventory-alerts", response_model=list[InventoryItem])
async def get_inventory_alerts(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get items that need restocking.
    """
    return await service.inventory_alerts(db, garage.id)
