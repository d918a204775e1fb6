"""
Invoice routes.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import get_current_garage
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.models.invoice import InvoiceStatus
from garagehub.schemas.invoice import (
    Invoice, InvoiceCreate, InvoiceItemsReplace, InvoiceList, InvoicePreview, InvoiceUpdate,
)
from garagehub.schemas.job_card import JobCard
from garagehub.services import invoices as service

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/", response_model=InvoiceList)
async def get_invoices(
    status_filter: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get invoices, newest first.
    """
    return await service.list_invoices(db, garage.id, status_filter, skip, limit)


@router.get("/invoiceable-jobs", response_model=list[JobCard])
async def get_invoiceable_jobs(db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get job cards that are ready to be invoiced.
    """
    return await service.invoiceable_jobs(db, garage.id)


@router.post("/preview", response_model=InvoicePreview)
async def preview_invoice(
    invoice: InvoiceCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Price an invoice for a job card without saving it.
    """
    return await service.preview_invoice(db, garage.id, invoice)


@router.post("/", response_model=Invoice, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice: InvoiceCreate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Generate an invoice from a completed job card.
    """
    db_invoice = await service.create_invoice(db, garage.id, invoice)
    return await service.invoice_view(db, db_invoice)


@router.get("/{invoice_id}", response_model=Invoice)
async def get_invoice(invoice_id: str, db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Get a specific invoice by ID.
    """
    return await service.invoice_view(db, await service.get_invoice(db, garage.id, invoice_id))


@router.get(
    "/{invoice_id}/pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}, "description": "The printable invoice."}},
)
async def get_invoice_pdf(
    invoice_id: str,
    download: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Get an invoice as a printable PDF, inline or as a download.
    """
    number, content = await service.invoice_pdf(db, garage, invoice_id)
    disposition = "attachment" if download else "inline"
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'{disposition}; filename="{number}.pdf"'},
    )


@router.put("/{invoice_id}", response_model=Invoice)
async def update_invoice(
    invoice_id: str,
    invoice_update: InvoiceUpdate,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Update the status or header details of an invoice.
    """
    db_invoice = await service.update_invoice(db, garage.id, invoice_id, invoice_update)
    return await service.invoice_view(db, db_invoice)


@router.put("/{invoice_id}/items", response_model=Invoice)
async def replace_invoice_items(
    invoice_id: str,
    replacement: InvoiceItemsReplace,
    db: AsyncSession = Depends(get_db),
    garage: Garage = Depends(get_current_garage),
):
    """
    Replace the line items of an invoice and recompute its totals.
    """
    db_invoice = await service.replace_items(db, garage.id, invoice_id, replacement.items)
    return await service.invoice_view(db, db_invoice)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(invoice_id: str, db: AsyncSession = Depends(get_db), garage: Garage = Depends(get_current_garage)):
    """
    Delete an invoice.
    """
    await service.delete_invoice(db, garage.id, invoice_id)
    return None
