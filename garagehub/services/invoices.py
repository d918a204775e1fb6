"""
Invoice generation from job cards, and invoice maintenance.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from garagehub import metrics
from garagehub.cache import query_cache
from garagehub.config import get_settings
from garagehub.converters import to_app_invoice, to_app_job_card
from garagehub.database import utcnow
from garagehub.errors import InvalidInputError
from garagehub.invoice_pdf import render_invoice_pdf
from garagehub.models.garage import Garage
from garagehub.models.gst_slab import GstSlab
from garagehub.models.invoice import Invoice, InvoiceItem, InvoiceStatus, ItemType
from garagehub.models.job_card import INVOICEABLE_STATUSES, JobCard
from garagehub.realtime import commit_and_publish
from garagehub.schemas.invoice import InvoiceCreate, InvoiceItemInput, InvoiceUpdate
from garagehub.services import get_owned
from garagehub.services import garage_settings
from garagehub.services.gst import is_effective

logger = logging.getLogger(__name__)


@dataclass
class TaxRates:
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0
    gst_slab_id: Optional[str] = None

    @classmethod
    def split(cls, rate: float) -> "TaxRates":
        """An intra-state rate, shared equally between CGST and SGST."""
        return cls(cgst=rate / 2, sgst=rate / 2)


def _format_hours(hours: float) -> str:
    return f"{hours:g}"


def job_lines(job: JobCard) -> list[dict]:
    """Invoice lines for a job card: valid parts, selected services and one labor line."""
    lines = []
    for part in job.parts or []:
        quantity = float(part.get("quantity") or 0)
        unit_price = float(part.get("unitPrice", part.get("unit_price")) or 0)
        if not part.get("name") or not quantity or not unit_price:
            continue
        lines.append({
            "description": part["name"], "quantity": quantity, "unit_price": unit_price,
            "item_type": ItemType.PART.value, "hsn_sac": part.get("hsnSac"),
        })

    for service in job.selected_services or []:
        price = float(service.get("price") or 0)
        name = service.get("serviceName", service.get("service_name"))
        if not name or not price:
            continue
        lines.append({
            "description": name, "quantity": 1.0, "unit_price": price,
            "item_type": ItemType.SERVICE.value, "hsn_sac": None,
        })

    manual = float(job.manual_labor_cost or 0)
    hours = float(job.labor_hours or 0)
    if metrics.labor_cost(job) > 0:
        if manual > 0:
            line = {"description": "Labor: Service charge", "quantity": 1.0, "unit_price": manual}
        else:
            line = {
                "description": f"Labor: {_format_hours(hours)} hours",
                "quantity": hours,
                "unit_price": float(job.hourly_rate or 0),
            }
        line.update(item_type=ItemType.LABOR.value, hsn_sac=None)
        lines.append(line)
    return lines


def price_lines(lines: list[dict], discount: float, rates: TaxRates) -> dict:
    """
    Apply the discount and GST to invoice lines.

    Each line carries the slab rates and its share of the tax, computed on
    its total scaled by the discount ratio. Returns the priced lines and the
    invoice totals.
    """
    subtotal = sum(line["quantity"] * line["unit_price"] for line in lines)
    if discount < 0 or discount > subtotal:
        raise InvalidInputError("Invalid discount", ["Discount must be between 0 and the subtotal"])
    base = subtotal - discount
    ratio = base / subtotal if subtotal else 0.0

    priced = []
    for position, line in enumerate(lines):
        total = line["quantity"] * line["unit_price"]
        taxable = total * ratio
        priced.append(dict(
            line,
            position=position,
            total_price=round(total, 2),
            cgst_rate=rates.cgst,
            sgst_rate=rates.sgst,
            igst_rate=rates.igst,
            cgst_amount=round(taxable * rates.cgst / 100, 2),
            sgst_amount=round(taxable * rates.sgst / 100, 2),
            igst_amount=round(taxable * rates.igst / 100, 2),
        ))

    cgst = base * rates.cgst / 100
    sgst = base * rates.sgst / 100
    igst = base * rates.igst / 100
    tax = cgst + sgst + igst
    return {
        "lines": priced,
        "subtotal": round(subtotal, 2),
        "discount": round(discount, 2),
        "taxable_base": round(base, 2),
        "cgst_amount": round(cgst, 2),
        "sgst_amount": round(sgst, 2),
        "igst_amount": round(igst, 2),
        "tax": round(tax, 2),
        "final_amount": round(base + tax, 2),
    }


async def rates_for_job(
    db: AsyncSession, garage_id: str, job: JobCard, on_date: date, tax_rate: Optional[float] = None
) -> TaxRates:
    """
    GST rates for invoicing ``job`` on ``on_date``.

    A job with a GST slab uses it, provided the slab is in effect on that
    date. Otherwise the requested rate, or the garage default, is split into
    CGST and SGST.
    """
    if job.gst_slab_id:
        slab = await get_owned(db, GstSlab, garage_id, job.gst_slab_id, "GST slab")
        if not is_effective(slab, on_date):
            raise InvalidInputError(
                "GST slab not in effect",
                [f"GST slab '{slab.name}' is not effective on {on_date.isoformat()}"],
            )
        return TaxRates(slab.cgst_percent, slab.sgst_percent, slab.igst_percent, slab.id)
    if tax_rate is None:
        tax_rate = await garage_settings.default_tax_rate(db, garage_id)
    return TaxRates.split(tax_rate)


async def _invoiceable_job(db: AsyncSession, garage_id: str, job_card_id: str) -> JobCard:
    job = await get_owned(db, JobCard, garage_id, job_card_id, "Job card")
    if job.status not in INVOICEABLE_STATUSES:
        raise InvalidInputError(
            "Job card cannot be invoiced",
            [f"Job card status is '{job.status.value}'; only completed or ready-for-pickup jobs can be invoiced"],
        )
    return job


async def preview_invoice(db: AsyncSession, garage_id: str, data: InvoiceCreate) -> dict:
    """Totals an invoice for ``data`` would have, without saving anything."""
    job = await _invoiceable_job(db, garage_id, data.job_card_id)
    on_date = data.invoice_date or utcnow().date()
    rates = await rates_for_job(db, garage_id, job, on_date, data.tax_rate)
    priced = price_lines(job_lines(job), data.discount, rates)
    return {
        "job_card_id": job.id,
        "gst_slab_id": rates.gst_slab_id or "",
        "cgst_rate": rates.cgst,
        "sgst_rate": rates.sgst,
        "igst_rate": rates.igst,
        "parts_cost": round(metrics.parts_cost(job), 2),
        "labor_cost": round(metrics.labor_cost(job), 2),
        "services_cost": round(metrics.services_cost(job), 2),
        **priced,
    }


def _item_rows(invoice: Invoice, lines: list[dict]) -> list[InvoiceItem]:
    return [InvoiceItem(garage_id=invoice.garage_id, **line) for line in lines]


async def create_invoice(db: AsyncSession, garage_id: str, data: InvoiceCreate) -> Invoice:
    job = await _invoiceable_job(db, garage_id, data.job_card_id)
    on_date = data.invoice_date or utcnow().date()
    rates = await rates_for_job(db, garage_id, job, on_date, data.tax_rate)
    priced = price_lines(job_lines(job), data.discount, rates)

    invoice = Invoice(
        garage_id=garage_id,
        job_card_id=job.id,
        total_amount=priced["taxable_base"],
        discount=priced["discount"],
        tax=priced["tax"],
        final_amount=priced["final_amount"],
        status=data.status.value,
        gst_slab_id=rates.gst_slab_id,
        cgst_amount=priced["cgst_amount"],
        sgst_amount=priced["sgst_amount"],
        igst_amount=priced["igst_amount"],
        advisor_name=data.advisor_name,
        mileage=data.mileage,
        warranty_info=data.warranty_info,
        notes=data.notes,
    )
    invoice.items = _item_rows(invoice, priced["lines"])
    db.add(invoice)
    await commit_and_publish(db)
    logger.info("Created invoice %s for job card %s (%.2f)", invoice.id, job.id, invoice.final_amount)
    return invoice


async def get_invoice(db: AsyncSession, garage_id: str, invoice_id: str) -> Invoice:
    return await get_owned(db, Invoice, garage_id, invoice_id, "Invoice")


async def invoice_view(db: AsyncSession, invoice: Invoice) -> dict:
    job = await db.get(JobCard, invoice.job_card_id)
    return to_app_invoice(invoice, job, invoice.items)


async def invoice_pdf(db: AsyncSession, garage: Garage, invoice_id: str) -> tuple[str, bytes]:
    """Render an invoice to PDF. Returns its invoice number and the document."""
    view = await invoice_view(db, await get_invoice(db, garage.id, invoice_id))
    header = await garage_settings.get_all(db, garage.id)
    content = await run_in_threadpool(render_invoice_pdf, view, header, garage.name)
    logger.info("Rendered PDF for invoice %s (%d bytes)", invoice_id, len(content))
    return view["invoiceNumber"], content


async def list_invoices(
    db: AsyncSession,
    garage_id: str,
    status: Optional[InvoiceStatus] = None,
    skip: int = 0,
    limit: int = 50,
) -> dict:
    """Newest first page of invoice view-models, with the total count."""

    async def load():
        conditions = [Invoice.garage_id == garage_id]
        if status is not None:
            statuses = [status.value]
            if status == InvoiceStatus.CANCELLED:
                statuses.append("Canceled")
            conditions.append(Invoice.status.in_(statuses))
        result = await db.execute(
            select(Invoice).where(*conditions).order_by(Invoice.created_at.desc()).offset(skip).limit(limit)
        )
        invoices = result.scalars().all()
        count = (await db.execute(select(func.count()).select_from(Invoice).where(*conditions))).scalar_one()

        job_ids = {invoice.job_card_id for invoice in invoices}
        jobs = {}
        if job_ids:
            job_rows = await db.execute(select(JobCard).where(JobCard.id.in_(job_ids)))
            jobs = {job.id: job for job in job_rows.scalars().all()}
        return {
            "invoices": [to_app_invoice(inv, jobs.get(inv.job_card_id), inv.items) for inv in invoices],
            "count": count,
        }

    key = ("invoices", garage_id, getattr(status, "value", status), skip, limit)
    return await query_cache.get_or_load(key, load, ttl=get_settings().cache_ttl_invoices)


async def invoiceable_jobs(db: AsyncSession, garage_id: str) -> list[dict]:
    """Job cards that are ready to be invoiced, most recently completed first."""

    async def load():
        result = await db.execute(
            select(JobCard)
            .where(JobCard.garage_id == garage_id, JobCard.status.in_(INVOICEABLE_STATUSES))
            .order_by(JobCard.actual_completion_date.desc(), JobCard.created_at.desc())
        )
        return [to_app_job_card(job) for job in result.scalars().all()]

    return await query_cache.get_or_load(("invoiceable_jobs", garage_id), load)


async def update_invoice(db: AsyncSession, garage_id: str, invoice_id: str, data: InvoiceUpdate) -> Invoice:
    invoice = await get_invoice(db, garage_id, invoice_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "status":
            if value is None:
                continue
            value = value.value
        setattr(invoice, field, value)
    await commit_and_publish(db)
    return invoice


async def replace_items(db: AsyncSession, garage_id: str, invoice_id: str, items: list[InvoiceItemInput]) -> Invoice:
    """Replace the line items of an invoice and recompute its totals from them."""
    invoice = await get_invoice(db, garage_id, invoice_id)
    lines = []
    for item in items:
        lines.append({
            "description": item.description,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "item_type": item.item_type.value,
            "hsn_sac": item.hsn_sac,
        })
    subtotal = sum(line["quantity"] * line["unit_price"] for line in lines)
    discount = min(invoice.discount or 0, subtotal)
    base = subtotal - discount
    ratio = base / subtotal if subtotal else 0.0

    rows = []
    cgst = sgst = igst = 0.0
    for position, (line, item) in enumerate(zip(lines, items)):
        total = line["quantity"] * line["unit_price"]
        taxable = total * ratio
        row = InvoiceItem(
            garage_id=garage_id,
            position=position,
            total_price=round(total, 2),
            cgst_rate=item.cgst_rate,
            sgst_rate=item.sgst_rate,
            igst_rate=item.igst_rate,
            cgst_amount=round(taxable * item.cgst_rate / 100, 2),
            sgst_amount=round(taxable * item.sgst_rate / 100, 2),
            igst_amount=round(taxable * item.igst_rate / 100, 2),
            **line,
        )
        cgst += taxable * item.cgst_rate / 100
        sgst += taxable * item.sgst_rate / 100
        igst += taxable * item.igst_rate / 100
        rows.append(row)

    invoice.items = rows
    invoice.discount = round(discount, 2)
    invoice.total_amount = round(base, 2)
    invoice.cgst_amount = round(cgst, 2)
    invoice.sgst_amount = round(sgst, 2)
    invoice.igst_amount = round(igst, 2)
    invoice.tax = round(cgst + sgst + igst, 2)
    invoice.final_amount = round(base + cgst + sgst + igst, 2)
    await commit_and_publish(db)
    return invoice


async def delete_invoice(db: AsyncSession, garage_id: str, invoice_id: str):
    invoice = await get_invoice(db, garage_id, invoice_id)
    await db.delete(invoice)
    await commit_and_publish(db)
