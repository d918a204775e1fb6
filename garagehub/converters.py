"""
Row <-> view-model conversion for job cards and invoices.

The API speaks camelCase documents for these two entities; the database
stores flat snake_case columns. Every other entity is returned through its
ORM-mode schema and needs no converter.
"""
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Union

from garagehub.realtime import row_to_dict

DateLike = Union[date, datetime, str, None]


def _as_row(obj: Any) -> Mapping:
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return obj
    return row_to_dict(obj)


def _num(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _optional_num(value) -> Optional[float]:
    return None if value is None else _num(value)


def _parse_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _iso(value: DateLike) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def format_display_date(value: DateLike) -> str:
    """Format a date for display, e.g. ``"18 Oct 2026"``. Empty string when unknown."""
    parsed = _parse_date(value)
    if parsed is None:
        return ""
    return parsed.strftime("%d %b %Y")


def job_number(job_card_id: str) -> str:
    """Short human reference of a job card: ``JC-`` + last 6 id characters."""
    return f"JC-{job_card_id[-6:].upper()}"


def invoice_number(invoice_id: str) -> str:
    """Short human reference of an invoice: ``INV-`` + first 6 id characters."""
    return f"INV-{invoice_id[:6].upper()}"


def staff_names(value) -> list[str]:
    """Normalise assigned staff (list or comma separated text) into a list of names."""
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [name.strip() for name in value if name and name.strip()]


def _photos(row: Mapping, job_card: Any) -> list[dict]:
    photos = row.get("photos")
    if photos is None and not isinstance(job_card, Mapping):
        # Only read the relationship when it is already loaded
        photos = job_card.__dict__.get("photos") if job_card is not None else None
    result = []
    for photo in photos or []:
        photo = _as_row(photo)
        result.append({"id": photo.get("id"), "type": photo.get("photo_type", photo.get("type")), "url": photo.get("url")})
    return result


# ==================== JOB CARDS ====================

def to_app_job_card(job_card: Any) -> dict:
    """Convert a job card row (ORM object or dict) into its camelCase view-model."""
    row = _as_row(job_card)
    status = row.get("status")
    parts = row.get("parts")
    services = row.get("selected_services")
    return {
        "id": row["id"],
        "jobNumber": job_number(row["id"]),
        "customer": {"name": row.get("customer_name") or "", "phone": row.get("customer_phone") or ""},
        "car": {
            "make": row.get("car_make") or "",
            "model": row.get("car_model") or "",
            "plate": row.get("car_number") or "",
        },
        "description": row.get("work_description") or "",
        "assignedStaff": ", ".join(staff_names(row.get("assigned_staff"))),
        "status": getattr(status, "value", status),
        "date": format_display_date(row.get("created_at")),
        "parts": parts if isinstance(parts, list) else [],
        "laborHours": _num(row.get("labor_hours")),
        "hourlyRate": _num(row.get("hourly_rate")),
        "manualLaborCost": _num(row.get("manual_labor_cost")),
        "estimatedCompletionDate": _iso(row.get("estimated_completion_date")),
        "actualCompletionDate": _iso(row.get("actual_completion_date")),
        "notes": row.get("notes") or "",
        "jobDate": _iso(row.get("job_date")) or date.today().isoformat(),
        "photos": _photos(row, job_card),
        "gstSlabId": row.get("gst_slab_id") or "",
        "selectedServices": services if isinstance(services, list) else [],
    }


def to_row_job_card(view: Mapping) -> dict:
    """
    Inverse of ``to_app_job_card``: map a (possibly partial) view-model onto
    column names. Keys absent from ``view`` are absent from the result.
    """
    row = {}
    customer = view.get("customer")
    if customer is not None:
        if "name" in customer:
            row["customer_name"] = customer["name"]
        if "phone" in customer:
            row["customer_phone"] = customer["phone"]
    car = view.get("car")
    if car is not None:
        for key, column in (("make", "car_make"), ("model", "car_model"), ("plate", "car_number")):
            if key in car:
                row[column] = car[key]

    simple = {
        "description": "work_description",
        "status": "status",
        "parts": "parts",
        "laborHours": "labor_hours",
        "hourlyRate": "hourly_rate",
        "manualLaborCost": "manual_labor_cost",
        "estimatedCompletionDate": "estimated_completion_date",
        "actualCompletionDate": "actual_completion_date",
        "notes": "notes",
        "jobDate": "job_date",
        "selectedServices": "selected_services",
    }
    for key, column in simple.items():
        if key in view:
            row[column] = view[key]
    if "assignedStaff" in view:
        row["assigned_staff"] = staff_names(view["assignedStaff"])
    if "gstSlabId" in view:
        row["gst_slab_id"] = view["gstSlabId"] or None
    return row


# ==================== INVOICES ====================

def _item_view(item: Mapping) -> dict:
    quantity = _num(item.get("quantity"))
    unit_price = _num(item.get("unit_price"))
    total_price = quantity * unit_price
    rates = {key: _num(item.get(f"{key}_rate")) for key in ("cgst", "sgst", "igst")}
    # Stored amounts win, zero included; older rows only carry the rates
    amounts = {}
    for key in rates:
        stored = item.get(f"{key}_amount")
        amounts[key] = _num(stored) if stored is not None else total_price * rates[key] / 100
    return {
        "id": item.get("id") or "",
        "description": item.get("description") or "",
        "quantity": quantity,
        "unitPrice": unit_price,
        "totalPrice": round(total_price, 2),
        "itemType": item.get("item_type"),
        "hsnSac": item.get("hsn_sac") or "",
        "cgstRate": rates["cgst"],
        "sgstRate": rates["sgst"],
        "igstRate": rates["igst"],
        "cgstAmount": round(amounts["cgst"], 2),
        "sgstAmount": round(amounts["sgst"], 2),
        "igstAmount": round(amounts["igst"], 2),
    }


def to_app_invoice(invoice: Any, job_card: Any, items: Optional[Iterable[Any]] = None) -> dict:
    """
    Build the invoice view-model from the invoice row, its job card and its
    line items. Totals are recomputed from the items rather than trusted from
    the invoice row; the stored totals are exposed as ``rawTotalAmount`` /
    ``rawFinalAmount``.
    """
    row = _as_row(invoice)
    job = _as_row(job_card)
    if items is None:
        items = invoice.__dict__.get("items", []) if not isinstance(invoice, Mapping) else row.get("items", [])

    views = [_item_view(_as_row(item)) for item in items]
    totals = {"part": 0.0, "labor": 0.0, "service": 0.0}
    for view in views:
        if view["itemType"] in totals:
            totals[view["itemType"]] += view["totalPrice"]
    cgst = sum(v["cgstAmount"] for v in views)
    sgst = sum(v["sgstAmount"] for v in views)
    igst = sum(v["igstAmount"] for v in views)

    subtotal = totals["part"] + totals["labor"] + totals["service"]
    discount = _num(row.get("discount"))
    tax = cgst + sgst + igst
    status = row.get("status")
    if status == "Canceled":
        status = "Cancelled"

    return {
        "id": row["id"],
        "invoiceNumber": invoice_number(row["id"]),
        "date": format_display_date(row.get("created_at")),
        "customerName": job.get("customer_name") or "",
        "customerPhone": job.get("customer_phone") or "",
        "carDetails": f"{job.get('car_make') or ''} {job.get('car_model') or ''} ({job.get('car_number') or ''})",
        "jobCardId": row.get("job_card_id"),
        "status": status,
        "items": views,
        "totalPartsCost": round(totals["part"], 2),
        "laborCost": round(totals["labor"], 2),
        "servicesCost": round(totals["service"], 2),
        "subtotal": round(subtotal, 2),
        "totalAmount": round(subtotal, 2),
        "discount": round(discount, 2),
        "tax": round(tax, 2),
        "finalAmount": round(subtotal - discount + tax, 2),
        "cgstAmount": round(cgst, 2),
        "sgstAmount": round(sgst, 2),
        "igstAmount": round(igst, 2),
        "gstSlabId": row.get("gst_slab_id") or "",
        "advisorName": row.get("advisor_name") or "",
        "mileage": int(_num(row.get("mileage"))),
        "warrantyInfo": row.get("warranty_info") or "",
        "notes": row.get("notes") or "",
        "pdfUrl": row.get("pdf_url") or "",
        "rawTotalAmount": _optional_num(row.get("total_amount")),
        "rawFinalAmount": _optional_num(row.get("final_amount")),
    }
