"""
Derived metrics.

Pure functions folding already-fetched rows into dashboard numbers. Rows may
be ORM objects or plain dicts; missing and null fields count as zero.
"""
import math
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

from dateutil.relativedelta import relativedelta

COMPLETED = "Completed"
ACTIVE_STATUSES = ("Pending", "In Progress")
PURCHASE_PENDING_STATUSES = ("Pending", "In Progress", "Parts Ordered")
PURCHASE_TYPES = ("purchase", "inventory_purchase")
TIME_RANGES = ("week", "month", "year")


def _get(obj: Any, name: str, default=None):
    if isinstance(obj, Mapping):
        value = obj.get(name, default)
    else:
        value = getattr(obj, name, default)
    return default if value is None else value


def _num(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _status(obj: Any) -> Optional[str]:
    status = _get(obj, "status")
    return getattr(status, "value", status)


def _type(obj: Any) -> Optional[str]:
    kind = _get(obj, "type")
    return getattr(kind, "value", kind)


def _as_datetime(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


# ==================== JOB TOTALS ====================

def labor_cost(job: Any) -> float:
    """Manual labor cost when set (> 0), otherwise hours x hourly rate."""
    manual = _num(_get(job, "manual_labor_cost"))
    if manual > 0:
        return manual
    return _num(_get(job, "labor_hours")) * _num(_get(job, "hourly_rate"))


def parts_cost(job: Any) -> float:
    parts = _get(job, "parts")
    if not isinstance(parts, list):
        return 0.0
    total = 0.0
    for part in parts:
        unit_price = part.get("unitPrice", part.get("unit_price"))
        total += _num(part.get("quantity")) * _num(unit_price)
    return total


def services_cost(job: Any) -> float:
    services = _get(job, "selected_services")
    if not isinstance(services, list):
        return 0.0
    return sum(_num(service.get("price")) for service in services)


def job_total(job: Any) -> float:
    """Billable value of a job card: parts + labor + selected services."""
    return parts_cost(job) + labor_cost(job) + services_cost(job)


# ==================== DASHBOARD ====================

def inventory_value(items: Iterable[Any]) -> float:
    return sum(_num(_get(item, "quantity")) * _num(_get(item, "unit_price")) for item in items)


def is_low_stock(item: Any) -> bool:
    return _num(_get(item, "quantity")) <= _num(_get(item, "min_stock_level"))


def low_stock(items: Iterable[Any]) -> list:
    """Items at or below their minimum stock level."""
    return [item for item in items if is_low_stock(item)]


def expense_summary(expenses: Iterable[Any]) -> dict:
    """
    Totals of the expenses table per type.

    ``balance`` is inventory purchases minus cost of goods sold, i.e. the
    value of purchased stock not yet used on a job.
    """
    purchases = cogs = manual = 0.0
    for expense in expenses:
        kind = _type(expense)
        amount = _num(_get(expense, "total_cost"))
        if kind in PURCHASE_TYPES:
            purchases += amount
        elif kind == "cogs":
            cogs += amount
        elif kind == "manual":
            manual += amount
    return {
        "purchases": round(purchases, 2),
        "cogs": round(cogs, 2),
        "manual": round(manual, 2),
        "balance": round(purchases - cogs, 2),
        "total": round(purchases + manual, 2),
    }


def dashboard_metrics(accounts: Iterable[Any], expenses: Iterable[Any], jobs: Iterable[Any], inventory: Iterable[Any]) -> dict:
    accounts = list(accounts)
    jobs = list(jobs)
    inventory = list(inventory)

    revenue = sum(_num(_get(a, "amount")) for a in accounts if _type(a) == "income")
    account_expenses = sum(_num(_get(a, "amount")) for a in accounts if _type(a) == "expense")
    summary = expense_summary(expenses)
    total_expenses = account_expenses + summary["purchases"] + summary["manual"]
    completed = sum(1 for job in jobs if _status(job) == COMPLETED)

    return {
        "totalRevenue": round(revenue, 2),
        "totalExpenses": round(total_expenses, 2),
        "netProfit": round(revenue - total_expenses, 2),
        "totalJobs": len(jobs),
        "completedJobs": completed,
        "pendingJobs": len(jobs) - completed,
        "lowStockItems": len(low_stock(inventory)),
        "inventoryValue": round(inventory_value(inventory), 2),
        "totalCOGS": summary["cogs"],
        "inventoryExpenseBalance": summary["balance"],
    }


def revenue_tabs(jobs: Iterable[Any], today: Optional[date] = None) -> dict:
    """Today / this-month revenue and job counters for the revenue tabs."""
    today = today or datetime.now(timezone.utc).date()
    day_start = datetime(today.year, today.month, today.day)
    month_start = datetime(today.year, today.month, 1)

    today_revenue = monthly_revenue = 0.0
    today_completed = month_completed = active = 0
    repair_days = []
    for job in jobs:
        status = _status(job)
        if status in ACTIVE_STATUSES:
            active += 1
        if status != COMPLETED:
            continue
        completed_at = _as_datetime(_get(job, "actual_completion_date"))
        if completed_at is None:
            continue
        total = job_total(job)
        if completed_at >= day_start:
            today_revenue += total
            if completed_at < day_start + timedelta(days=1):
                today_completed += 1
        if completed_at >= month_start:
            monthly_revenue += total
            month_completed += 1
        created_at = _as_datetime(_get(job, "created_at"))
        if created_at is not None:
            repair_days.append(math.ceil((completed_at - created_at).total_seconds() / 86400))

    avg_days = round_half_up(sum(repair_days) / len(repair_days)) if repair_days else 0
    return {
        "todayRevenue": round(today_revenue, 2),
        "monthlyRevenue": round(monthly_revenue, 2),
        "todayCompletedJobs": today_completed,
        "completedJobs": month_completed,
        "activeJobs": active,
        "avgRepairTime": "1 day" if avg_days == 1 else f"{avg_days} days",
    }


def range_start(time_range: str, now: datetime) -> datetime:
    if time_range == "week":
        return now - timedelta(days=7)
    if time_range == "year":
        return now - relativedelta(years=1)
    return now - relativedelta(months=1)


def _percent_change(current: float, previous: float) -> int:
    if previous == 0:
        return 0
    return round_half_up((current - previous) / previous * 100)


def revenue_chart(accounts: Iterable[Any], time_range: str = "month", now: Optional[datetime] = None) -> dict:
    """
    Revenue / expense / profit series over the last week, month or year.

    Week and month are bucketed per day, year per month. ``comparison``
    holds the percent change of the later half of the buckets against the
    earlier half.
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range: {time_range}")
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    start = range_start(time_range, now)

    buckets: dict[str, dict] = {}
    for entry in accounts:
        when = _as_datetime(_get(entry, "date"))
        if when is None or when < start:
            continue
        key = when.strftime("%Y-%m") if time_range == "year" else when.strftime("%Y-%m-%d")
        bucket = buckets.setdefault(key, {"revenue": 0.0, "expenses": 0.0})
        if _type(entry) == "income":
            bucket["revenue"] += _num(_get(entry, "amount"))
        else:
            bucket["expenses"] += _num(_get(entry, "amount"))

    series = OrderedDict(sorted(buckets.items()))
    data = [
        {
            "name": key,
            "revenue": round(value["revenue"], 2),
            "expenses": round(value["expenses"], 2),
            "profit": round(value["revenue"] - value["expenses"], 2),
        }
        for key, value in series.items()
    ]

    comparison = {
        "revenue": {"value": 0, "isPositive": True},
        "expenses": {"value": 0, "isPositive": False},
        "profit": {"value": 0, "isPositive": True},
    }
    if len(data) > 1:
        current = data[-math.ceil(len(data) / 2):]
        previous = data[:len(data) // 2]
        for metric in ("revenue", "expenses", "profit"):
            change = _percent_change(sum(d[metric] for d in current), sum(d[metric] for d in previous))
            comparison[metric] = {
                "value": change,
                "isPositive": change <= 0 if metric == "expenses" else change >= 0,
            }

    return {"range": time_range, "data": data, "comparison": comparison}


def staff_performance(staff: Iterable[Any], jobs: Iterable[Any]) -> list[dict]:
    """Number of job cards assigned to each staff member, busiest first."""
    jobs = list(jobs)
    counts = []
    for member in staff:
        member_id = _get(member, "id")
        name = _get(member, "name")
        count = 0
        for job in jobs:
            assigned = _get(job, "assigned_staff")
            if isinstance(assigned, str):
                assigned = [n.strip() for n in assigned.split(",")]
            if assigned and (name in assigned or member_id in assigned):
                count += 1
        counts.append({"id": member_id, "name": name, "jobCount": count})
    # stable sort keeps the alphabetical order among ties
    counts.sort(key=lambda row: row["jobCount"], reverse=True)
    return counts


def parts_to_order(jobs: Iterable[Any]) -> list[dict]:
    """
    Parts flagged for the purchase list and not available from stock, on
    jobs that are still waiting for work.
    """
    result = []
    for job in jobs:
        if _status(job) not in PURCHASE_PENDING_STATUSES:
            continue
        parts = _get(job, "parts")
        if not isinstance(parts, list):
            continue
        for part in parts:
            if not part.get("addedToPurchaseList"):
                continue
            if part.get("inStock") and part.get("inventoryId"):
                continue
            result.append({
                "id": f"{_get(job, 'id')}-{part.get('name')}",
                "name": part.get("name") or "",
                "quantity": part.get("quantity") or 0,
                "unitPrice": _num(part.get("unitPrice", part.get("unit_price"))),
                "jobCardId": _get(job, "id"),
                "customerName": _get(job, "customer_name", ""),
                "car": f"{_get(job, 'car_make', '')} {_get(job, 'car_model', '')}".strip(),
                "status": part.get("orderStatus") or "Pending",
            })
    result.sort(key=lambda row: row["name"].lower())
    return result


def invoice_totals(items: Iterable[Any]) -> dict:
    """Pre-tax total and tax components of a list of invoice line items."""
    before_tax = cgst = sgst = igst = 0.0
    for item in items:
        total = _num(_get(item, "quantity")) * _num(_get(item, "unit_price"))
        before_tax += total
        cgst += total * _num(_get(item, "cgst_rate")) / 100
        sgst += total * _num(_get(item, "sgst_rate")) / 100
        igst += total * _num(_get(item, "igst_rate")) / 100
    tax = cgst + sgst + igst
    return {
        "totalBeforeTax": round(before_tax, 2),
        "totalCgst": round(cgst, 2),
        "totalSgst": round(sgst, 2),
        "totalIgst": round(igst, 2),
        "totalTax": round(tax, 2),
        "grandTotal": round(before_tax + tax, 2),
    }
