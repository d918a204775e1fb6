import unittest
from datetime import date, datetime

from garagehub import metrics


def job(**fields):
    row = {
        "id": "job-1",
        "status": "Completed",
        "parts": [],
        "labor_hours": 0,
        "hourly_rate": 0,
        "manual_labor_cost": 0,
        "selected_services": [],
        "created_at": datetime(2026, 10, 1, 9),
        "actual_completion_date": datetime(2026, 10, 3, 9),
    }
    row.update(fields)
    return row


class TestJobTotals(unittest.TestCase):

    def test_manual_labor_wins_over_hours(self):
        self.assertEqual(metrics.labor_cost(job(manual_labor_cost=700, labor_hours=3, hourly_rate=500)), 700)
        self.assertEqual(metrics.labor_cost(job(labor_hours=3, hourly_rate=500)), 1500)

    def test_job_total_sums_parts_labor_and_services(self):
        total = metrics.job_total(job(
            parts=[{"quantity": 2, "unitPrice": 250}, {"quantity": 1, "unit_price": 100}],
            labor_hours=1.5, hourly_rate=400,
            selected_services=[{"price": 300}, {"price": None}],
        ))
        self.assertEqual(total, 500 + 100 + 600 + 300)

    def test_missing_fields_count_as_zero(self):
        self.assertEqual(metrics.job_total({"parts": None, "selected_services": "x"}), 0)


class TestDashboardMetrics(unittest.TestCase):

    def test_dashboard_metrics(self):
        accounts = [
            {"type": "income", "amount": 5000},
            {"type": "income", "amount": 1000},
            {"type": "expense", "amount": 400},
        ]
        expenses = [
            {"type": "purchase", "total_cost": 2000},
            {"type": "inventory_purchase", "total_cost": 500},
            {"type": "cogs", "total_cost": 800},
            {"type": "manual", "total_cost": 150},
        ]
        jobs = [job(), job(status="Pending"), job(status="In Progress")]
        inventory = [
            {"quantity": 1, "unit_price": 100, "min_stock_level": 2},
            {"quantity": 10, "unit_price": 50, "min_stock_level": 2},
        ]
        result = metrics.dashboard_metrics(accounts, expenses, jobs, inventory)
        self.assertEqual(result["totalRevenue"], 6000)
        self.assertEqual(result["totalExpenses"], 400 + 2500 + 150)
        self.assertEqual(result["netProfit"], 6000 - 3050)
        self.assertEqual(result["totalJobs"], 3)
        self.assertEqual(result["completedJobs"], 1)
        self.assertEqual(result["pendingJobs"], 2)
        self.assertEqual(result["lowStockItems"], 1)
        self.assertEqual(result["inventoryValue"], 600)
        self.assertEqual(result["totalCOGS"], 800)
        self.assertEqual(result["inventoryExpenseBalance"], 1700)

    def test_expense_summary(self):
        summary = metrics.expense_summary([
            {"type": "purchase", "total_cost": 100},
            {"type": "cogs", "total_cost": 40},
            {"type": "manual", "total_cost": 5},
        ])
        self.assertEqual(summary, {"purchases": 100, "cogs": 40, "manual": 5, "balance": 60, "total": 105})


class TestRevenueTabs(unittest.TestCase):

    def test_today_and_month(self):
        today = date(2026, 10, 18)
        jobs = [
            job(manual_labor_cost=1000, actual_completion_date=datetime(2026, 10, 18, 11),
                created_at=datetime(2026, 10, 16, 12)),
            job(manual_labor_cost=500, actual_completion_date=datetime(2026, 10, 2, 11),
                created_at=datetime(2026, 10, 1, 12)),
            job(manual_labor_cost=900, actual_completion_date=datetime(2026, 9, 30, 11),
                created_at=datetime(2026, 9, 29, 12)),
            job(status="Pending"),
            job(status="In Progress"),
            job(status="Parts Ordered"),
        ]
        tabs = metrics.revenue_tabs(jobs, today)
        self.assertEqual(tabs["todayRevenue"], 1000)
        self.assertEqual(tabs["monthlyRevenue"], 1500)
        self.assertEqual(tabs["todayCompletedJobs"], 1)
        self.assertEqual(tabs["completedJobs"], 2)
        self.assertEqual(tabs["activeJobs"], 2)
        # 2, 1 and 1 days
        self.assertEqual(tabs["avgRepairTime"], "1 day")

    def test_no_completed_jobs(self):
        tabs = metrics.revenue_tabs([], date(2026, 10, 18))
        self.assertEqual(tabs["avgRepairTime"], "0 days")
        self.assertEqual(tabs["todayRevenue"], 0)


class TestRevenueChart(unittest.TestCase):
    now = datetime(2026, 10, 18, 12)

    def test_week_buckets_by_day(self):
        accounts = [
            {"type": "income", "amount": 100, "date": datetime(2026, 10, 12, 10)},
            {"type": "income", "amount": 300, "date": datetime(2026, 10, 17, 10)},
            {"type": "expense", "amount": 50, "date": datetime(2026, 10, 17, 15)},
            {"type": "income", "amount": 999, "date": datetime(2026, 9, 1)},
        ]
        chart = metrics.revenue_chart(accounts, "week", self.now)
        self.assertEqual(chart["range"], "week")
        self.assertEqual([d["name"] for d in chart["data"]], ["2026-10-12", "2026-10-17"])
        self.assertEqual(chart["data"][1], {"name": "2026-10-17", "revenue": 300, "expenses": 50, "profit": 250})
        self.assertEqual(chart["comparison"]["revenue"], {"value": 200, "isPositive": True})
        # expenses went up from nothing
        self.assertEqual(chart["comparison"]["expenses"], {"value": 0, "isPositive": True})

    def test_year_buckets_by_month(self):
        accounts = [
            {"type": "expense", "amount": 200, "date": datetime(2026, 3, 5)},
            {"type": "expense", "amount": 100, "date": datetime(2026, 8, 5)},
        ]
        chart = metrics.revenue_chart(accounts, "year", self.now)
        self.assertEqual([d["name"] for d in chart["data"]], ["2026-03", "2026-08"])
        self.assertEqual(chart["comparison"]["expenses"], {"value": -50, "isPositive": True})

    def test_unknown_range(self):
        with self.assertRaises(ValueError):
            metrics.revenue_chart([], "decade", self.now)


class TestStaffAndParts(unittest.TestCase):

    def test_staff_performance_busiest_first(self):
        staff = [{"id": "s1", "name": "Imran"}, {"id": "s2", "name": "Suresh"}]
        jobs = [
            job(assigned_staff=["Suresh"]),
            job(assigned_staff="Suresh, Imran"),
            job(assigned_staff=["s2"]),
        ]
        self.assertEqual(metrics.staff_performance(staff, jobs), [
            {"id": "s2", "name": "Suresh", "jobCount": 3},
            {"id": "s1", "name": "Imran", "jobCount": 1},
        ])

    def test_parts_to_order(self):
        jobs = [
            job(id="j1", status="Pending", customer_name="Ravi", car_make="Tata", car_model="Nexon", parts=[
                {"name": "wiper", "quantity": 2, "unitPrice": 150, "addedToPurchaseList": True},
                {"name": "Filter", "quantity": 1, "unitPrice": 90, "addedToPurchaseList": True,
                 "inStock": True, "inventoryId": "inv-1"},
                {"name": "Bulb", "quantity": 1, "unitPrice": 40},
            ]),
            job(id="j2", status="Completed", parts=[
                {"name": "Belt", "quantity": 1, "unitPrice": 500, "addedToPurchaseList": True},
            ]),
            job(id="j3", status="Parts Ordered", customer_name="Meena", parts=[
                {"name": "Battery", "quantity": 1, "unitPrice": 4000, "addedToPurchaseList": True,
                 "orderStatus": "Ordered"},
            ]),
        ]
        rows = metrics.parts_to_order(jobs)
        self.assertEqual([r["name"] for r in rows], ["Battery", "wiper"])
        self.assertEqual(rows[0]["status"], "Ordered")
        self.assertEqual(rows[1]["car"], "Tata Nexon")
        self.assertEqual(rows[1]["status"], "Pending")
        self.assertEqual(rows[1]["jobCardId"], "j1")


class TestInvoiceTotals(unittest.TestCase):

    def test_invoice_totals(self):
        totals = metrics.invoice_totals([
            {"quantity": 2, "unit_price": 500, "cgst_rate": 9, "sgst_rate": 9},
            {"quantity": 1, "unit_price": 1000, "igst_rate": 18},
        ])
        self.assertEqual(totals, {
            "totalBeforeTax": 2000,
            "totalCgst": 90,
            "totalSgst": 90,
            "totalIgst": 180,
            "totalTax": 360,
            "grandTotal": 2360,
        })


if __name__ == "__main__":
    unittest.main()
