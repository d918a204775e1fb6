import unittest
from datetime import date, datetime

from garagehub.converters import (
    format_display_date, invoice_number, job_number, staff_names, to_app_invoice, to_app_job_card,
    to_row_job_card,
)

JOB_ROW = {
    "id": "6f1c2a9e-0000-4000-8000-00000abc12de",
    "garage_id": "g1",
    "customer_name": "Anita Rao",
    "customer_phone": "9000000001",
    "car_make": "Hyundai",
    "car_model": "i20",
    "car_number": "MH12XY9876",
    "work_description": "Brake inspection",
    "assigned_staff": ["Suresh", "Imran"],
    "status": "In Progress",
    "parts": [{"name": "Brake pad", "quantity": 2, "unitPrice": 800}],
    "labor_hours": None,
    "hourly_rate": 450,
    "manual_labor_cost": None,
    "estimated_completion_date": date(2026, 10, 20),
    "actual_completion_date": None,
    "notes": None,
    "job_date": date(2026, 10, 18),
    "gst_slab_id": None,
    "selected_services": None,
    "created_at": datetime(2026, 10, 18, 9, 30),
}


class TestHelpers(unittest.TestCase):

    def test_format_display_date(self):
        self.assertEqual(format_display_date(datetime(2026, 10, 8, 14, 0)), "08 Oct 2026")
        self.assertEqual(format_display_date("2026-01-31"), "31 Jan 2026")
        self.assertEqual(format_display_date(None), "")
        self.assertEqual(format_display_date("not a date"), "")

    def test_reference_numbers(self):
        self.assertEqual(job_number("6f1c2a9e-0000-4000-8000-00000abc12de"), "JC-BC12DE")
        self.assertEqual(invoice_number("a1b2c3d4-0000"), "INV-A1B2C3")

    def test_staff_names(self):
        self.assertEqual(staff_names("Suresh, Imran ,"), ["Suresh", "Imran"])
        self.assertEqual(staff_names(["Suresh", " "]), ["Suresh"])
        self.assertEqual(staff_names(None), [])


class TestJobCardConversion(unittest.TestCase):

    def test_row_to_view_model(self):
        view = to_app_job_card(JOB_ROW)
        self.assertEqual(view["jobNumber"], "JC-BC12DE")
        self.assertEqual(view["customer"], {"name": "Anita Rao", "phone": "9000000001"})
        self.assertEqual(view["car"], {"make": "Hyundai", "model": "i20", "plate": "MH12XY9876"})
        self.assertEqual(view["assignedStaff"], "Suresh, Imran")
        self.assertEqual(view["date"], "18 Oct 2026")
        self.assertEqual(view["laborHours"], 0)
        self.assertEqual(view["hourlyRate"], 450)
        self.assertEqual(view["estimatedCompletionDate"], "2026-10-20")
        self.assertIsNone(view["actualCompletionDate"])
        self.assertEqual(view["notes"], "")
        self.assertEqual(view["gstSlabId"], "")
        self.assertEqual(view["selectedServices"], [])
        self.assertEqual(view["photos"], [])

    def test_non_list_parts_become_empty(self):
        view = to_app_job_card(dict(JOB_ROW, parts="oops"))
        self.assertEqual(view["parts"], [])

    def test_missing_job_date_defaults_to_today(self):
        view = to_app_job_card(dict(JOB_ROW, job_date=None))
        self.assertEqual(view["jobDate"], date.today().isoformat())

    def test_view_model_back_to_row(self):
        row = to_row_job_card(to_app_job_card(JOB_ROW))
        self.assertEqual(row["customer_name"], "Anita Rao")
        self.assertEqual(row["car_number"], "MH12XY9876")
        self.assertEqual(row["work_description"], "Brake inspection")
        self.assertEqual(row["assigned_staff"], ["Suresh", "Imran"])
        self.assertIsNone(row["gst_slab_id"])

    def test_partial_view_maps_only_given_keys(self):
        self.assertEqual(to_row_job_card({"car": {"plate": "X1"}}), {"car_number": "X1"})


class TestInvoiceConversion(unittest.TestCase):

    def setUp(self):
        self.invoice = {
            "id": "9d8c7b6a-1111",
            "job_card_id": JOB_ROW["id"],
            "status": "Canceled",
            "discount": 100,
            "total_amount": None,
            "final_amount": 2500,
            "created_at": datetime(2026, 10, 18),
            "mileage": None,
        }
        self.items = [
            {"id": "i1", "description": "Brake pad", "quantity": 2, "unit_price": 800, "item_type": "part",
             "cgst_rate": 9, "sgst_rate": 9, "cgst_amount": None, "sgst_amount": None},
            {"id": "i2", "description": "Labor: 2 hours", "quantity": 2, "unit_price": 450, "item_type": "labor",
             "cgst_rate": 9, "sgst_rate": 9, "cgst_amount": 75, "sgst_amount": 75},
        ]

    def test_totals_are_recomputed_from_items(self):
        view = to_app_invoice(self.invoice, JOB_ROW, self.items)
        self.assertEqual(view["invoiceNumber"], "INV-9D8C7B")
        self.assertEqual(view["totalPartsCost"], 1600)
        self.assertEqual(view["laborCost"], 900)
        self.assertEqual(view["subtotal"], 2500)
        # part tax from the rates, labor tax from the stored amounts
        self.assertEqual(view["cgstAmount"], 144 + 75)
        self.assertEqual(view["tax"], 2 * (144 + 75))
        self.assertEqual(view["finalAmount"], 2500 - 100 + 438)

    def test_stored_zero_tax_is_kept(self):
        invoice = dict(self.invoice, discount=2500, total_amount=0, final_amount=0)
        items = [dict(item, cgst_amount=0, sgst_amount=0) for item in self.items]
        view = to_app_invoice(invoice, JOB_ROW, items)
        self.assertEqual(view["subtotal"], 2500)
        self.assertEqual(view["tax"], 0)
        self.assertEqual(view["finalAmount"], 0)
        self.assertEqual(view["rawTotalAmount"], 0)
        self.assertEqual(view["rawFinalAmount"], 0)

    def test_header_fields(self):
        view = to_app_invoice(self.invoice, JOB_ROW, self.items)
        self.assertEqual(view["status"], "Cancelled")
        self.assertEqual(view["carDetails"], "Hyundai i20 (MH12XY9876)")
        self.assertEqual(view["customerName"], "Anita Rao")
        self.assertEqual(view["mileage"], 0)
        self.assertIsNone(view["rawTotalAmount"])
        self.assertEqual(view["rawFinalAmount"], 2500)


if __name__ == "__main__":
    unittest.main()
