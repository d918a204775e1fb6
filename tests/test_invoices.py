import unittest

from tests.base import ApiTestCase

BRAKE_PADS = {"inventoryId": "custom", "name": "Brake pads", "quantity": 1, "unitPrice": 500}


class TestInvoices(ApiTestCase):

    def ready_job(self, **overrides) -> dict:
        overrides.setdefault("status", "Ready for Pickup")
        overrides.setdefault("parts", [BRAKE_PADS])
        return self.create_job_card(**overrides)

    def test_preview(self):
        job = self.ready_job()
        preview = self.ok(self.post("/invoices/preview", {"jobCardId": job["id"], "taxRate": 18, "discount": 100}))
        self.assertEqual(preview["subtotal"], 1500)
        self.assertEqual(preview["taxableBase"], 1400)
        self.assertEqual(preview["cgstRate"], 9)
        self.assertEqual(preview["sgstRate"], 9)
        self.assertEqual(preview["cgstAmount"], 126)
        self.assertEqual(preview["tax"], 252)
        self.assertEqual(preview["finalAmount"], 1652)
        self.assertEqual(preview["partsCost"], 500)
        self.assertEqual(preview["laborCost"], 1000)
        self.assertEqual([line["description"] for line in preview["lines"]], ["Brake pads", "Labor: 2 hours"])
        self.assertEqual(preview["lines"][1]["itemType"], "labor")

        # nothing is saved by a preview
        self.assertEqual(self.ok(self.get("/invoices/"))["count"], 0)

    def test_default_tax_rate_comes_from_settings(self):
        job = self.ready_job()
        self.ok(self.put("/settings/", {"default_tax_rate": "12"}))
        preview = self.ok(self.post("/invoices/preview", {"jobCardId": job["id"]}))
        self.assertEqual(preview["tax"], 180)
        self.assertEqual(preview["finalAmount"], 1680)

    def test_discount_above_subtotal(self):
        job = self.ready_job()
        response = self.post("/invoices/preview", {"jobCardId": job["id"], "discount": 5000})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"], "Invalid discount")

    def test_create_and_get(self):
        job = self.ready_job()
        invoice = self.ok(self.post("/invoices/", {
            "jobCardId": job["id"], "taxRate": 18, "discount": 100, "advisorName": "Anil", "mileage": "042000",
        }), 201)
        self.assertTrue(invoice["invoiceNumber"].startswith("INV-"))
        self.assertEqual(invoice["status"], "Draft")
        self.assertEqual(invoice["customerName"], "Ravi Kumar")
        self.assertEqual(invoice["carDetails"], "Maruti Swift (KA01AB1234)")
        self.assertEqual(invoice["subtotal"], 1500)
        self.assertEqual(invoice["discount"], 100)
        self.assertEqual(invoice["tax"], 252)
        self.assertEqual(invoice["finalAmount"], 1652)
        self.assertEqual(invoice["rawFinalAmount"], 1652)
        self.assertEqual(invoice["mileage"], 42000)
        self.assertEqual(len(invoice["items"]), 2)

        fetched = self.ok(self.get(f"/invoices/{invoice['id']}"))
        self.assertEqual(fetched["finalAmount"], 1652)
        self.assertEqual(fetched["advisorName"], "Anil")

        listing = self.ok(self.get("/invoices/"))
        self.assertEqual(listing["count"], 1)
        self.assertEqual(listing["invoices"][0]["id"], invoice["id"])

    def test_fully_discounted_invoice_has_no_tax(self):
        job = self.ready_job()
        invoice = self.ok(self.post("/invoices/", {"jobCardId": job["id"], "taxRate": 18, "discount": 1500}), 201)
        self.assertEqual(invoice["subtotal"], 1500)
        self.assertEqual(invoice["tax"], 0)
        self.assertEqual(invoice["finalAmount"], 0)
        self.assertEqual(invoice["rawFinalAmount"], 0)
        self.assertEqual(self.ok(self.get(f"/invoices/{invoice['id']}"))["finalAmount"], 0)

    def test_open_job_cannot_be_invoiced(self):
        job = self.ready_job(status="In Progress")
        response = self.post("/invoices/", {"jobCardId": job["id"]})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"], "Job card cannot be invoiced")

    def test_invoiceable_jobs(self):
        ready = self.ready_job()
        self.ready_job(status="Pending")
        jobs = self.ok(self.get("/invoices/invoiceable-jobs"))
        self.assertEqual([j["id"] for j in jobs], [ready["id"]])

    def test_gst_slab_must_be_in_effect(self):
        slab = self.ok(self.post("/gst-slabs/", {
            "name": "GST 2020", "cgst_percent": 9, "sgst_percent": 9,
            "effective_from": "2020-01-01", "effective_to": "2020-12-31",
        }), 201)
        job = self.ready_job(gstSlabId=slab["id"])
        response = self.post("/invoices/preview", {"jobCardId": job["id"]})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"], "GST slab not in effect")

        preview = self.ok(self.post("/invoices/preview", {"jobCardId": job["id"], "invoiceDate": "2020-06-01"}))
        self.assertEqual(preview["gstSlabId"], slab["id"])
        self.assertEqual(preview["tax"], 270)

    def test_status_update_and_filter(self):
        job = self.ready_job()
        invoice = self.ok(self.post("/invoices/", {"jobCardId": job["id"]}), 201)
        updated = self.ok(self.put(f"/invoices/{invoice['id']}", {"status": "Cancelled", "notes": "Duplicate"}))
        self.assertEqual(updated["status"], "Cancelled")
        self.assertEqual(updated["notes"], "Duplicate")

        self.assertEqual(self.ok(self.get("/invoices/", params={"status": "Cancelled"}))["count"], 1)
        self.assertEqual(self.ok(self.get("/invoices/", params={"status": "Paid"}))["count"], 0)

    def test_replace_items(self):
        job = self.ready_job()
        invoice = self.ok(self.post("/invoices/", {"jobCardId": job["id"], "discount": 100}), 201)
        replaced = self.ok(self.put(f"/invoices/{invoice['id']}/items", {"items": [
            {"description": "Brake pads", "quantity": 2, "unitPrice": 500, "itemType": "part",
             "cgstRate": 9, "sgstRate": 9},
            {"description": "Labor", "quantity": 1, "unitPrice": 500, "itemType": "labor",
             "cgstRate": 9, "sgstRate": 9},
        ]}))
        self.assertEqual(replaced["totalPartsCost"], 1000)
        self.assertEqual(replaced["laborCost"], 500)
        self.assertEqual(replaced["subtotal"], 1500)
        self.assertEqual(replaced["tax"], 252)
        self.assertEqual(replaced["finalAmount"], 1652)
        self.assertEqual(replaced["rawFinalAmount"], 1652)
        self.assertEqual(len(self.ok(self.get(f"/invoices/{invoice['id']}"))["items"]), 2)

    def test_pdf(self):
        job = self.ready_job()
        self.ok(self.put("/settings/", {"garage_name": "Speedy Motors", "gstin": "29ABCDE1234F1Z5"}))
        invoice = self.ok(self.post(
            "/invoices/", {"jobCardId": job["id"], "taxRate": 18, "notes": "Check <tyres> & brakes"}
        ), 201)

        response = self.get(f"/invoices/{invoice['id']}/pdf")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["content-type"], "application/pdf")
        self.assertEqual(
            response.headers["content-disposition"], f'inline; filename="{invoice["invoiceNumber"]}.pdf"'
        )
        self.assertTrue(response.content.startswith(b"%PDF"))

        download = self.get(f"/invoices/{invoice['id']}/pdf", params={"download": "true"})
        self.assertTrue(download.headers["content-disposition"].startswith("attachment;"))
        self.assertEqual(self.get("/invoices/missing/pdf").status_code, 404)

    def test_job_card_with_invoice_cannot_be_deleted(self):
        job = self.ready_job()
        invoice = self.ok(self.post("/invoices/", {"jobCardId": job["id"]}), 201)
        self.assertEqual(self.delete(f"/job-cards/{job['id']}").status_code, 409)

        self.ok(self.delete(f"/invoices/{invoice['id']}"), 204)
        self.ok(self.delete(f"/job-cards/{job['id']}"), 204)


if __name__ == "__main__":
    unittest.main()
