import unittest

from tests.base import ApiTestCase


class TestSettings(ApiTestCase):

    def test_upsert(self):
        self.assertEqual(self.ok(self.get("/settings/")), {})
        saved = self.ok(self.put("/settings/", {"default_tax_rate": "18", "invoice_footer": "Thank you!"}))
        self.assertEqual(saved, {"default_tax_rate": "18", "invoice_footer": "Thank you!"})

        saved = self.ok(self.put("/settings/", {"default_tax_rate": "12"}))
        self.assertEqual(saved, {"default_tax_rate": "12", "invoice_footer": "Thank you!"})
        self.assertEqual(self.ok(self.get("/settings/"))["default_tax_rate"], "12")

    def test_invalid_tax_rate(self):
        for value in ("abc", "120"):
            response = self.put("/settings/", {"default_tax_rate": value})
            self.assertEqual(response.status_code, 422)
            self.assertEqual(response.json()["detail"], "Invalid setting")
        self.assertEqual(self.ok(self.get("/settings/")), {})


class TestGstSlabs(ApiTestCase):

    def create_slab(self, **overrides) -> dict:
        payload = {"name": "GST 18", "cgst_percent": 9, "sgst_percent": 9, "effective_from": "2025-04-01"}
        payload.update(overrides)
        return self.ok(self.post("/gst-slabs/", payload), 201)

    def test_effective_slab(self):
        old = self.create_slab(name="Old", effective_from="2020-01-01", effective_to="2024-12-31")
        current = self.create_slab()

        self.assertEqual([s["id"] for s in self.ok(self.get("/gst-slabs/"))], [current["id"], old["id"]])
        self.assertEqual(self.ok(self.get("/gst-slabs/effective", params={"on": "2022-06-01"}))["id"], old["id"])
        self.assertEqual(self.ok(self.get("/gst-slabs/effective", params={"on": "2026-06-01"}))["id"], current["id"])
        self.assertIsNone(self.ok(self.get("/gst-slabs/effective", params={"on": "2019-01-01"})))

    def test_window_validation(self):
        response = self.post("/gst-slabs/", {"name": "Bad", "effective_from": "2025-04-01", "effective_to": "2025-01-01"})
        self.assertEqual(response.status_code, 422)

        slab = self.create_slab()
        self.assertEqual(self.put(f"/gst-slabs/{slab['id']}", {"effective_to": "2025-01-01"}).status_code, 422)

        closed = self.ok(self.put(f"/gst-slabs/{slab['id']}", {"effective_to": "2025-12-31"}))
        self.assertEqual(closed["effective_to"], "2025-12-31")
        reopened = self.ok(self.put(f"/gst-slabs/{slab['id']}", {"effective_to": None}))
        self.assertIsNone(reopened["effective_to"])

    def test_delete(self):
        slab = self.create_slab()
        self.ok(self.delete(f"/gst-slabs/{slab['id']}"), 204)
        self.assertEqual(self.get(f"/gst-slabs/{slab['id']}").status_code, 404)


class TestGarageServices(ApiTestCase):

    def test_catalogue(self):
        wash = self.ok(self.post("/garage-services/", {"service_name": "Car wash", "price": 499}), 201)
        self.ok(self.post("/garage-services/", {"service_name": "Alignment", "price": 799, "is_active": False}), 201)

        self.assertEqual([s["service_name"] for s in self.ok(self.get("/garage-services/"))], ["Alignment", "Car wash"])
        active = self.ok(self.get("/garage-services/", params={"active_only": "true"}))
        self.assertEqual([s["id"] for s in active], [wash["id"]])

        updated = self.ok(self.put(f"/garage-services/{wash['id']}", {"price": "0549"}))
        self.assertEqual(updated["price"], 549)

        self.ok(self.delete(f"/garage-services/{wash['id']}"), 204)
        self.assertEqual(self.get(f"/garage-services/{wash['id']}").status_code, 404)

    def test_selected_services_are_invoiced(self):
        wash = self.ok(self.post("/garage-services/", {"service_name": "Car wash", "price": 499}), 201)
        job = self.create_job_card(status="Completed", laborHours=0, selectedServices=[
            {"id": wash["id"], "serviceName": "Car wash", "price": 499},
        ])
        preview = self.ok(self.post("/invoices/preview", {"jobCardId": job["id"], "taxRate": 0}))
        self.assertEqual(preview["servicesCost"], 499)
        self.assertEqual([line["itemType"] for line in preview["lines"]], ["service"])
        self.assertEqual(preview["finalAmount"], 499)


if __name__ == "__main__":
    unittest.main()
