import unittest

from tests.base import ApiTestCase


class TestLeads(ApiTestCase):

    def create_lead(self, **overrides) -> dict:
        payload = {
            "customer_name": "Meena Iyer",
            "phone_number": "9812345678",
            "vehicle_make": "Hyundai",
            "vehicle_model": "i20",
            "license_plate": "TN09CD4321",
            "enquiry_type": "Service",
            "enquiry_details": "Periodic maintenance",
            "assigned_to": "Suresh",
        }
        payload.update(overrides)
        return self.ok(self.post("/leads/", payload), 201)

    def test_crud_and_status_filter(self):
        lead = self.create_lead()
        self.assertEqual(lead["status"], "Active")
        self.create_lead(customer_name="Farhan")

        lost = self.ok(self.put(f"/leads/{lead['id']}", {"status": "Lost"}))
        self.assertEqual(lost["status"], "Lost")
        self.assertEqual(lost["customer_name"], "Meena Iyer")

        self.assertEqual(len(self.ok(self.get("/leads/"))), 2)
        self.assertEqual([l["id"] for l in self.ok(self.get("/leads/", params={"status": "Lost"}))], [lead["id"]])

        self.ok(self.delete(f"/leads/{lead['id']}"), 204)
        self.assertEqual(self.get(f"/leads/{lead['id']}").status_code, 404)

    def test_follow_up_and_notes(self):
        lead = self.create_lead()
        followed = self.ok(self.post(f"/leads/{lead['id']}/follow-up", {
            "note": "Call back next week", "next_followup": "2026-11-02",
        }))
        self.assertIsNotNone(followed["last_followup"])
        self.assertEqual(followed["last_contacted"], followed["last_followup"])
        self.assertEqual(followed["next_followup"], "2026-11-02")
        self.assertTrue(followed["notes"].endswith("::Call back next week"))

        noted = self.ok(self.post(f"/leads/{lead['id']}/notes", {"note": "  Prefers Saturday  "}))
        lines = noted["notes"].split("\n")
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[1].endswith("::Prefers Saturday"))

    def test_convert(self):
        lead = self.create_lead()
        result = self.ok(self.post(f"/leads/{lead['id']}/convert"), 201)
        self.assertEqual(result["lead"]["status"], "Converted")

        job = result["job_card"]
        self.assertEqual(result["lead"]["converted_job_card_id"], job["id"])
        self.assertEqual(job["status"], "Pending")
        self.assertEqual(job["customer"], {"name": "Meena Iyer", "phone": "9812345678"})
        self.assertEqual(job["car"], {"make": "Hyundai", "model": "i20", "plate": "TN09CD4321"})
        self.assertEqual(job["description"], "Periodic maintenance")
        self.assertEqual(job["assignedStaff"], "Suresh")
        self.assertEqual(self.ok(self.get(f"/job-cards/{job['id']}"))["id"], job["id"])

        response = self.post(f"/leads/{lead['id']}/convert")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "Lead has already been converted")

    def test_convert_with_overrides(self):
        lead = self.create_lead()
        result = self.ok(self.post(f"/leads/{lead['id']}/convert", {
            "work_description": "Replace clutch", "assigned_staff": ["Arjun", "Suresh"],
        }), 201)
        self.assertEqual(result["job_card"]["description"], "Replace clutch")
        self.assertEqual(result["job_card"]["assignedStaff"], "Arjun, Suresh")

    def test_incomplete_lead_is_not_converted(self):
        lead = self.ok(self.post("/leads/", {"customer_name": "Only Name"}), 201)
        response = self.post(f"/leads/{lead['id']}/convert")
        self.assertEqual(response.status_code, 422)
        body = response.json()
        self.assertEqual(body["detail"], "Job card is incomplete")
        self.assertIn("Customer phone is required", body["errors"])
        self.assertIn("Car number plate is required", body["errors"])
        self.assertIn("Assigned staff is required", body["errors"])

        self.assertEqual(self.ok(self.get(f"/leads/{lead['id']}"))["status"], "Active")
        self.assertEqual(self.ok(self.get("/job-cards/"))["count"], 0)

        result = self.ok(self.post(f"/leads/{lead['id']}/convert", {
            "customer_phone": "9000000001", "car_make": "Tata", "car_model": "Nexon", "car_number": "KA05MN1111",
            "work_description": "Wheel alignment", "assigned_staff": "Suresh",
        }), 201)
        self.assertEqual(result["lead"]["status"], "Converted")
        self.assertEqual(result["job_card"]["customer"], {"name": "Only Name", "phone": "9000000001"})


if __name__ == "__main__":
    unittest.main()
