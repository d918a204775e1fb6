import unittest

from tests.base import ApiTestCase, job_card_payload


class TestJobCards(ApiTestCase):

    def test_create_and_get(self):
        job = self.create_job_card()
        self.assertTrue(job["jobNumber"].startswith("JC-"))
        self.assertEqual(job["jobNumber"], "JC-" + job["id"][-6:].upper())
        self.assertEqual(job["status"], "Pending")
        self.assertEqual(job["customer"], {"name": "Ravi Kumar", "phone": "9876543210"})
        self.assertEqual(job["assignedStaff"], "Suresh")
        self.assertIsNotNone(job["jobDate"])

        fetched = self.ok(self.get(f"/job-cards/{job['id']}"))
        self.assertEqual(fetched["id"], job["id"])
        self.assertEqual(fetched["car"]["plate"], "KA01AB1234")

    def test_missing_required_fields_are_reported_together(self):
        response = self.post("/job-cards/", job_card_payload(
            customer={"name": "", "phone": ""}, car={"make": "Tata"}, description=" ", assignedStaff=[],
        ))
        self.assertEqual(response.status_code, 422)
        body = response.json()
        self.assertEqual(body["detail"], "Job card is incomplete")
        self.assertEqual(body["errors"], [
            "Customer name is required",
            "Customer phone is required",
            "Car model is required",
            "Car number plate is required",
            "Work description is required",
            "Assigned staff is required",
        ])

    def test_numeric_form_input_is_sanitised(self):
        job = self.create_job_card(
            laborHours="02",
            hourlyRate="0450",
            parts=[{"name": "Coolant", "quantity": "003", "unitPrice": "0120", "inventoryId": "custom"}],
        )
        self.assertEqual(job["laborHours"], 2)
        self.assertEqual(job["hourlyRate"], 450)
        self.assertEqual(job["parts"][0]["quantity"], 3)
        self.assertEqual(job["parts"][0]["total"], 360)

    def test_list_filters_by_status(self):
        self.create_job_card()
        self.create_job_card(status="In Progress")
        self.assertEqual(self.ok(self.get("/job-cards/"))["count"], 2)
        listing = self.ok(self.get("/job-cards/", params={"status": "In Progress"}))
        self.assertEqual(listing["count"], 1)
        self.assertEqual(listing["jobCards"][0]["status"], "In Progress")

    def test_update_to_completed_stamps_completion_date(self):
        job = self.create_job_card()
        self.assertIsNone(job["actualCompletionDate"])
        updated = self.ok(self.put(f"/job-cards/{job['id']}", job_card_payload(status="Completed", notes="Done")))
        self.assertEqual(updated["status"], "Completed")
        self.assertEqual(updated["notes"], "Done")
        self.assertIsNotNone(updated["actualCompletionDate"])

    def test_pipeline_and_move(self):
        first = self.create_job_card()
        second = self.create_job_card()
        moved = self.ok(self.post(f"/job-cards/{first['id']}/move", {"status": "In Progress"}))
        self.assertEqual(moved["status"], "In Progress")

        pipeline = self.ok(self.get("/job-cards/pipeline"))
        self.assertEqual(set(pipeline["columns"]), {"Pending", "In Progress", "Parts Ordered", "Ready for Pickup"})
        self.assertEqual([j["id"] for j in pipeline["columns"]["In Progress"]], [first["id"]])
        self.assertEqual([j["id"] for j in pipeline["columns"]["Pending"]], [second["id"]])
        self.assertEqual(pipeline["completedCount"], 0)

        self.ok(self.post(f"/job-cards/{second['id']}/move", {"status": "Completed"}))
        pipeline = self.ok(self.get("/job-cards/pipeline", params={"page": 1, "page_size": 5}))
        self.assertEqual(pipeline["completedCount"], 1)
        self.assertEqual(pipeline["completed"][0]["id"], second["id"])
        self.assertIsNotNone(pipeline["completed"][0]["actualCompletionDate"])
        self.assertEqual(pipeline["columns"]["Pending"], [])

    def test_move_to_same_status_is_a_no_op(self):
        job = self.create_job_card()
        again = self.ok(self.post(f"/job-cards/{job['id']}/move", {"status": "Pending"}))
        self.assertEqual(again["status"], "Pending")

    def test_completion_books_parts(self):
        item = self.create_inventory_item(quantity=10, unit_price=250)
        job = self.create_job_card(parts=[
            {"inventoryId": item["id"], "name": "Oil filter", "quantity": 2, "unitPrice": 250, "inStock": True},
            {"inventoryId": "custom", "name": "Wiper blade", "quantity": 1, "unitPrice": 300, "isCustom": True},
        ])
        self.ok(self.post(f"/job-cards/{job['id']}/move", {"status": "Completed"}))

        self.assertEqual(self.ok(self.get(f"/inventory/{item['id']}"))["quantity"], 8)
        expenses = self.ok(self.get("/expenses/"))
        self.assertEqual(expenses["summary"]["purchases"], 2500)
        self.assertEqual(expenses["summary"]["cogs"], 500)
        self.assertEqual(expenses["summary"]["manual"], 300)
        descriptions = {e["description"] for e in expenses["expenses"]}
        self.assertIn(f"COGS for job card {job['id']} - Oil filter", descriptions)
        self.assertIn(f"Manual expense for custom part used in job card {job['id']} - Wiper blade", descriptions)

        # already completed: nothing is booked twice
        self.ok(self.post(f"/job-cards/{job['id']}/move", {"status": "Completed"}))
        self.assertEqual(len(self.ok(self.get("/expenses/"))["expenses"]), 3)

    def test_stock_never_goes_negative(self):
        item = self.create_inventory_item(quantity=1, unit_price=100)
        job = self.create_job_card(parts=[
            {"inventoryId": item["id"], "name": "Oil filter", "quantity": 3, "unitPrice": 100, "inStock": True},
        ])
        self.ok(self.post(f"/job-cards/{job['id']}/move", {"status": "Completed"}))
        self.assertEqual(self.ok(self.get(f"/inventory/{item['id']}"))["quantity"], 0)

    def test_completion_awards_loyalty_points_once(self):
        job = self.create_job_card()
        self.ok(self.post(f"/job-cards/{job['id']}/move", {"status": "Completed"}))
        self.ok(self.put(f"/job-cards/{job['id']}", job_card_payload(status="Completed", notes="Polished")))
        second = self.create_job_card()
        self.ok(self.post(f"/job-cards/{second['id']}/move", {"status": "Completed"}))

        leaderboard = self.ok(self.get("/promotions/loyalty"))
        self.assertEqual(len(leaderboard), 1)
        self.assertEqual(leaderboard[0]["customer_id"], "9876543210")
        self.assertEqual(leaderboard[0]["customer_name"], "Ravi Kumar")
        self.assertEqual(leaderboard[0]["total_points"], 20)

    def test_photos(self):
        job = self.create_job_card()
        photo = self.ok(self.post(f"/job-cards/{job['id']}/photos",
                                  {"type": "before", "url": "https://img.example.com/1.jpg"}), 201)
        self.assertEqual(photo["type"], "before")
        self.assertEqual(len(self.ok(self.get(f"/job-cards/{job['id']}/photos"))), 1)
        self.assertEqual(len(self.ok(self.get(f"/job-cards/{job['id']}"))["photos"]), 1)

        self.assertEqual(self.post(f"/job-cards/{job['id']}/photos", {"type": "during", "url": "x"}).status_code, 422)
        self.ok(self.delete(f"/job-cards/{job['id']}/photos/{photo['id']}"), 204)
        self.assertEqual(self.ok(self.get(f"/job-cards/{job['id']}/photos")), [])

    def test_delete(self):
        job = self.create_job_card()
        self.ok(self.delete(f"/job-cards/{job['id']}"), 204)
        response = self.get(f"/job-cards/{job['id']}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Job card not found")


if __name__ == "__main__":
    unittest.main()
