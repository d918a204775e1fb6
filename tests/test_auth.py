import unittest

from tests.base import API, ApiTestCase


class TestAuth(ApiTestCase):

    def test_health_and_root(self):
        self.assertEqual(self.client.get("/health").json()["status"], "healthy")
        self.assertIn("docs", self.client.get("/").json())

    def test_me(self):
        me = self.ok(self.get("/auth/me"))
        self.assertEqual(me["username"], self.username)
        self.assertEqual(me["role"], "admin")
        self.assertNotIn("hashed_password", me)

    def test_register_creates_a_garage(self):
        garage = self.ok(self.get("/garages/current"))
        self.assertEqual(garage["name"], "My Garage")
        renamed = self.ok(self.put("/garages/current", {"name": "Speedy Motors"}))
        self.assertEqual(renamed["name"], "Speedy Motors")
        self.assertEqual(renamed["id"], garage["id"])

    def test_duplicate_username_rejected(self):
        response = self.client.post(f"{API}/auth/register", json={
            "username": self.username,
            "email": "someone-else@example.com",
            "password": "another-pass-1",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Username already registered")

    def test_short_password_rejected(self):
        response = self.client.post(f"{API}/auth/register", json={
            "username": "shorty", "email": "shorty@example.com", "password": "123",
        })
        self.assertEqual(response.status_code, 422)

    def test_wrong_password(self):
        response = self.client.post(f"{API}/auth/login", json={"username": self.username, "password": "nope"})
        self.assertEqual(response.status_code, 401)

    def test_form_login_and_token_endpoint(self):
        form = {"username": self.username, "password": self.password}
        self.assertIn("access_token", self.ok(self.client.post(f"{API}/auth/login", data=form)))
        self.assertEqual(self.ok(self.client.post(f"{API}/auth/token", data=form))["token_type"], "bearer")

    def test_login_requires_both_fields(self):
        response = self.client.post(f"{API}/auth/login", json={"username": self.username})
        self.assertEqual(response.status_code, 422)

    def test_protected_routes_need_a_token(self):
        self.assertEqual(self.client.get(f"{API}/job-cards/").status_code, 401)
        bad = {"Authorization": "Bearer not-a-token"}
        self.assertEqual(self.client.get(f"{API}/job-cards/", headers=bad).status_code, 401)

    def test_garages_are_isolated(self):
        job = self.create_job_card()
        other = self.register("rival", "rival-pass-123")
        self.assertEqual(self.get(f"/job-cards/{job['id']}", headers=other).status_code, 404)
        self.assertEqual(self.ok(self.get("/job-cards/", headers=other))["count"], 0)


if __name__ == "__main__":
    unittest.main()
