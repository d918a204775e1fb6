import unittest
from unittest import mock

from fastapi import WebSocketDisconnect

from tests.base import API, ApiTestCase
from garagehub.realtime import feed


class TestRealtimeSocket(ApiTestCase):

    def socket_url(self, **params) -> str:
        token = self.headers["Authorization"].split(" ", 1)[1]
        query = "&".join(f"{k}={v}" for k, v in dict(token=token, **params).items())
        return f"{API}/realtime?{query}"

    def test_receives_row_changes(self):
        with self.client.websocket_connect(self.socket_url()) as socket:
            job = self.create_job_card()
            message = socket.receive_json()
        self.assertEqual(message["table"], "job_cards")
        self.assertEqual(message["eventType"], "INSERT")
        self.assertEqual(message["new"]["id"], job["id"])
        self.assertEqual(message["new"]["status"], "Pending")
        self.assertIsNone(message["old"])

    def test_table_filter(self):
        with self.client.websocket_connect(self.socket_url(table="inventory")) as socket:
            self.create_job_card()
            item = self.create_inventory_item()
            message = socket.receive_json()
        self.assertEqual(message["table"], "inventory")
        self.assertEqual(message["new"]["id"], item["id"])

    def test_update_carries_old_row(self):
        job = self.create_job_card()
        with self.client.websocket_connect(self.socket_url(table="job_cards")) as socket:
            self.ok(self.post(f"/job-cards/{job['id']}/move", {"status": "In Progress"}))
            message = socket.receive_json()
        self.assertEqual(message["eventType"], "UPDATE")
        self.assertEqual(message["old"]["status"], "Pending")
        self.assertEqual(message["new"]["status"], "In Progress")

    def test_failed_send_closes_the_stream(self):
        subscribers = len(feed)
        with mock.patch("starlette.websockets.WebSocket.send_json", side_effect=RuntimeError("send failed")):
            with self.client.websocket_connect(self.socket_url()) as socket:
                self.create_job_card()
                with self.assertRaises(WebSocketDisconnect) as raised:
                    socket.receive_json()
        self.assertEqual(raised.exception.code, 1011)
        self.assertEqual(len(feed), subscribers)

    def test_bad_token_is_rejected(self):
        with self.assertRaises(WebSocketDisconnect) as raised:
            with self.client.websocket_connect(f"{API}/realtime?token=not-a-token"):
                pass
        self.assertEqual(raised.exception.code, 1008)


if __name__ == "__main__":
    unittest.main()
