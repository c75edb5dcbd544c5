import json
import unittest
from datetime import datetime, timezone

import httpx

from code_assist_gateway.domain.exceptions import CollaboratorUnavailableError
from code_assist_gateway.infrastructure.profile_rest_adapter import ProfileRestAdapter

BASE_URL = "http://profiles.test/"


class TestProfileRestAdapter(unittest.IsolatedAsyncioTestCase):
    def _adapter(self, handler) -> ProfileRestAdapter:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        self.addAsyncCleanup(client.aclose)
        return ProfileRestAdapter(client=client, base_url=BASE_URL)

    async def test_fetch_user(self) -> None:
        adapter = self._adapter(
            lambda request: httpx.Response(
                200,
                json={
                    "id": "user_1",
                    "tier": "PRO",
                    "generations": 12,
                    "lastResetDate": "2026-10-01T00:00:00.000Z",
                },
            )
        )
        record = await adapter.fetch_user("user_1")

        self.assertEqual(record.user_id, "user_1")
        self.assertEqual(record.tier, "PRO")
        self.assertEqual(record.generations, 12)
        self.assertEqual(record.last_reset, datetime(2026, 10, 1, tzinfo=timezone.utc))
        request = self.requests[0]
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.url.path, "/api/user")
        self.assertEqual(request.url.params["id"], "user_1")

    async def test_fetch_user_defaults(self) -> None:
        adapter = self._adapter(lambda request: httpx.Response(200, json={"id": "user_1"}))
        record = await adapter.fetch_user("user_1")
        self.assertIsNone(record.tier)
        self.assertEqual(record.generations, 0)
        self.assertIsNone(record.last_reset)

    async def test_post_endpoints(self) -> None:
        adapter = self._adapter(lambda request: httpx.Response(200, json={}))
        await adapter.check_reset("user_1")
        await adapter.increment_generations("user_1")

        self.assertEqual(
            [(r.method, r.url.path) for r in self.requests],
            [
                ("POST", "/api/user/check-reset"),
                ("POST", "/api/user/increment-generations"),
            ],
        )
        for request in self.requests:
            self.assertEqual(json.loads(request.content), {"userId": "user_1"})

    async def test_error_status(self) -> None:
        adapter = self._adapter(lambda request: httpx.Response(503))
        with self.assertRaises(CollaboratorUnavailableError):
            await adapter.check_reset("user_1")

    async def test_network_error(self) -> None:
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        adapter = self._adapter(_refuse)
        with self.assertRaises(CollaboratorUnavailableError):
            await adapter.increment_generations("user_1")

    async def test_invalid_json(self) -> None:
        adapter = self._adapter(lambda request: httpx.Response(200, text="<html>"))
        with self.assertRaises(CollaboratorUnavailableError):
            await adapter.fetch_user("user_1")


if __name__ == "__main__":
    unittest.main()
