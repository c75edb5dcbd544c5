import unittest

from fastapi.testclient import TestClient

from fakes import FakeBackend, FakeProfileStore

from code_assist_gateway.infrastructure.template_registry import StaticTemplateRegistry
from code_assist_gateway.infrastructure.tiers import TIERS
from code_assist_gateway.interface.app import create_app
from code_assist_gateway.interface.dependencies import get_use_case
from code_assist_gateway.services.generate_completion import GenerateCompletionUseCase
from code_assist_gateway.services.quota_gate import QuotaGate
from code_assist_gateway.services.usage_recorder import UsageRecorder

BODY = {
    "messages": [{"role": "human", "content": "explain this file"}],
    "context": None,
    "activeFileContent": "print('hi')",
    "isEditMode": False,
    "fileName": "main.py",
    "line": 1,
    "templateType": "streamlit",
    "projectName": "demo",
    "files": [
        {
            "id": "folder/src",
            "type": "folder",
            "name": "src",
            "children": [{"id": "file/src/app.py", "type": "file", "name": "app.py"}],
        },
        {"id": "file/main.py", "type": "file", "name": "main.py"},
    ],
}

HEADERS = {"X-User-Id": "user_1"}


class TestGenerateRoute(unittest.TestCase):
    def setUp(self) -> None:
        self.store = FakeProfileStore(tier="FREE", generations=0)
        self.backend = FakeBackend(["Here", " is", " the answer"])
        use_case = GenerateCompletionUseCase(
            quota_gate=QuotaGate(self.store, TIERS),
            templates=StaticTemplateRegistry.from_settings(),
            backend=self.backend,
            usage_recorder=UsageRecorder(self.store),
        )
        self.app = create_app()
        self.app.dependency_overrides[get_use_case] = lambda: use_case
        self.client = TestClient(self.app, raise_server_exceptions=False)

    def test_streams_plain_text(self) -> None:
        resp = self.client.post("/api/ai", json=BODY, headers=HEADERS)

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.text, "Here is the answer")
        self.assertEqual(resp.headers["content-type"], "text/plain; charset=utf-8")
        self.assertEqual(resp.headers["cache-control"], "no-cache")
        self.assertEqual(len(self.backend.requests), 1)
        prompt = self.backend.requests[0].system_prompt
        self.assertIn("├── src/\n│   ├── app.py\n├── main.py", prompt)
        self.assertIn("Active File Content:\nprint('hi')", prompt)

    def test_missing_identity(self) -> None:
        resp = self.client.post("/api/ai", json=BODY)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.text, "Unauthorized")
        self.assertEqual(self.backend.requests, [])

    def test_quota_exceeded(self) -> None:
        self.store.tier = "PRO"
        self.store.generations = 2500
        resp = self.client.post("/api/ai", json=BODY, headers=HEADERS)
        self.assertEqual(resp.status_code, 429)
        self.assertEqual(resp.text, "AI generation limit reached for your PRO tier")
        self.assertEqual(self.backend.requests, [])
        self.assertEqual(self.store.increments, 0)

    def test_unexpected_error(self) -> None:
        async def _explode(request):
            raise RuntimeError("backend exploded")

        self.backend.open_stream = _explode  # type: ignore[method-assign]
        resp = self.client.post("/api/ai", json=BODY, headers=HEADERS)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.text, "backend exploded")

    def test_empty_messages_rejected(self) -> None:
        resp = self.client.post("/api/ai", json={**BODY, "messages": []}, headers=HEADERS)
        self.assertEqual(resp.status_code, 500)
        self.assertIn("messages", resp.text)
        self.assertEqual(resp.headers["content-type"], "text/plain; charset=utf-8")
        self.assertEqual(self.backend.requests, [])

    def test_wrong_field_type_is_a_plain_text_500(self) -> None:
        resp = self.client.post("/api/ai", json={**BODY, "line": "first"}, headers=HEADERS)
        self.assertEqual(resp.status_code, 500)
        self.assertIn("line", resp.text)
        self.assertEqual(self.store.increments, 0)

    def test_non_list_files_means_no_files(self) -> None:
        resp = self.client.post(
            "/api/ai", json={**BODY, "files": {"not": "a list"}}, headers=HEADERS
        )
        self.assertEqual(resp.status_code, 200)
        prompt = self.backend.requests[0].system_prompt
        self.assertIn("Current File Structure:\nNo files available", prompt)

    def test_unknown_tree_nodes_are_dropped(self) -> None:
        files = [
            {"type": "symlink", "name": "ghost"},
            {"type": "file"},
            {
                "type": "folder",
                "name": "lib",
                "children": [{"type": "socket", "name": "ghost"}, {"type": "file", "name": "util.py"}],
            },
            {"type": "file", "name": "a.py"},
        ]
        resp = self.client.post("/api/ai", json={**BODY, "files": files}, headers=HEADERS)
        self.assertEqual(resp.status_code, 200)
        prompt = self.backend.requests[0].system_prompt
        self.assertIn("├── lib/\n│   ├── util.py\n├── a.py", prompt)
        self.assertNotIn("ghost", prompt)

    def test_health(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
