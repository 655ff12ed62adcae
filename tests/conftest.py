import json
import os

os.environ.setdefault("MODE", "test")

import httpx
import pytest
from fastapi.testclient import TestClient

from app.apis.deps import get_ankix_client, get_counter_service
from app.modules.flashcards.client import AnkiXClient
from app.modules.workspace import workspace_manager


PROCESS_URL = "http://ankix.test/process"
IMPORT_URL = "http://ankix.test/generate-import"

SAMPLE_PAGES = [
    {
        "flashcards": [
            {"front": "Capital of France?", "back": "Paris", "type": "basic"},
            {"front": "2+2?", "back": "4", "type": "basic"},
            {"front": "Largest planet?", "back": "Jupiter", "type": "basic"},
        ]
    },
    {"flashcards": [{"front": "H2O is {{c1::water}}", "type": "cloze"}]},
    {"flashcards": [{"front": "Speed of light?", "back": "299792458 m/s", "type": "basic"}]},
    {"flashcards": [{"front": "Author of Hamlet?", "back": "Shakespeare", "type": "basic"}]},
]


class FakeAnkiXService:
    """Stands in for the remote service and records what it was sent."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.pages = SAMPLE_PAGES
        self.fail = False
        self.import_body = b"#separator:tab\nCapital of France?\tParis\n"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            return httpx.Response(500, text="boom")
        if request.url.path == "/process":
            return httpx.Response(200, json=self.pages)
        if request.url.path == "/generate-import":
            return httpx.Response(
                200,
                content=self.import_body,
                headers={
                    "content-type": "text/plain",
                    "content-disposition": 'attachment; filename="anki_import.txt"',
                },
            )
        return httpx.Response(404)

    def client(self) -> AnkiXClient:
        return AnkiXClient(
            process_url=PROCESS_URL,
            import_url=IMPORT_URL,
            transport=httpx.MockTransport(self.handler),
        )

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


class FakeCounter:
    def __init__(self, value=10):
        self.value = value
        self.increments: list[int] = []
        self.comments = 0

    async def get_count(self):
        return self.value

    async def get_and_increment(self, cards_created):
        if self.value is None:
            return None
        before = self.value
        self.value += cards_created
        self.increments.append(cards_created)
        return before

    async def insert_diagnostic_comment(self):
        self.comments += 1
        return True


@pytest.fixture(autouse=True)
def clean_workspaces():
    workspace_manager.workspaces.clear()
    yield
    workspace_manager.workspaces.clear()


@pytest.fixture
def fake_service():
    return FakeAnkiXService()


@pytest.fixture
def fake_counter():
    return FakeCounter()


@pytest.fixture
def api(fake_service, fake_counter):
    from main import app

    app.dependency_overrides[get_ankix_client] = fake_service.client
    app.dependency_overrides[get_counter_service] = lambda: fake_counter
    yield TestClient(app)
    app.dependency_overrides.clear()
