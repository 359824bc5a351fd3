"""
HTTP API tests. The assistant dependency is overridden with one built on in-process
fakes, so no provider is contacted.
"""

import pytest
from fastapi.testclient import TestClient

from src.agent.agent import LabourLawAssistant
from src.api.app import app, get_assistant
from src.services.cases.models import LegalResponse
from src.services.cases.storage import build_case_row
from src.services.errors import SearchBackendError
from tests.helpers import FakeGenerator, FakeSearchBackend, InMemoryCaseStore, make_case_facts, make_services


@pytest.fixture
def fakes():
    generator = FakeGenerator(
        texts={"expand": "LRA s188", "generate": "A dismissal must be substantively fair."},
        structured={"generate": LegalResponse(reply="What is your name?", legal_reasoning="Name unknown.")},
    )
    backend = FakeSearchBackend()
    store = InMemoryCaseStore()
    return generator, backend, store


@pytest.fixture
def client(fakes):
    generator, backend, store = fakes
    assistant = LabourLawAssistant(make_services(generator, backend=backend, store=store))
    app.dependency_overrides[get_assistant] = lambda: assistant
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_chat_returns_reply_and_case_id(client, fakes):
    _, _, store = fakes
    response = client.post("/api/chat", json={"question": "I was fired yesterday", "history": []})
    assert response.status_code == 200
    body = response.json()
    assert body["reply"] == "What is your name?"
    assert body["legal_reasoning"] == "Name unknown."
    assert body["stage"] == "intake"
    assert body["caseId"] == "case-1"
    assert "case-1" in store.rows


def test_chat_missing_question_is_400(client, fakes):
    generator, backend, _ = fakes
    response = client.post("/api/chat", json={"history": []})
    assert response.status_code == 400
    assert response.json() == {"error": "Question is required"}
    assert generator.calls == []
    assert backend.calls == []


def test_chat_malformed_history_is_400(client):
    response = client.post("/api/chat", json={"question": "hi", "history": [{"role": "bot", "content": "x"}]})
    assert response.status_code == 400
    assert "history[0].role" in response.json()["error"]


def test_chat_non_list_history_is_400(client):
    response = client.post("/api/chat", json={"question": "hi", "history": "not a list"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"


def test_wrong_method_is_405_json(client):
    response = client.get("/api/chat")
    assert response.status_code == 405
    assert "error" in response.json()


def test_search_failure_is_500_with_error_body(client, fakes):
    _, backend, _ = fakes
    backend.error = SearchBackendError("relation \"documents\" does not exist")
    response = client.post("/api/chat", json={"question": "Can they fire me?"})
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Database Error"
    assert body["stage"] == "search"
    assert body["details"].startswith("Failed to search database")


def test_ask_returns_answer_and_sources(client):
    response = client.post("/api/ask", json={"question": "What is an unfair dismissal?"})
    assert response.status_code == 200
    body = response.json()
    assert body["answer"] == "A dismissal must be substantively fair."
    assert [s["id"] for s in body["sources"]] == ["doc-1", "doc-2"]


def test_ask_empty_question_is_400(client):
    response = client.post("/api/ask", json={"question": "  "})
    assert response.status_code == 400
    assert response.json()["error"] == "Question is required"


def test_cases_listing(client):
    client.post("/api/chat", json={"question": "I was fired"})
    response = client.get("/api/cases")
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == ["case-1"]


def test_chat_accepts_numeric_case_id_from_listing(client, fakes):
    _, _, store = fakes
    store.rows["42"] = {**build_case_row(make_case_facts(client_name="Thandi")), "id": 42}

    response = client.post("/api/chat", json={"question": "I worked at Acme", "caseId": 42})

    assert response.status_code == 200
    body = response.json()
    assert body["caseId"] == "42"
    assert body["case_facts"]["client_name"] == "Thandi"
    assert len(store.rows) == 1
