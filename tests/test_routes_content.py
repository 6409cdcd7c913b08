"""Tests pour les routes `/content` (enveloppes, statuts HTTP, workflow de bout en bout)."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from content_engine.api.deps import get_pipeline, get_review_workflow, get_store
from content_engine.app.main import create_app
from content_engine.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_CREATED,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_SERVICE_UNAVAILABLE,
    PERSISTENCE_RETRY_AFTER_S,
)
from content_engine.domain.content_pipeline import ContentPipeline
from content_engine.domain.errors import PersistenceError
from content_engine.domain.review_workflow import ReviewWorkflow
from content_engine.infra.llm.generation_client import GenerationClient
from tests.fakes import FakeProvider, article_row, improvement_text, provider_text

FULL_SCORE = 100
SCORE_BELOW = 60
COVERAGE_SIZE = 6


def _client(store, audit, clock, *providers) -> TestClient:
    app = create_app()
    pipeline = ContentPipeline(GenerationClient(list(providers)), store, audit)
    workflow = ReviewWorkflow(store, audit, clock)
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_review_workflow] = lambda: workflow
    app.dependency_overrides[get_store] = lambda: store
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(store, audit, clock):
    return _client(store, audit, clock, FakeProvider("gemini", provider_text()))


def test_generate_returns_success_envelope(client):
    resp = client.post(
        "/content/generate",
        json={"primaryKeyword": "Karasu satılık daire", "pageType": "blog"},
        headers={"X-Request-ID": "req-123"},
    )
    assert resp.status_code == HTTP_CREATED
    body = resp.json()
    assert body["success"] is True
    assert body["requestId"] == "req-123"
    assert resp.headers["X-Request-ID"] == "req-123"
    assert body["data"]["record"]["title"] == "Karasu Satılık Daire Rehberi"
    assert body["data"]["quality"]["score"] == FULL_SCORE
    assert body["data"]["provider"] == "gemini"


def test_generate_generates_request_id_when_missing(client):
    resp = client.post("/content/generate", json={"primaryKeyword": "Karasu emlak"})
    assert resp.json()["requestId"]
    assert resp.headers["X-Request-ID"] == resp.json()["requestId"]


def test_missing_keyword_is_validation_error(client):
    resp = client.post("/content/generate", json={"pageType": "blog"})
    assert resp.status_code == HTTP_BAD_REQUEST
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert "primaryKeyword" in body["details"]["fields"]


def test_blank_keyword_is_validation_error(client):
    resp = client.post("/content/generate", json={"primaryKeyword": "   "})
    assert resp.status_code == HTTP_BAD_REQUEST
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_invalid_enum_is_validation_error(client):
    resp = client.post("/content/generate", json={"primaryKeyword": "x", "pageType": "landing"})
    assert resp.status_code == HTTP_BAD_REQUEST


def test_generation_failure_is_bad_gateway(store, audit, clock):
    client = _client(store, audit, clock, FakeProvider("gemini", exc=RuntimeError("secret")))
    resp = client.post("/content/generate", json={"primaryKeyword": "Karasu emlak"})
    assert resp.status_code == HTTP_BAD_GATEWAY
    body = resp.json()
    assert body["code"] == "GENERATION_ERROR"
    assert body["details"]["attempts"] == [{"provider": "gemini", "reason": "error"}]
    assert "secret" not in resp.text
    assert store.select("articles") == []


def test_parse_failure_is_bad_gateway(store, audit, clock):
    client = _client(store, audit, clock, FakeProvider("gemini", "JSON yok"))
    resp = client.post("/content/generate", json={"primaryKeyword": "Karasu emlak"})
    assert resp.status_code == HTTP_BAD_GATEWAY
    assert resp.json()["code"] == "PARSE_ERROR"


def test_review_flow_end_to_end(client, store):
    content_id = store.insert("articles", article_row())["id"]

    resp = client.post(f"/content/article/{content_id}/submit")
    assert resp.status_code == HTTP_OK
    assert resp.json()["data"]["review_status"] == "pending_review"

    pending = client.get("/content/reviews/pending").json()["data"]
    assert pending["total"] == 1
    assert pending["items"][0]["id"] == content_id
    assert pending["items"][0]["contentType"] == "article"

    resp = client.post(f"/content/article/{content_id}/approve", json={"notes": "iyi"})
    data = resp.json()["data"]
    assert data["review_status"] == "approved"
    assert data["status"] == "published"
    assert data["published_at"] is not None

    versions = client.get(f"/content/article/{content_id}/versions").json()["data"]["items"]
    assert [v["version_number"] for v in versions] == [1]


def test_reject_requires_reason(client, store):
    content_id = store.insert("articles", article_row(review_status="pending_review"))["id"]
    assert client.post(f"/content/article/{content_id}/reject", json={}).status_code == (
        HTTP_BAD_REQUEST
    )
    resp = client.post(f"/content/article/{content_id}/reject", json={"reason": "  "})
    assert resp.status_code == HTTP_BAD_REQUEST
    resp = client.post(
        f"/content/article/{content_id}/reject", json={"reason": "Eksik", "notes": "Kaynak"}
    )
    assert resp.json()["data"]["review_notes"] == "Eksik\n\nKaynak"


def test_request_changes_route(client, store):
    content_id = store.insert("articles", article_row(review_status="pending_review"))["id"]
    resp = client.post(f"/content/article/{content_id}/request-changes", json={"notes": "Düzelt"})
    assert resp.json()["data"]["review_status"] == "changes_requested"


def test_unknown_id_is_not_found(client):
    resp = client.post("/content/article/missing/approve")
    assert resp.status_code == HTTP_NOT_FOUND
    assert resp.json()["code"] == "NOT_FOUND"


def test_unknown_content_type_is_validation_error(client):
    resp = client.post("/content/podcast/x/submit")
    assert resp.status_code == HTTP_BAD_REQUEST


def test_quality_stats(client, store):
    store.insert("articles", article_row(slug="a", quality_score=FULL_SCORE))
    store.insert("news_articles", article_row(slug="b", quality_score=SCORE_BELOW))
    data = client.get("/content/quality/stats").json()["data"]
    assert data["stats"]["total"] == 2
    assert data["stats"]["highQuality"] == 1
    assert data["stats"]["mediumQuality"] == 1
    assert [item["type"] for item in data["lowQuality"]] == ["news", "article"]


def test_coverage_map_route(client):
    resp = client.post(
        "/content/coverage-map", json={"cluster": "sapanca", "pillarKeyword": "Sapanca bungalov"}
    )
    suggestions = resp.json()["data"]["suggestions"]
    assert len(suggestions) == COVERAGE_SIZE
    assert suggestions[0]["page_type"] == "cornerstone"


def test_persistence_error_is_service_unavailable(store, audit, clock):
    client = _client(store, audit, clock)
    broken = MagicMock()
    broken.select.side_effect = PersistenceError("Veri deposuna şu anda erişilemiyor")
    client.app.dependency_overrides[get_store] = lambda: broken
    resp = client.get("/content/quality/stats")
    assert resp.status_code == HTTP_SERVICE_UNAVAILABLE
    assert resp.json()["details"]["retry_after"] == PERSISTENCE_RETRY_AFTER_S
    assert resp.headers["Retry-After"] == str(PERSISTENCE_RETRY_AFTER_S)


def test_unexpected_error_is_generic_internal_error(store, audit, clock):
    client = _client(store, audit, clock)
    broken = MagicMock()
    broken.select.side_effect = RuntimeError("stack details")
    client.app.dependency_overrides[get_store] = lambda: broken
    resp = client.get("/content/quality/stats")
    assert resp.status_code == HTTP_INTERNAL_SERVER_ERROR
    assert resp.json()["code"] == "INTERNAL_ERROR"
    assert "stack details" not in resp.text


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/nope")
    assert resp.status_code == HTTP_NOT_FOUND
    assert resp.json()["success"] is False


def test_improve_route_returns_scores(store, audit, clock):
    client = _client(store, audit, clock, FakeProvider("gemini", improvement_text()))
    content_id = store.insert("articles", article_row(content="<p>kısa</p>"))["id"]
    resp = client.post(f"/content/article/{content_id}/improve", json={"actor": "editor-7"})
    assert resp.status_code == HTTP_OK
    data = resp.json()["data"]
    assert data["provider"] == "gemini"
    assert data["original"]["score"] < data["improved"]["score"] == FULL_SCORE
    assert data["scoreIncrease"] == data["improved"]["score"] - data["original"]["score"]
    assert data["record"]["slug"] == "karasu-satilik-daire-rehberi"
    assert store.select("content_improvements")[0]["actor"] == "editor-7"


def test_improve_route_generation_failure_leaves_record(store, audit, clock):
    client = _client(store, audit, clock, FakeProvider("gemini", exc=RuntimeError("down")))
    content_id = store.insert("articles", article_row(content="<p>kısa</p>"))["id"]
    resp = client.post(f"/content/article/{content_id}/improve")
    assert resp.status_code == HTTP_BAD_GATEWAY
    assert resp.json()["code"] == "GENERATION_ERROR"
    assert store.get("articles", content_id)["content"] == "<p>kısa</p>"


def test_improve_route_unknown_id(client):
    resp = client.post("/content/article/missing/improve")
    assert resp.status_code == HTTP_NOT_FOUND
