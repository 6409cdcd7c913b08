"""Tests pour la réécriture assistée d'un contenu existant."""

import pytest

from content_engine.domain.content_pipeline import ContentPipeline
from content_engine.domain.errors import GenerationError, NotFoundError, ParseError
from content_engine.domain.quality_gate import POINTS
from content_engine.infra.llm.generation_client import GenerationClient
from tests.fakes import PASSING_BODY, FakeProvider, article_row, improvement_text

FULL_SCORE = 100
THIN_CONTENT = "<p>kısa bir metin</p>"
THIN_SCORE = FULL_SCORE - POINTS["content_length"] - POINTS["headings"]


def _pipeline(store, audit, *providers):
    return ContentPipeline(GenerationClient(list(providers)), store, audit, actor="editor-1")


def _thin_row(store, table="articles", **overrides):
    row = article_row(content=THIN_CONTENT, quality_score=THIN_SCORE, **overrides)
    return store.insert(table, row)["id"]


def _assert_untouched(store, content_id):
    row = store.get("articles", content_id)
    assert row["content"] == THIN_CONTENT
    assert row["quality_score"] == THIN_SCORE
    assert store.select("content_versions") == []
    assert store.select("content_improvements") == []


@pytest.mark.asyncio
async def test_improve_rewrites_and_rescores(store, audit):
    content_id = _thin_row(store, status="published", review_status="approved")
    provider = FakeProvider("gemini", improvement_text())
    outcome = await _pipeline(store, audit, provider).improve("article", content_id)

    assert outcome.provider == "gemini"
    assert outcome.before.score == THIN_SCORE
    assert outcome.after.score == FULL_SCORE
    assert outcome.score_increase == FULL_SCORE - THIN_SCORE

    stored = store.get("articles", content_id)
    assert stored["content"] == PASSING_BODY
    assert stored["quality_score"] == FULL_SCORE
    assert stored["quality_issues"] == []
    assert stored["slug"] == "karasu-satilik-daire-rehberi"
    assert (stored["status"], stored["review_status"]) == ("published", "approved")

    prompt = provider.calls[0]
    assert "İçerik çok kısa" in prompt
    assert THIN_CONTENT in prompt
    assert f"{THIN_SCORE}/100" in prompt


@pytest.mark.asyncio
async def test_improve_keeps_previous_version_and_logs_scores(store, audit):
    content_id = _thin_row(store)
    await _pipeline(store, audit, FakeProvider("gemini", improvement_text())).improve(
        "article", content_id
    )

    versions = store.select("content_versions", filters={"content_id": content_id})
    assert [v["version_number"] for v in versions] == [1]
    assert versions[0]["content"] == THIN_CONTENT
    assert versions[0]["created_by"] == "editor-1"

    (entry,) = store.select("content_improvements", filters={"content_id": content_id})
    assert (entry["score_before"], entry["score_after"]) == (THIN_SCORE, FULL_SCORE)
    assert entry["original_content"] == THIN_CONTENT
    assert entry["improved_content"] == PASSING_BODY
    assert entry["provider"] == "gemini"
    assert [e.type for e in audit.events] == ["content.improved"]
    assert audit.events[0].metadata["score_after"] == FULL_SCORE


@pytest.mark.asyncio
async def test_improve_falls_back_to_secondary_provider(store, audit):
    content_id = _thin_row(store)
    primary = FakeProvider("gemini", exc=RuntimeError("quota"))
    secondary = FakeProvider("openai", improvement_text())
    outcome = await _pipeline(store, audit, primary, secondary).improve("article", content_id)
    assert outcome.provider == "openai"
    assert len(primary.calls) == len(secondary.calls) == 1
    assert store.select("content_improvements")[0]["provider"] == "openai"


@pytest.mark.asyncio
async def test_improve_writes_nothing_when_all_providers_fail(store, audit):
    content_id = _thin_row(store)
    pipeline = _pipeline(
        store,
        audit,
        FakeProvider("gemini", exc=RuntimeError("down")),
        FakeProvider("openai", configured=False),
    )
    with pytest.raises(GenerationError):
        await pipeline.improve("article", content_id)
    _assert_untouched(store, content_id)
    assert audit.events == []


@pytest.mark.parametrize(
    "text",
    ["JSON yok", improvement_text(mainContent="", content="")],
    ids=["unparseable", "empty-content"],
)
@pytest.mark.asyncio
async def test_improve_writes_nothing_on_unusable_response(store, audit, text):
    content_id = _thin_row(store)
    with pytest.raises(ParseError):
        await _pipeline(store, audit, FakeProvider("gemini", text)).improve("article", content_id)
    _assert_untouched(store, content_id)


@pytest.mark.asyncio
async def test_improve_unknown_id_calls_no_provider(store, audit):
    provider = FakeProvider("gemini", improvement_text())
    with pytest.raises(NotFoundError):
        await _pipeline(store, audit, provider).improve("article", "missing")
    assert provider.calls == []


@pytest.mark.asyncio
async def test_improve_keeps_stored_fields_the_provider_omits(store, audit):
    content_id = _thin_row(store, table="news_articles")
    text = improvement_text(title="", metaDescription="", excerpt="")
    outcome = await _pipeline(store, audit, FakeProvider("gemini", text)).improve(
        "news", content_id
    )
    assert outcome.record.title == article_row()["title"]
    assert outcome.record.meta_description == article_row()["meta_description"]
    assert outcome.record.content == PASSING_BODY
