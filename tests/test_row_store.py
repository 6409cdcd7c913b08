"""Tests pour les magasins de lignes (mémoire et SQLAlchemy/SQLite)."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from content_engine.core.http_constants import PERSISTENCE_RETRY_AFTER_S
from content_engine.domain.errors import PersistenceError
from content_engine.infra.repo.db import MEMORY_URL, create_schema, get_engine
from content_engine.infra.repo.row_store import InMemoryRowStore, SqlRowStore
from tests.fakes import StepClock, article_row

LIMIT = 2


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    clock = StepClock()
    if request.param == "memory":
        return InMemoryRowStore(clock=clock)
    engine = get_engine(MEMORY_URL)
    create_schema(engine)
    return SqlRowStore(engine, clock=clock)


def test_insert_assigns_id_and_timestamps(any_store):
    row = any_store.insert("articles", article_row())
    assert row["id"]
    assert row["created_at"] is not None
    assert row["updated_at"] is not None
    assert any_store.get("articles", row["id"])["slug"] == row["slug"]


def test_get_missing_returns_none(any_store):
    assert any_store.get("articles", "missing") is None


def test_update_changes_fields_and_touches_updated_at(any_store):
    row = any_store.insert("articles", article_row())
    updated = any_store.update("articles", row["id"], {"quality_score": 42, "quality_issues": ["x"]})
    assert updated["quality_score"] == 42
    assert updated["quality_issues"] == ["x"]
    assert updated["updated_at"] > row["updated_at"]


def test_update_missing_returns_none(any_store):
    assert any_store.update("articles", "missing", {"title": "x"}) is None


def test_find_one_by_slug(any_store):
    any_store.insert("articles", article_row(slug="karasu-emlak"))
    assert any_store.find_one("articles", slug="karasu-emlak")["slug"] == "karasu-emlak"
    assert any_store.find_one("articles", slug="yok") is None


def test_select_filters_orders_and_limits(any_store):
    ids = [
        any_store.insert("articles", article_row(slug=f"s-{i}", review_status="pending_review"))["id"]
        for i in range(3)
    ]
    any_store.insert("articles", article_row(slug="other", review_status="draft"))
    rows = any_store.select(
        "articles",
        filters={"review_status": "pending_review"},
        order_by="created_at",
        descending=True,
        limit=LIMIT,
    )
    assert [r["id"] for r in rows] == [ids[2], ids[1]]


def test_select_puts_missing_values_last(any_store):
    scored = any_store.insert("articles", article_row(slug="a", quality_score=10))["id"]
    unscored = any_store.insert("articles", article_row(slug="b", quality_score=None))["id"]
    for descending in (False, True):
        rows = any_store.select("articles", order_by="quality_score", descending=descending)
        assert [r["id"] for r in rows] == [scored, unscored]


def test_memory_store_returns_copies():
    store = InMemoryRowStore()
    row = store.insert("articles", article_row())
    row["title"] = "değişti"
    assert store.get("articles", row["id"])["title"] != "değişti"


def test_sql_failure_maps_to_persistence_error():
    engine = get_engine(MEMORY_URL)
    create_schema(engine)
    store = SqlRowStore(engine)
    with patch("sqlalchemy.orm.Session.execute", side_effect=OperationalError("stmt", {}, Exception("db down"))):
        with pytest.raises(PersistenceError) as exc:
            store.get("articles", "x")
    assert exc.value.details["retry_after"] == PERSISTENCE_RETRY_AFTER_S
    assert "db down" not in exc.value.message


def test_sql_unknown_table_raises_persistence_error():
    store = SqlRowStore(get_engine(MEMORY_URL))
    with pytest.raises(PersistenceError):
        store.select("listings")
