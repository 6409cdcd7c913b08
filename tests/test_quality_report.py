"""Tests pour les statistiques qualité agrégées."""

from content_engine.domain.quality_report import LOW_QUALITY_LIMIT, summarize_quality

LARGE_CATALOG = 150


def _row(i, score):
    return {"id": str(i), "title": f"T{i}", "slug": f"s-{i}", "quality_score": score}


def test_empty_catalog():
    report = summarize_quality([])
    assert report["stats"] == {
        "total": 0,
        "highQuality": 0,
        "mediumQuality": 0,
        "lowQuality": 0,
        "averageScore": 0,
        "needsReview": 0,
    }
    assert report["lowQuality"] == []


def test_buckets_and_average_ignore_unscored():
    rows = [
        ("article", _row(1, 90)),
        ("article", _row(2, 70)),
        ("news", _row(3, 55)),
        ("news", _row(4, None)),
        ("article", _row(5, 20)),
    ]
    stats = summarize_quality(rows)["stats"]
    assert stats["total"] == len(rows)
    assert stats["highQuality"] == 2
    assert stats["mediumQuality"] == 1
    assert stats["lowQuality"] == 2
    assert stats["needsReview"] == stats["lowQuality"]
    assert stats["averageScore"] == round((90 + 70 + 55 + 20) / 4)


def test_small_catalog_lists_every_item_lowest_first():
    rows = [("article", _row(1, 95)), ("news", _row(2, None)), ("article", _row(3, 60))]
    items = summarize_quality(rows)["lowQuality"]
    assert [i["id"] for i in items] == ["2", "3", "1"]
    assert items[0]["qualityScore"] == 0
    assert items[0]["issues"] == []
    assert items[1]["type"] == "article"


def test_large_catalog_lists_only_below_threshold_and_caps():
    rows = [("article", _row(i, i % 100)) for i in range(LARGE_CATALOG)]
    items = summarize_quality(rows)["lowQuality"]
    assert len(items) <= LOW_QUALITY_LIMIT
    assert all(i["qualityScore"] < 70 for i in items)
    scores = [i["qualityScore"] for i in items]
    assert scores == sorted(scores)
