"""Statistiques de qualité agrégées sur les articles et actualités."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from content_engine.domain.quality_gate import PUBLISH_THRESHOLD

MEDIUM_QUALITY_FLOOR = 50
SMALL_CATALOG_SIZE = 10
LOW_QUALITY_LIMIT = 100


def _score(row: Mapping[str, Any]) -> int:
    return int(row.get("quality_score") or 0)


def summarize_quality(rows: Iterable[tuple[str, Mapping[str, Any]]]) -> dict[str, Any]:
    """
    Agrège les scores qualité de lignes `(content_type, row)`.

    Un score absent compte pour 0. La moyenne ne porte que sur les scores positifs (contenus
    déjà évalués). La liste `lowQuality` contient au plus 100 éléments, du plus faible au plus
    fort: tous les éléments si le catalogue en compte 10 ou moins, sinon ceux sous le seuil de
    publication.
    """
    items = list(rows)
    total = len(items)
    scores = [_score(row) for _, row in items]
    positive = [s for s in scores if s > 0]

    high = sum(1 for s in scores if s >= PUBLISH_THRESHOLD)
    medium = sum(1 for s in scores if MEDIUM_QUALITY_FLOOR <= s < PUBLISH_THRESHOLD)
    low = sum(1 for s in scores if s < MEDIUM_QUALITY_FLOOR)

    candidates = [
        (content_type, row)
        for content_type, row in items
        if total <= SMALL_CATALOG_SIZE or _score(row) < PUBLISH_THRESHOLD
    ]
    candidates.sort(key=lambda pair: _score(pair[1]))
    low_items = [
        {
            "id": row.get("id"),
            "title": row.get("title") or "Untitled",
            "slug": row.get("slug") or "",
            "type": content_type,
            "qualityScore": _score(row),
            "issues": row.get("quality_issues") if isinstance(row.get("quality_issues"), list) else [],
        }
        for content_type, row in candidates[:LOW_QUALITY_LIMIT]
    ]

    return {
        "stats": {
            "total": total,
            "highQuality": high,
            "mediumQuality": medium,
            "lowQuality": low,
            "averageScore": round(sum(positive) / len(positive)) if positive else 0,
            "needsReview": low,
        },
        "lowQuality": low_items,
    }
