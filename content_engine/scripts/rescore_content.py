"""
Script de recalcul des scores qualité des contenus stockés.

Parcourt `articles` et/ou `news_articles`, recalcule le verdict de la porte qualité pour chaque
ligne et met à jour `quality_score` / `quality_issues` lorsqu'ils diffèrent. Le mode `--dry-run`
n'écrit rien et se contente du rapport.

Usage:
  python -m content_engine.scripts.rescore_content --table articles --dry-run
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

# Permet l'exécution du script en direct (python content_engine/scripts/rescore_content.py)
SYS_ROOT = Path(__file__).resolve().parents[2]
if str(SYS_ROOT) not in sys.path:
    sys.path.append(str(SYS_ROOT))

import structlog  # noqa: E402

from content_engine.core.container import build_store  # noqa: E402
from content_engine.core.logging import setup_logging  # noqa: E402
from content_engine.core.settings import get_settings  # noqa: E402
from content_engine.domain.entities import CONTENT_TABLES  # noqa: E402
from content_engine.domain.quality_gate import check_quality  # noqa: E402
from content_engine.infra.repo.row_store import RowStore  # noqa: E402

log = structlog.get_logger(__name__)


def rescore(store: RowStore, tables: list[str], dry_run: bool = False) -> dict[str, Any]:
    """
    Recalcule les verdicts et renvoie un rapport par table.

    Rapport: `{table: {"scanned": n, "changed": n, "passed": n}}`.
    """
    report: dict[str, Any] = {}
    for table in tables:
        scanned = changed = passed = 0
        for row in store.select(table, order_by="created_at"):
            scanned += 1
            verdict = check_quality(row)
            passed += int(verdict.passed)
            issues = list(verdict.issues)
            if row.get("quality_score") == verdict.score and row.get("quality_issues") == issues:
                continue
            changed += 1
            log.info(
                "content_rescored",
                table=table,
                content_id=row["id"],
                previous=row.get("quality_score"),
                score=verdict.score,
                dry_run=dry_run,
            )
            if not dry_run:
                store.update(table, row["id"], {"quality_score": verdict.score, "quality_issues": issues})
        report[table] = {"scanned": scanned, "changed": changed, "passed": passed}
    return report


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recalcule les scores qualité stockés")
    parser.add_argument(
        "--table",
        choices=[*CONTENT_TABLES.values(), "all"],
        default="all",
        help="table à traiter (défaut: toutes)",
    )
    parser.add_argument("--dry-run", action="store_true", help="n'écrit aucune mise à jour")
    parser.add_argument(
        "--database-url",
        default=None,
        help="URL SQLAlchemy (défaut: DATABASE_URL de la configuration)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, store: RowStore | None = None) -> int:
    """Point d'entrée; `store` permet d'injecter un magasin (tests)."""
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging(settings.APP_DEBUG)
    if store is None:
        if args.database_url:
            settings = settings.model_copy(update={"DATABASE_URL": args.database_url})
        store = build_store(settings)
    tables = list(CONTENT_TABLES.values()) if args.table == "all" else [args.table]
    report = rescore(store, tables, dry_run=args.dry_run)
    print(json.dumps({"dry_run": args.dry_run, "tables": report}, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
