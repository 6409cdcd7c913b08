"""
Workflow de revue éditoriale.

Machine à états sur `review_status` (draft, pending_review, approved, rejected,
changes_requested); `status` (draft/published) évolue séparément. Aucun état n'est terminal:
`submit` est valide depuis n'importe quel état. Les transitions depuis un état autre que
`pending_review` sont journalisées mais acceptées.

Chaque transition écrit une ligne `content_reviews` et émet un événement d'audit. Une
approbation crée aussi un instantané dans `content_versions` (`record_version`, partagé avec
la réécriture assistée) et publie le contenu si son score qualité stocké atteint le seuil.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from content_engine.app.metrics import AUTO_PUBLISHED, REVIEW_TRANSITIONS
from content_engine.domain.entities import (
    CONTENT_TABLES,
    REVIEWS_TABLE,
    VERSIONS_TABLE,
    ContentRecord,
    table_for,
)
from content_engine.domain.errors import NotFoundError, ValidationError
from content_engine.domain.quality_gate import PUBLISH_THRESHOLD, check_quality
from content_engine.infra.audit import AuditTrail
from content_engine.infra.repo.row_store import RowStore, utcnow

log = structlog.get_logger(__name__)

NOTES_SEPARATOR = "\n\n"


class ReviewWorkflow:
    """Transitions de revue sur les tables `articles` et `news_articles`."""

    def __init__(
        self,
        store: RowStore,
        audit: AuditTrail,
        clock: Callable[[], datetime] = utcnow,
        *,
        actor: str = "system",
    ) -> None:
        self.store = store
        self.audit = audit
        self.clock = clock
        self.actor = actor

    # --- transitions -------------------------------------------------------

    def submit(
        self, content_type: str, content_id: str, *, actor: str | None = None
    ) -> ContentRecord:
        """Passe en `pending_review` et recalcule le verdict qualité."""
        table, row = self._load(content_type, content_id)
        verdict = check_quality(row)
        changes = {
            "review_status": "pending_review",
            "quality_score": verdict.score,
            "quality_issues": list(verdict.issues),
        }
        return self._transition(
            "submit", content_type, table, row, changes, actor=actor,
            extra={"quality_score": verdict.score},
        )

    def approve(
        self,
        content_type: str,
        content_id: str,
        notes: str | None = None,
        *,
        actor: str | None = None,
    ) -> ContentRecord:
        """
        Passe en `approved`.

        Si le score qualité stocké atteint le seuil, le contenu est publié; `published_at` n'est
        renseigné que s'il était vide. Sous le seuil, `status` reste inchangé.
        """
        table, row = self._load(content_type, content_id)
        now = self.clock()
        changes: dict[str, Any] = {
            "review_status": "approved",
            "review_notes": notes,
            "reviewed_at": now,
        }
        score = row.get("quality_score")
        published = score is not None and score >= PUBLISH_THRESHOLD
        if published:
            changes["status"] = "published"
            if row.get("published_at") is None:
                changes["published_at"] = now
            AUTO_PUBLISHED.labels(content_type).inc()
        record_version(self.store, content_type, row, actor or self.actor)
        return self._transition(
            "approve", content_type, table, row, changes, actor=actor, notes=notes,
            extra={"quality_score": score, "published": published},
        )

    def reject(
        self,
        content_type: str,
        content_id: str,
        reason: str,
        notes: str | None = None,
        *,
        actor: str | None = None,
    ) -> ContentRecord:
        """Passe en `rejected`; le motif est obligatoire et précède les notes."""
        if not reason or not reason.strip():
            raise ValidationError("Red nedeni zorunludur", {"fields": ["reason"]})
        table, row = self._load(content_type, content_id)
        review_notes = reason.strip()
        if notes and notes.strip():
            review_notes = f"{review_notes}{NOTES_SEPARATOR}{notes.strip()}"
        changes = {
            "review_status": "rejected",
            "review_notes": review_notes,
            "reviewed_at": self.clock(),
        }
        return self._transition(
            "reject", content_type, table, row, changes, actor=actor, notes=review_notes
        )

    def request_changes(
        self,
        content_type: str,
        content_id: str,
        notes: str | None = None,
        *,
        actor: str | None = None,
    ) -> ContentRecord:
        """Passe en `changes_requested`."""
        table, row = self._load(content_type, content_id)
        changes = {
            "review_status": "changes_requested",
            "review_notes": notes,
            "reviewed_at": self.clock(),
        }
        return self._transition(
            "request_changes", content_type, table, row, changes, actor=actor, notes=notes
        )

    # --- lectures ----------------------------------------------------------

    def list_pending(self, content_type: str | None = None) -> list[tuple[str, ContentRecord]]:
        """Contenus en attente de revue, le plus ancien (mise à jour) en premier."""
        types = [content_type] if content_type else list(CONTENT_TABLES)
        pending: list[tuple[str, ContentRecord]] = []
        for ctype in types:
            rows = self.store.select(
                table_for(ctype),
                filters={"review_status": "pending_review"},
                order_by="updated_at",
            )
            pending.extend((ctype, ContentRecord.model_validate(r)) for r in rows)
        pending.sort(key=lambda pair: (pair[1].updated_at is None, pair[1].updated_at or 0))
        return pending

    def list_versions(self, content_type: str, content_id: str) -> list[dict[str, Any]]:
        """Instantanés d'un contenu, du plus récent au plus ancien."""
        self._load(content_type, content_id)
        return self.store.select(
            VERSIONS_TABLE,
            filters={"content_type": content_type, "content_id": content_id},
            order_by="version_number",
            descending=True,
        )

    # --- internes ----------------------------------------------------------

    def _load(self, content_type: str, content_id: str) -> tuple[str, dict[str, Any]]:
        table = table_for(content_type)
        row = self.store.get(table, content_id)
        if row is None:
            raise NotFoundError(
                "İçerik bulunamadı", {"content_type": content_type, "id": content_id}
            )
        return table, row

    def _transition(
        self,
        action: str,
        content_type: str,
        table: str,
        row: dict[str, Any],
        changes: dict[str, Any],
        *,
        actor: str | None,
        notes: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> ContentRecord:
        # les écritures et l'audit précèdent toute journalisation
        actor = actor or self.actor
        previous = row.get("review_status")
        updated = self.store.update(table, row["id"], changes)
        if updated is None:
            raise NotFoundError("İçerik bulunamadı", {"content_type": content_type, "id": row["id"]})

        self.store.insert(
            REVIEWS_TABLE,
            {
                "content_type": content_type,
                "content_id": row["id"],
                "action": action,
                "review_status": changes["review_status"],
                "notes": notes,
                "actor": actor,
            },
        )
        REVIEW_TRANSITIONS.labels(action, content_type).inc()
        self.audit.emit(
            f"content.{action}",
            actor=actor,
            resource_type=content_type,
            resource_id=row["id"],
            metadata={"from": previous, "to": changes["review_status"], **(extra or {})},
        )

        if action != "submit" and previous != "pending_review":
            log.info(
                "review_transition_from_unexpected_state",
                action=action,
                content_id=row["id"],
                review_status=previous,
            )
        log.info(
            "review_transition",
            action=action,
            content_type=content_type,
            content_id=row["id"],
            from_status=previous,
            to_status=changes["review_status"],
        )
        return ContentRecord.model_validate(updated)


def record_version(
    store: RowStore, content_type: str, row: dict[str, Any], actor: str
) -> dict[str, Any]:
    """Écrit un instantané de `row` dans `content_versions` avec le numéro de version suivant."""
    latest = store.select(
        VERSIONS_TABLE,
        filters={"content_type": content_type, "content_id": row["id"]},
        order_by="version_number",
        descending=True,
        limit=1,
    )
    version_number = (latest[0]["version_number"] + 1) if latest else 1
    return store.insert(
        VERSIONS_TABLE,
        {
            "content_type": content_type,
            "content_id": row["id"],
            "version_number": version_number,
            "title": row.get("title"),
            "content": row.get("content"),
            "excerpt": row.get("excerpt"),
            "meta_description": row.get("meta_description"),
            "created_by": actor,
        },
    )
