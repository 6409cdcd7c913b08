"""
Orchestrateur du pipeline de génération de contenu.

Enchaînement linéaire: prompt -> génération (avec repli) -> parsing -> slug unique -> brouillon
persisté -> score qualité (écriture de suivi idempotente) -> événement d'audit. Un échec de
génération ou de parsing interrompt le pipeline avant toute écriture.

`improve` réécrit un contenu existant: verdict courant -> prompt de réécriture -> génération ->
parsing -> instantané de la version précédente -> mise à jour et nouveau verdict -> journal
`content_improvements`.

Le magasin est synchrone; ses appels passent par `asyncio.to_thread` pour ne pas bloquer la
boucle d'événements.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import structlog

from content_engine.app.metrics import CONTENT_IMPROVEMENTS, PARSE_FAILURES, QUALITY_SCORE
from content_engine.domain.entities import (
    IMPROVEMENTS_TABLE,
    ContentRecord,
    ContentRequest,
    GeneratedContent,
    QualityVerdict,
    table_for,
)
from content_engine.domain.errors import NotFoundError, ParseError
from content_engine.domain.prompts import build_improvement_prompt, build_prompt
from content_engine.domain.quality_gate import check_quality
from content_engine.domain.response_parser import parse_response
from content_engine.domain.review_workflow import record_version
from content_engine.domain.slugs import resolve_slug
from content_engine.infra.audit import AuditTrail
from content_engine.infra.llm.generation_client import GenerationClient
from content_engine.infra.repo.row_store import RowStore

log = structlog.get_logger(__name__)

BLOG_CATEGORY = "Blog"


@dataclass(frozen=True)
class PipelineOutcome:
    """Résultat d'une génération: brouillon persisté, verdict qualité et fournisseur retenu."""

    record: ContentRecord
    verdict: QualityVerdict
    provider: str


@dataclass(frozen=True)
class ImprovementOutcome:
    """Résultat d'une réécriture: contenu mis à jour et verdicts avant/après."""

    record: ContentRecord
    before: QualityVerdict
    after: QualityVerdict
    provider: str

    @property
    def score_increase(self) -> int:
        return self.after.score - self.before.score


def category_for(request: ContentRequest) -> str:
    """Catégorie par défaut: mot-clé en casse titre pour un pilier, sinon « Blog »."""
    if request.page_type == "cornerstone":
        return request.primary_keyword.title()
    return BLOG_CATEGORY


def _keywords(request: ContentRequest, generated: GeneratedContent) -> list[str]:
    if generated.keywords:
        return list(generated.keywords)
    return [request.primary_keyword, *request.secondary_keywords]


class ContentPipeline:
    """Assemble les composants; toutes les dépendances sont injectées."""

    def __init__(
        self,
        generation_client: GenerationClient,
        store: RowStore,
        audit: AuditTrail,
        *,
        author: str = "Karasu Emlak",
        actor: str = "system",
    ) -> None:
        self.generation_client = generation_client
        self.store = store
        self.audit = audit
        self.author = author
        self.actor = actor

    async def generate(
        self, request: ContentRequest, content_type: str = "article"
    ) -> PipelineOutcome:
        """
        Génère, persiste et évalue un nouveau brouillon.

        Raises:
            GenerationError: aucun fournisseur n'a répondu.
            ParseError: la réponse ne contient aucun objet JSON exploitable.
            PersistenceError: le magasin est indisponible.
        """
        table = table_for(content_type)
        prompt = build_prompt(request)
        raw, provider = await self.generation_client.generate_with_provider(prompt)
        generated = self._parse(raw, provider)

        slug = await asyncio.to_thread(
            resolve_slug,
            generated.slug_hint or generated.title or request.primary_keyword,
            lambda candidate: self.store.find_one(table, slug=candidate) is not None,
        )
        row = await asyncio.to_thread(
            self.store.insert, table, self._draft_row(request, generated, slug)
        )

        verdict = check_quality(row)
        QUALITY_SCORE.observe(verdict.score)
        row = await asyncio.to_thread(
            self.store.update,
            table,
            row["id"],
            {"quality_score": verdict.score, "quality_issues": list(verdict.issues)},
        ) or row

        self.audit.emit(
            "content.created",
            actor=self.actor,
            resource_type=content_type,
            resource_id=row["id"],
            metadata={
                "slug": slug,
                "provider": provider,
                "quality_score": verdict.score,
                "page_type": request.page_type,
            },
        )
        log.info(
            "content_created",
            content_type=content_type,
            content_id=row["id"],
            slug=slug,
            provider=provider,
            quality_score=verdict.score,
        )
        return PipelineOutcome(
            record=ContentRecord.model_validate(row), verdict=verdict, provider=provider
        )

    async def improve(
        self, content_type: str, content_id: str, *, actor: str | None = None
    ) -> ImprovementOutcome:
        """
        Réécrit le contenu stocké à partir de son verdict qualité courant.

        Le slug, le statut et le statut de revue ne changent pas. La version précédente est
        conservée dans `content_versions`. Aucun échec de génération ou de parsing n'écrit quoi
        que ce soit.

        Raises:
            NotFoundError: contenu inconnu.
            GenerationError: aucun fournisseur n'a répondu.
            ParseError: la réponse ne contient pas de contenu réécrit.
        """
        actor = actor or self.actor
        table = table_for(content_type)
        row = await asyncio.to_thread(self.store.get, table, content_id)
        if row is None:
            raise NotFoundError(
                "İçerik bulunamadı", {"content_type": content_type, "id": content_id}
            )

        before = check_quality(row)
        prompt = build_improvement_prompt(
            row.get("title") or "",
            row.get("content") or "",
            before.score,
            before.issues,
            row.get("keywords") or None,
        )
        raw, provider = await self.generation_client.generate_with_provider(prompt)
        generated = self._parse(raw, provider)
        if not generated.content.strip():
            PARSE_FAILURES.inc()
            log.warning("improved_content_empty", provider=provider, content_id=content_id)
            raise ParseError("improved content is empty", {"provider": provider})

        changes: dict[str, Any] = {
            "title": generated.title or row.get("title"),
            "content": generated.content,
            "excerpt": generated.excerpt or row.get("excerpt"),
            "meta_description": generated.meta_description or row.get("meta_description"),
        }
        after = check_quality({**row, **changes})
        changes["quality_score"] = after.score
        changes["quality_issues"] = list(after.issues)
        QUALITY_SCORE.observe(after.score)

        await asyncio.to_thread(record_version, self.store, content_type, row, actor)
        updated = await asyncio.to_thread(self.store.update, table, content_id, changes)
        if updated is None:
            raise NotFoundError(
                "İçerik bulunamadı", {"content_type": content_type, "id": content_id}
            )
        await asyncio.to_thread(
            self.store.insert,
            IMPROVEMENTS_TABLE,
            {
                "content_type": content_type,
                "content_id": content_id,
                "provider": provider,
                "score_before": before.score,
                "score_after": after.score,
                "issues_before": list(before.issues),
                "issues_after": list(after.issues),
                "original_content": row.get("content") or "",
                "improved_content": generated.content,
                "actor": actor,
            },
        )

        outcome = ImprovementOutcome(
            record=ContentRecord.model_validate(updated),
            before=before,
            after=after,
            provider=provider,
        )
        CONTENT_IMPROVEMENTS.labels(
            content_type, "improved" if outcome.score_increase > 0 else "not_improved"
        ).inc()
        self.audit.emit(
            "content.improved",
            actor=actor,
            resource_type=content_type,
            resource_id=content_id,
            metadata={
                "provider": provider,
                "score_before": before.score,
                "score_after": after.score,
            },
        )
        log.info(
            "content_improved",
            content_type=content_type,
            content_id=content_id,
            provider=provider,
            score_before=before.score,
            score_after=after.score,
        )
        return outcome

    def _parse(self, raw: str, provider: str) -> GeneratedContent:
        try:
            return parse_response(raw)
        except ParseError:
            PARSE_FAILURES.inc()
            log.warning("provider_response_unparseable", provider=provider)
            raise

    def _draft_row(
        self, request: ContentRequest, generated: GeneratedContent, slug: str
    ) -> dict[str, Any]:
        return {
            "title": generated.title,
            "slug": slug,
            "content": generated.content,
            "excerpt": generated.excerpt,
            "meta_description": generated.meta_description,
            "keywords": _keywords(request, generated),
            "category": category_for(request),
            "author": self.author,
            "status": "draft",
            "review_status": "draft",
            "quality_score": None,
            "quality_issues": [],
        }
