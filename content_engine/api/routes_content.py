"""
Routes du moteur de contenu: génération, réécriture, revue éditoriale, statistiques qualité,
versions et carte de couverture.

Toutes les réponses utilisent l'enveloppe `{success, requestId, data}`; les erreurs du domaine
sont converties par les gestionnaires de `apigw.errors`.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from content_engine.api.deps import get_pipeline, get_review_workflow, get_store
from content_engine.api.schemas import (
    CoverageMapBody,
    GenerateContentBody,
    ImproveBody,
    RejectBody,
    ReviewNotesBody,
)
from content_engine.apigw.errors import success_response
from content_engine.core.http_constants import HTTP_CREATED
from content_engine.domain.content_pipeline import ContentPipeline
from content_engine.domain.coverage_map import generate_coverage_map
from content_engine.domain.entities import CONTENT_TABLES, ContentRecord, parse_content_request
from content_engine.domain.quality_report import summarize_quality
from content_engine.domain.review_workflow import ReviewWorkflow
from content_engine.infra.repo.row_store import RowStore

router = APIRouter(prefix="/content", tags=["content"])

# plafond par table pour les statistiques
STATS_ROW_LIMIT = 1000

pipeline_dep = Depends(get_pipeline)
workflow_dep = Depends(get_review_workflow)
store_dep = Depends(get_store)


def _record(record: ContentRecord) -> dict[str, Any]:
    return record.model_dump(mode="json")


@router.post("/generate")
async def generate_content(
    request: Request, body: GenerateContentBody, pipeline: ContentPipeline = pipeline_dep
):
    """Génère un brouillon, le persiste et renvoie le verdict qualité."""
    content_request = parse_content_request(
        body.model_dump(exclude={"content_type"})
    )
    outcome = await pipeline.generate(content_request, body.content_type)
    return success_response(
        request,
        {
            "contentType": body.content_type,
            "record": _record(outcome.record),
            "quality": {
                "score": outcome.verdict.score,
                "passed": outcome.verdict.passed,
                "issues": list(outcome.verdict.issues),
            },
            "provider": outcome.provider,
        },
        status_code=HTTP_CREATED,
    )


@router.get("/reviews/pending")
def list_pending(
    request: Request,
    content_type: str | None = None,
    workflow: ReviewWorkflow = workflow_dep,
):
    """Liste les contenus en attente de revue (plus ancienne mise à jour en premier)."""
    items = [
        {"contentType": ctype, **_record(record)}
        for ctype, record in workflow.list_pending(content_type)
    ]
    return success_response(request, {"items": items, "total": len(items)})


@router.get("/quality/stats")
def quality_stats(request: Request, store: RowStore = store_dep):
    """Statistiques qualité agrégées sur articles et actualités."""
    rows = [
        (ctype, row)
        for ctype, table in CONTENT_TABLES.items()
        for row in store.select(
            table, order_by="created_at", descending=True, limit=STATS_ROW_LIMIT
        )
    ]
    return success_response(request, summarize_quality(rows))


@router.post("/coverage-map")
def coverage_map(request: Request, body: CoverageMapBody):
    """Propose 1 article pilier et 5 articles de blog pour un cluster."""
    suggestions = generate_coverage_map(body.cluster, body.pillar_keyword, body.year)
    return success_response(
        request, {"suggestions": [s.to_dict() for s in suggestions]}
    )


@router.post("/{content_type}/{content_id}/submit")
def submit(
    request: Request,
    content_type: str,
    content_id: str,
    body: ReviewNotesBody | None = None,
    workflow: ReviewWorkflow = workflow_dep,
):
    actor = body.actor if body else None
    record = workflow.submit(content_type, content_id, actor=actor)
    return success_response(request, _record(record))


@router.post("/{content_type}/{content_id}/approve")
def approve(
    request: Request,
    content_type: str,
    content_id: str,
    body: ReviewNotesBody | None = None,
    workflow: ReviewWorkflow = workflow_dep,
):
    """Approuve; publie si le score qualité stocké atteint le seuil."""
    body = body or ReviewNotesBody()
    record = workflow.approve(content_type, content_id, body.notes, actor=body.actor)
    return success_response(request, _record(record))


@router.post("/{content_type}/{content_id}/reject")
def reject(
    request: Request,
    content_type: str,
    content_id: str,
    body: RejectBody,
    workflow: ReviewWorkflow = workflow_dep,
):
    record = workflow.reject(
        content_type, content_id, body.reason, body.notes, actor=body.actor
    )
    return success_response(request, _record(record))


@router.post("/{content_type}/{content_id}/request-changes")
def request_changes(
    request: Request,
    content_type: str,
    content_id: str,
    body: ReviewNotesBody | None = None,
    workflow: ReviewWorkflow = workflow_dep,
):
    body = body or ReviewNotesBody()
    record = workflow.request_changes(content_type, content_id, body.notes, actor=body.actor)
    return success_response(request, _record(record))


@router.post("/{content_type}/{content_id}/improve")
async def improve_content(
    request: Request,
    content_type: str,
    content_id: str,
    body: ImproveBody | None = None,
    pipeline: ContentPipeline = pipeline_dep,
):
    """Réécrit le contenu via la chaîne de fournisseurs et renvoie les scores avant/après."""
    actor = body.actor if body else None
    outcome = await pipeline.improve(content_type, content_id, actor=actor)
    return success_response(
        request,
        {
            "contentType": content_type,
            "record": _record(outcome.record),
            "provider": outcome.provider,
            "original": {"score": outcome.before.score, "issues": list(outcome.before.issues)},
            "improved": {"score": outcome.after.score, "issues": list(outcome.after.issues)},
            "scoreIncrease": outcome.score_increase,
        },
    )


@router.get("/{content_type}/{content_id}/versions")
def list_versions(
    request: Request,
    content_type: str,
    content_id: str,
    workflow: ReviewWorkflow = workflow_dep,
):
    """Instantanés créés à chaque approbation, du plus récent au plus ancien."""
    versions = workflow.list_versions(content_type, content_id)
    return success_response(
        request,
        {
            "items": [
                {
                    key: (value.isoformat() if hasattr(value, "isoformat") else value)
                    for key, value in version.items()
                }
                for version in versions
            ]
        },
    )
