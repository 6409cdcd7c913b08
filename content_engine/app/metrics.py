"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP et celles du pipeline de contenu (génération, parsing,
qualité, revue), ainsi que l'endpoint `/metrics` et le middleware de mesure HTTP.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Génération (une tentative par fournisseur)
GENERATION_ATTEMPTS = Counter(
    "content_generation_attempts_total",
    "Generation attempts per provider",
    ["provider", "outcome"],
)
GENERATION_LATENCY = Histogram(
    "content_generation_latency_seconds",
    "Latency of a single provider call",
    ["provider"],
    buckets=[0.5, 1, 2, 5, 10, 20, 40, 60, 90],
)
PARSE_FAILURES = Counter(
    "content_parse_failures_total",
    "Provider responses without a usable JSON object",
)

# Qualité / revue
QUALITY_SCORE = Histogram(
    "content_quality_score",
    "Distribution of quality gate scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)
REVIEW_TRANSITIONS = Counter(
    "content_review_transitions_total",
    "Review workflow transitions",
    ["action", "content_type"],
)
AUTO_PUBLISHED = Counter(
    "content_auto_published_total",
    "Approvals that published the content (score above threshold)",
    ["content_type"],
)
CONTENT_IMPROVEMENTS = Counter(
    "content_improvements_total",
    "Assisted rewrites of stored content",
    ["content_type", "outcome"],
)


@metrics_router.get("/metrics")
def metrics():
    """Expose les métriques Prometheus au format texte."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Le label de route utilise le gabarit FastAPI (`/content/{content_type}/...`) pour garder une
    cardinalité faible.
    """

    async def dispatch(self, request: Request, call_next):
        """Traite une requête HTTP et collecte les métriques."""
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = getattr(request.scope.get("route"), "path", None) or "unmatched"
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
