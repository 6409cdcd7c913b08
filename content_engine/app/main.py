"""
Application principale FastAPI.

Assemble les middlewares (request id, métriques), les gestionnaires d'erreurs à enveloppe
standard et les routes (santé, contenu, métriques). À l'arrêt, le cycle de vie ferme les clients
HTTP des fournisseurs.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from content_engine.api.routes_content import router as content_router
from content_engine.api.routes_health import router as health_router
from content_engine.apigw.errors import register_error_handlers
from content_engine.app.metrics import PrometheusMiddleware, metrics_router
from content_engine.core.container import container
from content_engine.core.logging import setup_logging
from content_engine.middlewares.request_id import RequestIDMiddleware

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Démarrage sans effet; à l'arrêt, fermeture des connexions des fournisseurs."""
    yield
    await container.aclose()
    log.info("providers_closed")


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Ajoute les middlewares (mesure Prometheus, identifiant de requête)
    - Enregistre les gestionnaires d'erreurs
    - Publie les routes
    """
    settings = container.settings
    setup_logging(settings.APP_DEBUG)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG, lifespan=lifespan)
    app.add_middleware(PrometheusMiddleware)
    # ajouté en dernier: englobe les autres middlewares
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(content_router)
    app.include_router(metrics_router)
    return app


app = create_app()
