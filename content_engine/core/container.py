"""
Conteneur d'injection de dépendances.

Instancie une seule fois les collaborateurs (magasin de lignes, fournisseurs de génération,
audit, pipeline, workflow de revue) et expose un singleton `container` lu par les dépendances
FastAPI. Sans `DATABASE_URL`, le magasin est en mémoire.
"""

from __future__ import annotations

import structlog

from content_engine.core.settings import Settings, get_settings
from content_engine.domain.content_pipeline import ContentPipeline
from content_engine.domain.review_workflow import ReviewWorkflow
from content_engine.infra.audit import AuditTrail, StructlogAuditTrail
from content_engine.infra.llm.gemini_client import GeminiProvider
from content_engine.infra.llm.generation_client import GenerationClient
from content_engine.infra.llm.openai_client import OpenAIProvider
from content_engine.infra.repo.db import create_schema, get_engine
from content_engine.infra.repo.row_store import InMemoryRowStore, RowStore, SqlRowStore

log = structlog.get_logger(__name__)


def build_store(settings: Settings) -> RowStore:
    """Magasin SQLAlchemy si `DATABASE_URL` est défini, sinon magasin en mémoire."""
    if not settings.DATABASE_URL:
        return InMemoryRowStore()
    engine = get_engine(settings.DATABASE_URL)
    create_schema(engine)
    return SqlRowStore(engine)


def build_generation_client(settings: Settings) -> GenerationClient:
    """Chaîne de repli par défaut: Gemini puis OpenAI."""
    providers = [
        GeminiProvider(
            settings.GEMINI_API_KEY,
            settings.GEMINI_MODEL,
            base_url=settings.GEMINI_BASE_URL,
            temperature=settings.LLM_TEMPERATURE,
            max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
            timeout_s=settings.LLM_TIMEOUT_S,
        ),
        OpenAIProvider(
            settings.OPENAI_API_KEY,
            settings.OPENAI_MODEL,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
        ),
    ]
    return GenerationClient(providers, timeout_s=settings.LLM_TIMEOUT_S)


class Container:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: RowStore | None = None,
        generation_client: GenerationClient | None = None,
        audit: AuditTrail | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store or build_store(self.settings)
        self.storage_backend = "memory" if isinstance(self.store, InMemoryRowStore) else "sql"
        self.generation_client = generation_client or build_generation_client(self.settings)
        self.audit = audit or StructlogAuditTrail()
        self.pipeline = ContentPipeline(
            self.generation_client,
            self.store,
            self.audit,
            author=self.settings.CONTENT_DEFAULT_AUTHOR,
            actor=self.settings.SYSTEM_ACTOR_ID,
        )
        self.review_workflow = ReviewWorkflow(
            self.store, self.audit, actor=self.settings.SYSTEM_ACTOR_ID
        )
        log.info(
            "container_ready",
            storage_backend=self.storage_backend,
            providers=[p.name for p in self.generation_client.providers if p.is_configured],
        )

    async def aclose(self) -> None:
        """Libère les ressources réseau (appelé à l'arrêt de l'application)."""
        await self.generation_client.aclose()


container = Container()
