"""Dépendances partagées pour les routes de l'API.

Les routes ne construisent rien elles-mêmes: elles lisent les collaborateurs du conteneur via ces
fonctions, que les tests remplacent par `app.dependency_overrides`.
"""

from content_engine.core.container import container
from content_engine.domain.content_pipeline import ContentPipeline
from content_engine.domain.review_workflow import ReviewWorkflow
from content_engine.infra.repo.row_store import RowStore


def get_pipeline() -> ContentPipeline:
    return container.pipeline


def get_review_workflow() -> ReviewWorkflow:
    return container.review_workflow


def get_store() -> RowStore:
    return container.store
