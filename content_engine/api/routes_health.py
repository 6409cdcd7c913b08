"""
Endpoint de santé pour vérifier la disponibilité de l'API et du backend.

Expose `/health` pour signaler l'état général, le stockage et les fournisseurs configurés.
"""

from fastapi import APIRouter

from content_engine.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API et le backend de stockage."""
    return {
        "status": "ok",
        "storage": getattr(container, "storage_backend", "unknown"),
        "providers": [
            p.name for p in container.generation_client.providers if p.is_configured
        ],
    }
