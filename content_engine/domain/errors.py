"""Taxonomie des erreurs métier du moteur de contenu.

Chaque erreur porte un code stable, un message lisible et le statut HTTP équivalent. La couche
API (`content_engine.apigw.errors`) les convertit en enveloppes `{success: false, ...}`; aucun
texte brut de bibliothèque ou de fournisseur ne doit figurer dans `message`.
"""

from __future__ import annotations

from typing import Any

from content_engine.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_NOT_FOUND,
    HTTP_SERVICE_UNAVAILABLE,
    PERSISTENCE_RETRY_AFTER_S,
)


class ContentEngineError(Exception):
    """Erreur de base: code, message, statut HTTP et détails optionnels."""

    code = "CONTENT_ENGINE_ERROR"
    status_code = 500
    retryable = False

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialise l'erreur avec un message destiné à l'appelant."""
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ContentEngineError):
    """Champ requis manquant ou mal formé dans une requête."""

    code = "VALIDATION_ERROR"
    status_code = HTTP_BAD_REQUEST


class GenerationError(ContentEngineError):
    """Tous les fournisseurs de génération ont échoué; l'appelant peut réessayer."""

    code = "GENERATION_ERROR"
    status_code = HTTP_BAD_GATEWAY
    retryable = True


class ParseError(ContentEngineError):
    """La réponse du fournisseur ne contient aucun objet JSON exploitable."""

    code = "PARSE_ERROR"
    status_code = HTTP_BAD_GATEWAY


class NotFoundError(ContentEngineError):
    """Contenu inexistant pour le type et l'identifiant demandés."""

    code = "NOT_FOUND"
    status_code = HTTP_NOT_FOUND


class PersistenceError(ContentEngineError):
    """Stockage sous-jacent indisponible."""

    code = "PERSISTENCE_ERROR"
    status_code = HTTP_SERVICE_UNAVAILABLE
    retryable = True

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Ajoute l'indication `retry_after` attendue par les clients."""
        merged = {"retry_after": PERSISTENCE_RETRY_AFTER_S, **(details or {})}
        super().__init__(message, merged)
