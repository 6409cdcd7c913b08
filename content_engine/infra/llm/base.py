"""Interface de base pour les fournisseurs de génération de texte."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TextProvider(ABC):
    """Fournisseur interchangeable: « complète ce prompt et renvoie du texte »."""

    name: str = "provider"

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Indique si les identifiants nécessaires sont présents."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Renvoie le texte brut généré pour `prompt` (JSON attendu)."""

    async def aclose(self) -> None:
        """Libère les connexions détenues par le fournisseur (aucune par défaut)."""
        return None
