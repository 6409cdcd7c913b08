"""
Fournisseur de génération basé sur l'API OpenAI (chat.completions, sortie JSON).

Utilisé en second dans la chaîne de repli. Sans clé API, le fournisseur se déclare non configuré
et le client de génération passe au suivant sans appel réseau. Le client du SDK est créé au
premier appel et fermé par `aclose`.
"""

from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI

from content_engine.infra.llm.base import TextProvider


class OpenAIProvider(TextProvider):
    """Fournisseur OpenAI (SDK officiel, client asynchrone)."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        *,
        temperature: float = 0.7,
        max_tokens: int = 8000,
        client: Any = None,
    ) -> None:
        """Initialise le fournisseur; `client` permet d'injecter un double de test."""
        self.api_key = (api_key or "").strip()
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client
        self._owns_client = client is None

    @property
    def is_configured(self) -> bool:
        return self.client is not None or bool(self.api_key)

    def _sdk(self) -> Any:
        # créé au premier appel; recréé après `aclose`
        if self.client is None:
            self.client = AsyncOpenAI(api_key=self.api_key)
        return self.client

    async def aclose(self) -> None:
        """Ferme le client du SDK s'il a été créé par le fournisseur."""
        if self._owns_client and self.client is not None:
            client, self.client = self.client, None
            await client.close()

    async def complete(self, prompt: str) -> str:
        """Appelle chat.completions en mode `json_object` et renvoie le contenu du message."""
        resp = await self._sdk().chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"},
        )
        if not resp.choices:
            return ""
        message = getattr(resp.choices[0], "message", None)
        return str(getattr(message, "content", None) or "")
