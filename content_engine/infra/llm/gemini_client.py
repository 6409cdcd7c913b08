"""
Fournisseur de génération Google Gemini via l'API REST `generateContent`.

Fournisseur principal de la chaîne de repli. L'appel HTTP passe par httpx: client asynchrone
injectable pour les tests, sinon créé au premier appel et fermé par `aclose`.
"""

from __future__ import annotations

from typing import Any

import httpx

from content_engine.infra.llm.base import TextProvider


class GeminiProvider(TextProvider):
    """Fournisseur Gemini (REST v1beta, réponse en `application/json`)."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-1.5-flash",
        *,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: float = 0.7,
        max_output_tokens: int = 8000,
        timeout_s: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise le fournisseur; sans clé, il reste non configuré."""
        self.api_key = (api_key or "").strip()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._timeout = httpx.Timeout(timeout_s, connect=5.0)
        self._client = client
        self._owns_client = client is None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None or (self._owns_client and self._client.is_closed):
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Ferme le client httpx s'il a été créé par le fournisseur."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    async def complete(self, prompt: str) -> str:
        """Appelle `models/{model}:generateContent` et concatène les parties texte."""
        url = f"{self.base_url}/models/{self.model}:generateContent"
        resp = await self._http().post(
            url,
            json=self._payload(prompt),
            headers={"x-goog-api-key": self.api_key},
        )
        resp.raise_for_status()
        return extract_text(resp.json())


def extract_text(body: dict[str, Any]) -> str:
    """Extrait le texte du premier candidat d'une réponse `generateContent`."""
    candidates = body.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict))
