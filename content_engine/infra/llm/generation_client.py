"""Client de génération avec chaîne de repli ordonnée.

Une seule tentative par fournisseur, dans l'ordre: fournisseur non configuré, exception,
dépassement du délai ou texte vide font passer au suivant. Le premier succès l'emporte; si tous
échouent, `GenerationError` est levée avec le motif de chaque tentative (sans texte brut du
fournisseur). Pas de nouvelle tentative au sein d'un même fournisseur.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

import structlog

from content_engine.app.metrics import GENERATION_ATTEMPTS, GENERATION_LATENCY
from content_engine.domain.errors import GenerationError
from content_engine.infra.llm.base import TextProvider

log = structlog.get_logger(__name__)


class GenerationClient:
    """Enveloppe une liste ordonnée de fournisseurs interchangeables."""

    def __init__(self, providers: Sequence[TextProvider], timeout_s: float = 60.0) -> None:
        """Construit le client; `providers[0]` est le fournisseur principal."""
        self.providers = list(providers)
        self.timeout_s = timeout_s

    async def aclose(self) -> None:
        """Ferme les connexions de chaque fournisseur."""
        for provider in self.providers:
            await provider.aclose()

    async def generate(self, prompt: str) -> str:
        """Renvoie le texte brut du premier fournisseur qui répond."""
        text, _provider = await self.generate_with_provider(prompt)
        return text

    async def generate_with_provider(self, prompt: str) -> tuple[str, str]:
        """Comme `generate`, en renvoyant aussi le nom du fournisseur retenu."""
        attempts: list[dict[str, str]] = []
        for provider in self.providers:
            reason = await self._attempt(provider, prompt)
            if isinstance(reason, _Success):
                return reason.text, provider.name
            attempts.append({"provider": provider.name, "reason": reason})
        log.error("generation_failed", attempts=attempts)
        raise GenerationError(
            "İçerik üretimi başarısız oldu: tüm sağlayıcılar yanıt vermedi",
            {"attempts": attempts},
        )

    async def _attempt(self, provider: TextProvider, prompt: str) -> _Success | str:
        if not provider.is_configured:
            log.info("provider_skipped", provider=provider.name, reason="not_configured")
            GENERATION_ATTEMPTS.labels(provider.name, "not_configured").inc()
            return "not_configured"
        start = time.perf_counter()
        try:
            text = await asyncio.wait_for(provider.complete(prompt), timeout=self.timeout_s)
        except TimeoutError:
            outcome = "timeout"
        except Exception as exc:
            log.warning("provider_failed", provider=provider.name, error=type(exc).__name__)
            outcome = "error"
        else:
            outcome = "ok" if text and text.strip() else "empty"
        finally:
            GENERATION_LATENCY.labels(provider.name).observe(time.perf_counter() - start)
        GENERATION_ATTEMPTS.labels(provider.name, outcome).inc()
        if outcome == "ok":
            return _Success(text)
        if outcome != "error":
            log.warning("provider_failed", provider=provider.name, reason=outcome)
        return outcome


class _Success:
    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text
