"""Journal d'audit des événements éditoriaux.

Les événements (création de contenu, transitions de revue) sont émis en « fire-and-forget »:
une défaillance du puits d'audit est journalisée puis ignorée, elle ne doit jamais faire échouer
l'opération principale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import structlog

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AuditEvent:
    """Événement d'audit structuré."""

    type: str
    actor: str
    resource_type: str
    resource_id: str
    metadata: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class AuditTrail:
    """Point d'émission des événements d'audit; les sous-classes implémentent `_write`."""

    def emit(
        self,
        event_type: str,
        *,
        actor: str,
        resource_type: str,
        resource_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Émet un événement sans jamais propager d'erreur."""
        event = AuditEvent(
            type=event_type,
            actor=actor,
            resource_type=resource_type,
            resource_id=resource_id,
            metadata=dict(metadata or {}),
        )
        try:
            self._write(event)
        except Exception as exc:
            log.warning("audit_emit_failed", event_type=event_type, error=type(exc).__name__)

    def _write(self, event: AuditEvent) -> None:
        raise NotImplementedError


class StructlogAuditTrail(AuditTrail):
    """Écrit les événements dans les logs structurés."""

    def __init__(self) -> None:
        """Logger dédié à l'audit, résolu paresseusement à chaque écriture."""
        self._log = structlog.get_logger("content_engine.audit", component="audit")

    def _write(self, event: AuditEvent) -> None:
        self._log.info(
            "audit_event",
            event_type=event.type,
            actor=event.actor,
            resource_type=event.resource_type,
            resource_id=event.resource_id,
            occurred_at=event.occurred_at.isoformat(),
            metadata=event.metadata,
        )


class InMemoryAuditTrail(AuditTrail):
    """Conserve les événements en mémoire (tests, inspection locale)."""

    def __init__(self) -> None:
        """Initialise une liste d'événements vide."""
        self.events: list[AuditEvent] = []

    def _write(self, event: AuditEvent) -> None:
        self.events.append(event)
