"""
Magasins de lignes génériques (adaptateur de persistance).

Le pipeline ne dépend que de: lecture par id, recherche par égalité (slug, statut de revue),
insertion et mise à jour par id. Deux implémentations: en mémoire (dev/tests) et SQLAlchemy.
Les défaillances du stockage sont converties en `PersistenceError`.
"""

from __future__ import annotations

import copy
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from content_engine.domain.errors import PersistenceError
from content_engine.infra.repo.db import get_session_factory, session_scope
from content_engine.infra.repo.models import Base

Row = dict[str, Any]

log = structlog.get_logger(__name__)


def utcnow() -> datetime:
    """Horodatage UTC courant."""
    return datetime.now(UTC)


class RowStore(ABC):
    """Interface minimale de stockage par table nommée."""

    @abstractmethod
    def get(self, table: str, row_id: str) -> Row | None:
        """Retourne la ligne `row_id` ou None."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Retourne les lignes dont les colonnes égalent `filters`."""

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        """Insère une ligne (id et horodatages assignés) et la retourne."""

    @abstractmethod
    def update(self, table: str, row_id: str, changes: Row) -> Row | None:
        """Met à jour une ligne par id; None si elle n'existe pas."""

    def find_one(self, table: str, **filters: Any) -> Row | None:
        """Première ligne correspondant aux filtres, ou None."""
        rows = self.select(table, filters=filters, limit=1)
        return rows[0] if rows else None


class InMemoryRowStore(RowStore):
    """
    Magasin en mémoire (utilisé pour dev/tests).

    Stocke les lignes dans des dicts locaux, non persistants; renvoie des copies.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        """Initialise un magasin vide."""
        self._tables: dict[str, dict[str, Row]] = {}
        self._clock = clock

    def _table(self, table: str) -> dict[str, Row]:
        return self._tables.setdefault(table, {})

    def get(self, table: str, row_id: str) -> Row | None:
        row = self._table(table).get(row_id)
        return copy.deepcopy(row) if row is not None else None

    def select(self, table, filters=None, order_by=None, descending=False, limit=None):
        rows = [
            r
            for r in self._table(table).values()
            if all(r.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            # les None passent en dernier quel que soit le sens
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            present.sort(key=lambda r: r[order_by], reverse=descending)
            rows = present + missing
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    def insert(self, table: str, row: Row) -> Row:
        now = self._clock()
        stored = {"created_at": now, "updated_at": now, **copy.deepcopy(row)}
        stored.setdefault("id", str(uuid.uuid4()))
        self._table(table)[stored["id"]] = stored
        return copy.deepcopy(stored)

    def update(self, table: str, row_id: str, changes: Row) -> Row | None:
        rows = self._table(table)
        if row_id not in rows:
            return None
        rows[row_id].update(copy.deepcopy(changes))
        rows[row_id]["updated_at"] = self._clock()
        return copy.deepcopy(rows[row_id])


class SqlRowStore(RowStore):
    """Magasin adossé à SQLAlchemy Core sur les tables déclarées dans `models.py`."""

    def __init__(self, engine: Engine, clock: Callable[[], datetime] = utcnow) -> None:
        """Construit le magasin à partir d'un moteur SQLAlchemy."""
        self._factory = get_session_factory(engine)
        self._clock = clock

    def _table(self, table: str):
        try:
            return Base.metadata.tables[table]
        except KeyError as err:
            raise PersistenceError(f"Bilinmeyen tablo: {table}") from err

    def _run(self, op: str, table: str, fn: Callable[[Any], Any]) -> Any:
        try:
            with session_scope(self._factory) as session:
                return fn(session)
        except SQLAlchemyError as err:
            log.error("row_store_failure", op=op, table=table, error=type(err).__name__)
            raise PersistenceError("Veri deposuna şu anda erişilemiyor") from err

    def get(self, table: str, row_id: str) -> Row | None:
        t = self._table(table)
        stmt = select(t).where(t.c.id == row_id)
        return self._run("get", table, lambda s: _first(s.execute(stmt)))

    def select(self, table, filters=None, order_by=None, descending=False, limit=None):
        t = self._table(table)
        stmt = select(t)
        for key, value in (filters or {}).items():
            col = t.c[key]
            stmt = stmt.where(col.is_(None) if value is None else col == value)
        if order_by:
            col = t.c[order_by]
            stmt = stmt.order_by(col.desc().nulls_last() if descending else col.asc().nulls_last())
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._run("select", table, lambda s: [dict(r) for r in s.execute(stmt).mappings()])

    def insert(self, table: str, row: Row) -> Row:
        t = self._table(table)
        now = self._clock()
        values = {"created_at": now, "updated_at": now, **row}
        values.setdefault("id", str(uuid.uuid4()))

        def _do(session):
            session.execute(insert(t).values(**values))
            return _first(session.execute(select(t).where(t.c.id == values["id"])))

        return self._run("insert", table, _do)

    def update(self, table: str, row_id: str, changes: Row) -> Row | None:
        t = self._table(table)
        values = {**changes, "updated_at": self._clock()}

        def _do(session):
            result = session.execute(update(t).where(t.c.id == row_id).values(**values))
            if result.rowcount == 0:
                return None
            return _first(session.execute(select(t).where(t.c.id == row_id)))

        return self._run("update", table, _do)


def _first(result) -> Row | None:
    row = result.mappings().first()
    return dict(row) if row is not None else None
