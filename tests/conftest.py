"""Configuration de test pour pytest avec gestion des chemins.

Ajoute la racine du projet au sys.path et fournit les fixtures partagées (magasin en mémoire,
audit en mémoire, horloge contrôlable).
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from content_engine...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from content_engine.infra.audit import InMemoryAuditTrail  # noqa: E402
from content_engine.infra.repo.row_store import InMemoryRowStore  # noqa: E402
from tests.fakes import StepClock  # noqa: E402


@pytest.fixture(autouse=True)
def no_provider_keys(monkeypatch):
    """Aucun appel réseau réel: les clés des fournisseurs sont retirées de l'environnement."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(clock):
    return InMemoryRowStore(clock=clock)


@pytest.fixture
def audit():
    return InMemoryAuditTrail()
