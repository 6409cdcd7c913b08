"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _resolve_env_file() -> Path | str:
    """Retourne le fichier .env prioritaire (ENV_FILE, puis .env.{APP_ENV}, puis .env)."""
    explicit = os.getenv("ENV_FILE")
    if explicit:
        return explicit
    cwd = Path.cwd()
    specific = cwd / f".env.{os.getenv('APP_ENV', 'dev')}"
    if specific.exists():
        return specific
    return cwd / ".env"


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file(),
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )
    APP_NAME: str = "karasu-content-engine"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = False

    # Stockage: absent -> magasin en mémoire
    DATABASE_URL: str | None = None

    # Fournisseurs de génération (ordre: Gemini puis OpenAI)
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o"
    LLM_TIMEOUT_S: float = 60.0
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_OUTPUT_TOKENS: int = 8000

    # Contenu
    CONTENT_DEFAULT_AUTHOR: str = "Karasu Emlak"
    SYSTEM_ACTOR_ID: str = "00000000-0000-0000-0000-000000000000"


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
