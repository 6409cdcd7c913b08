"""
Entités du domaine éditorial.

Ce module définit les modèles de données du pipeline de contenu: la requête de génération, le
contenu normalisé issu du fournisseur, l'enregistrement persisté et le verdict qualité.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from content_engine.domain.errors import ValidationError

PageType = Literal["cornerstone", "blog"]
Region = Literal["Karasu", "Sapanca", "Kocaali", "Sakarya"]
FunnelStage = Literal["TOFU", "MOFU", "BOFU"]
CallToAction = Literal["ilan ara", "iletişim", "WhatsApp"]
PublishStatus = Literal["draft", "published"]
ReviewStatus = Literal["draft", "pending_review", "approved", "rejected", "changes_requested"]
ReviewActionName = Literal["submit", "approve", "reject", "request_changes"]

# Type de contenu exposé -> table du magasin
CONTENT_TABLES: dict[str, str] = {
    "article": "articles",
    "news": "news_articles",
}
REVIEWS_TABLE = "content_reviews"
VERSIONS_TABLE = "content_versions"
IMPROVEMENTS_TABLE = "content_improvements"


def table_for(content_type: str) -> str:
    """Retourne la table associée à un type de contenu, ou lève ValidationError."""
    try:
        return CONTENT_TABLES[content_type]
    except KeyError as err:
        raise ValidationError(
            f"Bilinmeyen içerik türü: {content_type}",
            {"allowed": sorted(CONTENT_TABLES)},
        ) from err


class ContentRequest(BaseModel):
    """Requête de génération (éphémère, non persistée)."""

    primary_keyword: str
    secondary_keywords: list[str] = Field(default_factory=list)
    page_type: PageType = "blog"
    region: Region | None = None
    funnel_stage: FunnelStage | None = None
    cta: CallToAction | None = None
    locale: str = "tr"

    @field_validator("primary_keyword")
    @classmethod
    def _primary_keyword_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("primary keyword is required")
        return value

    @field_validator("secondary_keywords")
    @classmethod
    def _drop_blank_keywords(cls, value: list[str]) -> list[str]:
        return [kw.strip() for kw in value if kw and kw.strip()]


def parse_content_request(payload: Mapping[str, Any]) -> ContentRequest:
    """Valide un dictionnaire brut et convertit les erreurs pydantic en ValidationError."""
    try:
        return ContentRequest.model_validate(dict(payload))
    except PydanticValidationError as err:
        fields = [".".join(str(p) for p in e["loc"]) for e in err.errors()]
        raise ValidationError("Geçersiz içerik isteği", {"fields": fields}) from err


@dataclass(frozen=True)
class FaqItem:
    """Paire question/réponse."""

    question: str
    answer: str


@dataclass(frozen=True)
class GeneratedContent:
    """Contenu canonique produit par le parseur à partir de la réponse brute."""

    title: str
    content: str
    excerpt: str
    meta_description: str
    keywords: tuple[str, ...] = ()
    faq: tuple[FaqItem, ...] = ()
    slug_hint: str | None = None


@dataclass(frozen=True)
class QualityVerdict:
    """Score qualité (0–100), décision de publication et problèmes détaillés."""

    score: int
    passed: bool
    issues: tuple[str, ...] = field(default_factory=tuple)


class ContentRecord(BaseModel):
    """Vue typée d'une ligne `articles` / `news_articles`."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    slug: str = ""
    content: str = ""
    excerpt: str | None = None
    meta_description: str | None = None
    keywords: list[str] | None = None
    category: str | None = None
    author: str | None = None
    status: PublishStatus = "draft"
    review_status: ReviewStatus = "draft"
    quality_score: int | None = None
    quality_issues: list[str] = Field(default_factory=list)
    review_notes: str | None = None
    reviewed_at: datetime | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("quality_issues", mode="before")
    @classmethod
    def _issues_default(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []
