# Schémas Pydantic exposés par l'API (corps de requête, clés camelCase côté client).

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from content_engine.domain.entities import CallToAction, FunnelStage, PageType, Region


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateContentBody(_CamelModel):
    """Requête de génération.

    Champs:
    - primaryKeyword: str (obligatoire, non vide)
    - secondaryKeywords: list[str]
    - pageType: cornerstone | blog
    - region, funnelStage, cta: optionnels
    - contentType: article | news (table cible)
    """

    primary_keyword: str = Field(alias="primaryKeyword")
    secondary_keywords: list[str] = Field(default_factory=list, alias="secondaryKeywords")
    page_type: PageType = Field(default="blog", alias="pageType")
    region: Region | None = None
    funnel_stage: FunnelStage | None = Field(default=None, alias="funnelStage")
    cta: CallToAction | None = None
    locale: str = "tr"
    content_type: Literal["article", "news"] = Field(default="article", alias="contentType")


class ReviewNotesBody(_CamelModel):
    """Notes optionnelles pour approve / request-changes."""

    notes: str | None = None
    actor: str | None = None


class RejectBody(_CamelModel):
    """Rejet: motif obligatoire, notes optionnelles."""

    reason: str
    notes: str | None = None
    actor: str | None = None


class ImproveBody(_CamelModel):
    actor: str | None = None


class CoverageMapBody(_CamelModel):
    cluster: Literal["karasu", "sapanca"]
    pillar_keyword: str = Field(alias="pillarKeyword")
    year: int | None = None
