"""SQLAlchemy models for the content tables used by the pipeline.

Le schéma réel appartient au service de base hébergé; ces modèles en décrivent la partie lue et
écrite par le pipeline, pour le magasin SQL et les tests SQLite.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class _EditorialColumns:
    """Colonnes communes aux articles et aux actualités."""

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False, default="")
    slug = Column(String(120), nullable=False, unique=True)
    content = Column(Text, nullable=False, default="")
    excerpt = Column(Text, nullable=True)
    meta_description = Column(String(320), nullable=True)
    keywords = Column(JSON, nullable=True)
    category = Column(String(120), nullable=True)
    author = Column(String(120), nullable=True)
    status = Column(String(20), nullable=False, default="draft")
    review_status = Column(String(32), nullable=False, default="draft")
    quality_score = Column(Integer, nullable=True)
    quality_issues = Column(JSON, nullable=False, default=list)
    review_notes = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class ArticleORM(_EditorialColumns, Base):
    """Articles de blog et contenus piliers."""

    __tablename__ = "articles"


class NewsArticleORM(_EditorialColumns, Base):
    """Actualités."""

    __tablename__ = "news_articles"


class ContentReviewORM(Base):
    """Historique des actions de revue éditoriale."""

    __tablename__ = "content_reviews"

    id = Column(String(36), primary_key=True)
    content_type = Column(String(32), nullable=False)
    content_id = Column(String(36), nullable=False, index=True)
    action = Column(String(32), nullable=False)
    review_status = Column(String(32), nullable=False)
    notes = Column(Text, nullable=True)
    actor = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class ContentVersionORM(Base):
    """Instantanés d'un contenu pris à chaque approbation."""

    __tablename__ = "content_versions"

    id = Column(String(36), primary_key=True)
    content_type = Column(String(32), nullable=False)
    content_id = Column(String(36), nullable=False, index=True)
    version_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    excerpt = Column(Text, nullable=True)
    meta_description = Column(String(320), nullable=True)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "content_type", "content_id", "version_number", name="uq_content_version_number"
        ),
    )


class ContentImprovementORM(Base):
    """Journal des réécritures assistées: contenu et score avant/après."""

    __tablename__ = "content_improvements"

    id = Column(String(36), primary_key=True)
    content_type = Column(String(32), nullable=False)
    content_id = Column(String(36), nullable=False, index=True)
    provider = Column(String(32), nullable=False)
    score_before = Column(Integer, nullable=False)
    score_after = Column(Integer, nullable=False)
    issues_before = Column(JSON, nullable=False, default=list)
    issues_after = Column(JSON, nullable=False, default=list)
    original_content = Column(Text, nullable=False, default="")
    improved_content = Column(Text, nullable=False, default="")
    actor = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
