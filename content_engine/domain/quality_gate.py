"""Porte qualité: grille de notation fixe des contenus.

La grille n'est pas configurable à l'appel. Chaque contrôle rapporte ses points
indépendamment et ajoute un message distinct en cas d'échec. Le seuil de publication
`PUBLISH_THRESHOLD` (70) conditionne aussi la publication automatique du workflow de revue.

Le HTML est analysé avec BeautifulSoup; commentaires, `script` et `style` sont retirés avant
tout contrôle, seul le contenu visible compte.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup, Comment

from content_engine.domain.entities import QualityVerdict

PUBLISH_THRESHOLD = 70

TITLE_LENGTH = (20, 70)
META_TITLE_MAX = 70
META_DESCRIPTION_LENGTH = (120, 160)
MIN_CONTENT_WORDS = 300

POINTS = {
    "title": 15,
    "meta_title": 5,
    "meta_description": 15,
    "excerpt": 5,
    "slug": 10,
    "content_length": 25,
    "headings": 15,
    "artifacts": 10,
}

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_HEADING_TAG_RE = re.compile(r"^h[1-6]$")
_INVISIBLE_TAGS = ["script", "style", "template"]
_TEXT_ARTIFACT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\[IMAGE", re.IGNORECASE),
    # yer tutucu: [Açıklama], [Görsel açıklaması] ...
    re.compile(r"\[[A-Za-zÇĞİÖŞÜçğıöşü][A-Za-zÇĞİÖŞÜçğıöşü ]{1,40}\]"),
)


def _text(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    return value.strip() if isinstance(value, str) else str(value).strip()


def visible_soup(html: str) -> BeautifulSoup:
    """Arbre HTML sans commentaires ni balises non rendues."""
    soup = BeautifulSoup(html or "", "html.parser")
    for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
        comment.extract()
    for tag in soup.find_all(_INVISIBLE_TAGS):
        tag.decompose()
    return soup


def _words(soup: BeautifulSoup) -> int:
    return len(soup.get_text(" ").split())


def word_count(html: str) -> int:
    """Nombre de mots du texte visible (balises et commentaires retirés)."""
    return _words(visible_soup(html))


def _has_artifacts(soup: BeautifulSoup) -> bool:
    text = soup.get_text(" ")
    if any(p.search(text) for p in _TEXT_ARTIFACT_PATTERNS):
        return True
    return any("alt text" in quote.get_text(" ").lower() for quote in soup.find_all("blockquote"))


def check_quality(record: Mapping[str, Any]) -> QualityVerdict:
    """Note un contenu (title, content, excerpt, meta_title, meta_description, slug)."""
    title = _text(record, "title")
    meta_title = _text(record, "meta_title") or title
    meta_description = _text(record, "meta_description")
    excerpt = _text(record, "excerpt")
    slug = _text(record, "slug")
    content = _text(record, "content")

    score = 0
    issues: list[str] = []

    if TITLE_LENGTH[0] <= len(title) <= TITLE_LENGTH[1]:
        score += POINTS["title"]
    elif not title:
        issues.append("Başlık eksik")
    else:
        issues.append(
            f"Başlık uzunluğu {len(title)} karakter ({TITLE_LENGTH[0]}-{TITLE_LENGTH[1]} önerilir)"
        )

    if meta_title and len(meta_title) <= META_TITLE_MAX:
        score += POINTS["meta_title"]
    else:
        issues.append(f"Meta başlık eksik veya {META_TITLE_MAX} karakterden uzun")

    low, high = META_DESCRIPTION_LENGTH
    if low <= len(meta_description) <= high:
        score += POINTS["meta_description"]
    elif not meta_description:
        issues.append("Meta açıklama eksik")
    else:
        issues.append(
            f"Meta açıklama uzunluğu {len(meta_description)} karakter ({low}-{high} önerilir)"
        )

    if excerpt:
        score += POINTS["excerpt"]
    else:
        issues.append("Özet (excerpt) eksik")

    if slug and _SLUG_RE.match(slug):
        score += POINTS["slug"]
    elif not slug:
        issues.append("Slug eksik")
    else:
        issues.append("Slug URL için uygun değil")

    soup = visible_soup(content)
    words = _words(soup)
    if words >= MIN_CONTENT_WORDS:
        score += POINTS["content_length"]
    else:
        issues.append(f"İçerik çok kısa: {words} kelime (en az {MIN_CONTENT_WORDS})")

    if soup.find(_HEADING_TAG_RE) is not None:
        score += POINTS["headings"]
    else:
        issues.append("İçerikte başlık (H2/H3) yok")

    if not _has_artifacts(soup):
        score += POINTS["artifacts"]
    else:
        issues.append("İçerikte yer tutucu veya AI kalıntısı var ([IMAGE, Alt Text, [..])")

    score = max(0, min(100, score))
    return QualityVerdict(score=score, passed=score >= PUBLISH_THRESHOLD, issues=tuple(issues))
