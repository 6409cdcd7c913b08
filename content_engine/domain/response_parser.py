"""Extraction, réparation et normalisation des réponses des fournisseurs.

Les fournisseurs renvoient un objet JSON parfois entouré de prose ou de blocs markdown, avec des
noms de champs variables (`seoSetup` vs `seoMeta`, `mainContent` vs `article.mainContent`...).
La normalisation est pilotée par une liste ordonnée de règles `(champ, chemins, transformation)`:
pour chaque champ, le premier chemin donnant une valeur non vide l'emporte.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from content_engine.domain.entities import FaqItem, GeneratedContent
from content_engine.domain.errors import ParseError

log = structlog.get_logger(__name__)

FAQ_HEADING = "Sık Sorulan Sorular"
EXCERPT_MAX_CHARS = 200

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


def _as_mapping(value: Any) -> dict | None:
    return value if isinstance(value, dict) and value else None


def _as_faq(value: Any) -> tuple[FaqItem, ...] | None:
    if not isinstance(value, list):
        return None
    items = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        question = _as_text(entry.get("question"))
        answer = _as_text(entry.get("answer"))
        if question and answer:
            items.append(FaqItem(question=question, answer=answer))
    return tuple(items) or None


def _as_keywords(value: Any) -> tuple[str, ...] | None:
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, list):
        parts = [p for p in value if isinstance(p, str)]
    else:
        return None
    cleaned = tuple(p.strip() for p in parts if p.strip())
    return cleaned or None


@dataclass(frozen=True)
class ExtractionRule:
    """Règle d'extraction: chemins candidats par ordre de priorité."""

    field: str
    paths: tuple[tuple[str, ...], ...]
    transform: Callable[[Any], Any] = _as_text


EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(
        "title",
        (
            ("seoSetup", "title"),
            ("seoSetup", "h1"),
            ("seoMeta", "title"),
            ("seoMeta", "h1"),
            ("meta", "title"),
            ("title",),
        ),
    ),
    ExtractionRule(
        "meta_description",
        (
            ("seoSetup", "metaDescription"),
            ("seoMeta", "metaDescription"),
            ("meta", "metaDescription"),
            ("metaDescription",),
        ),
    ),
    ExtractionRule(
        "slug_hint",
        (
            ("seoSetup", "urlSlug"),
            ("seoMeta", "urlSlug"),
            ("meta", "urlSlug"),
            ("urlSlug",),
            ("slug",),
        ),
    ),
    ExtractionRule("body", (("mainContent",), ("article", "mainContent"), ("content",))),
    ExtractionRule("intro", (("intro",), ("article", "intro")), _as_mapping),
    ExtractionRule("faq", (("faq",), ("article", "faq")), _as_faq),
    ExtractionRule("excerpt", (("excerpt",),)),
    ExtractionRule("keywords", (("keywords",), ("seoSetup", "keywords")), _as_keywords),
)


def _lookup(tree: dict, path: tuple[str, ...]) -> Any:
    node: Any = tree
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def extract_fields(tree: dict, rules: tuple[ExtractionRule, ...] = EXTRACTION_RULES) -> dict:
    """Applique les règles sur l'arbre clé/valeur et retourne les champs trouvés (ou None)."""
    out: dict[str, Any] = {}
    for rule in rules:
        out[rule.field] = None
        for path in rule.paths:
            value = rule.transform(_lookup(tree, path))
            if value:
                out[rule.field] = value
                break
    return out


def _loads_object(text: str) -> dict | None:
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _repair(text: str) -> str:
    """Corrige les défauts mineurs: balises markdown et virgules finales."""
    return _TRAILING_COMMA_RE.sub(r"\1", _FENCE_RE.sub("", text)).strip()


def _outermost_braces(text: str) -> str | None:
    """Sous-chaîne du premier `{` au dernier `}` inclus, ou None."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def load_json_object(raw: str) -> dict:
    """Localise et décode l'objet JSON d'une réponse brute.

    Ordre: décodage direct, puis plus grande sous-chaîne `{...}`, puis version réparée de cette
    sous-chaîne. Lève ParseError si aucun objet n'est trouvé.
    """
    text = (raw or "").strip()
    parsed = _loads_object(text)
    if parsed is not None:
        return parsed
    candidate = _outermost_braces(text)
    if candidate:
        parsed = _loads_object(candidate)
        if parsed is None:
            parsed = _loads_object(_repair(candidate))
            if parsed is not None:
                log.info("provider_json_repaired", length=len(candidate))
        if parsed is not None:
            return parsed
    raise ParseError("invalid JSON response")


def render_faq_html(faq: tuple[FaqItem, ...]) -> str:
    """Rend la FAQ en bloc HTML (titre + une div par question)."""
    blocks = "\n".join(f"  <div><h3>{item.question}</h3><p>{item.answer}</p></div>" for item in faq)
    return f'\n<section class="faq-section">\n  <h2>{FAQ_HEADING}</h2>\n{blocks}\n</section>'


def _compose_body(body: str, intro: dict | None, faq: tuple[FaqItem, ...]) -> str:
    if intro:
        first = _as_text(intro.get("paragraph1"))
        second = _as_text(intro.get("paragraph2"))
        # évite une double introduction quand le fournisseur l'a déjà insérée
        if first and second and first not in body:
            body = f"<p>{first}</p><p>{second}</p>{body}"
    if faq and FAQ_HEADING not in body:
        body += render_faq_html(faq)
    return body


def parse_response(raw: str) -> GeneratedContent:
    """Transforme la réponse brute d'un fournisseur en `GeneratedContent`."""
    fields = extract_fields(load_json_object(raw))
    faq = fields["faq"] or ()
    meta_description = fields["meta_description"] or ""
    return GeneratedContent(
        title=fields["title"] or "",
        content=_compose_body(fields["body"] or "", fields["intro"], faq),
        excerpt=fields["excerpt"] or meta_description[:EXCERPT_MAX_CHARS],
        meta_description=meta_description,
        keywords=fields["keywords"] or (),
        faq=faq,
        slug_hint=fields["slug_hint"],
    )
