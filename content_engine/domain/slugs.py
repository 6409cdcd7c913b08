"""Génération et désambiguïsation des slugs d'URL.

La mise en forme (`slugify`) est pure et hors réseau; seule la vérification d'unicité de
`resolve_slug` passe par le callable `exists` injecté (requête sur la table du type de contenu).
"""

from __future__ import annotations

import time
from collections.abc import Callable

from slugify import slugify as _slugify

MAX_SLUG_LENGTH = 100
FALLBACK_SLUG = "icerik"

# Appliquées avant la translittération: "İ".lower() produirait un point combinant
TURKISH_REPLACEMENTS: list[list[str]] = [
    ["ç", "c"],
    ["Ç", "c"],
    ["ğ", "g"],
    ["Ğ", "g"],
    ["ı", "i"],
    ["İ", "i"],
    ["ö", "o"],
    ["Ö", "o"],
    ["ş", "s"],
    ["Ş", "s"],
    ["ü", "u"],
    ["Ü", "u"],
    ["â", "a"],
    ["Â", "a"],
    ["î", "i"],
    ["Î", "i"],
    ["û", "u"],
    ["Û", "u"],
]


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def slugify(text: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Convertit un texte libre en slug ASCII minuscule, sans tiret aux extrémités."""
    return _slugify(text or "", max_length=max_length, replacements=TURKISH_REPLACEMENTS)


def resolve_slug(
    candidate: str,
    exists: Callable[[str], bool],
    *,
    now_ms: Callable[[], int] = _epoch_ms,
) -> str:
    """Retourne un slug libre pour `candidate`.

    En cas de collision, un suffixe horodaté (millisecondes) est ajouté sans nouvelle
    vérification: une seconde collision est considérée comme négligeable.
    """
    slug = slugify(candidate) or FALLBACK_SLUG
    if not exists(slug):
        return slug
    suffix = str(now_ms())
    base = slug[: MAX_SLUG_LENGTH - len(suffix) - 1].rstrip("-")
    return f"{base}-{suffix}"
