"""Construction du prompt de génération SEO.

`build_prompt` est une fonction pure: même requête -> même texte. Le format de sortie JSON attendu
est décrit par `PROMPT_OUTPUT_SCHEMA`, partagé avec le parseur de réponses. Les règles de ton (mots
minimum, formules interdites) sont seulement écrites dans le prompt; leur contrôle se fait dans la
porte qualité.
"""

from __future__ import annotations

import json

from content_engine.domain.entities import ContentRequest

PLACEHOLDER = "—"

MIN_WORDS: dict[str, int] = {
    "cornerstone": 2500,
    "blog": 1200,
}

BANNED_PHRASES: tuple[str, ...] = (
    "Sonuç olarak",
    "Özetlemek gerekirse",
    "Bu makalede",
)

PROMPT_OUTPUT_SCHEMA: dict = {
    "seoSetup": {
        "primaryKeyword": "string",
        "searchIntent": "informational|commercial|transactional|local",
        "audience": "string",
        "contentAngle": "string",
        "title": "string (55-60 karakter)",
        "h1": "string",
        "metaDescription": "string (145-160 karakter)",
        "urlSlug": "string (seo-friendly-slug)",
        "schema": "Article + FAQPage",
    },
    "outline": [{"level": "H2|H3", "title": "string", "note": "string"}],
    "intro": {"paragraph1": "string", "paragraph2": "string"},
    "mainContent": "string (HTML)",
    "faq": [{"question": "string", "answer": "string"}],
    "keywords": ["string"],
    "internalLinking": {
        "pillarLink": {"target": "/blog/slug", "anchor": "string"},
        "supportingLinks": [{"target": "/blog/slug", "anchor": "string"}],
        "nextArticles": ["string"],
    },
    "ctaBlocks": {"soft": "string", "direct": "string"},
    "qualityCheck": {
        "intentMatched": "boolean",
        "microAnswersIncluded": "boolean",
        "internalLinksPlanned": "boolean",
        "ctaPresent": "boolean",
        "overClaimingAvoided": "boolean",
    },
}

_TEMPLATE = """# SEO İçerik Motoru — KarasuEmlak.net

Sen KarasuEmlak.net için çalışan kıdemli bir SEO stratejisti, editör ve emlak yazarısın.
Odak noktan arama niyeti, okuyucu deneyimi ve konu otoritesi. Anahtar kelime doldurma yapma.

## GİRDİLER
- Ana anahtar kelime: {primary_keyword}
- İkincil anahtar kelimeler: {secondary_keywords}
- Sayfa tipi: {page_type}
- Bölge: {region}
- Huni aşaması: {funnel_stage}
- CTA: {cta}
- Dil: {locale}

## KURALLAR
1. İnsan bir uzman gibi yaz; her bölüm net bir arama niyetine hizmet etsin.
2. Doğrulanamayan rakamsal iddia kullanma; fiyat ve getiri için aralık ver ve "piyasa koşullarına göre değişir" notunu ekle.
3. Yerel bağlamı doğal kullan: tapu, iskan, aidat, ulaşım, denize/göle yakınlık (yalnızca ilgiliyse).
4. mainContent en az {min_words} kelime olmalı; kısa paragraflar, listeler ve 2-4 adet "Kısa Cevap:" bloğu içermeli.
5. Şu kalıpları KULLANMA: {banned_phrases}.
6. Cümle uzunluklarını çeşitlendir; satış baskısı kurma.

## ÇIKTI FORMATI (STRICT JSON)
Yalnızca aşağıdaki yapıda geçerli bir JSON nesnesi döndür, öncesinde veya sonrasında metin yazma.

{schema}
"""


def _or_placeholder(value: str | None) -> str:
    return value if value else PLACEHOLDER


def build_prompt(request: ContentRequest) -> str:
    """Construit le prompt d'instruction complet pour une requête de contenu."""
    secondary = ", ".join(request.secondary_keywords) if request.secondary_keywords else PLACEHOLDER
    return _TEMPLATE.format(
        primary_keyword=request.primary_keyword,
        secondary_keywords=secondary,
        page_type=request.page_type,
        region=_or_placeholder(request.region),
        funnel_stage=_or_placeholder(request.funnel_stage),
        cta=_or_placeholder(request.cta),
        locale=_or_placeholder(request.locale),
        min_words=MIN_WORDS[request.page_type],
        banned_phrases=", ".join(f'"{p}"' for p in BANNED_PHRASES),
        schema=json.dumps(PROMPT_OUTPUT_SCHEMA, ensure_ascii=False, indent=2),
    )


# --- amélioration d'un contenu existant ------------------------------------------

IMPROVE_SOURCE_MAX_CHARS = 12000

IMPROVEMENT_OUTPUT_SCHEMA: dict = {
    "title": "string (20-70 karakter)",
    "metaDescription": "string (120-160 karakter)",
    "excerpt": "string",
    "mainContent": "string (HTML, H2/H3 başlıklarıyla)",
}

_IMPROVE_TEMPLATE = """# İçerik İyileştirme — KarasuEmlak.net

Sen bir içerik editörüsün. Aşağıdaki Türkçe içeriği kalite analizine göre iyileştir.

## MEVCUT İÇERİK
- Başlık: {title}
- Anahtar kelimeler: {keywords}
- Mevcut kalite skoru: {score}/100
- Tespit edilen sorunlar:
{issues}

İçerik (HTML):
{content}

## GÖREVLER
1. Tespit edilen sorunları gider.
2. Generic ifadeleri kaldır, tekrar eden kelimeleri eş anlamlılarıyla değiştir.
3. Cümle yapılarını çeşitlendir; doğal ve samimi bir ton kullan.
4. Anahtar kelimeleri doğal şekilde kullan; en az {min_words} kelime yaz.
5. Şu kalıpları KULLANMA: {banned_phrases}.

ÖNEMLİ: İçeriğin anlamını ve bilgi değerini koru, HTML etiketlerini koru, yer tutucu bırakma.

## ÇIKTI FORMATI (STRICT JSON)
Yalnızca aşağıdaki yapıda geçerli bir JSON nesnesi döndür, öncesinde veya sonrasında metin yazma.

{schema}
"""


def build_improvement_prompt(
    title: str,
    content: str,
    score: int,
    issues: tuple[str, ...] | list[str],
    keywords: list[str] | None = None,
) -> str:
    """Prompt de réécriture d'un contenu existant à partir de son verdict qualité."""
    issue_lines = "\n".join(f"  - {issue}" for issue in issues) or f"  - {PLACEHOLDER}"
    return _IMPROVE_TEMPLATE.format(
        title=_or_placeholder(title),
        keywords=", ".join(keywords) if keywords else PLACEHOLDER,
        score=score,
        issues=issue_lines,
        content=(content or "")[:IMPROVE_SOURCE_MAX_CHARS] or PLACEHOLDER,
        min_words=MIN_WORDS["blog"],
        banned_phrases=", ".join(f'"{p}"' for p in BANNED_PHRASES),
        schema=json.dumps(IMPROVEMENT_OUTPUT_SCHEMA, ensure_ascii=False, indent=2),
    )
