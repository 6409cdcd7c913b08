"""
Carte de couverture d'un cluster thématique: 1 article pilier + 5 articles de blog.

Les titres proviennent de clusters prédéfinis (Karasu, Sapanca). Un mot-clé pilier inconnu
retombe sur le premier cluster de la région.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from content_engine.domain.errors import ValidationError
from content_engine.domain.slugs import slugify

BLOG_SUGGESTIONS = 5
# les deux premiers blogs sont informationnels, les suivants commerciaux
INFORMATIONAL_BLOGS = 2

REGIONS: dict[str, str] = {"karasu": "Karasu", "sapanca": "Sapanca"}


def _karasu_clusters(year: int) -> dict[str, list[str]]:
    return {
        "karasu satılık daire": [
            "Karasu Satılık Daire Fiyatları ve Mahalle Rehberi",
            "Karasu'da Daire Alırken Dikkat Edilecekler",
            "Karasu Sahilinde Satılık Daire Seçenekleri",
            "Karasu İskanlı Daire Nedir, Nasıl Alınır?",
            "Karasu'da Yatırım İçin Daire Seçimi",
        ],
        "karasu kiralık daire": [
            "Karasu Kiralık Daire Rehberi ve Fiyat Aralıkları",
            "Karasu Yaz-Kış Kiralık Daire Farkları",
            "Karasu'da Kiralık Daire Ararken Kontrol Listesi",
            "Karasu Sahil Mahallelerinde Kiralık Seçenekler",
            "Karasu Kiralık Daire Sözleşmesi: Bilmeniz Gerekenler",
        ],
        "karasu emlak": [
            f"Karasu Emlak Piyasası {year}: Kapsamlı Rehber",
            "Karasu'da Emlak Alırken Tapu ve İskan Kontrolü",
            "Karasu Emlak Ofisleri ve Güvenilir Danışmanlık",
            "Karasu Emlak Yatırımı: Riskler ve Fırsatlar",
            "Karasu Emlak Vergileri ve Masraflar Rehberi",
        ],
        "karasu yazlık fiyatları": [
            "Karasu Yazlık Fiyatları ve Bölge Karşılaştırması",
            "Karasu'da Yazlık Alırken Dikkat Edilecekler",
            "Karasu Yazlık Kira Getirisi Hesaplama",
            "Karasu Sahilinde Yazlık vs Daire: Karar Rehberi",
            "Karasu Yazlık Piyasası Trendleri",
        ],
        "karasu kira getirisi": [
            "Karasu'da Kira Getirisi: Hesaplama ve Örnekler",
            "Karasu Yazlık Kira Getirisi Rehberi",
            "Karasu'da Yatırım Getirisi Karşılaştırması",
            "Karasu Kira Geliri Vergileri",
            "Karasu'da En İyi Kira Getirisi Veren Bölgeler",
        ],
    }


SAPANCA_CLUSTERS: dict[str, list[str]] = {
    "sapanca bungalov": [
        "Sapanca Bungalov Rehberi: Satın Alma ve Kiralama",
        "Sapanca Bungalov Fiyatları ve Bölge Analizi",
        "Sapanca'da Bungalov vs Yazlık: Karar Rehberi",
        "Sapanca Bungalov Yatırım Potansiyeli",
        "Sapanca Gölü Çevresinde Bungalov Seçenekleri",
    ],
    "sapanca günlük kiralık": [
        "Sapanca Günlük Kiralık Evler: Tatil Rehberi",
        "Sapanca'da Günlük Kiralık Bungalov ve Villa",
        "Sapanca Günlük Kiralık Fiyat Aralıkları",
        "Sapanca Tatil Konaklama Seçenekleri",
        "Sapanca Günlük Kiralık Rezervasyon İpuçları",
    ],
    "sapanca satılık daire": [
        "Sapanca Satılık Daire Fiyatları ve Bölgeler",
        "Sapanca'da Daire Alırken Bilmeniz Gerekenler",
        "Sapanca Gölü Manzaralı Daireler",
        "Sapanca Satılık Daire Yatırım Analizi",
        "Sapanca Daire ve Bungalov Karşılaştırması",
    ],
    "sapanca satılık yazlık": [
        "Sapanca Satılık Yazlık Rehberi ve Fiyatları",
        "Sapanca'da Yazlık Alırken Kontrol Listesi",
        "Sapanca Yazlık Kira Getirisi",
        "Sapanca Göl Çevresi Yazlık Seçenekleri",
        "Sapanca Yazlık Piyasası Trendleri",
    ],
    "sapanca satılık bungalov": [
        "Sapanca Satılık Bungalov Fiyatları ve Rehber",
        "Sapanca'da Bungalov Alırken Dikkat Edilecekler",
        "Sapanca Bungalov Yatırım Getirisi",
        "Sapanca Satılık Bungalov Bölge Analizi",
        "Sapanca Bungalov Tapu ve İmar Durumu",
    ],
}


@dataclass(frozen=True)
class CoverageSuggestion:
    """Une entrée de la carte de couverture."""

    title: str
    primary_keyword: str
    intent: str
    slug: str
    page_type: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def generate_coverage_map(
    cluster: str, pillar_keyword: str, year: int | None = None
) -> list[CoverageSuggestion]:
    """
    Construit 1 suggestion pilier (cornerstone) puis 5 suggestions de blog.

    Args:
        cluster: "karasu" ou "sapanca".
        pillar_keyword: mot-clé pilier; comparé en minuscules, sans espaces de bord.
        year: année injectée dans certains titres (année courante par défaut).

    Raises:
        ValidationError: cluster inconnu ou mot-clé vide.
    """
    region = REGIONS.get(cluster)
    if region is None:
        raise ValidationError(f"Bilinmeyen küme: {cluster}", {"allowed": sorted(REGIONS)})
    pillar_keyword = pillar_keyword.strip()
    if not pillar_keyword:
        raise ValidationError("Ana anahtar kelime zorunludur", {"fields": ["pillar_keyword"]})
    year = year or datetime.now(UTC).year

    clusters = _karasu_clusters(year) if cluster == "karasu" else SAPANCA_CLUSTERS
    titles = clusters.get(pillar_keyword.lower()) or next(iter(clusters.values()))

    pillar_title = titles[0] if titles else f"{region} {pillar_keyword} Rehberi"
    result = [
        CoverageSuggestion(
            title=pillar_title,
            primary_keyword=pillar_keyword,
            intent="commercial",
            slug=slugify(pillar_title),
            page_type="cornerstone",
        )
    ]
    for i in range(1, BLOG_SUGGESTIONS + 1):
        title = titles[i] if i < len(titles) else f"{region} {pillar_keyword} - Rehber {i}"
        result.append(
            CoverageSuggestion(
                title=title,
                primary_keyword=pillar_keyword,
                intent="informational" if i <= INFORMATIONAL_BLOGS else "commercial",
                slug=slugify(title),
                page_type="blog",
            )
        )
    return result
