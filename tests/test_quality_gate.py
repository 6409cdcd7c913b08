"""Tests pour la porte qualité (barème fixe, seuil de publication 70)."""

from content_engine.domain.quality_gate import POINTS, PUBLISH_THRESHOLD, check_quality, word_count
from tests.fakes import article_row

FULL_SCORE = 100
THRESHOLD = 70


def test_rubric_sums_to_hundred_and_threshold_is_seventy():
    assert sum(POINTS.values()) == FULL_SCORE
    assert PUBLISH_THRESHOLD == THRESHOLD


def test_complete_record_scores_full_marks():
    verdict = check_quality(article_row())
    assert verdict.score == FULL_SCORE
    assert verdict.passed
    assert verdict.issues == ()


def test_empty_record_fails_and_scores_lower():
    empty = check_quality({"title": "", "content": "", "slug": ""})
    full = check_quality(article_row())
    assert empty.score < full.score
    assert not empty.passed
    assert len(empty.issues) == len(set(empty.issues))


def test_none_and_missing_values_never_raise():
    verdict = check_quality({"title": None, "content": None, "meta_description": 42})
    assert 0 <= verdict.score <= FULL_SCORE
    assert not verdict.passed


def test_each_failing_check_adds_its_own_issue():
    verdict = check_quality(
        article_row(
            title="Kısa",
            meta_description="çok kısa",
            excerpt="",
            slug="Geçersiz Slug",
            content="<p>" + "kelime " * 50 + "[IMAGE: ev]</p>",
        )
    )
    assert len(verdict.issues) == len(set(verdict.issues))
    assert any("Başlık" in issue for issue in verdict.issues)
    assert any("Meta açıklama" in issue for issue in verdict.issues)
    assert any("Özet" in issue for issue in verdict.issues)
    assert any("Slug" in issue for issue in verdict.issues)
    assert any("İçerik çok kısa" in issue for issue in verdict.issues)
    assert any("başlık (H2/H3)" in issue for issue in verdict.issues)
    assert any("AI kalıntısı" in issue for issue in verdict.issues)


def test_missing_meta_description_scores_eighty_five():
    verdict = check_quality(article_row(meta_description=None))
    assert verdict.score == FULL_SCORE - POINTS["meta_description"]
    assert verdict.passed


def test_meta_title_falls_back_to_title():
    long_meta_title = "x" * 80
    assert check_quality(article_row(meta_title=long_meta_title)).score == (
        FULL_SCORE - POINTS["meta_title"]
    )
    assert check_quality(article_row()).score == FULL_SCORE


def test_alt_text_blockquote_and_placeholders_are_artifacts():
    body = article_row()["content"]
    for artifact in ("<blockquote>Alt Text: deniz</blockquote>", "<p>[Görsel açıklaması]</p>"):
        verdict = check_quality(article_row(content=body + artifact))
        assert verdict.score == FULL_SCORE - POINTS["artifacts"]


def test_word_count_ignores_tags():
    assert word_count("<h2>Bir iki</h2><p>üç <strong>dört</strong></p>") == 4


def test_commented_out_words_and_headings_do_not_count():
    hidden = "<p>kısa</p><!-- <h2>taslak</h2> " + "kelime " * 320 + "-->"
    verdict = check_quality(article_row(content=hidden))
    assert verdict.score == FULL_SCORE - POINTS["content_length"] - POINTS["headings"]
    assert any("İçerik çok kısa: 1 kelime" in issue for issue in verdict.issues)
    assert any("başlık (H2/H3)" in issue for issue in verdict.issues)


def test_script_and_style_text_is_ignored():
    body = "<style>h2 { color: red; }</style><script>" + "var x; " * 320 + "</script><p>bir iki</p>"
    assert word_count(body) == 2
    verdict = check_quality(article_row(content=body))
    assert verdict.score == FULL_SCORE - POINTS["content_length"] - POINTS["headings"]
    assert not verdict.passed


def test_heading_inside_markup_attribute_is_not_a_heading():
    body = '<p title="<h2>">' + "kelime " * 320 + "</p>"
    verdict = check_quality(article_row(content=body))
    assert verdict.score == FULL_SCORE - POINTS["headings"]
