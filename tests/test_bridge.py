import pytest

from medisocial.errors import ValidationFailure
from medisocial.models.schemas import (
    ArticleRequest,
    GeneratedArticle,
    PostCategory,
    PostFormat,
    RequestOrigin,
    Tone,
    TrendSuggestion,
)
from medisocial.workflow.bridge import article_to_post_request, trend_to_post_request
from medisocial.workflow.view import ViewMode


def test_article_becomes_post_request():
    request = article_to_post_request(GeneratedArticle(title="Lesão do LCA no futebol"))

    assert request.topic == "Lesão do LCA no futebol"
    assert '"Lesão do LCA no futebol"' in request.custom_instructions
    assert request.category is PostCategory.PATHOLOGY
    assert request.tone is Tone.EDUCATIONAL
    assert request.format is PostFormat.FEED
    assert request.uploaded_image is None
    assert request.origin is RequestOrigin.ARTICLE_DERIVED


def test_trend_defaults_fill_missing_fields():
    request = trend_to_post_request(TrendSuggestion(topic="Dor no joelho ao correr"))

    assert request.topic == "Dor no joelho ao correr"
    assert request.category is PostCategory.PATHOLOGY
    assert request.tone is Tone.PROFESSIONAL
    assert request.format is PostFormat.FEED
    assert request.custom_instructions == ""
    assert request.origin is RequestOrigin.TREND_SUGGESTED


def test_trend_fields_override_defaults():
    request = trend_to_post_request(
        TrendSuggestion(topic="Mitos da artrose", category=PostCategory.MYTHS, tone=Tone.EMPATHETIC, format=PostFormat.STORY)
    )

    assert request.category is PostCategory.MYTHS
    assert request.tone is Tone.EMPATHETIC
    assert request.format is PostFormat.STORY


def test_empty_trend_still_yields_a_request():
    request = trend_to_post_request(TrendSuggestion())
    assert request.topic == ""


async def test_article_to_post_seeds_wizard_without_generating(studio, capability):
    await studio.article.submit(ArticleRequest(topic="Menisco"))
    calls_before = len(capability.calls)

    request = studio.article_to_post()

    assert len(capability.calls) == calls_before
    assert request.topic == "Guia completo: Menisco"
    assert studio.view.mode is ViewMode.POST
    assert studio.notifier.message == "Iniciando Post do Artigo..."
    prefill = studio.view.prefill()
    assert prefill.request == request
    assert prefill.start_step == 3


async def test_article_to_post_requires_an_article(studio):
    with pytest.raises(ValidationFailure):
        studio.article_to_post()
    assert studio.view.mode is ViewMode.DASHBOARD


async def test_trend_opens_wizard_on_review_step(studio, capability):
    studio.use_trend(TrendSuggestion(topic="Joelho de corredor"))

    prefill = studio.view.prefill()
    assert prefill.start_step == 3
    assert prefill.request.topic == "Joelho de corredor"
    assert studio.view.mode is ViewMode.POST
    assert capability.calls == []


async def test_leaving_post_tool_drops_prefill(studio):
    studio.use_trend(TrendSuggestion(topic="Joelho de corredor"))
    studio.navigate(ViewMode.SEO)

    assert studio.view.post_prefill is None
    assert studio.view.prefill().start_step == 1
