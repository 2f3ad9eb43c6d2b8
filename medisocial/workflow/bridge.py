"""Cross-tool bridges: turn one tool's output into another tool's starting request."""
from medisocial.models.schemas import (
    GeneratedArticle,
    PostCategory,
    PostFormat,
    PostRequest,
    RequestOrigin,
    Tone,
    TrendSuggestion,
)

ARTICLE_INSTRUCTIONS = 'Baseie o post EXATAMENTE neste artigo: "{title}". Resuma os pontos principais para o Instagram.'


def article_to_post_request(article: GeneratedArticle) -> PostRequest:
    """Post request that summarizes `article`. Category is always pathology, whatever the article covers."""
    return PostRequest(
        topic=article.title,
        category=PostCategory.PATHOLOGY,
        tone=Tone.EDUCATIONAL,
        format=PostFormat.FEED,
        custom_instructions=ARTICLE_INSTRUCTIONS.format(title=article.title),
        origin=RequestOrigin.ARTICLE_DERIVED,
    )


def trend_to_post_request(partial: TrendSuggestion) -> PostRequest:
    """Complete a trend suggestion; fields the trend source left out get the form defaults."""
    return PostRequest(
        topic=partial.topic or "",
        category=partial.category or PostCategory.PATHOLOGY,
        tone=partial.tone or Tone.PROFESSIONAL,
        format=partial.format or PostFormat.FEED,
        custom_instructions=partial.custom_instructions or "",
        origin=RequestOrigin.TREND_SUGGESTED,
    )
