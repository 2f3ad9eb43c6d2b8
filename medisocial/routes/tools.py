"""Article, infographic and conversion tools, plus the article/trend bridges into the post tool."""
from fastapi import APIRouter, Depends

from medisocial.errors import StudioError
from medisocial.models.schemas import (
    ArticleRequest,
    ConversionRequest,
    InfographicRequest,
    PostPrefillOut,
    ToolScope,
    ToolStateOut,
    TrendSuggestion,
)
from medisocial.routes.deps import get_studio, http_error
from medisocial.studio import Studio

router = APIRouter(tags=["tools"])


@router.post("/article/generate", response_model=ToolStateOut)
async def generate_article(body: ArticleRequest, studio: Studio = Depends(get_studio)):
    try:
        await studio.article.submit(body)
    except StudioError as e:
        raise http_error(e) from e
    return studio.tool_state(ToolScope.ARTICLE)


@router.post("/article/to-post", response_model=PostPrefillOut)
async def article_to_post(studio: Studio = Depends(get_studio)):
    """Seed the post wizard from the current article. Nothing is generated until the post is submitted."""
    try:
        studio.article_to_post()
    except StudioError as e:
        raise http_error(e) from e
    return studio.view.prefill()


@router.post("/trends/use", response_model=PostPrefillOut)
async def use_trend(body: TrendSuggestion, studio: Studio = Depends(get_studio)):
    """Seed the post wizard from a trend suggestion."""
    studio.use_trend(body)
    return studio.view.prefill()


@router.post("/infographic/generate", response_model=ToolStateOut)
async def generate_infographic(body: InfographicRequest, studio: Studio = Depends(get_studio)):
    """Returns once the structured payload is ready; images are merged in as they arrive (poll GET /infographic)."""
    try:
        await studio.infographic.submit(body)
    except StudioError as e:
        raise http_error(e) from e
    return studio.tool_state(ToolScope.INFOGRAPHIC)


@router.get("/infographic", response_model=ToolStateOut)
async def get_infographic(studio: Studio = Depends(get_studio)):
    return studio.tool_state(ToolScope.INFOGRAPHIC)


@router.post("/conversion/generate", response_model=ToolStateOut)
async def generate_conversion(body: ConversionRequest, studio: Studio = Depends(get_studio)):
    try:
        await studio.conversion.submit(body)
    except StudioError as e:
        raise http_error(e) from e
    return studio.tool_state(ToolScope.CONVERSION)
