"""GET /history, POST /history/{id}/open, GET /evidence."""
from fastapi import APIRouter, Depends, Query

from medisocial.errors import StudioError
from medisocial.models.schemas import PostResult, PubMedArticle
from medisocial.routes.deps import get_studio, http_error
from medisocial.studio import Studio

router = APIRouter(tags=["library"])


@router.get("/history", response_model=list[PostResult])
async def list_history(studio: Studio = Depends(get_studio)):
    """Generated posts, newest first."""
    return studio.post.history


@router.post("/history/{result_id}/open", response_model=PostResult)
async def open_history_entry(result_id: str, studio: Studio = Depends(get_studio)):
    """Make a history entry the current post (and the saved draft)."""
    try:
        return await studio.open_history(result_id)
    except StudioError as e:
        raise http_error(e) from e


@router.get("/evidence", response_model=list[PubMedArticle])
async def search_evidence(q: str = Query(min_length=1), studio: Studio = Depends(get_studio)):
    """Most recent PubMed articles for a query; empty on search failure."""
    return await studio.search_evidence(q)
