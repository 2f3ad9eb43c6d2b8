"""GET /session, POST /session/navigate, POST /session/tab."""
from fastapi import APIRouter, Depends, HTTPException

from medisocial.models.schemas import NavigateRequest, SessionOut, TabRequest
from medisocial.routes.deps import get_studio
from medisocial.studio import Studio
from medisocial.workflow.view import Panel, ViewMode

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=SessionOut)
async def get_session(studio: Studio = Depends(get_studio)):
    """Active tool, visible panel, live notification and every tool's status."""
    return studio.snapshot()


@router.post("/navigate", response_model=SessionOut)
async def navigate(body: NavigateRequest, studio: Studio = Depends(get_studio)):
    try:
        mode = ViewMode(body.mode)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown view mode: {body.mode}")
    studio.navigate(mode)
    return studio.snapshot()


@router.post("/tab", response_model=SessionOut)
async def select_tab(body: TabRequest, studio: Studio = Depends(get_studio)):
    try:
        tab = Panel(body.tab)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown tab: {body.tab}")
    studio.view.select_tab(tab)
    return studio.snapshot()
