"""Return-to-sport calculator: score and saved evaluations."""
from fastapi import APIRouter, Depends

from medisocial.errors import StudioError
from medisocial.models.schemas import RTSHistoryEntry, RTSMetrics, RTSScoreOut
from medisocial.routes.deps import get_studio, http_error
from medisocial.services import rts_calculator
from medisocial.studio import Studio

router = APIRouter(prefix="/rts", tags=["rts"])


@router.post("/score", response_model=RTSScoreOut)
async def score(body: RTSMetrics):
    return rts_calculator.evaluate(body)


@router.post("/history", response_model=RTSHistoryEntry)
async def save_evaluation(body: RTSMetrics, studio: Studio = Depends(get_studio)):
    """Save an evaluation (patient name required)."""
    try:
        return await studio.save_rts(body)
    except StudioError as e:
        raise http_error(e) from e


@router.get("/history", response_model=list[RTSHistoryEntry])
async def list_evaluations(studio: Studio = Depends(get_studio)):
    return studio.rts_history
