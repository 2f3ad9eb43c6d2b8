"""Post tool: generate, regenerate text/image, edit and refine the draft."""
from fastapi import APIRouter, Depends, HTTPException

from medisocial.errors import StudioError
from medisocial.models.schemas import (
    PostPrefillOut,
    PostRequest,
    RefineRequest,
    ToolScope,
    ToolStateOut,
    UpdateDraftRequest,
)
from medisocial.routes.deps import get_studio, http_error
from medisocial.studio import Studio

router = APIRouter(prefix="/post", tags=["post"])


@router.get("", response_model=ToolStateOut)
async def get_post(studio: Studio = Depends(get_studio)):
    """Current post result, status and regeneration flags."""
    return studio.tool_state(ToolScope.POST)


@router.get("/prefill", response_model=PostPrefillOut)
async def get_prefill(studio: Studio = Depends(get_studio)):
    """Initial wizard state (from a trend or an article) and the step to open on."""
    return studio.view.prefill()


@router.post("/generate", response_model=ToolStateOut)
async def generate_post(body: PostRequest, studio: Studio = Depends(get_studio)):
    """Run the post pipeline (text, then generated or uploaded image) and archive the result."""
    try:
        await studio.post.submit(body)
    except StudioError as e:
        raise http_error(e) from e
    return studio.tool_state(ToolScope.POST)


@router.post("/regenerate-text", response_model=ToolStateOut)
async def regenerate_text(studio: Studio = Depends(get_studio)):
    """New caption/headline from the last request; keeps the image. No-op without a prior post."""
    await studio.post.regenerate_text()
    return studio.tool_state(ToolScope.POST)


@router.post("/regenerate-image", response_model=ToolStateOut)
async def regenerate_image(studio: Studio = Depends(get_studio)):
    """New image from the current brief. No-op when the image was uploaded by the user."""
    await studio.post.regenerate_image()
    return studio.tool_state(ToolScope.POST)


@router.patch("/draft", response_model=ToolStateOut)
async def update_draft(body: UpdateDraftRequest, studio: Studio = Depends(get_studio)):
    """Edit headline, caption or hashtags in place (review step)."""
    try:
        await studio.post.edit_content(headline=body.headline, caption=body.caption, hashtags=body.hashtags)
    except StudioError as e:
        raise http_error(e) from e
    return studio.tool_state(ToolScope.POST)


@router.post("/refine", response_model=ToolStateOut)
async def refine_caption(body: RefineRequest, studio: Studio = Depends(get_studio)):
    """Rewrite the caption with an instruction such as 'mais curto'."""
    if studio.post.result is None:
        raise HTTPException(status_code=404, detail="Nenhum post para refinar.")
    await studio.post.refine_caption(body.instruction)
    return studio.tool_state(ToolScope.POST)


@router.delete("", response_model=ToolStateOut)
async def clear_post(studio: Studio = Depends(get_studio)):
    studio.post.clear()
    return studio.tool_state(ToolScope.POST)
