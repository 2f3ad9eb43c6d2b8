"""LangGraph state schema for the post generation pipeline."""
from typing import TypedDict

from medisocial.models.schemas import PostContent, PostRequest


class PostWorkflowState(TypedDict, total=False):
    """State passed between nodes. All keys optional for partial updates."""

    # Injected by the coordinator
    request: PostRequest

    # Text node
    content: PostContent

    # Image node (generated) or upload node (user-supplied)
    image_url: str | None
    is_custom_image: bool
