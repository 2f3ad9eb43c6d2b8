"""Generation orchestration: coordinators, partial-result merger, bridges, view state."""
from medisocial.workflow.bridge import article_to_post_request, trend_to_post_request
from medisocial.workflow.coordinator import (
    ArticleCoordinator,
    ConversionCoordinator,
    GenerationCoordinator,
    InfographicCoordinator,
    PostCoordinator,
)
from medisocial.workflow.graph import create_post_graph
from medisocial.workflow.merger import PartialResultMerger
from medisocial.workflow.view import Notifier, Panel, ViewMode, ViewState

__all__ = [
    "ArticleCoordinator",
    "ConversionCoordinator",
    "GenerationCoordinator",
    "InfographicCoordinator",
    "Notifier",
    "Panel",
    "PartialResultMerger",
    "PostCoordinator",
    "ViewMode",
    "ViewState",
    "article_to_post_request",
    "create_post_graph",
    "trend_to_post_request",
]
