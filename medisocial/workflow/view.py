"""View state (active tool, editor/result panel) and the single-slot notifier."""
import asyncio
from enum import Enum

from medisocial.config import settings
from medisocial.models.schemas import PostRequest, PostPrefillOut, RequestOrigin
from medisocial.utils.logging import get_logger

logger = get_logger(__name__)


class ViewMode(str, Enum):
    DASHBOARD = "dashboard"
    POST = "post"
    SEO = "seo"
    INFOGRAPHIC = "infographic"
    CONVERSION = "conversion"
    MATERIALS = "materials"
    HISTORY = "history"
    SITE = "site"
    TRENDS = "trends"
    CALCULATOR = "calculator"


class Panel(str, Enum):
    EDITOR = "editor"
    RESULT = "result"


WIZARD_STEPS = 3
_REVIEW_ORIGINS = (RequestOrigin.TREND_SUGGESTED, RequestOrigin.ARTICLE_DERIVED)


class ViewState:
    """Which tool is open and which panel is showing. Holds the post wizard prefill."""

    def __init__(self):
        self.mode = ViewMode.DASHBOARD
        self.tab = Panel.EDITOR
        self.post_prefill: PostRequest | None = None

    def navigate(self, mode: ViewMode) -> None:
        self.mode = mode
        self.tab = Panel.EDITOR

    def select_tab(self, tab: Panel) -> None:
        self.tab = tab

    def show_result(self) -> None:
        """Called once when a submission settles successfully."""
        self.tab = Panel.RESULT

    def visible_panel(self, has_any_result: bool, any_in_flight: bool) -> Panel:
        if self.tab is Panel.RESULT and (has_any_result or any_in_flight):
            return Panel.RESULT
        return Panel.EDITOR

    def prefill_post(self, request: PostRequest) -> None:
        """Seed the post wizard with a request (not submitted) and open the post tool."""
        self.post_prefill = request
        self.navigate(ViewMode.POST)

    def prefill(self) -> PostPrefillOut:
        request = self.post_prefill or PostRequest()
        # Bridged requests arrive with content already chosen: open on the review step
        start_step = WIZARD_STEPS if request.origin in _REVIEW_ORIGINS else 1
        return PostPrefillOut(request=request, start_step=start_step)


class Notifier:
    """At most one live message; a new message replaces the old one and restarts its timer."""

    def __init__(self, lifetime: float | None = None):
        self.lifetime = settings.notification_seconds if lifetime is None else lifetime
        self.message: str | None = None
        self._clear_handle: asyncio.TimerHandle | None = None

    def show(self, message: str) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
        self.message = message
        self._clear_handle = asyncio.get_running_loop().call_later(self.lifetime, self._expire)
        logger.debug("notification_shown", message=message)

    def dismiss(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
        self._expire()

    def _expire(self) -> None:
        self.message = None
        self._clear_handle = None
