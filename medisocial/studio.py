"""Studio: composition root wiring capability, store, coordinators, bridges, view and notifier."""
from medisocial.errors import ValidationFailure
from medisocial.models.schemas import (
    GeneratedArticle,
    PostRequest,
    PostResult,
    PubMedArticle,
    RTSHistoryEntry,
    RTSMetrics,
    SessionOut,
    ToolScope,
    ToolStateOut,
    TrendSuggestion,
)
from medisocial.services import rts_calculator
from medisocial.services.capabilities import EvidenceSearch, GenerativeCapability
from medisocial.services.persistence import PersistenceStore
from medisocial.utils.helpers import next_result_id, utc_now_iso
from medisocial.utils.logging import get_logger
from medisocial.workflow.bridge import article_to_post_request, trend_to_post_request
from medisocial.workflow.coordinator import (
    ArticleCoordinator,
    ConversionCoordinator,
    GenerationCoordinator,
    InfographicCoordinator,
    PostCoordinator,
)
from medisocial.workflow.view import Notifier, ViewMode, ViewState

logger = get_logger(__name__)


class Studio:
    """One user session. Build it, `await start()` once, then drive it from the routes."""

    def __init__(
        self,
        capability: GenerativeCapability,
        store: PersistenceStore,
        search: EvidenceSearch | None = None,
        *,
        notification_seconds: float | None = None,
        discard_stale_merges: bool | None = None,
    ):
        self.capability = capability
        self.store = store
        self.search = search
        self.view = ViewState()
        self.notifier = Notifier(notification_seconds)
        hooks = {"on_success": self._generation_succeeded, "on_notice": self.notifier.show}
        self.post = PostCoordinator(capability, store, **hooks)
        self.article = ArticleCoordinator(capability, **hooks)
        self.infographic = InfographicCoordinator(
            capability,
            discard_stale_merges=discard_stale_merges,
            **hooks,
        )
        self.conversion = ConversionCoordinator(capability, **hooks)
        self.rts_history: list[RTSHistoryEntry] = []

    @property
    def coordinators(self) -> dict[ToolScope, GenerationCoordinator]:
        return {
            ToolScope.POST: self.post,
            ToolScope.ARTICLE: self.article,
            ToolScope.INFOGRAPHIC: self.infographic,
            ToolScope.CONVERSION: self.conversion,
        }

    async def start(self) -> None:
        """Load persisted history, draft and RTS history. Call once."""
        state = await self.store.load()
        self.post.restore(state.history, state.draft)
        self.rts_history = await self.store.load_rts_history()
        logger.info("studio_started", history=len(state.history), has_draft=state.draft is not None)

    async def shutdown(self) -> None:
        await self.infographic.merger.drain()

    def _generation_succeeded(self, tool: ToolScope, message: str) -> None:
        self.view.show_result()
        self.notifier.show(message)

    # ----- navigation -----
    def navigate(self, mode: ViewMode) -> None:
        self.view.navigate(mode)
        if mode is not ViewMode.POST:
            # Leaving for another tool drops any pending wizard prefill
            self.view.post_prefill = None
        for coordinator in self.coordinators.values():
            coordinator.clear_error()

    async def open_history(self, result_id: str) -> PostResult:
        entry = await self.post.open_from_history(result_id)
        self.view.navigate(ViewMode.POST)
        self.view.show_result()
        return entry

    @property
    def any_in_flight(self) -> bool:
        return any(c.is_in_flight for c in self.coordinators.values())

    @property
    def has_any_result(self) -> bool:
        return any(c.result is not None for c in self.coordinators.values())

    # ----- bridges -----
    def article_to_post(self, article: GeneratedArticle | None = None) -> PostRequest:
        article = article or self.article.result
        if article is None:
            raise ValidationFailure("Gere um artigo antes de transformá-lo em post.")
        request = article_to_post_request(article)
        self.view.prefill_post(request)
        self.notifier.show("Iniciando Post do Artigo...")
        return request

    def use_trend(self, suggestion: TrendSuggestion) -> PostRequest:
        request = trend_to_post_request(suggestion)
        self.view.prefill_post(request)
        return request

    # ----- evidence finder -----
    async def search_evidence(self, query: str) -> list[PubMedArticle]:
        if self.search is None:
            return []
        return await self.search.search(query)

    # ----- RTS calculator -----
    async def save_rts(self, metrics: RTSMetrics) -> RTSHistoryEntry:
        if not metrics.patient_name.strip():
            raise ValidationFailure("Digite o nome do paciente para salvar.")
        entry = RTSHistoryEntry(
            id=next_result_id(),
            date=utc_now_iso(),
            patient_name=metrics.patient_name.strip(),
            score=rts_calculator.compute_score(metrics),
            metrics=metrics,
        )
        self.rts_history.insert(0, entry)
        await self.store.save_rts_history(self.rts_history)
        return entry

    # ----- snapshots -----
    def tool_state(self, tool: ToolScope) -> ToolStateOut:
        coordinator = self.coordinators[tool]
        result = coordinator.result
        return ToolStateOut(
            tool=tool,
            status=coordinator.status,
            error=coordinator.error,
            result=result.model_dump() if result is not None else None,
            regenerating_text=getattr(coordinator, "regenerating_text", False),
            regenerating_image=getattr(coordinator, "regenerating_image", False),
            refining=getattr(coordinator, "refining", False),
        )

    def snapshot(self) -> SessionOut:
        return SessionOut(
            view_mode=self.view.mode.value,
            tab=self.view.tab.value,
            visible_panel=self.view.visible_panel(self.has_any_result, self.any_in_flight).value,
            notification=self.notifier.message,
            any_in_flight=self.any_in_flight,
            tools=[self.tool_state(tool) for tool in ToolScope],
        )
