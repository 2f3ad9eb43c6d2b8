"""Generation coordinators: one per tool scope, each owning its tool status state machine."""
import asyncio
from dataclasses import dataclass
from typing import Any, Callable

from medisocial.config import settings
from medisocial.errors import GenerationFailure, NotFound, StudioError, SubmissionRejected, ValidationFailure
from medisocial.models.schemas import (
    ArticleRequest,
    ConversionRequest,
    ConversionResult,
    GeneratedArticle,
    InfographicRequest,
    InfographicResult,
    PostFormat,
    PostRequest,
    PostResult,
    ToolScope,
    ToolStatus,
)
from medisocial.services.capabilities import GenerativeCapability
from medisocial.services.persistence import PersistenceStore
from medisocial.utils.helpers import next_result_id, utc_now_iso
from medisocial.utils.logging import generation_context, get_logger
from medisocial.workflow.graph import create_post_graph
from medisocial.workflow.merger import PartialResultMerger

logger = get_logger(__name__)

SuccessHook = Callable[[ToolScope, str], None]
NoticeHook = Callable[[str], None]

_KEEP = object()


@dataclass(frozen=True)
class ToolState:
    status: ToolStatus = ToolStatus.IDLE
    result: Any = None
    error: str | None = None


class GenerationCoordinator:
    """
    Drives at most one outstanding submission for a tool scope.

    Status moves Idle -> InFlight -> Succeeded | Failed and back to InFlight on the next
    submission. A failure keeps the previous result. `_transition` is the only mutation path.
    """

    tool: ToolScope
    success_message = "Conteúdo gerado!"
    failure_message = "Ocorreu um erro na geração."

    def __init__(
        self,
        capability: GenerativeCapability,
        *,
        on_success: SuccessHook | None = None,
        on_notice: NoticeHook | None = None,
    ):
        self.capability = capability
        self.on_success = on_success
        self.on_notice = on_notice
        self.last_request: Any = None
        # Incremented per accepted submission; tags partial results with their origin
        self.request_token = 0
        self._state = ToolState()
        self._tasks: set[asyncio.Task] = set()

    # ----- read side -----
    @property
    def state(self) -> ToolState:
        return self._state

    @property
    def status(self) -> ToolStatus:
        return self._state.status

    @property
    def result(self) -> Any:
        return self._state.result

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def is_in_flight(self) -> bool:
        return self._state.status is ToolStatus.IN_FLIGHT

    # ----- transitions -----
    def _transition(self, status: ToolStatus, *, result: Any = _KEEP, error: str | None = None) -> None:
        new_result = self._state.result if result is _KEEP else result
        self._state = ToolState(status=status, result=new_result, error=error if status is ToolStatus.FAILED else None)
        logger.debug("tool_transition", tool=self.tool.value, status=status.value)

    def replace_result(self, result: Any) -> None:
        """Swap the current result, keeping the status (Idle becomes Succeeded)."""
        status = ToolStatus.SUCCEEDED if self.status is ToolStatus.IDLE else self.status
        self._transition(status, result=result, error=self.error)

    def clear(self) -> None:
        """Drop the current result. An in-flight submission keeps running."""
        self._transition(ToolStatus.IN_FLIGHT if self.is_in_flight else ToolStatus.IDLE, result=None)

    def clear_error(self) -> None:
        if self.status is ToolStatus.FAILED:
            self._transition(ToolStatus.SUCCEEDED if self.result is not None else ToolStatus.IDLE)

    def fail(self, message: str) -> None:
        self._transition(ToolStatus.FAILED, error=message)

    def _settle_side(self, *, result: Any = _KEEP, error: str | None = None) -> None:
        """Settle a regeneration or refinement. A submission started meanwhile keeps its InFlight status."""
        if self.is_in_flight:
            if result is not _KEEP:
                self.replace_result(result)
            return
        if error is not None:
            self.fail(error)
        else:
            self._transition(ToolStatus.SUCCEEDED, result=result)

    # ----- submission -----
    def validate(self, request: Any) -> None:
        """Raise ValidationFailure when the request cannot be submitted."""

    def launch(self, request: Any) -> asyncio.Task:
        """Take the in-flight guard synchronously and schedule the generation."""
        if self.is_in_flight:
            raise SubmissionRejected("Uma geração já está em andamento.")
        self.validate(request)
        self.request_token += 1
        self.last_request = request
        self._transition(ToolStatus.IN_FLIGHT)
        token = self.request_token
        task = asyncio.create_task(self._run(request, token))
        task.add_done_callback(lambda t: self._settle_cancelled(t, token))
        self._track(task)
        return task

    async def submit(self, request: Any) -> Any:
        """Run one generation to completion. Raises GenerationFailure when it settles as failed.

        Cancelling the caller does not cancel the generation: it still settles and releases the guard.
        """
        result = await asyncio.shield(self.launch(request))
        if result is None:
            raise GenerationFailure(self.error or self.failure_message)
        return result

    async def _run(self, request: Any, token: int) -> Any:
        with generation_context(self.tool.value, token):
            try:
                result = await self._generate(request)
            except Exception as e:
                message = e.message if isinstance(e, StudioError) else self.failure_message
                logger.warning("generation_failed", error=str(e))
                self.fail(message)
                return None
            self._transition(ToolStatus.SUCCEEDED, result=result)
            logger.info("generation_succeeded")
            await self._after_success(result, token)
        if self.on_success is not None:
            self.on_success(self.tool, self.success_message)
        return result

    def _settle_cancelled(self, task: asyncio.Task, token: int) -> None:
        # A cancelled task never reaches the transitions in _run
        if task.cancelled() and self.is_in_flight and token == self.request_token:
            logger.warning("generation_cancelled", tool=self.tool.value, token=token)
            self.fail(self.failure_message)

    async def _generate(self, request: Any) -> Any:
        raise NotImplementedError

    async def _after_success(self, result: Any, token: int) -> None:
        pass

    def _track(self, task: asyncio.Task) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _notice(self, message: str) -> None:
        if self.on_notice is not None:
            self.on_notice(message)


class PostCoordinator(GenerationCoordinator):
    """Post tool: LangGraph text/image pipeline, history log, draft slot, regeneration and edits."""

    tool = ToolScope.POST
    success_message = "Post gerado com sucesso!"
    failure_message = "Ocorreu um erro ao gerar o post."

    def __init__(self, capability: GenerativeCapability, store: PersistenceStore, **hooks):
        super().__init__(capability, **hooks)
        self.store = store
        self.graph = create_post_graph(capability)
        self.history: list[PostResult] = []
        self.regenerating_text = False
        self.regenerating_image = False
        self.refining = False

    def restore(self, history: list[PostResult], draft: PostResult | None) -> None:
        """Resume a session from persisted state. Does not touch the durable medium."""
        self.history = list(history)
        if draft is not None:
            self._transition(ToolStatus.SUCCEEDED, result=draft)

    def validate(self, request: PostRequest) -> None:
        if not (request.topic or "").strip():
            raise ValidationFailure("Informe o tema do post.")

    async def _generate(self, request: PostRequest) -> PostResult:
        state = await self.graph.ainvoke({"request": request})
        return PostResult(
            id=next_result_id(),
            date=utc_now_iso(),
            content=state["content"],
            image_url=state.get("image_url"),
            is_custom_image=bool(state.get("is_custom_image")),
        )

    async def _after_success(self, result: PostResult, token: int) -> None:
        self.history.insert(0, result)
        await self.store.save_history(self.history)
        await self.store.save_draft(result)

    async def _save_current(self, result: PostResult) -> None:
        self.replace_result(result)
        await self.store.save_draft(result)

    async def regenerate_text(self) -> PostResult | None:
        """New text from the remembered request; media, id and date are kept. No-op without both."""
        if self.last_request is None or self.result is None:
            return None
        if self.regenerating_text or self.is_in_flight:
            return None
        self.regenerating_text = True
        try:
            content = await self.capability.generate_text(self.last_request)
        except Exception as e:
            logger.warning("regenerate_text_failed", error=str(e))
            self._settle_side(error="Falha ao regerar o texto")
            return None
        finally:
            self.regenerating_text = False
        if self.result is None:
            return None
        updated = self.result.model_copy(update={"content": content})
        self._settle_side(result=updated)
        await self.store.save_draft(updated)
        self._notice("Texto atualizado!")
        return updated

    async def regenerate_image(self) -> PostResult | None:
        """New image from the current image brief. No-op for user-supplied media or a missing brief."""
        current = self.result
        if current is None or current.is_custom_image or not current.content.image_prompt_description:
            return None
        if self.regenerating_image or self.is_in_flight:
            return None
        format = self.last_request.format if self.last_request is not None else PostFormat.FEED
        self.regenerating_image = True
        try:
            image_url = await self.capability.generate_image(current.content.image_prompt_description, format)
        except Exception as e:
            logger.warning("regenerate_image_failed", error=str(e))
            self._settle_side(error="Falha ao regerar a imagem")
            return None
        finally:
            self.regenerating_image = False
        if self.result is None:
            return None
        updated = self.result.model_copy(update={"image_url": image_url})
        self._settle_side(result=updated)
        await self.store.save_draft(updated)
        self._notice("Nova imagem gerada!")
        return updated

    async def edit_content(
        self,
        *,
        headline: str | None = None,
        caption: str | None = None,
        hashtags: list[str] | None = None,
    ) -> PostResult:
        """In-place edit of the current post; rewrites the draft slot."""
        if self.result is None:
            raise NotFound("Nenhum post para editar.")
        changes = {k: v for k, v in (("headline", headline), ("caption", caption), ("hashtags", hashtags)) if v is not None}
        content = self.result.content.model_copy(update=changes)
        updated = self.result.model_copy(update={"content": content})
        await self._save_current(updated)
        return updated

    async def refine_caption(self, instruction: str) -> PostResult | None:
        """Rewrite the caption following `instruction` and apply it as an edit."""
        if self.result is None or self.refining:
            return None
        self.refining = True
        try:
            caption = await self.capability.refine_text(self.result.content.caption, instruction)
        except Exception as e:
            logger.warning("refine_caption_failed", error=str(e))
            self._settle_side(error="Falha ao refinar a legenda.")
            return None
        finally:
            self.refining = False
        if self.result is None:
            return None
        return await self.edit_content(caption=caption)

    async def open_from_history(self, result_id: str) -> PostResult:
        entry = next((item for item in self.history if item.id == result_id), None)
        if entry is None:
            raise NotFound("Item do histórico não encontrado.")
        self._transition(ToolStatus.IN_FLIGHT if self.is_in_flight else ToolStatus.SUCCEEDED, result=entry)
        await self.store.save_draft(entry)
        return entry


class ArticleCoordinator(GenerationCoordinator):
    tool = ToolScope.ARTICLE
    success_message = "Artigo SEO criado!"
    failure_message = "Erro ao gerar artigo."

    def validate(self, request: ArticleRequest) -> None:
        if not (request.topic or "").strip():
            raise ValidationFailure("Informe o tema do artigo.")

    async def _generate(self, request: ArticleRequest) -> GeneratedArticle:
        return await self.capability.generate_article(request)


class InfographicCoordinator(GenerationCoordinator):
    """Two-phase tool: structured payload first, then one image per prompt merged as it lands."""

    tool = ToolScope.INFOGRAPHIC
    success_message = "Infográfico estruturado!"
    failure_message = "Erro no infográfico."

    def __init__(self, capability: GenerativeCapability, *, discard_stale_merges: bool | None = None, **hooks):
        super().__init__(capability, **hooks)
        if discard_stale_merges is None:
            discard_stale_merges = settings.discard_stale_merges
        self.merger = PartialResultMerger(self, capability, discard_stale=discard_stale_merges)

    def validate(self, request: InfographicRequest) -> None:
        if not (request.topic or "").strip():
            raise ValidationFailure("Informe o tema do infográfico.")

    async def _generate(self, request: InfographicRequest) -> InfographicResult:
        data = await self.capability.generate_infographic(request)
        return InfographicResult(data=data)

    async def _after_success(self, result: InfographicResult, token: int) -> None:
        jobs = {"hero_image_url": result.data.hero_image_prompt}
        if result.data.anatomy is not None:
            jobs["anatomy_image_url"] = result.data.anatomy.image_prompt
        self.merger.spawn(token, {field: prompt for field, prompt in jobs.items() if prompt})


class ConversionCoordinator(GenerationCoordinator):
    tool = ToolScope.CONVERSION
    success_message = "Estratégia de conversão pronta!"
    failure_message = "Erro na estratégia."

    def validate(self, request: ConversionRequest) -> None:
        if not (request.procedure or "").strip():
            raise ValidationFailure("Informe o procedimento.")

    async def _generate(self, request: ConversionRequest) -> ConversionResult:
        return await self.capability.generate_conversion(request)
