"""Partial-result merger: folds independently resolving images into the current infographic result."""
import asyncio
from typing import TYPE_CHECKING, Any

from medisocial.models.schemas import PostFormat
from medisocial.services.capabilities import GenerativeCapability
from medisocial.utils.logging import get_logger

if TYPE_CHECKING:
    from medisocial.workflow.coordinator import GenerationCoordinator

logger = get_logger(__name__)


class PartialResultMerger:
    """
    Spawns one image task per prompt and merges each URL into its own field of the
    coordinator's *current* result when it lands. Fields are disjoint, so arrival order
    does not matter.

    A merge is dropped when no result is stored. With `discard_stale` it is also dropped
    when the coordinator has accepted a newer submission than the one that spawned it.
    """

    def __init__(self, coordinator: "GenerationCoordinator", capability: GenerativeCapability, discard_stale: bool = True):
        self.coordinator = coordinator
        self.capability = capability
        self.discard_stale = discard_stale
        self.pending: set[asyncio.Task] = set()

    def spawn(self, token: int, jobs: dict[str, str]) -> list[asyncio.Task]:
        """Start one image generation per {field: prompt}; does not wait for them."""
        tasks = []
        for field, prompt in jobs.items():
            task = asyncio.create_task(self._resolve(token, field, prompt))
            self.pending.add(task)
            task.add_done_callback(self.pending.discard)
            tasks.append(task)
        return tasks

    async def _resolve(self, token: int, field: str, prompt: str) -> bool:
        try:
            url = await self.capability.generate_image(prompt, PostFormat.FEED)
        except Exception as e:
            logger.warning("partial_image_failed", field=field, error=str(e))
            return False
        return self.merge(token, field, url)

    def merge(self, token: int, field: str, value: Any) -> bool:
        current = self.coordinator.result
        if current is None:
            logger.info("partial_merge_dropped", field=field, reason="no_result")
            return False
        if self.discard_stale and token != self.coordinator.request_token:
            logger.info("partial_merge_dropped", field=field, reason="stale", current_token=self.coordinator.request_token)
            return False
        self.coordinator.replace_result(current.model_copy(update={field: value}))
        return True

    async def drain(self) -> None:
        """Wait for every outstanding image task (shutdown and tests)."""
        while self.pending:
            await asyncio.gather(*list(self.pending), return_exceptions=True)
