import asyncio

import pytest

from medisocial.errors import GenerationFailure
from medisocial.models.schemas import (
    AnatomyPanel,
    ArticleSection,
    ConversionResult,
    GeneratedArticle,
    InfographicData,
    ObjectionAnswer,
    PostContent,
)
from medisocial.services.persistence import InMemoryMedium, PersistenceStore
from medisocial.studio import Studio


class FakeCapability:
    """Scriptable GenerativeCapability. Gates hold a call until the test sets them."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.failing: set[str] = set()
        self.text_gate: asyncio.Event | None = None
        self.image_gates: dict[str, asyncio.Event] = {}
        self.text_count = 0
        self.infographic_count = 0

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def _maybe_fail(self, name: str) -> None:
        if name in self.failing:
            raise GenerationFailure(f"{name} indisponível")

    async def generate_text(self, request):
        self.calls.append(("generate_text", request))
        if self.text_gate is not None:
            await self.text_gate.wait()
        self._maybe_fail("generate_text")
        self.text_count += 1
        n = self.text_count
        return PostContent(
            headline=f"Headline {n}",
            caption=f"Legenda {n} sobre {request.topic}",
            hashtags=["#joelho", "#ortopedia"],
            image_prompt_description=f"knee illustration {n}",
        )

    async def generate_image(self, prompt, format):
        self.calls.append(("generate_image", prompt, format))
        gate = self.image_gates.get(prompt)
        if gate is not None:
            await gate.wait()
        self._maybe_fail("generate_image")
        return f"https://img.test/{format.value}/{prompt.replace(' ', '-')}.png"

    async def generate_article(self, request):
        self.calls.append(("generate_article", request))
        self._maybe_fail("generate_article")
        return GeneratedArticle(
            title=f"Guia completo: {request.topic}",
            meta_description="Tudo sobre o tema.",
            sections=[ArticleSection(heading="O que é", body="Explicação.")],
        )

    async def generate_infographic(self, request):
        self.calls.append(("generate_infographic", request))
        self._maybe_fail("generate_infographic")
        self.infographic_count += 1
        n = self.infographic_count
        return InfographicData(
            title=request.topic,
            key_points=["Ponto 1", "Ponto 2"],
            hero_image_prompt=f"hero {n}",
            anatomy=AnatomyPanel(title="Anatomia", description="Ligamentos", image_prompt=f"anatomy {n}"),
        )

    async def generate_conversion(self, request):
        self.calls.append(("generate_conversion", request))
        self._maybe_fail("generate_conversion")
        return ConversionResult(
            headline=f"Medo da cirurgia de {request.procedure}?",
            objections=[ObjectionAnswer(objection="Dói?", answer="A dor é controlada.")],
        )

    async def refine_text(self, text, instruction):
        self.calls.append(("refine_text", text, instruction))
        self._maybe_fail("refine_text")
        return f"{text} ({instruction})"


class FailingMedium(InMemoryMedium):
    """Reads work; every write raises like a full disk or a locked SQLite file."""

    async def set(self, key, value):
        raise OSError("disk full")


class FakeSearch:
    def __init__(self, articles=None):
        self.articles = articles or []
        self.queries: list[str] = []

    async def search(self, query):
        self.queries.append(query)
        return self.articles


async def wait_for(predicate, timeout: float = 1.0) -> None:
    """Yield to the loop until `predicate()` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


@pytest.fixture
def capability():
    return FakeCapability()


@pytest.fixture
def medium():
    return InMemoryMedium()


@pytest.fixture
def store(medium):
    return PersistenceStore(medium)


@pytest.fixture
async def studio(capability, store):
    studio = Studio(capability, store, FakeSearch(), notification_seconds=0.05, discard_stale_merges=True)
    await studio.start()
    yield studio
    await studio.shutdown()
