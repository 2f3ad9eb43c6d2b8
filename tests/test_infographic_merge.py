import asyncio

import pytest

from medisocial.models.schemas import InfographicData, InfographicRequest, ToolStatus
from medisocial.workflow.coordinator import InfographicCoordinator

from tests.conftest import wait_for

HERO_1 = "https://img.test/feed/hero-1.png"
ANATOMY_1 = "https://img.test/feed/anatomy-1.png"


def gated(capability, *prompts):
    for prompt in prompts:
        capability.image_gates[prompt] = asyncio.Event()
    return capability.image_gates


FIELDS = {"hero 1": "hero_image_url", "anatomy 1": "anatomy_image_url"}


@pytest.mark.parametrize("first,second", [("hero 1", "anatomy 1"), ("anatomy 1", "hero 1")])
async def test_images_merge_in_any_order(capability, first, second):
    coordinator = InfographicCoordinator(capability)
    gates = gated(capability, "hero 1", "anatomy 1")

    result = await coordinator.submit(InfographicRequest(topic="LCA"))

    assert coordinator.status is ToolStatus.SUCCEEDED
    assert result.hero_image_url is None and result.anatomy_image_url is None

    gates[first].set()
    await wait_for(lambda: len(coordinator.merger.pending) == 1)

    partial = coordinator.result
    assert getattr(partial, FIELDS[first]) is not None
    assert getattr(partial, FIELDS[second]) is None
    assert partial.data == result.data

    gates[second].set()
    await coordinator.merger.drain()

    merged = coordinator.result
    assert merged.hero_image_url == HERO_1
    assert merged.anatomy_image_url == ANATOMY_1
    assert merged.data == result.data


async def test_base_payload_is_visible_before_images(capability):
    coordinator = InfographicCoordinator(capability)
    gates = gated(capability, "hero 1", "anatomy 1")

    await coordinator.submit(InfographicRequest(topic="Menisco"))
    gates["hero 1"].set()
    await wait_for(lambda: coordinator.result.hero_image_url is not None)

    assert coordinator.result.data.title == "Menisco"
    assert coordinator.result.anatomy_image_url is None

    gates["anatomy 1"].set()
    await coordinator.merger.drain()


async def test_merge_after_clear_is_dropped(capability):
    coordinator = InfographicCoordinator(capability)
    gates = gated(capability, "hero 1", "anatomy 1")
    await coordinator.submit(InfographicRequest(topic="LCA"))

    coordinator.clear()
    for gate in gates.values():
        gate.set()
    await coordinator.merger.drain()

    assert coordinator.result is None
    assert coordinator.status is ToolStatus.IDLE


async def test_stale_merge_is_discarded(capability):
    coordinator = InfographicCoordinator(capability, discard_stale_merges=True)
    gates = gated(capability, "hero 1", "anatomy 1")
    await coordinator.submit(InfographicRequest(topic="Primeiro"))

    await coordinator.submit(InfographicRequest(topic="Segundo"))
    await wait_for(lambda: coordinator.result.hero_image_url is not None)
    for gate in gates.values():
        gate.set()
    await coordinator.merger.drain()

    assert coordinator.result.data.title == "Segundo"
    assert coordinator.result.hero_image_url == "https://img.test/feed/hero-2.png"
    assert coordinator.result.anatomy_image_url == "https://img.test/feed/anatomy-2.png"


async def test_stale_merge_lands_when_discard_is_off(capability):
    coordinator = InfographicCoordinator(capability, discard_stale_merges=False)
    gates = gated(capability, "hero 1", "anatomy 1")
    await coordinator.submit(InfographicRequest(topic="Primeiro"))

    await coordinator.submit(InfographicRequest(topic="Segundo"))
    await wait_for(lambda: coordinator.result.anatomy_image_url is not None)
    for gate in gates.values():
        gate.set()
    await coordinator.merger.drain()

    assert coordinator.result.data.title == "Segundo"
    assert coordinator.result.hero_image_url == HERO_1


async def test_image_failure_leaves_field_unset(capability):
    coordinator = InfographicCoordinator(capability)
    capability.failing.add("generate_image")

    await coordinator.submit(InfographicRequest(topic="Artrose"))
    await coordinator.merger.drain()

    assert coordinator.status is ToolStatus.SUCCEEDED
    assert coordinator.error is None
    assert coordinator.result.hero_image_url is None
    assert coordinator.result.anatomy_image_url is None


async def test_missing_prompts_spawn_nothing(capability):
    async def bare(request):
        return InfographicData(title=request.topic)

    capability.generate_infographic = bare
    coordinator = InfographicCoordinator(capability)

    await coordinator.submit(InfographicRequest(topic="Dor"))

    assert coordinator.merger.pending == set()
    assert capability.count("generate_image") == 0
