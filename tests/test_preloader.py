# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the once-per-process NPC dependency preload."""

from __future__ import annotations

import asyncio

import pytest
from fakes import TRANSLATION_DIR, FakeHost, MemoryFetcher, MemoryTransport

from packtrans.coordinator import PackLoadCoordinator
from packtrans.models import LoadStatus
from packtrans.preloader import NpcDependencyPreloader
from packtrans.state import CoordinatorState

BESTIARY = "pf2e.pathfinder-bestiary"
NPC_MAPPING = {"items": {"path": "items", "converter": "npc-item-translation"}}


@pytest.mark.asyncio
async def test_concurrent_preloads_run_the_dependency_list_once() -> None:
    """Callers arriving while a preload runs wait for it instead of starting another."""

    state = CoordinatorState()
    loaded: list[str] = []
    release = asyncio.Event()

    async def load(pack_id: str, visited: frozenset[str]) -> None:
        await release.wait()
        loaded.append(pack_id)

    preloader = NpcDependencyPreloader(state=state, pack_ids=["pf2e.a", "pf2e.b"], load=load)
    first = asyncio.ensure_future(preloader.ensure_preloaded())
    second = asyncio.ensure_future(preloader.ensure_preloaded())
    await asyncio.sleep(0)
    release.set()
    await asyncio.gather(first, second)
    await preloader.ensure_preloaded()

    assert loaded == ["pf2e.a", "pf2e.b"]
    assert preloader.preloaded
    assert state.npc_loading is None


@pytest.mark.asyncio
async def test_preload_skips_excluded_pack_and_tolerates_failures() -> None:
    """One failing dependency does not stop the rest, and the caller's pack is skipped."""

    state = CoordinatorState()
    seen: list[str] = []

    async def load(pack_id: str, visited: frozenset[str]) -> None:
        seen.append(pack_id)
        if pack_id == "pf2e.a":
            raise RuntimeError("missing")

    preloader = NpcDependencyPreloader(state=state, pack_ids=["pf2e.a", "pf2e.self", "pf2e.b"], load=load)
    await preloader.ensure_preloaded("pf2e.self")

    assert seen == ["pf2e.a", "pf2e.b"]
    assert state.npc_loaded


@pytest.mark.asyncio
async def test_npc_mapping_triggers_dependency_preload(
    coordinator: PackLoadCoordinator,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
) -> None:
    """Loading a pack whose mapping uses an NPC converter loads the dependency packs first."""

    host.add_pack(BESTIARY, document_type="Actor")
    host.add_pack("pf2e.spells-srd")
    host.add_pack("pf2e.feats-srd")
    transport.add(
        {
            f"{BESTIARY}.json": {"mapping": NPC_MAPPING, "entries": {"Goblin": {"name": "哥布林"}}},
            "pf2e.spells-srd.json": {"entries": {"Fireball": "火球术"}},
            "pf2e.feats-srd.json": {"entries": {"Power Attack": "猛力攻击"}},
        },
        fetcher,
    )

    await coordinator.ensure_loaded(BESTIARY)
    await coordinator.ensure_loaded("pf2e.other")

    assert coordinator.state.npc_loaded
    assert coordinator.status("pf2e.spells-srd") is LoadStatus.LOADED
    assert coordinator.status("pf2e.feats-srd") is LoadStatus.LOADED
    assert fetcher.calls[f"{TRANSLATION_DIR}/pf2e.spells-srd.json"] == 1


@pytest.mark.asyncio
async def test_dependency_referencing_the_loading_pack_does_not_deadlock(
    coordinator: PackLoadCoordinator,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
) -> None:
    """A dependency pack that references the pack being loaded completes."""

    host.add_pack(BESTIARY, document_type="Actor")
    host.add_pack("pf2e.spells-srd")
    transport.add(
        {
            f"{BESTIARY}.json": {"mapping": NPC_MAPPING, "entries": {"Goblin": "哥布林"}},
            "pf2e.spells-srd.json": {"entries": {"Fireball": "火球术"}, "reference": BESTIARY},
        },
        fetcher,
    )

    record = await asyncio.wait_for(coordinator.ensure_loaded(BESTIARY), timeout=5)

    assert record is not None
    assert coordinator.status(BESTIARY) is LoadStatus.LOADED
    assert coordinator.status("pf2e.spells-srd") is LoadStatus.LOADED


@pytest.mark.asyncio
async def test_concurrent_chains_through_the_preload_both_complete(
    coordinator: PackLoadCoordinator,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
) -> None:
    """A dependency pack loading on its own chain neither blocks nor is blocked by an NPC pack it references."""

    spells_url = f"{TRANSLATION_DIR}/pf2e.spells-srd.json"
    host.add_pack(BESTIARY, document_type="Actor")
    host.add_pack("pf2e.spells-srd")
    transport.add(
        {
            f"{BESTIARY}.json": {"mapping": NPC_MAPPING, "entries": {"Goblin": "哥布林"}},
            "pf2e.spells-srd.json": {"entries": {"Fireball": "火球术"}, "reference": BESTIARY},
        },
        fetcher,
    )
    fetcher.gates[spells_url] = asyncio.Event()

    spells = asyncio.ensure_future(coordinator.ensure_loaded("pf2e.spells-srd"))
    while not fetcher.calls[spells_url]:
        await asyncio.sleep(0)
    bestiary = await asyncio.wait_for(coordinator.ensure_loaded(BESTIARY), timeout=5)

    assert bestiary is not None
    assert coordinator.status(BESTIARY) is LoadStatus.LOADED
    assert coordinator.status("pf2e.spells-srd") is LoadStatus.LOADING

    fetcher.gates[spells_url].set()
    record = await asyncio.wait_for(spells, timeout=5)

    assert record is not None
    assert coordinator.status("pf2e.spells-srd") is LoadStatus.LOADED
    assert fetcher.calls[spells_url] == 1
