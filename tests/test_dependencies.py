# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for converter dependency tracking and selective rebuilds."""

from __future__ import annotations

import logging

import pytest
from fakes import FakeHost, MemoryFetcher, MemoryTransport

from packtrans.coordinator import PackLoadCoordinator
from packtrans.dependencies import RebuildQueue, mapping_uses_converters

SPELLS = "pf2e.spells-srd"
BESTIARY = "pf2e.pathfinder-bestiary"


def _noop(*_: object) -> None:
    return None


def test_mapping_uses_converters_scans_nested_values() -> None:
    """Converter names are found at any depth of a mapping."""

    mapping = {"items": {"nested": {"converter": "npc-item-translation"}}, "name": "name"}

    assert mapping_uses_converters(mapping, {"npc-item-translation"})
    assert not mapping_uses_converters(mapping, {"npc-portrait-path"})
    assert not mapping_uses_converters(None, {"npc-item-translation"})


@pytest.mark.asyncio
async def test_registering_missing_converter_rebuilds_only_waiting_packs(
    coordinator: PackLoadCoordinator,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
) -> None:
    """Only packs that lacked the new converter are rebuilt, without refetching."""

    host.add_pack(SPELLS)
    host.add_pack("pf2e.feats-srd")
    transport.add(
        {
            f"{SPELLS}.json": {
                "mapping": {"desc": {"path": "system.description.value", "converter": "translateDesc"}},
                "entries": {"Fireball": {"name": "火球术"}},
            },
            "pf2e.feats-srd.json": {"entries": {"Power Attack": {"name": "猛力攻击"}}},
        },
        fetcher,
    )
    await coordinator.ensure_loaded(SPELLS)
    await coordinator.ensure_loaded("pf2e.feats-srd")
    assert coordinator.state.missing_converters == {SPELLS: {"translateDesc"}}

    host.register_converters({"translateDesc": _noop})
    scheduled = coordinator.tracker.on_converter_registered(["translateDesc"])
    await coordinator.tracker.queue.drain()

    assert scheduled == [SPELLS]
    assert host.builds[SPELLS] == 2
    assert host.builds["pf2e.feats-srd"] == 1
    assert "translateDesc" in coordinator.state.packs[SPELLS].converters
    assert coordinator.state.missing_converters == {}
    assert sum(fetcher.calls.values()) == 2


@pytest.mark.asyncio
async def test_unrelated_converter_schedules_nothing(
    coordinator: PackLoadCoordinator,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
) -> None:
    """A converter no pack is missing leaves every artifact alone."""

    host.add_pack(SPELLS)
    transport.add({f"{SPELLS}.json": {"mapping": {"desc": {"converter": "a"}}, "entries": {"x": "y"}}}, fetcher)
    await coordinator.ensure_loaded(SPELLS)

    assert coordinator.tracker.on_converter_registered(["b"]) == []
    assert coordinator.tracker.on_converter_registered([]) == []
    assert coordinator.tracker.queue.pending == 0


@pytest.mark.asyncio
async def test_missing_converters_consider_host_default_mapping(
    coordinator: PackLoadCoordinator,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
) -> None:
    """Converters named by the default mapping of the pack's type are tracked too."""

    host.mappings["Actor"] = {"items": {"converter": "npc-item-translation"}}
    host.add_pack(BESTIARY, document_type="Actor")
    transport.add({f"{BESTIARY}.json": {"entries": {"Goblin": {"name": "哥布林"}}}}, fetcher)
    await coordinator.ensure_loaded(BESTIARY)

    assert coordinator.state.missing_converters[BESTIARY] == {"npc-item-translation"}


@pytest.mark.asyncio
async def test_registering_mapping_rebuilds_packs_of_that_type(
    coordinator: PackLoadCoordinator,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
) -> None:
    """A mapping for a document type rebuilds installed packs of that type only."""

    host.add_pack(SPELLS)
    host.add_pack(BESTIARY, document_type="Actor")
    transport.add(
        {
            f"{SPELLS}.json": {"entries": {"Fireball": "火球术"}},
            f"{BESTIARY}.json": {"entries": {"Goblin": "哥布林"}},
        },
        fetcher,
    )
    await coordinator.ensure_loaded(SPELLS)
    await coordinator.ensure_loaded(BESTIARY)

    mapping = {"Actor": {"hp": "system.attributes.hp"}}
    host.register_mapping(mapping)
    scheduled = coordinator.tracker.on_mapping_registered(mapping)
    await coordinator.tracker.queue.drain()

    assert scheduled == [BESTIARY]
    assert coordinator.state.packs[BESTIARY].mapping == {"hp": "system.attributes.hp"}
    assert host.builds == {SPELLS: 1, BESTIARY: 2}


@pytest.mark.asyncio
async def test_rebuild_queue_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    """A failing rebuild job is logged and does not escape the queue."""

    queue = RebuildQueue()

    async def failing() -> None:
        raise RuntimeError("converter exploded")

    with caplog.at_level(logging.ERROR, logger="packtrans.dependencies"):
        queue.submit("pf2e.broken", failing)
        await queue.drain()

    assert queue.pending == 0
    assert "pf2e.broken" in caplog.text


def test_rebuild_queue_runs_inline_without_a_loop() -> None:
    """Without a running loop the job completes before ``submit`` returns."""

    queue = RebuildQueue()
    ran: list[str] = []

    async def job() -> None:
        ran.append("done")

    queue.submit("pf2e.inline", job)

    assert ran == ["done"]
