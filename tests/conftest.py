# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import pytest
from fakes import TRANSLATION_DIR, FakeHost, MemoryFetcher, MemoryTransport

from packtrans.config import EngineConfig, TranslationModule
from packtrans.coordinator import PackLoadCoordinator
from packtrans.engine import OnDemandEngine
from packtrans.transport import MemorySettingsStore


@pytest.fixture
def config() -> EngineConfig:
    """Return an on-demand configuration with one translation module."""

    return EngineConfig(
        language="zh",
        modules=[TranslationModule(module="demo-translations", lang="zh", dir="compendium")],
        npc_dependency_packs=("pf2e.spells-srd", "pf2e.feats-srd"),
    )


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def fetcher() -> MemoryFetcher:
    return MemoryFetcher()


@pytest.fixture
def transport() -> MemoryTransport:
    return MemoryTransport({TRANSLATION_DIR: []})


@pytest.fixture
def settings() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture
def coordinator(
    config: EngineConfig,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
    settings: MemorySettingsStore,
) -> PackLoadCoordinator:
    """Return a coordinator wired to the in-memory collaborators."""

    return PackLoadCoordinator(config=config, host=host, transport=transport, fetcher=fetcher, settings=settings)


@pytest.fixture
def engine(
    config: EngineConfig,
    host: FakeHost,
    transport: MemoryTransport,
    fetcher: MemoryFetcher,
    settings: MemorySettingsStore,
) -> OnDemandEngine:
    """Return an engine wired to the in-memory collaborators."""

    return OnDemandEngine(config=config, host=host, transport=transport, fetcher=fetcher, settings=settings)
