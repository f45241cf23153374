# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for translation directory discovery and pack URL indexing."""

from __future__ import annotations

import pytest
from fakes import TRANSLATION_DIR, FakeHost, MemoryTransport

from packtrans.config import EngineConfig, TranslationModule
from packtrans.discovery import DirectoryIndexer, fragment_file_name
from packtrans.state import CoordinatorState
from packtrans.transport import MemorySettingsStore
from packtrans.types import MAPPING_FILES, TRANSLATION_FILES


def _indexer(
    config: EngineConfig,
    host: FakeHost,
    transport: MemoryTransport,
    settings: MemorySettingsStore,
) -> DirectoryIndexer:
    return DirectoryIndexer(config=config, host=host, transport=transport, settings=settings, state=CoordinatorState())


def test_translation_directories_combine_modules_setting_and_system() -> None:
    """Module, configured and system directories all contribute for the active language."""

    config = EngineConfig(
        language="zh",
        system_id="pf2e",
        system_translations_dir="lang/packs",
        modules=[
            TranslationModule(module="zh-pack", lang="zh", dir="compendium"),
            TranslationModule(module="fr-pack", lang="fr", dir="compendium"),
        ],
    )
    settings = MemorySettingsStore({("babele", "directory"): "worlds/custom "})
    indexer = _indexer(config, FakeHost(), MemoryTransport(), settings)

    assert indexer.translation_directories() == [
        "modules/zh-pack/compendium",
        "worlds/custom/zh",
        "systems/pf2e/lang/packs/zh",
    ]
    assert indexer.mapping_directories() == [
        "modules/zh-pack/compendium",
        "modules/fr-pack/compendium",
        "worlds/custom",
        "systems/pf2e/lang/packs",
    ]


@pytest.mark.asyncio
async def test_list_candidate_files_is_cached_after_first_listing(
    config: EngineConfig,
    host: FakeHost,
    settings: MemorySettingsStore,
) -> None:
    """The directory listing is enumerated once per file kind."""

    transport = MemoryTransport({TRANSLATION_DIR: ["pf2e.spells-srd.json"]})
    indexer = _indexer(config, host, transport, settings)

    first = await indexer.list_candidate_files(TRANSLATION_FILES)
    second = await indexer.list_candidate_files(TRANSLATION_FILES)

    assert first == [f"{TRANSLATION_DIR}/pf2e.spells-srd.json"]
    assert second is first
    assert transport.calls[TRANSLATION_DIR] == 1


@pytest.mark.asyncio
async def test_list_candidate_files_skips_directories_that_fail(host: FakeHost, settings: MemorySettingsStore) -> None:
    """Enumeration errors for one directory leave the others intact."""

    config = EngineConfig(
        language="zh",
        modules=[
            TranslationModule(module="missing", lang="zh", dir="compendium"),
            TranslationModule(module="present", lang="zh", dir="compendium"),
        ],
    )
    transport = MemoryTransport({"modules/present/compendium": ["a.b.json"]})
    indexer = _indexer(config, host, transport, settings)

    assert await indexer.list_candidate_files(TRANSLATION_FILES) == ["modules/present/compendium/a.b.json"]


@pytest.mark.asyncio
async def test_list_candidate_files_filters_mapping_files(
    config: EngineConfig,
    host: FakeHost,
    settings: MemorySettingsStore,
) -> None:
    """Mapping listings only keep ``mapping.json`` files."""

    transport = MemoryTransport({TRANSLATION_DIR: ["mapping.json", "pf2e.spells-srd.json", "other-mapping.json"]})
    indexer = _indexer(config, host, transport, settings)

    assert await indexer.list_candidate_files(MAPPING_FILES) == [f"{TRANSLATION_DIR}/mapping.json"]


@pytest.mark.asyncio
async def test_list_candidate_files_falls_back_to_persisted_list_without_browse(config: EngineConfig) -> None:
    """Users who cannot browse read the persisted list, which is not cached."""

    host = FakeHost(browse=False)
    transport = MemoryTransport({TRANSLATION_DIR: ["ignored.json"]})
    settings = MemorySettingsStore({("babele", "translationFiles"): ["a/pf2e.spells-srd.json", 42]})
    indexer = _indexer(config, host, transport, settings)

    files = await indexer.list_candidate_files(TRANSLATION_FILES)
    await settings.set("babele", "translationFiles", ["b/pf2e.spells-srd.json"])

    assert files == ["a/pf2e.spells-srd.json"]
    assert await indexer.list_candidate_files(TRANSLATION_FILES) == ["b/pf2e.spells-srd.json"]
    assert not transport.calls


def test_build_pack_url_index_matches_encoded_file_names(
    config: EngineConfig,
    host: FakeHost,
    settings: MemorySettingsStore,
) -> None:
    """Only supported packs with matching files are indexed, in discovery order."""

    host.add_pack("pf2e.spells-srd")
    host.add_pack("world.my spells")
    host.add_pack("pf2e.feats-srd")
    host.add_pack("pf2e.hidden")
    host.unsupported.add("pf2e.hidden")
    indexer = _indexer(config, host, MemoryTransport(), settings)
    files = [
        "modules/a/pf2e.spells-srd.json",
        "modules/a/world.my%20spells.json",
        "modules/b/pf2e.spells-srd.json",
        "modules/b/pf2e.hidden.json",
    ]

    index = indexer.build_pack_url_index(files)

    assert index == {
        "pf2e.spells-srd": ["modules/a/pf2e.spells-srd.json", "modules/b/pf2e.spells-srd.json"],
        "world.my spells": ["modules/a/world.my%20spells.json"],
    }


def test_fragment_file_name_keeps_uri_reserved_characters() -> None:
    """File names are encoded like a URI: spaces escape, punctuation survives."""

    assert fragment_file_name("pf2e.spells-srd") == "pf2e.spells-srd.json"
    assert fragment_file_name("world.my spells (new)") == "world.my%20spells%20(new).json"
