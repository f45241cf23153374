# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Lazily load, merge, and cache full translation data per pack."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .config import EngineConfig
from .dependencies import ConverterDependencyTracker, mapping_uses_converters
from .discovery import DirectoryIndexer, file_basename, find_pack_metadata
from .interfaces import FileTransport, FragmentFetcher, SettingsStore, TranslationHost
from .merger import FragmentMerger
from .models import Loaded, Loading, LoadStatus, PackMetadata, TranslationRecord
from .preloader import NpcDependencyPreloader
from .state import CoordinatorState
from .types import TRANSLATION_FILES, PackId

LOGGER = logging.getLogger(__name__)


def normalize_pack_id(pack: object) -> PackId | None:
    """Return the pack identifier for ``pack``.

    Args:
        pack: A pack id string, an object exposing a ``collection`` string, or
            an object whose ``metadata.id`` is a string.

    Returns:
        PackId | None: The identifier, or ``None`` when none can be derived.
    """

    if pack is None:
        return None
    if isinstance(pack, str):
        return pack or None
    collection = getattr(pack, "collection", None)
    if isinstance(collection, str):
        return collection
    metadata = getattr(pack, "metadata", None)
    metadata_id = metadata.get("id") if isinstance(metadata, Mapping) else getattr(metadata, "id", None)
    if isinstance(metadata_id, str):
        return metadata_id
    return None


def derived_pack_id(pack_id: PackId, key: str) -> PackId:
    """Return the identifier of the sub-pack materialised under ``key``."""

    return f"{pack_id}-{key}"


class PackLoadCoordinator:
    """Own the load-state cache and guarantee one fragment fetch per pack at a time."""

    def __init__(
        self,
        *,
        config: EngineConfig,
        host: TranslationHost,
        transport: FileTransport,
        fetcher: FragmentFetcher,
        settings: SettingsStore,
        state: CoordinatorState | None = None,
    ) -> None:
        """Wire the indexer, merger, dependency tracker, and preloader around one state object.

        Args:
            config: Engine configuration.
            host: Host capabilities used to build translation artifacts.
            transport: Directory enumeration collaborator.
            fetcher: JSON document fetcher.
            settings: Settings store for persisted file lists.
            state: Optional pre-built state; a fresh one is created otherwise.
        """

        self.config = config
        self.host = host
        self.state = state or CoordinatorState()
        self.indexer = DirectoryIndexer(
            config=config,
            host=host,
            transport=transport,
            settings=settings,
            state=self.state,
        )
        self.merger = FragmentMerger(fetcher)
        self.tracker = ConverterDependencyTracker(host=host, state=self.state, rebuild=self.rebuild_pack)
        self.preloader = NpcDependencyPreloader(
            state=self.state,
            pack_ids=config.npc_dependency_packs,
            load=self._load_dependency,
        )

    def status(self, pack: object) -> LoadStatus:
        """Return the load status of ``pack``."""

        pack_id = normalize_pack_id(pack)
        return self.state.status(pack_id) if pack_id else LoadStatus.NOT_LOADED

    def is_translated(self, pack: object) -> bool:
        """Return ``True`` when ``pack`` has an installed, translated artifact."""

        pack_id = normalize_pack_id(pack)
        if not pack_id:
            return False
        artifact = self.state.packs.get(pack_id)
        return artifact is not None and bool(artifact.translated)

    def translate(self, pack: object, document: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``document`` localized by the pack's artifact, or an unchanged copy."""

        pack_id = normalize_pack_id(pack)
        artifact = self.state.packs.get(pack_id) if pack_id else None
        if artifact is None or not artifact.translated:
            return dict(document)
        return artifact.translate(document)

    async def ensure_loaded(self, pack: object) -> TranslationRecord | None:
        """Load the translations of ``pack`` and of the packs it references.

        Concurrent calls for the same pack share one fetch. Failures of any
        kind leave the pack unloaded and resolve to ``None``.

        Args:
            pack: Pack identifier or pack-like object.

        Returns:
            TranslationRecord | None: The installed record, or ``None`` when the
            pack has no translation.
        """

        return await self._ensure_loaded(normalize_pack_id(pack), frozenset())

    async def _load_dependency(self, pack_id: PackId, visited: frozenset[PackId]) -> TranslationRecord | None:
        return await self._ensure_loaded(pack_id, visited)

    async def _ensure_loaded(self, pack_id: PackId | None, visited: frozenset[PackId]) -> TranslationRecord | None:
        if not pack_id:
            return None
        current = self.state.load_states.get(pack_id)
        if isinstance(current, Loaded):
            return current.record
        if isinstance(current, Loading):
            if visited:
                # A pack owned by another load chain is not awaited from inside a chain.
                LOGGER.debug("%s is already loading on another chain", pack_id)
                return None
            return await asyncio.shield(current.future)

        # Registration happens before the first suspension point.
        task = asyncio.ensure_future(self._load(pack_id, visited | {pack_id}))
        loading = Loading(task)
        self.state.load_states[pack_id] = loading
        task.add_done_callback(lambda _: self._clear_loading(pack_id, loading))
        return await asyncio.shield(task)

    def _clear_loading(self, pack_id: PackId, loading: Loading) -> None:
        if self.state.load_states.get(pack_id) is loading:
            del self.state.load_states[pack_id]

    async def _load(self, pack_id: PackId, visited: frozenset[PackId]) -> TranslationRecord | None:
        try:
            return await self._fetch_and_install(pack_id, visited)
        except Exception:  # pylint: disable=broad-exception-caught -- a failed load leaves the pack untranslated
            LOGGER.exception("loading translations for %s failed", pack_id)
            return None

    async def _fetch_and_install(self, pack_id: PackId, visited: frozenset[PackId]) -> TranslationRecord | None:
        if not self.state.pack_urls:
            files = await self.indexer.list_candidate_files(TRANSLATION_FILES)
            self.state.pack_urls = self.indexer.build_pack_url_index(files)

        urls = self.state.pack_urls.get(pack_id)
        if not urls:
            LOGGER.debug("no translation files for %s", pack_id)
            return None

        record = await self.merger.load_and_merge(urls)
        if record is None:
            return None

        metadata = find_pack_metadata(self.host, pack_id)
        if metadata is None:
            LOGGER.debug("no metadata known for %s", pack_id)
            return None

        if (
            not self.state.npc_loaded
            and self.state.npc_loading is None
            and mapping_uses_converters(record.mapping, self.config.npc_converters)
        ):
            await self.preloader.ensure_preloaded(pack_id, visited=visited)

        self.install(pack_id, metadata, record)

        for reference in record.reference or ():
            if reference in visited:
                LOGGER.debug("skipping reference %s -> %s already on the load chain", pack_id, reference)
                continue
            await self._ensure_loaded(reference, visited)
        return record

    def install(self, pack_id: PackId, metadata: PackMetadata, record: TranslationRecord) -> None:
        """Install ``record`` as the translation of ``pack_id``.

        Args:
            pack_id: Pack being installed.
            metadata: Host metadata of the pack.
            record: Merged translation record; its ``collection`` is set to ``pack_id``.
        """

        record.collection = pack_id
        self.tracker.track(pack_id, metadata, record)
        self._build_artifacts(pack_id, metadata, record)
        self.state.load_states[pack_id] = Loaded(record)
        self.state.upsert_translation(record)
        LOGGER.debug("installed translations for %s", pack_id)

    async def rebuild_pack(self, pack_id: PackId) -> bool:
        """Rebuild the artifacts of an installed pack from its cached record.

        Args:
            pack_id: Pack to rebuild; no fragment is fetched again.

        Returns:
            bool: ``True`` when the pack was rebuilt.
        """

        record = self.state.find_translation(pack_id)
        metadata = find_pack_metadata(self.host, pack_id)
        if record is None or metadata is None:
            return False
        self._build_artifacts(pack_id, metadata, record)
        self.tracker.track(pack_id, metadata, record)
        LOGGER.debug("rebuilt translations for %s", pack_id)
        return True

    def _build_artifacts(self, pack_id: PackId, metadata: PackMetadata, record: TranslationRecord) -> None:
        self.state.packs[pack_id] = self.host.build_translated_pack(metadata, record)

        subpack = self.config.aggregate_subpacks.get(metadata.type)
        if subpack is None or record.entries is None:
            return
        mapping = (record.mapping or {}).get(subpack.key)
        sub_id = derived_pack_id(pack_id, subpack.key)
        for aggregate in record.entry_values():
            items = aggregate.get(subpack.key) if isinstance(aggregate, Mapping) else None
            sub_record = TranslationRecord(
                mapping=dict(mapping) if isinstance(mapping, Mapping) else {},
                entries=items if isinstance(items, (list, dict)) else {},
                collection=sub_id,
            )
            sub_metadata = PackMetadata(
                package_name=metadata.package_name,
                name=f"{metadata.name}-{subpack.key}",
                type=subpack.document_type,
                id=sub_id,
            )
            self.state.packs[sub_id] = self.host.build_translated_pack(sub_metadata, sub_record)
            self.state.load_states[sub_id] = Loaded(sub_record)

    async def install_folder_translations(self, files: Sequence[str]) -> list[PackId]:
        """Install catalog-folder translation files as ``Folder`` packs.

        Args:
            files: Translation file list to pick folder files from.

        Returns:
            list[PackId]: Collections installed by this call.
        """

        installed: list[PackId] = []
        for path in self.indexer.folder_translation_files(files):
            package_name, _, rest = file_basename(path).partition(".")
            name = rest.split(".", 1)[0]
            collection = f"{package_name}.{name}"
            if self.is_translated(collection):
                continue
            record = await self.merger.load_and_merge([path])
            if record is None:
                continue
            metadata = PackMetadata(package_name=package_name, name=name, type="Folder", package_type="system")
            record.collection = collection
            self.state.packs[collection] = self.host.build_translated_pack(metadata, record)
            self.state.load_states[collection] = Loaded(record)
            installed.append(collection)
        return installed


__all__ = ["PackLoadCoordinator", "derived_pack_id", "normalize_pack_id"]
