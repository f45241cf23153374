# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Boot sequence and host hooks for on-demand pack translation loading."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from .config import EngineConfig, LoadingMode
from .coordinator import PackLoadCoordinator, normalize_pack_id
from .dependencies import ConverterDependencyTracker
from .discovery import DirectoryIndexer
from .interfaces import FileTransport, FragmentFetcher, SettingsStore, TranslatedPack, TranslationHost
from .light_index import LightIndexApplier
from .models import ItemTranslationReport, TranslationRecord
from .state import CoordinatorState
from .types import MAPPING_FILES, SETTING_LOADING_MODE, TRANSLATION_FILES, PackId
from .utils import dedupe

LOGGER = logging.getLogger(__name__)

COMPENDIUM_UUID_PREFIX = "Compendium"


def parse_compendium_uuid(uuid: object) -> PackId | None:
    """Return the pack identifier embedded in a ``Compendium.<pkg>.<name>...`` uuid."""

    if not isinstance(uuid, str):
        return None
    parts = uuid.split(".")
    if len(parts) < 4 or parts[0] != COMPENDIUM_UUID_PREFIX:
        return None
    return f"{parts[1]}.{parts[2]}"


def source_pack_id(item: Mapping[str, Any]) -> PackId | None:
    """Return the pack an owned item was imported from, if recorded."""

    flags = item.get("flags")
    core = flags.get("core") if isinstance(flags, Mapping) else None
    source = core.get("sourceId") if isinstance(core, Mapping) else None
    if not source:
        stats = item.get("_stats")
        source = stats.get("compendiumSource") if isinstance(stats, Mapping) else None
    return parse_compendium_uuid(source)


class OnDemandEngine:
    """Entry point wiring the coordinator and light index to host events.

    Every hook is a pass-through when the effective loading mode is
    :attr:`LoadingMode.FULL`.
    """

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
        """Create the engine and its components around one state object.

        Args:
            config: Engine configuration.
            host: Host capabilities.
            transport: Directory enumeration collaborator.
            fetcher: JSON document fetcher.
            settings: Settings store.
            state: Optional pre-built coordinator state.
        """

        self.config = config
        self.host = host
        self.settings = settings
        self.fetcher = fetcher
        self.coordinator = PackLoadCoordinator(
            config=config,
            host=host,
            transport=transport,
            fetcher=fetcher,
            settings=settings,
            state=state,
        )
        self.light_index = LightIndexApplier(
            config=config,
            host=host,
            settings=settings,
            fetcher=fetcher,
            indexer=self.coordinator.indexer,
            state=self.coordinator.state,
        )
        self._init_task: asyncio.Future[None] | None = None

    @property
    def state(self) -> CoordinatorState:
        """Return the coordinator-owned state."""

        return self.coordinator.state

    @property
    def indexer(self) -> DirectoryIndexer:
        """Return the directory indexer."""

        return self.coordinator.indexer

    @property
    def tracker(self) -> ConverterDependencyTracker:
        """Return the converter dependency tracker."""

        return self.coordinator.tracker

    @property
    def initialized(self) -> bool:
        """Return ``True`` once the on-demand boot sequence completed."""

        return self.state.initialized

    def is_on_demand(self) -> bool:
        """Return ``True`` when the effective loading mode is on-demand."""

        try:
            mode = self.settings.get(self.config.namespace, SETTING_LOADING_MODE, None)
        except Exception:  # pylint: disable=broad-exception-caught -- unreadable settings mean full mode
            LOGGER.debug("unable to read loading mode", exc_info=True)
            return False
        if mode is None:
            mode = self.config.loading_mode
        return str(getattr(mode, "value", mode)) == LoadingMode.ONDEMAND.value

    async def init(self) -> None:
        """Run the on-demand boot sequence once; concurrent callers share it."""

        if not self.is_on_demand() or self.state.initialized:
            return
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._init_on_demand())
        try:
            await asyncio.shield(self._init_task)
        finally:
            if self._init_task is not None and self._init_task.done():
                self._init_task = None

    async def _init_on_demand(self) -> None:
        await self.load_global_mappings()

        files = await self.indexer.list_candidate_files(TRANSLATION_FILES)
        self.state.pack_urls = self.indexer.build_pack_url_index(files)

        await self.coordinator.install_folder_translations(files)

        try:
            labels = await self.light_index.load_labels()
            self.light_index.apply_labels(labels)
        except Exception:  # pylint: disable=broad-exception-caught -- labels are cosmetic
            LOGGER.warning("unable to apply translated labels", exc_info=True)

        try:
            await self.light_index.load_title_index()
        except Exception:  # pylint: disable=broad-exception-caught -- titles are cosmetic
            LOGGER.warning("unable to load the title index", exc_info=True)
            self.state.title_index = {}

        self.state.initialized = True
        LOGGER.info(
            "on-demand translations ready: %d packs indexed, %d labels",
            len(self.state.pack_urls),
            len(self.state.labels or {}),
        )

    async def load_global_mappings(self) -> int:
        """Register every ``mapping.json`` found in the mapping directories, once.

        Returns:
            int: Number of mappings registered by this call.
        """

        if self.state.global_mappings_loaded:
            return 0
        files = await self.indexer.list_candidate_files(MAPPING_FILES)
        payloads = await asyncio.gather(*(self._fetch_optional(url) for url in files))
        registered = 0
        for payload in payloads:
            if isinstance(payload, Mapping):
                self.register_mapping(payload)
                registered += 1
        self.state.global_mappings_loaded = True
        return registered

    async def _fetch_optional(self, url: str) -> Any:
        try:
            return await self.fetcher.fetch_json(url)
        except Exception:  # pylint: disable=broad-exception-caught -- a missing mapping contributes nothing
            LOGGER.debug("unable to fetch %s", url, exc_info=True)
            return None

    def register_converters(self, converters: Mapping[str, Callable[..., Any]]) -> list[PackId]:
        """Register converters with the host and schedule rebuilds of packs waiting on them.

        Returns:
            list[PackId]: Packs whose rebuild was scheduled.
        """

        self.host.register_converters(converters)
        if not self.is_on_demand() or not converters:
            return []
        return self.tracker.on_converter_registered(list(converters))

    def register_mapping(self, mapping: Mapping[str, Any]) -> list[PackId]:
        """Register a mapping with the host and schedule rebuilds of packs of the mapped types.

        Returns:
            list[PackId]: Packs whose rebuild was scheduled.
        """

        self.host.register_mapping(mapping)
        if not self.is_on_demand() or not isinstance(mapping, Mapping):
            return []
        return self.tracker.on_mapping_registered(mapping.keys())

    async def ensure_loaded(self, pack: object) -> TranslationRecord | None:
        """Load the full translation of ``pack``; see :meth:`PackLoadCoordinator.ensure_loaded`."""

        return await self.coordinator.ensure_loaded(pack)

    def is_translated(self, pack: object) -> bool:
        """Return ``True`` when ``pack`` has an installed translation."""

        return self.coordinator.is_translated(pack)

    def translate(self, pack: object, document: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``document`` localized with the translation of ``pack``."""

        return self.coordinator.translate(pack, document)

    async def on_documents_fetched(
        self,
        pack: object,
        documents: list[Any],
        *,
        index: bool = False,
    ) -> list[Any]:
        """Translate documents the host just read from a catalog.

        Index requests only receive light title translation; document requests
        load the full pack translation first.

        Args:
            pack: Catalog the documents come from.
            documents: Documents or index entries as read by the host.
            index: ``True`` when the host requested the lightweight index.

        Returns:
            list[Any]: Translated documents, or ``documents`` untouched.
        """

        if not self.is_on_demand():
            return documents
        if not self.state.initialized:
            try:
                await self.init()
            except Exception:  # pylint: disable=broad-exception-caught -- the host keeps its untranslated documents
                LOGGER.warning("on-demand initialisation failed", exc_info=True)
                return documents

        pack_id = normalize_pack_id(pack)
        if not pack_id:
            return documents

        if index:
            try:
                self.light_index.apply_title_index(documents, pack_id)
            except Exception:  # pylint: disable=broad-exception-caught -- an unreadable index keeps its names
                LOGGER.warning("applying titles to the index of %s failed", pack_id, exc_info=True)
            return documents

        await self.ensure_loaded(pack_id)
        if not self.is_translated(pack_id):
            return documents
        try:
            return [self.translate(pack_id, document) for document in documents]
        except Exception:  # pylint: disable=broad-exception-caught -- a converter failure keeps the originals
            LOGGER.warning("translating documents of %s failed", pack_id, exc_info=True)
            return documents

    def on_tree_initialized(self, pack: object, index: Iterable[Any], folders: Iterable[Any] = ()) -> None:
        """Apply light titles and folder names when the host builds a catalog tree."""

        if not self.is_on_demand():
            return
        pack_id = normalize_pack_id(pack)
        if not pack_id:
            return
        try:
            self.light_index.apply_title_index(index, pack_id)
            self.light_index.apply_folders(pack_id, folders)
        except Exception:  # pylint: disable=broad-exception-caught -- the tree is built with its original names
            LOGGER.warning("translating the tree of %s failed", pack_id, exc_info=True)

    def translate_pack_folders(self, pack: object, folders: Iterable[Any]) -> int:
        """Rename the folders of ``pack`` from the title index.

        Returns:
            int: Number of folders renamed.
        """

        if not self.is_on_demand():
            return 0
        pack_id = normalize_pack_id(pack)
        if not pack_id:
            return 0
        try:
            return self.light_index.apply_folders(pack_id, folders)
        except Exception:  # pylint: disable=broad-exception-caught -- folders keep their original names
            LOGGER.warning("translating the folders of %s failed", pack_id, exc_info=True)
            return 0

    async def on_ready(self) -> None:
        """Share the light indexes with other clients and relabel catalogs."""

        if not self.is_on_demand():
            return
        try:
            await self.light_index.share_labels()
            await self.light_index.share_title_index()
        except Exception:  # pylint: disable=broad-exception-caught -- sharing is best effort
            LOGGER.warning("unable to share light indexes", exc_info=True)
        try:
            labels = self.state.labels if self.state.labels is not None else await self.light_index.load_labels()
            self.light_index.apply_labels(labels)
        except Exception:  # pylint: disable=broad-exception-caught -- labels are cosmetic
            LOGGER.warning("unable to apply translated labels", exc_info=True)

    async def translate_owned_items(self, items: Sequence[Mapping[str, Any]]) -> ItemTranslationReport:
        """Translate items embedded in another document using their source packs.

        Args:
            items: Item documents; each may record its source pack.

        Returns:
            ItemTranslationReport: Updates to apply plus per-item outcome lines.
        """

        report = ItemTranslationReport()
        pack_ids = dedupe(pack_id for pack_id in (source_pack_id(item) for item in items) if pack_id)
        for pack_id in pack_ids:
            await self.ensure_loaded(pack_id)

        for item in items:
            data = dict(item)
            name = str(data.get("name", ""))
            artifact = self._find_artifact(data)
            if artifact is None:
                report.log.append(f"{name.ljust(61, '.')}not found")
                report.untranslated += 1
                continue
            translated = artifact.translate(data)
            translated["_id"] = data.get("_id")
            report.updates.append(translated)
            report.log.append(f"{name.ljust(68, '.')}ok")
            report.translated += 1

        report.log.append(
            f"Done. tot items: {report.total}, tot translated: {report.translated}, "
            f"tot untranslated: {report.untranslated}",
        )
        return report

    def _find_artifact(self, data: Mapping[str, Any]) -> TranslatedPack | None:
        pack_id = source_pack_id(data)
        artifact = self.state.packs.get(pack_id) if pack_id else None
        if artifact is not None and artifact.translated and artifact.has_translation(data):
            return artifact
        for candidate in self.state.packs.values():
            if candidate.translated and candidate.has_translation(data):
                return candidate
        return None


__all__ = ["OnDemandEngine", "parse_compendium_uuid", "source_pack_id"]
