# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Apply pre-baked labels and titles to catalogs without loading full translations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any, Final

from .config import EngineConfig
from .discovery import DirectoryIndexer
from .errors import PackTranslationError
from .interfaces import FragmentFetcher, SettingsStore, TranslationHost
from .models import LabelIndex, TitleIndex, TitleIndexEntry, title_index_from_mapping, title_index_to_dict
from .state import CoordinatorState
from .types import LABELS_FILENAME, SETTING_LABELS, SETTING_TITLE_INDEX, TITLES_FILENAME, JSONValue, PackId
from .utils import deep_merge, string_mapping

LOGGER = logging.getLogger(__name__)

ORIGINAL_NAME_FIELD: Final[str] = "originalName"


def _non_empty_string(value: object) -> bool:
    return isinstance(value, str) and bool(value)


class LightIndexApplier:
    """Load the light label/title indexes and paint them onto catalog metadata and indexes."""

    def __init__(
        self,
        *,
        config: EngineConfig,
        host: TranslationHost,
        settings: SettingsStore,
        fetcher: FragmentFetcher,
        indexer: DirectoryIndexer,
        state: CoordinatorState,
    ) -> None:
        """Create an applier.

        Args:
            config: Engine configuration; ``namespace`` scopes settings and flags.
            host: Host capabilities exposing pack metadata and permissions.
            settings: Settings store holding the shared indexes.
            fetcher: Fetcher for ``labels.json`` and ``titles.json``.
            indexer: Indexer resolving the translation directories.
            state: Coordinator state receiving the loaded indexes.
        """

        self._config = config
        self._host = host
        self._settings = settings
        self._fetcher = fetcher
        self._indexer = indexer
        self._state = state

    @property
    def labels(self) -> LabelIndex:
        """Return the label index currently in effect."""

        return self._state.labels or {}

    @property
    def title_index(self) -> TitleIndex:
        """Return the title index currently in effect."""

        return self._state.title_index or {}

    async def _fetch_index_files(self, file_name: str) -> list[Mapping[str, JSONValue]]:
        payloads: list[Mapping[str, JSONValue]] = []
        for directory in self._indexer.translation_directories():
            url = f"{directory.rstrip('/')}/{file_name}"
            try:
                payload = await self._fetcher.fetch_json(url)
            except PackTranslationError as exc:
                LOGGER.debug("no light index at %s: %s", url, exc)
                continue
            except Exception:  # pylint: disable=broad-exception-caught -- index files are optional
                LOGGER.debug("unable to fetch %s", url, exc_info=True)
                continue
            if isinstance(payload, Mapping):
                payloads.append(payload)
        return payloads

    async def load_labels(self) -> LabelIndex:
        """Return the label index from settings, refreshed from ``labels.json`` files.

        Files are read when the user may browse or nothing is persisted yet;
        later directories override earlier ones.
        """

        result: LabelIndex = string_mapping(self._settings.get(self._config.namespace, SETTING_LABELS, {}))
        if self._host.can_browse_files() or not result:
            for payload in await self._fetch_index_files(LABELS_FILENAME):
                result.update(string_mapping(payload))
        self._state.labels = result
        return result

    async def load_title_index(self) -> TitleIndex:
        """Return the title index from settings, refreshed from ``titles.json`` files."""

        index = title_index_from_mapping(self._settings.get(self._config.namespace, SETTING_TITLE_INDEX, {}))
        if self._host.can_browse_files() or not index:
            for payload in await self._fetch_index_files(TITLES_FILENAME):
                for pack_id, entry in title_index_from_mapping(payload).items():
                    index.setdefault(pack_id, TitleIndexEntry()).update(entry)
        self._state.title_index = index
        return index

    async def share_labels(self) -> bool:
        """Persist a freshly loaded label index for other clients; GM only."""

        if not self._host.is_gm():
            return False
        labels = await self.load_labels()
        await self._settings.set(self._config.namespace, SETTING_LABELS, dict(labels))
        return True

    async def share_title_index(self) -> bool:
        """Persist a freshly loaded title index for other clients; GM only."""

        if not self._host.is_gm():
            return False
        index = await self.load_title_index()
        await self._settings.set(self._config.namespace, SETTING_TITLE_INDEX, title_index_to_dict(index))
        return True

    def apply_labels(self, labels: Mapping[PackId, str] | None = None) -> list[PackId]:
        """Rewrite the display label of every known catalog present in ``labels``.

        Args:
            labels: Label index; the loaded one when omitted.

        Returns:
            list[PackId]: Catalogs whose label was rewritten.
        """

        source = labels if labels is not None else self.labels
        if not isinstance(source, Mapping):
            return []
        relabeled: list[PackId] = []
        for metadata in self._host.pack_metadata():
            collection = self._host.get_collection(metadata)
            label = source.get(collection)
            if label:
                metadata.label = label
                relabeled.append(collection)
        return relabeled

    def apply_title_index(
        self,
        catalog_index: Iterable[Any] | Mapping[str, Any] | None,
        pack_id: PackId,
        *,
        title_index: Mapping[PackId, TitleIndexEntry] | None = None,
    ) -> Iterable[Any] | Mapping[str, Any] | None:
        """Translate entry names of a catalog's lightweight index in place.

        Entries may be given as mappings, as ``(key, entry)`` pairs, or as a
        mapping of key to entry. Lookup keys are tried in order: the supplied
        key, ``_id``, ``originalName``, then ``name``.

        Args:
            catalog_index: Index entries to translate.
            pack_id: Catalog the entries belong to.
            title_index: Title index to use; the loaded one when omitted.

        Returns:
            The same ``catalog_index`` object.
        """

        source = title_index if title_index is not None else self.title_index
        entry = source.get(pack_id)
        if entry is None or not entry.titles or not catalog_index:
            return catalog_index
        titles = entry.titles

        rows = catalog_index.items() if isinstance(catalog_index, Mapping) else catalog_index
        for row in rows:
            if isinstance(row, (tuple, list)) and len(row) == 2:
                self._apply_entry(titles, row[1], row[0])
            else:
                self._apply_entry(titles, row, None)
        return catalog_index

    def _apply_entry(self, titles: Mapping[str, str], entry: object, key: object) -> None:
        if not isinstance(entry, MutableMapping) or not entry:
            return
        flags = entry.get("flags")
        own_flags = flags.get(self._config.namespace) if isinstance(flags, Mapping) else None
        if entry.get("translated") or (isinstance(own_flags, Mapping) and own_flags.get("translated")):
            return

        candidates = [key, entry.get("_id"), entry.get(ORIGINAL_NAME_FIELD), entry.get("name")]
        translated_name: str | None = None
        for candidate in candidates:
            if not _non_empty_string(candidate):
                continue
            value = titles.get(candidate)
            if _non_empty_string(value):
                translated_name = value
                break
        if translated_name is None:
            return

        if entry.get(ORIGINAL_NAME_FIELD) is None:
            entry[ORIGINAL_NAME_FIELD] = entry.get("name")
        entry["name"] = translated_name
        entry["translated"] = True
        entry["hasTranslation"] = True
        entry["flags"] = deep_merge(
            flags if isinstance(flags, Mapping) else {},
            {
                self._config.namespace: {
                    "translated": True,
                    "hasTranslation": True,
                    ORIGINAL_NAME_FIELD: entry[ORIGINAL_NAME_FIELD],
                },
            },
        )

    def apply_folders(
        self,
        pack_id: PackId,
        folders: Iterable[Any],
        *,
        title_index: Mapping[PackId, TitleIndexEntry] | None = None,
    ) -> int:
        """Rename folders whose exact original name has a translation.

        Args:
            pack_id: Catalog owning ``folders``.
            folders: Objects with a writable ``name`` attribute, or mappings with a ``name`` key.
            title_index: Title index to use; the loaded one when omitted.

        Returns:
            int: Number of folders renamed.
        """

        source = title_index if title_index is not None else self.title_index
        entry = source.get(pack_id)
        if entry is None or not entry.folders:
            return 0
        renamed = 0
        for folder in folders:
            if isinstance(folder, MutableMapping):
                translated = entry.folders.get(folder.get("name"))
                if translated:
                    folder["name"] = translated
                    renamed += 1
                continue
            translated = entry.folders.get(getattr(folder, "name", None))
            if translated:
                folder.name = translated
                renamed += 1
        return renamed


__all__ = ["LightIndexApplier", "ORIGINAL_NAME_FIELD"]
