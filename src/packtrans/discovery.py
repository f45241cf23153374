# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve translation directories and index the fragment files they hold."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Final
from urllib.parse import quote

from .config import EngineConfig
from .interfaces import FileTransport, SettingsStore, TranslationHost
from .models import PackMetadata
from .state import CoordinatorState
from .types import (
    MAPPING_FILENAME,
    MAPPING_FILES,
    SETTING_DIRECTORY,
    SETTING_MAPPING_FILES,
    SETTING_TRANSLATION_FILES,
    TRANSLATION_FILES,
    FileKind,
    PackId,
)

LOGGER = logging.getLogger(__name__)

# Characters ``encodeURI`` leaves untouched in addition to alphanumerics.
_URI_SAFE: Final[str] = ";,/?:@&=+$-_.!~*'()#"


def file_basename(path: str) -> str:
    """Return the final component of ``path`` for both separators."""

    return path.split("/")[-1].split("\\")[-1]


def fragment_file_name(pack_id: PackId) -> str:
    """Return the URI-encoded fragment file name for ``pack_id``."""

    return quote(f"{pack_id}.json", safe=_URI_SAFE)


class DirectoryIndexer:
    """List candidate translation and mapping files once and index them per pack."""

    def __init__(
        self,
        *,
        config: EngineConfig,
        host: TranslationHost,
        transport: FileTransport,
        settings: SettingsStore,
        state: CoordinatorState,
    ) -> None:
        """Create an indexer sharing the coordinator-owned ``state``.

        Args:
            config: Engine configuration providing language and directories.
            host: Host capabilities (permissions and pack metadata).
            transport: Directory enumeration collaborator.
            settings: Settings store holding persisted file lists.
            state: Coordinator state caching the file lists.
        """

        self._config = config
        self._host = host
        self._transport = transport
        self._settings = settings
        self._state = state

    def _base_directories(self) -> list[str]:
        return [f"modules/{module.module}/{module.dir}" for module in self._config.modules]

    def _configured_directory(self) -> str:
        value = self._settings.get(self._config.namespace, SETTING_DIRECTORY, None)
        directory = value if isinstance(value, str) else self._config.directory
        return directory.strip()

    def _system_directory(self) -> str | None:
        if not self._config.system_translations_dir:
            return None
        return f"systems/{self._config.system_id}/{self._config.system_translations_dir}"

    def translation_directories(self) -> list[str]:
        """Return the directories that may hold translations for the active language."""

        lang = self._config.language
        dirs = [
            f"modules/{module.module}/{module.dir}" for module in self._config.modules if module.lang == lang
        ]
        directory = self._configured_directory()
        if directory:
            dirs.append(f"{directory}/{lang}")
        system_dir = self._system_directory()
        if system_dir:
            dirs.append(f"{system_dir}/{lang}")
        return dirs

    def mapping_directories(self) -> list[str]:
        """Return the language-independent directories that may hold ``mapping.json``."""

        dirs = self._base_directories()
        directory = self._configured_directory()
        if directory:
            dirs.append(directory)
        system_dir = self._system_directory()
        if system_dir:
            dirs.append(system_dir)
        return dirs

    async def list_candidate_files(self, kind: FileKind = TRANSLATION_FILES) -> list[str]:
        """Return every file that may hold ``kind`` assets, cached after first success.

        Users without browse permission receive the list persisted in settings
        instead; that fallback is not cached.

        Args:
            kind: ``"translation"`` or ``"mapping"``.

        Returns:
            list[str]: Flat list of file paths.
        """

        cached = self._state.file_lists.get(kind)
        if cached is not None:
            return cached

        if not self._host.can_browse_files():
            key = SETTING_MAPPING_FILES if kind == MAPPING_FILES else SETTING_TRANSLATION_FILES
            persisted = self._settings.get(self._config.namespace, key, None)
            return [item for item in persisted or [] if isinstance(item, str)]

        dirs = self.mapping_directories() if kind == MAPPING_FILES else self.translation_directories()
        files: list[str] = []
        for directory in dirs:
            try:
                listed = await self._transport.browse(directory)
            except Exception:  # pylint: disable=broad-exception-caught -- enumeration is fail-soft
                LOGGER.debug("unable to browse %s", directory, exc_info=True)
                continue
            for path in listed:
                if kind == MAPPING_FILES and not (isinstance(path, str) and path.endswith(f"/{MAPPING_FILENAME}")):
                    continue
                files.append(path)
        self._state.file_lists[kind] = files
        return files

    def build_pack_url_index(self, files: Sequence[str]) -> dict[PackId, list[str]]:
        """Return fragment URLs for every supported pack that has at least one file.

        Args:
            files: File list produced by :meth:`list_candidate_files`.

        Returns:
            dict[PackId, list[str]]: URLs per pack in file-discovery order.
        """

        index: dict[PackId, list[str]] = {}
        for metadata in self._host.pack_metadata():
            if not self._host.supported(metadata):
                continue
            collection = self._host.get_collection(metadata)
            file_name = fragment_file_name(collection)
            urls = [path for path in files if isinstance(path, str) and file_basename(path) == file_name]
            if urls:
                index[collection] = urls
        return index

    def folder_translation_files(self, files: Iterable[str]) -> list[str]:
        """Return the files holding catalog-folder translations."""

        suffix = f"{self._config.folder_suffix}.json"
        return [path for path in files if isinstance(path, str) and path.endswith(suffix)]


def find_pack_metadata(host: TranslationHost, pack_id: PackId) -> PackMetadata | None:
    """Return the host metadata whose collection is ``pack_id``."""

    for metadata in host.pack_metadata():
        if host.get_collection(metadata) == pack_id:
            return metadata
    return None


__all__ = ["DirectoryIndexer", "file_basename", "find_pack_metadata", "fragment_file_name"]
