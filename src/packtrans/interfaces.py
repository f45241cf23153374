# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Contracts for the host platform collaborators consumed by the engine."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from .models import PackMetadata, TranslationRecord
from .types import JSONValue, PackId


@runtime_checkable
class FileTransport(Protocol):
    """Enumerate the files stored directly inside a data directory."""

    async def browse(self, directory: str) -> Sequence[str]:
        """Return the file paths contained in ``directory``."""

        raise NotImplementedError


@runtime_checkable
class FragmentFetcher(Protocol):
    """Retrieve and decode JSON documents by URL."""

    async def fetch_json(self, url: str) -> JSONValue:
        """Return the decoded JSON document at ``url``.

        Raises:
            FragmentFetchError: When the document cannot be retrieved.
            FragmentDecodeError: When the document is not valid JSON.
        """

        raise NotImplementedError


@runtime_checkable
class SettingsStore(Protocol):
    """Key-value settings scoped by a namespace."""

    def get(self, namespace: str, key: str, default: Any = None) -> Any:
        """Return the stored value for ``namespace.key`` or ``default``."""

        raise NotImplementedError

    async def set(self, namespace: str, key: str, value: Any) -> None:
        """Persist ``value`` under ``namespace.key``."""

        raise NotImplementedError


@runtime_checkable
class TranslatedPack(Protocol):
    """Translation artifact built by the host from metadata and a record."""

    @property
    def translated(self) -> bool:
        """Return ``True`` when the artifact carries usable translations."""

        raise NotImplementedError

    def has_translation(self, document: Mapping[str, Any]) -> bool:
        """Return ``True`` when ``document`` has a translation in this pack."""

        raise NotImplementedError

    def translate(self, document: Mapping[str, Any]) -> dict[str, Any]:
        """Return a localized copy of ``document``."""

        raise NotImplementedError


@runtime_checkable
class TranslationHost(Protocol):
    """Capabilities the surrounding application exposes to the engine."""

    def pack_metadata(self) -> Sequence[PackMetadata]:
        """Return metadata for every catalog known to the host."""

        raise NotImplementedError

    def get_collection(self, metadata: PackMetadata) -> PackId:
        """Return the pack identifier for ``metadata``."""

        raise NotImplementedError

    def supported(self, metadata: PackMetadata) -> bool:
        """Return ``True`` when ``metadata`` describes a translatable catalog."""

        raise NotImplementedError

    def default_mapping(self, document_type: str) -> Mapping[str, Any]:
        """Return the default field mapping for ``document_type``."""

        raise NotImplementedError

    def has_converter(self, name: str) -> bool:
        """Return ``True`` when a converter named ``name`` is registered."""

        raise NotImplementedError

    def register_converters(self, converters: Mapping[str, Callable[..., Any]]) -> None:
        """Register field converters with the host."""

        raise NotImplementedError

    def register_mapping(self, mapping: Mapping[str, Any]) -> None:
        """Register per-document-type default mappings with the host."""

        raise NotImplementedError

    def build_translated_pack(self, metadata: PackMetadata, record: TranslationRecord) -> TranslatedPack:
        """Return the translation artifact for ``metadata`` and ``record``."""

        raise NotImplementedError

    def can_browse_files(self) -> bool:
        """Return ``True`` when the current user may enumerate data directories."""

        raise NotImplementedError

    def is_gm(self) -> bool:
        """Return ``True`` when the current user may write shared settings."""

        raise NotImplementedError


__all__ = [
    "FileTransport",
    "FragmentFetcher",
    "SettingsStore",
    "TranslatedPack",
    "TranslationHost",
]
