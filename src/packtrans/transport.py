# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Concrete file-listing, fetch, and settings adapters."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Any

import httpx

from .errors import FragmentFetchError
from .io import load_document, parse_document
from .types import JSONValue
from .utils import copy_json_value

LOGGER = logging.getLogger(__name__)


class LocalFileTransport:
    """List files beneath a local data root, one directory level at a time."""

    def __init__(self, root: Path) -> None:
        """Bind the transport to ``root``.

        Args:
            root: Directory that relative data paths are resolved against.
        """

        self._root = root

    async def browse(self, directory: str) -> list[str]:
        """Return ``"<directory>/<file>"`` for each file directly inside ``directory``.

        Args:
            directory: Data directory relative to the transport root.

        Returns:
            list[str]: Sorted file paths; sub-directories are not descended.

        Raises:
            FileNotFoundError: If ``directory`` does not exist.
        """

        return await asyncio.to_thread(self._list, directory)

    def _list(self, directory: str) -> list[str]:
        base = self._root / directory
        if not base.is_dir():
            raise FileNotFoundError(base)
        prefix = directory.rstrip("/")
        return sorted(f"{prefix}/{child.name}" for child in base.iterdir() if child.is_file())


class LocalFragmentFetcher:
    """Read JSON documents from a local data root."""

    def __init__(self, root: Path) -> None:
        """Bind the fetcher to ``root``.

        Args:
            root: Directory that document URLs are resolved against.
        """

        self._root = root

    async def fetch_json(self, url: str) -> JSONValue:
        """Return the parsed document stored at ``url`` under the root.

        Raises:
            FragmentFetchError: If the document does not exist.
            FragmentDecodeError: If the document is not valid JSON.
        """

        path = self._root / PurePosixPath(url.lstrip("/"))
        try:
            return await asyncio.to_thread(load_document, path)
        except (FileNotFoundError, PermissionError, IsADirectoryError) as exc:
            raise FragmentFetchError(url, "not found") from exc


class HttpFragmentFetcher:
    """Fetch JSON documents over HTTP with ``httpx``."""

    def __init__(self, base_url: str = "", *, client: httpx.AsyncClient | None = None) -> None:
        """Create a fetcher rooted at ``base_url``.

        Args:
            base_url: Prefix for relative document URLs.
            client: Optional pre-configured client; one is created lazily otherwise.
        """

        self._base_url = base_url
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=None)
        return self._client

    async def fetch_json(self, url: str) -> JSONValue:
        """Return the decoded JSON body served at ``url``.

        Raises:
            FragmentFetchError: On transport errors or a non-success status.
            FragmentDecodeError: If the body is not valid JSON.
        """

        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as exc:
            raise FragmentFetchError(url, str(exc)) from exc
        if response.status_code >= 400:
            raise FragmentFetchError(url, f"HTTP {response.status_code}")
        return parse_document(response.content, context=url)

    async def aclose(self) -> None:
        """Close the underlying client when this fetcher created it."""

        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


class MemorySettingsStore:
    """Settings store keeping values in process memory."""

    def __init__(self, initial: Mapping[tuple[str, str], Any] | None = None) -> None:
        self._values: dict[tuple[str, str], Any] = dict(initial or {})

    def get(self, namespace: str, key: str, default: Any = None) -> Any:
        """Return an independent copy of the stored value or ``default``."""

        if (namespace, key) not in self._values:
            return default
        return copy_json_value(self._values[(namespace, key)])

    async def set(self, namespace: str, key: str, value: Any) -> None:
        """Store a copy of ``value`` under ``namespace.key``."""

        LOGGER.debug("storing setting %s.%s", namespace, key)
        self._values[(namespace, key)] = copy_json_value(value)


__all__ = [
    "HttpFragmentFetcher",
    "LocalFileTransport",
    "LocalFragmentFetcher",
    "MemorySettingsStore",
]
