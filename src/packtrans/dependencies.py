# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Track converters a pack needs and rebuild packs once they become available."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Collection, Iterable, Mapping
from typing import Any

from .discovery import find_pack_metadata
from .interfaces import TranslationHost
from .models import PackMetadata, TranslationRecord
from .state import CoordinatorState
from .types import PackId
from .utils import deep_merge

LOGGER = logging.getLogger(__name__)

RebuildCallable = Callable[[PackId], Awaitable[bool]]


def mapping_uses_converters(mapping: object, converters: Collection[str]) -> bool:
    """Return ``True`` when any field spec in ``mapping``, at any depth, names one of ``converters``.

    Args:
        mapping: Field-conversion spec, possibly nested per sub-document type.
        converters: Converter names to look for.

    Returns:
        bool: ``True`` if a ``converter`` value matches.
    """

    if not isinstance(mapping, Mapping):
        return False
    for value in mapping.values():
        if not isinstance(value, Mapping):
            continue
        converter = value.get("converter")
        if isinstance(converter, str) and converter in converters:
            return True
        if mapping_uses_converters(value, converters):
            return True
    return False


class RebuildQueue:
    """Run rebuild jobs without making the registering caller wait for them."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Return the number of rebuild jobs still running."""

        return len(self._tasks)

    def submit(self, pack_id: PackId, job: Callable[[], Awaitable[Any]]) -> None:
        """Schedule ``job`` on the running loop, or run it to completion when there is none.

        Args:
            pack_id: Pack being rebuilt, used in log messages.
            job: Zero-argument coroutine factory performing the rebuild.
        """

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._run(pack_id, job))
            return
        task = loop.create_task(self._run(pack_id, job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every submitted job has finished."""

        while self._tasks:
            await asyncio.gather(*tuple(self._tasks))

    @staticmethod
    async def _run(pack_id: PackId, job: Callable[[], Awaitable[Any]]) -> None:
        try:
            await job()
        except Exception:  # pylint: disable=broad-exception-caught -- failures stay away from the registration call site
            LOGGER.exception("rebuilding translations for %s failed", pack_id)


class ConverterDependencyTracker:
    """Record converters missing from each pack's effective mapping and trigger selective rebuilds."""

    def __init__(
        self,
        *,
        host: TranslationHost,
        state: CoordinatorState,
        rebuild: RebuildCallable,
        queue: RebuildQueue | None = None,
    ) -> None:
        """Create a tracker sharing the coordinator-owned ``state``.

        Args:
            host: Host capabilities exposing default mappings and registered converters.
            state: Coordinator state holding the missing-converter map.
            rebuild: Coroutine rebuilding one installed pack from its cached record.
            queue: Queue used to run rebuilds in the background.
        """

        self._host = host
        self._state = state
        self._rebuild = rebuild
        self.queue = queue or RebuildQueue()

    def effective_mapping(self, metadata: PackMetadata, record: TranslationRecord) -> dict[str, Any]:
        """Return the host default mapping for the pack's type overlaid with the record's own."""

        base = self._host.default_mapping(metadata.type) or {}
        return deep_merge(base, record.mapping or {})

    def missing_converters(self, pack_id: PackId, effective_mapping: Mapping[str, Any]) -> set[str]:
        """Return converter names used by ``effective_mapping`` that the host lacks.

        Args:
            pack_id: Pack the mapping belongs to.
            effective_mapping: Mapping produced by :meth:`effective_mapping`.

        Returns:
            set[str]: Unregistered converter names; empty when the pack is complete.
        """

        missing: set[str] = set()
        for value in effective_mapping.values():
            if not isinstance(value, Mapping):
                continue
            converter = value.get("converter")
            if not isinstance(converter, str) or not converter:
                continue
            if not self._host.has_converter(converter):
                missing.add(converter)
        if missing:
            LOGGER.debug("pack %s is missing converters: %s", pack_id, ", ".join(sorted(missing)))
        return missing

    def track(self, pack_id: PackId, metadata: PackMetadata, record: TranslationRecord) -> set[str]:
        """Recompute and store the missing-converter set of ``pack_id``."""

        missing = self.missing_converters(pack_id, self.effective_mapping(metadata, record))
        if missing:
            self._state.missing_converters[pack_id] = missing
        else:
            self._state.missing_converters.pop(pack_id, None)
        return missing

    def on_converter_registered(self, names: Iterable[str]) -> list[PackId]:
        """Schedule rebuilds for the packs that were waiting on any of ``names``.

        Args:
            names: Converter names that just became available.

        Returns:
            list[PackId]: Packs whose rebuild was scheduled.
        """

        targets = set(names)
        if not targets or not self._state.missing_converters:
            return []
        scheduled: list[PackId] = []
        for pack_id, missing in list(self._state.missing_converters.items()):
            if missing.isdisjoint(targets):
                continue
            if self._state.find_translation(pack_id) is None:
                continue
            self._schedule(pack_id)
            scheduled.append(pack_id)
        return scheduled

    def on_mapping_registered(self, type_names: Iterable[str]) -> list[PackId]:
        """Schedule rebuilds for installed packs whose document type gained a mapping.

        Args:
            type_names: Document types the newly registered mapping covers.

        Returns:
            list[PackId]: Packs whose rebuild was scheduled.
        """

        types = set(type_names)
        if not types:
            return []
        scheduled: list[PackId] = []
        for pack_id in list(self._state.packs):
            metadata = find_pack_metadata(self._host, pack_id)
            if metadata is None or metadata.type not in types:
                continue
            if self._state.find_translation(pack_id) is None:
                continue
            self._schedule(pack_id)
            scheduled.append(pack_id)
        return scheduled

    def _schedule(self, pack_id: PackId) -> None:
        self.queue.submit(pack_id, lambda: self._rebuild(pack_id))


__all__ = ["ConverterDependencyTracker", "RebuildQueue", "mapping_uses_converters"]
