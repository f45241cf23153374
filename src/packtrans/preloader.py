# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Preload the foundational packs that NPC converters resolve documents from."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from .state import CoordinatorState
from .types import PackId

LOGGER = logging.getLogger(__name__)

PackLoader = Callable[[PackId, frozenset[PackId]], Awaitable[Any]]


class NpcDependencyPreloader:
    """Load a fixed set of packs once per process, coalescing concurrent requests."""

    def __init__(self, *, state: CoordinatorState, pack_ids: Sequence[PackId], load: PackLoader) -> None:
        """Create a preloader.

        Args:
            state: Coordinator state holding the process-wide preload flags.
            pack_ids: Packs to preload, in order.
            load: Coroutine loading one pack; receives the packs already on the
                caller's load chain so they are not re-entered.
        """

        self._state = state
        self._pack_ids = tuple(pack_ids)
        self._load = load

    @property
    def preloaded(self) -> bool:
        """Return ``True`` once every dependency pack has been attempted."""

        return self._state.npc_loaded

    async def ensure_preloaded(
        self,
        excluding: PackId | None = None,
        *,
        visited: frozenset[PackId] = frozenset(),
    ) -> None:
        """Load the dependency packs unless that already happened.

        Args:
            excluding: Pack currently being loaded; skipped to avoid self-recursion.
            visited: Packs on the caller's load chain.
        """

        if self._state.npc_loaded:
            return
        pending = self._state.npc_loading
        if pending is not None:
            await asyncio.shield(pending)
            return

        loader = asyncio.ensure_future(self._preload(excluding, visited))
        self._state.npc_loading = loader
        try:
            await asyncio.shield(loader)
        finally:
            if self._state.npc_loading is loader:
                self._state.npc_loading = None

    async def _preload(self, excluding: PackId | None, visited: frozenset[PackId]) -> None:
        LOGGER.debug("preloading %d NPC dependency packs", len(self._pack_ids))
        for pack_id in self._pack_ids:
            if pack_id == excluding:
                continue
            try:
                await self._load(pack_id, visited)
            except Exception:  # pylint: disable=broad-exception-caught -- one missing dependency must not block the rest
                LOGGER.warning("failed to preload dependency pack %s", pack_id, exc_info=True)
        self._state.npc_loaded = True


__all__ = ["NpcDependencyPreloader"]
