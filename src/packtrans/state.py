# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Mutable state owned by a single pack load coordinator."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from .interfaces import TranslatedPack
from .models import LabelIndex, Loaded, Loading, LoadState, LoadStatus, TitleIndex, TranslationRecord
from .types import FileKind, PackId


@dataclass(slots=True)
class CoordinatorState:
    """Caches shared by the engine components.

    One instance is created per coordinator and handed to the components it
    wires together; nothing else holds a reference to it.

    Attributes:
        load_states: ``Loading`` or ``Loaded`` per pack; absent means not loaded.
        packs: Translation artifacts built by the host, including derived packs.
        translations: Installed records in installation order, one per pack.
        pack_urls: Fragment URLs per pack, built lazily from ``file_lists``.
        file_lists: Directory listings per file kind.
        missing_converters: Converter names each incomplete pack still lacks.
    """

    load_states: dict[PackId, LoadState] = field(default_factory=dict)
    packs: dict[PackId, TranslatedPack] = field(default_factory=dict)
    translations: list[TranslationRecord] = field(default_factory=list)
    pack_urls: dict[PackId, list[str]] = field(default_factory=dict)
    file_lists: dict[FileKind, list[str]] = field(default_factory=dict)
    missing_converters: dict[PackId, set[str]] = field(default_factory=dict)
    labels: LabelIndex | None = None
    title_index: TitleIndex | None = None
    global_mappings_loaded: bool = False
    npc_loaded: bool = False
    npc_loading: asyncio.Future[None] | None = None
    initialized: bool = False

    def status(self, pack_id: PackId) -> LoadStatus:
        """Return the load status of ``pack_id``."""

        state = self.load_states.get(pack_id)
        if isinstance(state, Loaded):
            return LoadStatus.LOADED
        if isinstance(state, Loading):
            return LoadStatus.LOADING
        return LoadStatus.NOT_LOADED

    def record(self, pack_id: PackId) -> TranslationRecord | None:
        """Return the installed record for ``pack_id`` when loaded."""

        state = self.load_states.get(pack_id)
        return state.record if isinstance(state, Loaded) else None

    def find_translation(self, pack_id: PackId) -> TranslationRecord | None:
        """Return the entry of the flat translations list for ``pack_id``."""

        for record in self.translations:
            if record.collection == pack_id:
                return record
        return None

    def upsert_translation(self, record: TranslationRecord) -> None:
        """Replace the translations-list entry sharing ``record.collection`` or append it."""

        for index, existing in enumerate(self.translations):
            if existing.collection == record.collection:
                self.translations[index] = record
                return
        self.translations.append(record)


__all__ = ["CoordinatorState"]
