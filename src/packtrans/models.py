# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data models describing pack translations, light indexes, and load state."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias

from .types import JSONValue, PackId
from .utils import as_list, copy_json_value, dedupe, is_json_array, string_mapping

_RECORD_FIELDS = frozenset({"label", "entries", "mapping", "folders", "types", "reference", "collection"})


@dataclass(slots=True)
class PackMetadata:
    """Describe a catalog the host knows about, independent of its contents."""

    package_name: str
    name: str
    type: str = "Item"
    label: str = ""
    package_type: str = "module"
    id: str | None = None

    @property
    def collection(self) -> PackId:
        """Return the ``"<package>.<name>"`` identifier of the catalog."""

        return self.id or f"{self.package_name}.{self.name}"


@dataclass(slots=True, eq=False)
class TranslationRecord:
    """Translation data for one pack, merged from one or more fragments.

    ``entries`` keeps the shape found on disk: either a list of per-document
    rows or a mapping keyed by original identifier or name. Unknown top-level
    keys are preserved in ``extra``.
    """

    label: str | None = None
    entries: list[Any] | dict[str, Any] | None = None
    mapping: dict[str, Any] | None = None
    folders: dict[str, Any] | None = None
    types: list[str] | None = None
    reference: list[PackId] | None = None
    collection: PackId | None = None
    extra: dict[str, JSONValue] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, JSONValue]) -> TranslationRecord:
        """Build a record from a parsed fragment object.

        Args:
            payload: JSON object decoded from a fragment file.

        Returns:
            TranslationRecord: Record holding independent copies of the fragment data.
        """

        label = payload.get("label")
        entries = payload.get("entries")
        if is_json_array(entries):
            entries = list(copy_json_value(entries))
        elif isinstance(entries, Mapping):
            entries = dict(copy_json_value(entries))
        else:
            entries = None
        types = payload.get("types")
        reference = payload.get("reference")
        collection = payload.get("collection")
        return cls(
            label=label if isinstance(label, str) else None,
            entries=entries,
            mapping=_optional_object(payload.get("mapping")),
            folders=_optional_object(payload.get("folders")),
            types=dedupe(item for item in as_list(types) if isinstance(item, str)) if types is not None else None,
            reference=(
                dedupe(item for item in as_list(reference) if isinstance(item, str))
                if reference is not None
                else None
            ),
            collection=collection if isinstance(collection, str) else None,
            extra={key: copy_json_value(value) for key, value in payload.items() if key not in _RECORD_FIELDS},
        )

    def entry_values(self) -> list[Any]:
        """Return the per-document translations regardless of entry shape."""

        if self.entries is None:
            return []
        if isinstance(self.entries, list):
            return list(self.entries)
        return list(self.entries.values())

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation omitting absent fields."""

        payload: dict[str, Any] = dict(self.extra)
        for key in ("label", "entries", "mapping", "folders", "types", "reference", "collection"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(slots=True)
class TitleIndexEntry:
    """Display strings for one pack: entry titles and folder names."""

    titles: dict[str, str] = field(default_factory=dict)
    folders: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, payload: object) -> TitleIndexEntry:
        """Build an entry from a ``{"titles": ..., "folders": ...}`` object."""

        if not isinstance(payload, Mapping):
            return cls()
        return cls(titles=string_mapping(payload.get("titles")), folders=string_mapping(payload.get("folders")))

    def update(self, other: TitleIndexEntry) -> None:
        """Merge ``other`` into this entry, ``other`` winning on key collision."""

        self.titles.update(other.titles)
        self.folders.update(other.folders)

    def is_empty(self) -> bool:
        """Return ``True`` when the entry holds no titles and no folders."""

        return not (self.titles or self.folders)

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Return the entry with keys sorted, as written to ``titles.json``."""

        return {
            "titles": {key: self.titles[key] for key in sorted(self.titles)},
            "folders": {key: self.folders[key] for key in sorted(self.folders)},
        }


LabelIndex: TypeAlias = dict[PackId, str]
TitleIndex: TypeAlias = dict[PackId, TitleIndexEntry]


def title_index_from_mapping(payload: object) -> TitleIndex:
    """Return a title index parsed leniently from a ``titles.json`` payload."""

    if not isinstance(payload, Mapping):
        return {}
    return {
        str(pack_id): TitleIndexEntry.from_mapping(data)
        for pack_id, data in payload.items()
        if isinstance(data, Mapping)
    }


def title_index_to_dict(index: Mapping[PackId, TitleIndexEntry]) -> dict[str, dict[str, dict[str, str]]]:
    """Return ``index`` as a JSON-compatible mapping."""

    return {pack_id: entry.to_dict() for pack_id, entry in index.items()}


class LoadStatus(str, Enum):
    """Enumerate the observable load states of a pack."""

    NOT_LOADED = "not-loaded"
    LOADING = "loading"
    LOADED = "loaded"


@dataclass(frozen=True, slots=True)
class Loading:
    """A fragment fetch in flight; concurrent callers await ``future``."""

    future: asyncio.Future[TranslationRecord | None]


@dataclass(frozen=True, slots=True)
class Loaded:
    """A record installed into the cache."""

    record: TranslationRecord


LoadState: TypeAlias = Loading | Loaded


@dataclass(slots=True)
class ItemTranslationReport:
    """Outcome of translating a batch of owned items."""

    updates: list[dict[str, Any]] = field(default_factory=list)
    translated: int = 0
    untranslated: int = 0
    log: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Return the number of items inspected."""

        return self.translated + self.untranslated


def _optional_object(value: object) -> dict[str, Any] | None:
    if not isinstance(value, Mapping):
        return None
    return dict(copy_json_value(value))


__all__ = [
    "ItemTranslationReport",
    "LabelIndex",
    "LoadState",
    "LoadStatus",
    "Loaded",
    "Loading",
    "PackMetadata",
    "TitleIndex",
    "TitleIndexEntry",
    "TranslationRecord",
    "title_index_from_mapping",
    "title_index_to_dict",
]
