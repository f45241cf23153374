# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build ``labels.json`` and ``titles.json`` light indexes from translation files."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import unquote

from .errors import FragmentDecodeError
from .io import dump_document, load_document
from .models import LabelIndex, TitleIndex, TitleIndexEntry
from .types import DEFAULT_FOLDER_SUFFIX, LABELS_FILENAME, MAPPING_FILENAME, TITLES_FILENAME, PackId
from .utils import string_mapping

LOGGER = logging.getLogger(__name__)

_RESERVED_FILENAMES = frozenset({LABELS_FILENAME, TITLES_FILENAME, MAPPING_FILENAME})


@dataclass(slots=True)
class LightIndexResult:
    """Labels and titles collected from a translation directory."""

    labels: LabelIndex = field(default_factory=dict)
    titles: TitleIndex = field(default_factory=dict)
    files_read: int = 0
    files_skipped: int = 0

    def labels_document(self) -> dict[PackId, str]:
        """Return the label index with sorted keys."""

        return {key: self.labels[key] for key in sorted(self.labels)}

    def titles_document(self) -> dict[PackId, dict[str, dict[str, str]]]:
        """Return the title index with sorted keys, omitting empty packs."""

        return {
            key: self.titles[key].to_dict()
            for key in sorted(self.titles)
            if not self.titles[key].is_empty()
        }

    @property
    def pack_count(self) -> int:
        """Return the number of packs written to ``titles.json``."""

        return sum(1 for entry in self.titles.values() if not entry.is_empty())

    @property
    def total_titles(self) -> int:
        """Return the number of entry titles across packs."""

        return sum(len(entry.titles) for entry in self.titles.values())

    @property
    def total_folders(self) -> int:
        """Return the number of folder names across packs."""

        return sum(len(entry.folders) for entry in self.titles.values())


def collection_key(path: Path) -> PackId:
    """Return the pack identifier encoded in a translation file name."""

    return unquote(path.stem)


def iter_json_files(root: Path, *, recursive: bool = True) -> list[Path]:
    """Return the ``.json`` files under ``root`` in sorted order.

    Args:
        root: Directory to scan.
        recursive: Descend into sub-directories when ``True``.

    Returns:
        list[Path]: Matching files sorted by path.
    """

    candidates = root.rglob("*") if recursive else root.iterdir()
    return sorted(
        (path for path in candidates if path.is_file() and path.suffix.lower() == ".json"),
        key=str,
    )


def _non_blank(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _scan_nested_titles(node: Any, titles: dict[str, str]) -> None:
    if isinstance(node, list):
        for value in node:
            _scan_nested_titles(value, titles)
        return
    if not isinstance(node, Mapping):
        return
    for key, value in node.items():
        if isinstance(value, (Mapping, list)):
            name = value.get("name") if isinstance(value, Mapping) else None
            if _non_blank(name):
                titles[str(key)] = name
            _scan_nested_titles(value, titles)


def extract_titles(entries: Any, *, deep: bool = False) -> dict[str, str]:
    """Return original-key to translated-name pairs found in ``entries``.

    Keyed entries map their key to either a string or an object's ``name``.
    List entries use ``id`` or ``_id`` as the key. With ``deep`` set, every
    nested object carrying a ``name`` also contributes under its own key.

    Args:
        entries: The ``entries`` member of a translation file.
        deep: Index nested structures as well as top-level entries.

    Returns:
        dict[str, str]: Extracted titles.
    """

    titles: dict[str, str] = {}
    if isinstance(entries, list):
        for row in entries:
            if not isinstance(row, Mapping):
                continue
            original = row.get("id") if isinstance(row.get("id"), str) else row.get("_id")
            translated = row.get("name")
            if _non_blank(original) and _non_blank(translated):
                titles[original] = translated
            if deep:
                _scan_nested_titles(row, titles)
        return titles

    if isinstance(entries, Mapping):
        for key, value in entries.items():
            if isinstance(value, str):
                if value.strip():
                    titles[str(key)] = value
                continue
            if isinstance(value, Mapping):
                if _non_blank(value.get("name")):
                    titles[str(key)] = value["name"]
                if deep:
                    _scan_nested_titles(value, titles)
    return titles


def _is_skipped(path: Path, *, include_folders: bool, folder_suffix: str) -> bool:
    name = path.name.lower()
    if name in _RESERVED_FILENAMES:
        return True
    return not include_folders and name.endswith(f"{folder_suffix.lower()}.json")


def build_light_index(
    root: Path,
    *,
    recursive: bool = True,
    include_folders: bool = False,
    deep: bool = False,
    folder_suffix: str = DEFAULT_FOLDER_SUFFIX,
) -> LightIndexResult:
    """Collect labels and titles from every translation file under ``root``.

    Unparsable files are skipped. Later files override earlier ones for the
    same pack.

    Args:
        root: Translation directory.
        recursive: Descend into sub-directories.
        include_folders: Also read catalog-folder translation files.
        deep: Index nested names as well as top-level entries.
        folder_suffix: File-name suffix identifying folder translation files.

    Returns:
        LightIndexResult: Collected indexes and counters.
    """

    result = LightIndexResult()
    for path in iter_json_files(root, recursive=recursive):
        if _is_skipped(path, include_folders=include_folders, folder_suffix=folder_suffix):
            continue
        try:
            payload = load_document(path)
        except (OSError, FragmentDecodeError) as exc:
            LOGGER.debug("skipping %s: %s", path, exc)
            result.files_skipped += 1
            continue
        result.files_read += 1
        if not isinstance(payload, Mapping):
            continue

        collection = collection_key(path)
        label = payload.get("label")
        if _non_blank(label):
            result.labels[collection] = label

        entry = result.titles.setdefault(collection, TitleIndexEntry())
        entry.titles.update(extract_titles(payload.get("entries"), deep=deep))
        folders = payload.get("folders")
        if isinstance(folders, Mapping):
            entry.folders.update(string_mapping(folders))
    return result


def write_light_index(
    result: LightIndexResult,
    *,
    labels_output: Path,
    titles_output: Path,
    pretty: bool = True,
) -> tuple[Path, Path]:
    """Write both index files, creating parent directories as needed.

    Returns:
        tuple[Path, Path]: The labels and titles paths written.
    """

    labels_output.parent.mkdir(parents=True, exist_ok=True)
    titles_output.parent.mkdir(parents=True, exist_ok=True)
    labels_output.write_text(dump_document(result.labels_document(), pretty=pretty), encoding="utf-8")
    titles_output.write_text(dump_document(result.titles_document(), pretty=pretty), encoding="utf-8")
    return labels_output, titles_output


__all__ = [
    "LightIndexResult",
    "build_light_index",
    "collection_key",
    "extract_titles",
    "iter_json_files",
    "write_light_index",
]
