# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for pack translation data."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, Literal, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

PackId: TypeAlias = str
FileKind: TypeAlias = Literal["translation", "mapping"]

TRANSLATION_FILES: Final[FileKind] = "translation"
MAPPING_FILES: Final[FileKind] = "mapping"

LABELS_FILENAME: Final[str] = "labels.json"
TITLES_FILENAME: Final[str] = "titles.json"
MAPPING_FILENAME: Final[str] = "mapping.json"
DEFAULT_FOLDER_SUFFIX: Final[str] = "_packs-folders"

SETTING_LOADING_MODE: Final[str] = "loadingMode"
SETTING_LABELS: Final[str] = "labels"
SETTING_TITLE_INDEX: Final[str] = "titleIndex"
SETTING_DIRECTORY: Final[str] = "directory"
SETTING_TRANSLATION_FILES: Final[str] = "translationFiles"
SETTING_MAPPING_FILES: Final[str] = "mappingFiles"

__all__ = [
    "DEFAULT_FOLDER_SUFFIX",
    "FileKind",
    "JSONPrimitive",
    "JSONValue",
    "LABELS_FILENAME",
    "MAPPING_FILENAME",
    "MAPPING_FILES",
    "PackId",
    "SETTING_DIRECTORY",
    "SETTING_LABELS",
    "SETTING_LOADING_MODE",
    "SETTING_MAPPING_FILES",
    "SETTING_TITLE_INDEX",
    "SETTING_TRANSLATION_FILES",
    "TITLES_FILENAME",
    "TRANSLATION_FILES",
]
