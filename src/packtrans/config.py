# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loading for the on-demand translation engine."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .types import DEFAULT_FOLDER_SUFFIX

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "packtrans"

DEFAULT_NPC_CONVERTERS: Final[tuple[str, ...]] = (
    "npc-portrait-path",
    "npc-token-translation",
    "npc-data-translation",
    "npc-item-translation",
)

DEFAULT_NPC_DEPENDENCY_PACKS: Final[tuple[str, ...]] = (
    "pf2e.spells-srd",
    "pf2e.bestiary-ability-glossary-srd",
    "pf2e.conditionitems",
    "pf2e.actionspf2e",
    "pf2e.feats-srd",
    "pf2e.classfeatures",
    "pf2e.ancestryfeatures",
    "pf2e.ancestries",
    "pf2e.heritages",
    "pf2e.classes",
    "pf2e.backgrounds",
    "pf2e.deities",
    "pf2e.equipment-srd",
)


class LoadingMode(str, Enum):
    """Enumerate how pack translations are loaded."""

    FULL = "full"
    ONDEMAND = "ondemand"


class TranslationModule(BaseModel):
    """A module shipping translations for one language."""

    model_config = ConfigDict(frozen=True)

    module: str
    lang: str
    dir: str


class AggregateSubpack(BaseModel):
    """Sub-document set bundled inside an aggregate document type."""

    model_config = ConfigDict(frozen=True)

    key: str = "items"
    document_type: str = "Item"


class EngineConfig(BaseModel):
    """Primary configuration container used by the engine."""

    model_config = ConfigDict(validate_assignment=True)

    namespace: str = "babele"
    language: str = "en"
    directory: str = ""
    system_id: str = ""
    system_translations_dir: str | None = None
    modules: list[TranslationModule] = Field(default_factory=list)
    loading_mode: LoadingMode = LoadingMode.ONDEMAND
    folder_suffix: str = DEFAULT_FOLDER_SUFFIX
    npc_converters: frozenset[str] = Field(default_factory=lambda: frozenset(DEFAULT_NPC_CONVERTERS))
    npc_dependency_packs: tuple[str, ...] = DEFAULT_NPC_DEPENDENCY_PACKS
    aggregate_subpacks: dict[str, AggregateSubpack] = Field(
        default_factory=lambda: {"Adventure": AggregateSubpack()},
    )


def load_engine_config(path: Path) -> EngineConfig:
    """Load engine configuration from a TOML document.

    ``pyproject.toml`` files are read from their ``[tool.packtrans]`` table;
    any other file is treated as the configuration table itself.

    Args:
        path: TOML file to read. A missing file yields the defaults.

    Returns:
        EngineConfig: Validated configuration.

    Raises:
        ConfigError: If the file is not valid TOML or fails validation.
    """

    if not path.exists():
        return EngineConfig()
    try:
        with path.open("rb") as handle:
            data: Mapping[str, Any] = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    if path.name == "pyproject.toml":
        data = data.get(PYPROJECT_TOOL_KEY, {}).get(PYPROJECT_SECTION_KEY, {})
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration at {path} must be a table")
    try:
        return EngineConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"{path}: {exc}") from exc


__all__ = [
    "AggregateSubpack",
    "DEFAULT_NPC_CONVERTERS",
    "DEFAULT_NPC_DEPENDENCY_PACKS",
    "EngineConfig",
    "LoadingMode",
    "TranslationModule",
    "load_engine_config",
]
