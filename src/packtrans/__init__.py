# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""On-demand loading of pack translations with light label and title indexes."""

from __future__ import annotations

from .config import EngineConfig, LoadingMode, TranslationModule, load_engine_config
from .coordinator import PackLoadCoordinator, normalize_pack_id
from .dependencies import ConverterDependencyTracker, RebuildQueue
from .discovery import DirectoryIndexer
from .engine import OnDemandEngine
from .errors import ConfigError, FragmentDecodeError, FragmentFetchError, PackTranslationError
from .generator import build_light_index, write_light_index
from .light_index import LightIndexApplier
from .merger import FragmentMerger, merge_records
from .models import LoadStatus, PackMetadata, TitleIndexEntry, TranslationRecord
from .preloader import NpcDependencyPreloader
from .transport import HttpFragmentFetcher, LocalFileTransport, LocalFragmentFetcher, MemorySettingsStore

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConverterDependencyTracker",
    "DirectoryIndexer",
    "EngineConfig",
    "FragmentDecodeError",
    "FragmentFetchError",
    "FragmentMerger",
    "HttpFragmentFetcher",
    "LightIndexApplier",
    "LoadStatus",
    "LoadingMode",
    "LocalFileTransport",
    "LocalFragmentFetcher",
    "MemorySettingsStore",
    "NpcDependencyPreloader",
    "OnDemandEngine",
    "PackLoadCoordinator",
    "PackMetadata",
    "PackTranslationError",
    "RebuildQueue",
    "TitleIndexEntry",
    "TranslationModule",
    "TranslationRecord",
    "build_light_index",
    "load_engine_config",
    "merge_records",
    "normalize_pack_id",
    "write_light_index",
]
