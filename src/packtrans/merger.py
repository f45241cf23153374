# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Fetch translation fragments for a pack and merge them into one record."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence

from .errors import PackTranslationError
from .interfaces import FragmentFetcher
from .models import TranslationRecord
from .utils import dedupe

LOGGER = logging.getLogger(__name__)


def merge_records(left: TranslationRecord, right: TranslationRecord) -> TranslationRecord:
    """Merge ``right`` into ``left`` in place and return ``left``.

    ``label`` takes the right-most present value. List-shaped ``entries`` on
    either side concatenate (a mapping on the other side contributes nothing);
    otherwise entries, ``mapping`` and ``folders`` are shallow unions where
    ``right`` wins. ``types`` and ``reference`` are order-preserving unions.

    Args:
        left: Accumulated record; mutated.
        right: Record from the next fragment.

    Returns:
        TranslationRecord: ``left`` after the merge.
    """

    if right.label is not None:
        left.label = right.label

    if right.entries is not None:
        if isinstance(left.entries, list) or isinstance(right.entries, list):
            head = left.entries if isinstance(left.entries, list) else []
            tail = right.entries if isinstance(right.entries, list) else []
            left.entries = [*head, *tail]
        else:
            left.entries = {**(left.entries or {}), **right.entries}

    if right.mapping is not None:
        left.mapping = {**(left.mapping or {}), **right.mapping}

    if right.folders is not None:
        left.folders = {**(left.folders or {}), **right.folders}

    if right.types is not None:
        left.types = dedupe([*(left.types or []), *right.types])

    if right.reference is not None:
        left.reference = dedupe([*(left.reference or []), *right.reference])

    return left


def merge_fragments(fragments: Iterable[TranslationRecord]) -> TranslationRecord | None:
    """Fold ``fragments`` left to right; ``None`` when there are none."""

    merged: TranslationRecord | None = None
    for fragment in fragments:
        merged = fragment if merged is None else merge_records(merged, fragment)
    return merged


class FragmentMerger:
    """Fetch every fragment URL of a pack and merge the ones that parse."""

    def __init__(self, fetcher: FragmentFetcher) -> None:
        """Create a merger reading documents through ``fetcher``."""

        self._fetcher = fetcher

    async def load_and_merge(self, urls: Sequence[str]) -> TranslationRecord | None:
        """Fetch ``urls`` concurrently and merge the results in input order.

        Args:
            urls: Fragment locations for a single pack.

        Returns:
            TranslationRecord | None: Merged record, or ``None`` when no
            fragment could be fetched and parsed.
        """

        fragments = await asyncio.gather(*(self._load_fragment(url) for url in urls))
        return merge_fragments(fragment for fragment in fragments if fragment is not None)

    async def _load_fragment(self, url: str) -> TranslationRecord | None:
        try:
            payload = await self._fetcher.fetch_json(url)
        except PackTranslationError as exc:
            LOGGER.warning("skipping translation fragment: %s", exc)
            return None
        except Exception:  # pylint: disable=broad-exception-caught -- a bad fragment never aborts the merge
            LOGGER.warning("skipping translation fragment %s", url, exc_info=True)
            return None
        if not isinstance(payload, Mapping):
            LOGGER.warning("skipping translation fragment %s: root is not an object", url)
            return None
        return TranslationRecord.from_mapping(payload)


__all__ = ["FragmentMerger", "merge_fragments", "merge_records"]
