# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Utility helpers for validating and normalising translation JSON structures."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from .types import JSONValue

HashableT = TypeVar("HashableT", bound=Hashable)


def is_json_array(value: object) -> bool:
    """Return ``True`` when ``value`` is a JSON array."""

    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def string_mapping(value: object) -> dict[str, str]:
    """Return the string-to-string entries of ``value``.

    Non-mapping input yields an empty dict; entries whose key or value is not a
    string are dropped.

    Args:
        value: Candidate mapping read from a light index or settings payload.

    Returns:
        dict[str, str]: Filtered copy of ``value``.
    """

    if not isinstance(value, Mapping):
        return {}
    return {key: item for key, item in value.items() if isinstance(key, str) and isinstance(item, str)}


def as_list(value: Any) -> list[Any]:
    """Return ``value`` wrapped as a list; ``None`` becomes an empty list."""

    if value is None:
        return []
    if is_json_array(value):
        return list(value)
    return [value]


def dedupe(items: Iterable[HashableT]) -> list[HashableT]:
    """Return ``items`` with duplicates removed while preserving order.

    Args:
        items: Iterable of hashable values that may contain duplicates.

    Returns:
        list: Ordered list containing the first instance of each value.
    """

    seen: set[HashableT] = set()
    ordered: list[HashableT] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        ordered.append(item)
    return ordered


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new mapping with ``override`` recursively merged over ``base``.

    Args:
        base: Mapping providing default values.
        override: Mapping whose values win on conflict; nested mappings merge.

    Returns:
        dict[str, Any]: Merged copy; neither input is mutated.
    """

    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def copy_json_value(value: JSONValue) -> JSONValue:
    """Return a plain, independent copy of ``value``.

    Args:
        value: JSON value that may contain mappings, lists, or tuples.

    Returns:
        JSONValue: Copy composed of built-in ``dict`` and ``list`` containers.
    """

    if isinstance(value, Mapping):
        return {str(key): copy_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [copy_json_value(item) for item in value]
    return value


__all__ = [
    "as_list",
    "copy_json_value",
    "dedupe",
    "deep_merge",
    "is_json_array",
    "string_mapping",
]
