# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading and writing translation JSON documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import cast

from .errors import FragmentDecodeError
from .types import JSONValue


def parse_document(text: str | bytes, *, context: str) -> JSONValue:
    """Parse ``text`` as JSON.

    Args:
        text: Raw document body.
        context: Location of the document, used in error messages.

    Returns:
        JSONValue: Parsed JSON value.

    Raises:
        FragmentDecodeError: If ``text`` is not valid JSON.
    """

    try:
        return cast(JSONValue, json.loads(text))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise FragmentDecodeError(context, str(exc)) from exc


def load_document(path: Path) -> JSONValue:
    """Load a JSON document from disk.

    Args:
        path: Filesystem path to the JSON document.

    Returns:
        JSONValue: Parsed JSON value extracted from the document.

    Raises:
        FileNotFoundError: If the JSON document is missing.
        FragmentDecodeError: If the document cannot be parsed.
    """
    if not path.is_file():
        raise FileNotFoundError(path)
    return parse_document(path.read_bytes(), context=str(path))


def dump_document(payload: JSONValue, *, pretty: bool = True) -> str:
    """Serialise ``payload`` the way light index files are written.

    Args:
        payload: JSON-compatible value to serialise.
        pretty: Indent with two spaces when ``True``; otherwise emit compact JSON.

    Returns:
        str: Serialised document terminated by a newline.
    """

    if pretty:
        body = json.dumps(payload, indent=2, ensure_ascii=False)
    else:
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return body + "\n"


__all__ = ["dump_document", "load_document", "parse_document"]
