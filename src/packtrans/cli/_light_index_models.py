# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data structures for the light index CLI command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..types import DEFAULT_FOLDER_SUFFIX, LABELS_FILENAME, TITLES_FILENAME

INPUT_OPTION = Annotated[
    Path | None,
    typer.Option("--input", "-i", help="Translation directory to index."),
]
LABELS_OUTPUT_OPTION = Annotated[
    Path | None,
    typer.Option("--labels-output", "--output", "-o", help=f"Labels file (default: <input>/{LABELS_FILENAME})."),
]
TITLES_OUTPUT_OPTION = Annotated[
    Path | None,
    typer.Option("--titles-output", help=f"Titles file (default: <input>/{TITLES_FILENAME})."),
]
RECURSIVE_OPTION = Annotated[
    bool,
    typer.Option("--recursive/--no-recursive", help="Descend into sub-directories."),
]
COMPACT_OPTION = Annotated[
    bool,
    typer.Option("--compact", help="Write compact JSON instead of indenting."),
]
INCLUDE_FOLDERS_OPTION = Annotated[
    bool,
    typer.Option("--include-folders", help=f"Also read '*{DEFAULT_FOLDER_SUFFIX}.json' folder files."),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Print both documents to stdout instead of writing them."),
]
DEEP_OPTION = Annotated[
    bool,
    typer.Option("--deep", help="Index names found in nested structures as well."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in status output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Emit library debug logging."),
]


@dataclass(slots=True)
class LightIndexCLIOptions:
    """Normalised CLI inputs for the light index generator."""

    input_dir: Path
    labels_output: Path
    titles_output: Path
    recursive: bool
    pretty: bool
    include_folders: bool
    dry_run: bool
    deep: bool


def build_light_index_options(
    *,
    input_dir: Path,
    labels_output: Path | None,
    titles_output: Path | None,
    recursive: bool,
    compact: bool,
    include_folders: bool,
    dry_run: bool,
    deep: bool,
) -> LightIndexCLIOptions:
    """Construct ``LightIndexCLIOptions`` with outputs defaulting into ``input_dir``."""

    resolved_input = input_dir.expanduser().resolve()
    return LightIndexCLIOptions(
        input_dir=resolved_input,
        labels_output=(labels_output or resolved_input / LABELS_FILENAME).expanduser().resolve(),
        titles_output=(titles_output or resolved_input / TITLES_FILENAME).expanduser().resolve(),
        recursive=recursive,
        pretty=not compact,
        include_folders=include_folders,
        dry_run=dry_run,
        deep=deep,
    )


__all__ = [
    "COMPACT_OPTION",
    "DEBUG_OPTION",
    "DEEP_OPTION",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "INCLUDE_FOLDERS_OPTION",
    "INPUT_OPTION",
    "LABELS_OUTPUT_OPTION",
    "LightIndexCLIOptions",
    "RECURSIVE_OPTION",
    "TITLES_OUTPUT_OPTION",
    "build_light_index_options",
]
