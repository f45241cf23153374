# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command generating ``labels.json`` and ``titles.json`` light indexes."""

from __future__ import annotations

import typer

from ..generator import build_light_index, write_light_index
from ..io import dump_document
from ..logging import configure_logging
from ._light_index_models import (
    COMPACT_OPTION,
    DEBUG_OPTION,
    DEEP_OPTION,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    INCLUDE_FOLDERS_OPTION,
    INPUT_OPTION,
    LABELS_OUTPUT_OPTION,
    RECURSIVE_OPTION,
    TITLES_OUTPUT_OPTION,
    LightIndexCLIOptions,
    build_light_index_options,
)
from .shared import CLIError, CLILogger, build_cli_logger


def light_index_command(
    ctx: typer.Context,
    input_dir: INPUT_OPTION = None,
    labels_output: LABELS_OUTPUT_OPTION = None,
    titles_output: TITLES_OUTPUT_OPTION = None,
    recursive: RECURSIVE_OPTION = True,
    compact: COMPACT_OPTION = False,
    include_folders: INCLUDE_FOLDERS_OPTION = False,
    dry_run: DRY_RUN_OPTION = False,
    deep: DEEP_OPTION = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Extract pack labels, entry titles and folder names from translation files.

    Only top-level entry names are indexed unless ``--deep`` is given.
    """

    if input_dir is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)

    if debug:
        configure_logging(debug=True)
    logger = build_cli_logger(emoji=emoji, debug=debug)
    options = build_light_index_options(
        input_dir=input_dir,
        labels_output=labels_output,
        titles_output=titles_output,
        recursive=recursive,
        compact=compact,
        include_folders=include_folders,
        dry_run=dry_run,
        deep=deep,
    )
    try:
        _run_light_index(options, logger)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def _run_light_index(options: LightIndexCLIOptions, logger: CLILogger) -> None:
    if not options.input_dir.is_dir():
        raise CLIError(f"Input directory not found: {options.input_dir}")

    result = build_light_index(
        options.input_dir,
        recursive=options.recursive,
        include_folders=options.include_folders,
        deep=options.deep,
    )
    logger.debug(f"files_read={result.files_read} files_skipped={result.files_skipped}")

    if options.dry_run:
        logger.echo(dump_document(result.labels_document(), pretty=options.pretty))
        logger.echo(dump_document(result.titles_document(), pretty=options.pretty))
        return

    logger.info(f"Indexed {result.files_read} translation files under {options.input_dir}")
    try:
        labels_path, titles_path = write_light_index(
            result,
            labels_output=options.labels_output,
            titles_output=options.titles_output,
            pretty=options.pretty,
        )
    except OSError as exc:
        raise CLIError(f"Unable to write light index: {exc}") from exc
    logger.ok(f"Wrote {labels_path} ({len(result.labels)} labels)")
    logger.ok(
        f"Wrote {titles_path} ({result.pack_count} packs, "
        f"{result.total_titles} titles, {result.total_folders} folders)",
    )


__all__ = ["light_index_command"]
