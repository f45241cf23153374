# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI tests for the ``light-index`` command."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from packtrans.cli.app import app


def _seed(root: Path) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / "pf2e.spells-srd.json").write_text(
        json.dumps({"label": "法术", "entries": {"Fireball": {"name": "火球术"}}}, ensure_ascii=False),
        encoding="utf-8",
    )


def test_light_index_writes_default_outputs(tmp_path: Path) -> None:
    """Outputs default to ``labels.json`` and ``titles.json`` inside the input directory."""

    _seed(tmp_path)
    runner = CliRunner()

    result = runner.invoke(app, ["light-index", "--input", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert json.loads((tmp_path / "labels.json").read_text(encoding="utf-8")) == {"pf2e.spells-srd": "法术"}
    titles = json.loads((tmp_path / "titles.json").read_text(encoding="utf-8"))
    assert titles == {"pf2e.spells-srd": {"titles": {"Fireball": "火球术"}, "folders": {}}}
    assert "1 packs, 1 titles, 0 folders" in result.output


def test_light_index_dry_run_prints_both_documents(tmp_path: Path) -> None:
    """Dry runs print labels then titles and write nothing."""

    _seed(tmp_path)
    runner = CliRunner()

    result = runner.invoke(app, ["light-index", "-i", str(tmp_path), "--dry-run", "--compact"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        '{"pf2e.spells-srd":"法术"}',
        '{"pf2e.spells-srd":{"titles":{"Fireball":"火球术"},"folders":{}}}',
    ]
    assert not (tmp_path / "labels.json").exists()


def test_light_index_custom_output_paths(tmp_path: Path) -> None:
    """``--output`` aliases ``--labels-output`` and both outputs may live elsewhere."""

    _seed(tmp_path / "in")
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "light-index",
            "--input",
            str(tmp_path / "in"),
            "-o",
            str(tmp_path / "out" / "l.json"),
            "--titles-output",
            str(tmp_path / "out" / "t.json"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "out" / "l.json").is_file()
    assert (tmp_path / "out" / "t.json").is_file()


def test_light_index_without_input_prints_usage_and_fails() -> None:
    """Omitting ``--input`` prints usage and exits with status 1."""

    runner = CliRunner()

    result = runner.invoke(app, ["light-index"])

    assert result.exit_code == 1
    assert "--input" in result.output


def test_light_index_missing_directory_fails(tmp_path: Path) -> None:
    """A non-existent input directory is reported as a failure."""

    runner = CliRunner()

    result = runner.invoke(app, ["light-index", "--input", str(tmp_path / "missing"), "--no-emoji"])

    assert result.exit_code == 1
    assert "Input directory not found" in result.output


def test_light_index_debug_flag_reports_file_counts(tmp_path: Path) -> None:
    """``--debug`` adds debug lines with the scan counters."""

    _seed(tmp_path)
    (tmp_path / "broken.json").write_text("{", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["light-index", "--input", str(tmp_path), "--debug", "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "files_read=1 files_skipped=1" in result.output
