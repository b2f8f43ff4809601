"""Tests for the patternkit CLI."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from patternkit.cli.main import app

runner = CliRunner()


def test_build_command_writes_site(site_root: Path) -> None:
    result = runner.invoke(app, ["build", "--site-root", str(site_root)])

    assert result.exit_code == 0, result.output
    assert "Wrote" in result.stdout
    assert (site_root / "dist" / "patterns" / "components" / "button.html").exists()
    assert (site_root / "dist" / "index.html").exists()


def test_build_dry_run_writes_nothing(site_root: Path) -> None:
    result = runner.invoke(app, ["build", "--site-root", str(site_root), "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Dry run" in result.stdout
    assert not (site_root / "dist").exists()


def test_build_with_custom_dest(site_root: Path, tmp_path_factory) -> None:
    dest = tmp_path_factory.mktemp("out")

    result = runner.invoke(app, ["build", "--site-root", str(site_root), "--dest", str(dest)])

    assert result.exit_code == 0, result.output
    assert (dest / "patterns" / "patterns.html").exists()


def test_build_reports_reserved_property(site_root: Path) -> None:
    (site_root / "src" / "patterns" / "bad.html").write_text("---\nid: nope\n---\n<p></p>\n", encoding="utf-8")

    result = runner.invoke(app, ["build", "--site-root", str(site_root)])

    assert result.exit_code == 1
    assert not (site_root / "dist").exists()


def test_tree_json(site_root: Path) -> None:
    result = runner.invoke(
        app, ["tree", "--site-root", str(site_root), "--json"], env={"PATTERNKIT_LOG_LEVEL": "WARNING"}
    )

    assert result.exit_code == 0, result.output
    tree = json.loads(result.stdout)
    assert tree["components"]["collection"]["items"]["orange"]["id"] == "patterns.components.orange"
    assert "contents" not in tree["components"]["collection"]
