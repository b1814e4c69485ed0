"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pushmanifest.cli import _build_parser, main
from tests._fixtures.project_builder import ProjectBuilder


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "generate"]).verbose is True
    assert parser.parse_args(["generate", "-v"]).verbose is True


def test_cli_generate_defaults() -> None:
    args = _build_parser().parse_args(["generate"])

    assert args.command == "generate"
    assert args.path == "."
    assert args.out_path is None
    assert args.base_path is None
    assert args.dry_run is False
    assert args.log_file is None


def test_cli_generate_options() -> None:
    args = _build_parser().parse_args(
        ["generate", "site", "--out", "push.json", "--base-path", "/static", "--dry-run"]
    )

    assert args.path == "site"
    assert args.out_path == "push.json"
    assert args.base_path == "/static"
    assert args.dry_run is True


def test_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_main_dry_run_prints_manifest(project_builder: ProjectBuilder, capsys) -> None:
    project_builder.write(
        {"index.html": '<script src="app.js"></script>\n', "app.js": ""}
    )

    main(["generate", str(project_builder.path()), "--dry-run"])

    printed = capsys.readouterr().out
    assert json.loads(printed) == {"index.html": {"app.js": {"type": "script", "weight": 1}}}
    assert not (project_builder.path() / "push-manifest.json").exists()


def test_main_reports_resolution_failure(project_builder: ProjectBuilder, capsys) -> None:
    project_builder.write({"about.html": ""})

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(project_builder.path())])

    assert excinfo.value.code == 1
    assert "Unable to get document index.html" in capsys.readouterr().err


def test_main_writes_log_file(project_builder: ProjectBuilder, tmp_path: Path) -> None:
    project_builder.write({"index.html": ""})
    log_file = tmp_path / "pushmanifest.log"

    main(["--log-file", str(log_file), "generate", str(project_builder.path())])

    logged = log_file.read_text(encoding="utf-8")
    assert "INFO pushmanifest.orchestrator: Push manifest written to" in logged
