"""CLI parser and command behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from stager.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "stage", "src", "dest"])
    assert args.verbose is True
    assert args.command == "stage"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["stage", "src", "dest", "--verbose"])
    assert args.verbose is True


def test_cli_accepts_staging_overrides() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        [
            "stage",
            "src",
            "dest",
            "--start-command",
            "node app.js",
            "--buildpack",
            "https://example.com/bp.git",
            "--framework",
            "node",
        ]
    )
    assert args.start_command == "node app.js"
    assert args.buildpack == "https://example.com/bp.git"
    assert args.framework == "node"


def test_cli_stages_node_app(tmp_path: Path, app_builder, capsys) -> None:
    app_builder.write({"server.js": "// server\n"})
    env_file = tmp_path / "env.yml"
    env_file.write_text(
        "runtime_info:\n  name: node\n  executable: node\nframework_info:\n  name: node\n",
        encoding="utf-8",
    )

    main(["stage", str(app_builder.path()), str(tmp_path / "droplet"), "--env", str(env_file), "--config", str(tmp_path)])

    out = capsys.readouterr().out
    assert "Droplet staged at" in out
    assert "node server.js $@" in out
    assert (tmp_path / "droplet" / "startup").is_file()


def test_cli_reports_staging_errors(tmp_path: Path, app_builder, capsys) -> None:
    app_builder.write({"README": "nothing to run\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["stage", str(app_builder.path()), str(tmp_path / "droplet"), "--framework", "sinatra", "--config", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "Unable to determine Sinatra startup command" in capsys.readouterr().err
