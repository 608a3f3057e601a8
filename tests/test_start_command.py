"""Tests for start command precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from stager.errors import InvalidProcfileFormat, NoStartCommand
from stager.models import ReleaseMetadata
from stager.start_command import StartCommandResolver

RELEASE = ReleaseMetadata(default_process_types={"web": "node app.js --from-buildpack=true"})


def _procfile(app_dir: Path, text: str) -> None:
    (app_dir / "Procfile").write_text(text, encoding="utf-8")


def test_override_wins_over_everything(tmp_path: Path) -> None:
    _procfile(tmp_path, "web: node app.js --from-procfile=true\n")

    command = StartCommandResolver().resolve(
        tmp_path, override="node app.js --from-manifest=true", release=RELEASE
    )

    assert command.command == "node app.js --from-manifest=true"
    assert command.source == "override"


def test_override_skips_procfile_parsing(tmp_path: Path) -> None:
    _procfile(tmp_path, "- not a mapping\n")

    command = StartCommandResolver().resolve(tmp_path, override="node app.js")

    assert command.command == "node app.js"


def test_procfile_wins_over_release(tmp_path: Path) -> None:
    _procfile(tmp_path, "web: node app.js --from-procfile=true\n")

    command = StartCommandResolver().resolve(tmp_path, release=RELEASE)

    assert command.command == "node app.js --from-procfile=true"
    assert command.source == "procfile"


def test_release_used_without_override_or_procfile(tmp_path: Path) -> None:
    command = StartCommandResolver().resolve(tmp_path, release=RELEASE)

    assert command.command == "node app.js --from-buildpack=true"
    assert command.source == "release"
    assert command.stdout_log == "$DROPLET_BASE_DIR/logs/stdout.log"
    assert command.stderr_log == "$DROPLET_BASE_DIR/logs/stderr.log"


def test_procfile_without_web_falls_through_to_release(tmp_path: Path) -> None:
    _procfile(tmp_path, "worker: node worker.js\n")

    command = StartCommandResolver().resolve(tmp_path, release=RELEASE)

    assert command.source == "release"


def test_no_source_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(NoStartCommand) as excinfo:
        StartCommandResolver().resolve(tmp_path, release=ReleaseMetadata())
    assert str(excinfo.value) == "Please specify a web start command in your manifest.yml or Procfile"


def test_invalid_procfile_is_fatal_without_override(tmp_path: Path) -> None:
    _procfile(tmp_path, "- web: node app.js\n")

    with pytest.raises(InvalidProcfileFormat):
        StartCommandResolver().resolve(tmp_path, release=RELEASE)
