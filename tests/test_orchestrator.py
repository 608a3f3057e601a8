"""Tests for dispatching staging requests to plugins."""

from __future__ import annotations

from pathlib import Path

import pytest

from stager import Stager, StagingRequest
from stager.config import BuildpackConfig, StagingConfig
from stager.errors import StagingError, UnknownFramework
from stager.models import RuntimeInfo
from stager.plugins import BuildpackPlugin, SinatraPlugin


def _request(tmp_path: Path, app_dir: Path, framework: str) -> StagingRequest:
    return StagingRequest(
        source_dir=app_dir,
        destination_dir=tmp_path / "droplet",
        runtime=RuntimeInfo(name="ruby19", version="1.9.2", executable="ruby"),
        framework=framework,
    )


def test_plugin_selected_by_framework(tmp_path, app_builder) -> None:
    stager = Stager(StagingConfig(root=tmp_path))

    assert isinstance(stager.plugin_for(_request(tmp_path, app_builder.path(), "buildpack")), BuildpackPlugin)
    assert isinstance(stager.plugin_for(_request(tmp_path, app_builder.path(), "sinatra")), SinatraPlugin)


def test_unknown_framework_is_a_staging_error(tmp_path, app_builder) -> None:
    with pytest.raises(StagingError) as excinfo:
        Stager(StagingConfig(root=tmp_path)).stage(_request(tmp_path, app_builder.path(), "zope"))
    assert isinstance(excinfo.value, UnknownFramework)


def test_stage_through_buildpack(tmp_path, app_builder, buildpack_builder) -> None:
    app_builder.write({"app.js": "// app\n"})
    buildpack_builder.add("nodejs", release="default_process_types:\n  web: node app.js")
    config = StagingConfig(
        root=tmp_path,
        buildpacks=BuildpackConfig(path=buildpack_builder.root),
        cache_dir=tmp_path / "cache",
    )

    droplet = Stager(config).stage(_request(tmp_path, app_builder.path(), "buildpack"))

    assert droplet.start_command.command == "node app.js"
    assert droplet.startup_script == tmp_path / "droplet" / "startup"


def test_stage_through_sinatra(tmp_path, app_builder) -> None:
    app_builder.write({"web.rb": "require 'sinatra'\n"})

    droplet = Stager(StagingConfig(root=tmp_path)).stage(_request(tmp_path, app_builder.path(), "sinatra"))

    assert droplet.start_command.command == "ruby web.rb $@"
    assert droplet.buildpack is None


def test_staging_log_records_run_and_failure(tmp_path, app_builder) -> None:
    app_builder.write({"web.rb": "require 'sinatra'\n"})
    Stager(StagingConfig(root=tmp_path)).stage(_request(tmp_path, app_builder.path(), "sinatra"))

    log = (tmp_path / "droplet" / "logs" / "staging.log").read_text(encoding="utf-8")
    assert "Staged" in log

    other = tmp_path / "other"
    other.mkdir()
    failing = StagingRequest(
        source_dir=other,
        destination_dir=tmp_path / "failed",
        runtime=RuntimeInfo(name="node"),
        framework="node",
    )
    with pytest.raises(StagingError):
        Stager(StagingConfig(root=tmp_path)).stage(failing)

    failed_log = (tmp_path / "failed" / "logs" / "staging.log").read_text(encoding="utf-8")
    assert "Staging failed [NoEntryPointDetected]" in failed_log
    assert not (tmp_path / "failed" / "startup").exists()
