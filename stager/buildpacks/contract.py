"""Execution of the detect/compile/release buildpack contract."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..errors import BuildpackCompileFailed, InvalidReleaseOutput
from ..logging import get_logger
from ..models import Buildpack, Detection, ReleaseMetadata
from ..process import ProcessResult, ProcessRunner, run_process


class BuildpackContractRunner:
    """Runs a single buildpack's phases against an application directory."""

    def __init__(self, runner: ProcessRunner | None = None) -> None:
        self._runner = runner or run_process
        self.logger = get_logger("buildpacks.contract")

    def detect(self, buildpack: Buildpack, app_dir: Path) -> Detection:
        """Return whether ``buildpack`` claims the app; exit status 0 is a match."""
        result = self._run(buildpack, "detect", [str(app_dir)])
        if not result.ok:
            self.logger.debug("Buildpack %s did not match", buildpack.name)
            return Detection(matched=False)
        return Detection(matched=True, label=result.stdout.strip())

    def compile(self, buildpack: Buildpack, app_dir: Path, cache_dir: Path) -> None:
        """Install dependencies into the app tree. A non-zero exit aborts staging."""
        self.logger.info("Compiling with buildpack %s", buildpack.name)
        result = self._run(buildpack, "compile", [str(app_dir), str(cache_dir)])
        _log_output(self.logger, result)
        if not result.ok:
            raise BuildpackCompileFailed(
                f"Buildpack compilation step failed (exit status {result.returncode})"
            )

    def release(self, buildpack: Buildpack, app_dir: Path) -> ReleaseMetadata:
        """Run the release phase and parse its YAML output."""
        result = self._run(buildpack, "release", [str(app_dir)])
        if not result.ok:
            raise InvalidReleaseOutput(f"Release info failed:\n{result.stdout}{result.stderr}")
        return parse_release_output(result.stdout)

    def _run(self, buildpack: Buildpack, phase: str, args: List[str]) -> ProcessResult:
        command = [str(buildpack.executable(phase)), *args]
        self.logger.debug("Running %s", " ".join(command))
        return self._runner(command, cwd=Path(args[0]))


def parse_release_output(text: str) -> ReleaseMetadata:
    """Turn release-phase stdout into :class:`ReleaseMetadata`."""
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidReleaseOutput(f"Invalid release output: {exc}") from exc

    if not isinstance(loaded, dict):
        raise InvalidReleaseOutput()

    process_types = _string_mapping(loaded, "default_process_types")
    config_vars = _string_mapping(loaded, "config_vars")

    return ReleaseMetadata(
        default_process_types=process_types,
        config_vars=config_vars,
    )


def _string_mapping(data: Dict[str, Any], key: str) -> Dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidReleaseOutput(f"Invalid release output: '{key}' must be a mapping")
    return {str(name): "" if item is None else str(item) for name, item in value.items()}


def _log_output(logger, result: ProcessResult) -> None:
    for line in (result.stdout + result.stderr).splitlines():
        logger.debug("  %s", line)


__all__ = ["BuildpackContractRunner", "parse_release_output"]
