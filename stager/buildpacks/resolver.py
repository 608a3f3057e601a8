"""Selection of the buildpack that stages an application."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from ..config import StagingConfig
from ..errors import BuildpackFetchFailed, NoMatchingBuildpack
from ..logging import get_logger
from ..models import Buildpack, SelectedBuildpack
from ..process import ProcessRunner, run_process
from .contract import BuildpackContractRunner

BUILDPACKS_SUBDIR = ".buildpacks"


class BuildpackResolver:
    """Chooses one buildpack per staging run.

    A buildpack URL replaces the local list entirely: it is cloned into the
    app's ``.buildpacks`` directory and used without running detect. Otherwise
    local buildpacks are probed in priority order and the first match wins.
    """

    def __init__(
        self,
        config: StagingConfig,
        *,
        contract: BuildpackContractRunner | None = None,
        runner: ProcessRunner | None = None,
        buildpacks: Sequence[Buildpack] | None = None,
    ) -> None:
        self.config = config
        self._runner = runner or run_process
        self.contract = contract or BuildpackContractRunner(self._runner)
        self._buildpacks = list(buildpacks) if buildpacks is not None else None
        self.logger = get_logger("buildpacks.resolver")

    @property
    def buildpacks(self) -> List[Buildpack]:
        if self._buildpacks is None:
            self._buildpacks = discover_buildpacks(
                self.config.buildpacks.path, self.config.buildpacks.order
            )
        return list(self._buildpacks)

    def resolve(self, app_dir: Path, buildpack_url: str | None = None) -> SelectedBuildpack:
        if buildpack_url:
            return SelectedBuildpack(buildpack=self.clone(app_dir, buildpack_url), remote=True)

        for buildpack in self.buildpacks:
            detection = self.contract.detect(buildpack, app_dir)
            if detection.matched:
                self.logger.info(
                    "Detected buildpack %s%s",
                    buildpack.name,
                    f" ({detection.label})" if detection.label else "",
                )
                return SelectedBuildpack(buildpack=buildpack, label=detection.label)

        raise NoMatchingBuildpack()

    def clone(self, app_dir: Path, buildpack_url: str) -> Buildpack:
        """Clone ``buildpack_url`` into the app's ``.buildpacks`` directory."""
        name = _buildpack_name(buildpack_url)
        target = Path(app_dir) / BUILDPACKS_SUBDIR
        self.logger.info("Cloning buildpack %s", buildpack_url)
        result = self._runner(
            [self.config.git.executable, "clone", buildpack_url, str(target)],
            cwd=Path(app_dir),
        )
        if not result.ok:
            self.logger.error("git clone of %s failed: %s", buildpack_url, result.stderr.strip())
            raise BuildpackFetchFailed()
        return Buildpack(name=name, path=target)


def discover_buildpacks(root: Path | None, order: Sequence[str] = ()) -> List[Buildpack]:
    """List buildpacks installed under ``root``.

    Names in ``order`` come first, in that order; any remaining buildpacks
    follow sorted by name so the overall order is total.
    """
    if root is None or not root.is_dir():
        return []
    available = {
        entry.name: Buildpack(name=entry.name, path=entry)
        for entry in root.iterdir()
        if entry.is_dir() and (entry / "bin" / "detect").exists()
    }
    ordered: List[Buildpack] = []
    for name in order:
        buildpack = available.pop(name, None)
        if buildpack is not None:
            ordered.append(buildpack)
    ordered.extend(available[name] for name in sorted(available))
    return ordered


def _buildpack_name(url: str) -> str:
    name = url.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name or "buildpack"


__all__ = ["BUILDPACKS_SUBDIR", "BuildpackResolver", "discover_buildpacks"]
