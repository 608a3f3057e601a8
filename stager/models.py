"""Core data models shared across staging components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

STDOUT_LOG = "$DROPLET_BASE_DIR/logs/stdout.log"
STDERR_LOG = "$DROPLET_BASE_DIR/logs/stderr.log"


@dataclass(frozen=True)
class RuntimeInfo:
    """Runtime the application was pushed with (e.g. ruby19, node)."""

    name: str
    version: str = ""
    executable: str = ""
    description: Optional[str] = None
    environment: Mapping[str, Any] = field(default_factory=dict)

    @property
    def library_version(self) -> str:
        """Ruby library directory name used by bundler installs."""
        return "1.8" if self.version.startswith("1.8") else "1.9.1"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuntimeInfo":
        environment = data.get("environment")
        return cls(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            executable=str(data.get("executable") or ""),
            description=data.get("description"),
            environment=dict(environment) if isinstance(environment, Mapping) else {},
        )


@dataclass(frozen=True)
class StagingRequest:
    """Everything a single staging run consumes. Immutable once staging begins."""

    source_dir: Path
    destination_dir: Path
    runtime: RuntimeInfo
    framework: str = "buildpack"
    command: Optional[str] = None
    buildpack_url: Optional[str] = None
    services: Tuple[Mapping[str, Any], ...] = ()
    memory_mb: Optional[int] = None
    cache_dir: Optional[Path] = None

    @property
    def app_dir(self) -> Path:
        return self.destination_dir / "app"

    @classmethod
    def from_environment(
        cls,
        source_dir: Path | str,
        destination_dir: Path | str,
        env: Mapping[str, Any],
    ) -> "StagingRequest":
        """Build a request from a staging environment mapping.

        The mapping uses the keys handed over by the staging service:
        ``runtime_info``, ``framework_info``, ``services``, ``meta.command``,
        ``buildpack`` and ``resources.memory``.
        """
        runtime_data = env.get("runtime_info")
        framework_data = env.get("framework_info")
        meta = env.get("meta")
        resources = env.get("resources")
        services = env.get("services") or []

        framework = "buildpack"
        if isinstance(framework_data, Mapping) and framework_data.get("name"):
            framework = str(framework_data["name"])

        command = None
        if isinstance(meta, Mapping) and meta.get("command"):
            command = str(meta["command"])

        memory = None
        if isinstance(resources, Mapping) and resources.get("memory") is not None:
            memory = int(resources["memory"])

        buildpack = env.get("buildpack")

        return cls(
            source_dir=Path(source_dir),
            destination_dir=Path(destination_dir),
            runtime=RuntimeInfo.from_dict(runtime_data if isinstance(runtime_data, Mapping) else {}),
            framework=framework,
            command=command,
            buildpack_url=str(buildpack) if buildpack else None,
            services=tuple(service for service in services if isinstance(service, Mapping)),
            memory_mb=memory,
        )


@dataclass(frozen=True)
class Buildpack:
    """A filesystem-resident buildpack exposing bin/detect, bin/compile and bin/release."""

    name: str
    path: Path

    def executable(self, phase: str) -> Path:
        return self.path / "bin" / phase


@dataclass(frozen=True)
class Detection:
    """Outcome of a buildpack detect phase."""

    matched: bool
    label: str = ""


@dataclass(frozen=True)
class SelectedBuildpack:
    """The buildpack chosen for a staging run and how it was chosen."""

    buildpack: Buildpack
    label: str = ""
    remote: bool = False


@dataclass
class ReleaseMetadata:
    """Parsed output of a buildpack release phase."""

    default_process_types: Dict[str, str] = field(default_factory=dict)
    config_vars: Dict[str, str] = field(default_factory=dict)

    @property
    def web_command(self) -> Optional[str]:
        return self.default_process_types.get("web") or None


@dataclass(frozen=True)
class StartCommand:
    """Resolved launch command plus where its output is redirected."""

    command: str
    source: str
    stdout_log: str = STDOUT_LOG
    stderr_log: str = STDERR_LOG


@dataclass(frozen=True)
class StagedDroplet:
    """Paths and decisions produced by a successful staging run."""

    droplet_dir: Path
    start_command: StartCommand
    startup_script: Path
    stop_script: Path
    buildpack: Optional[SelectedBuildpack] = None


__all__ = [
    "Buildpack",
    "Detection",
    "ReleaseMetadata",
    "RuntimeInfo",
    "STDERR_LOG",
    "STDOUT_LOG",
    "SelectedBuildpack",
    "StagedDroplet",
    "StagingRequest",
    "StartCommand",
]
