"""Configuration loading for stager (stager.yml)."""

from __future__ import annotations

import hashlib
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = "stager.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class BuildpackConfig:
    """Where locally installed buildpacks live and the order they are tried in."""

    path: Optional[Path] = None
    order: List[str] = field(default_factory=list)


@dataclass
class GitConfig:
    """Settings for cloning buildpacks from a source-control URL."""

    executable: str = "git"


@dataclass
class ConsoleConfig:
    """Operational console layering for Rails applications."""

    enabled: bool = True


@dataclass
class StagingConfig:
    """Settings shared by every staging run of one worker.

    Instances are passed explicitly into resolvers and plugins; nothing here
    is mutated during a run.
    """

    root: Path
    buildpacks: BuildpackConfig = field(default_factory=BuildpackConfig)
    cache_dir: Optional[Path] = None
    git: GitConfig = field(default_factory=GitConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)

    def cache_dir_for(self, source_dir: Path) -> Path:
        """Return the compile cache directory for the app at ``source_dir``.

        The directory name carries a digest of the resolved source path, so
        apps whose directories share a basename never share a cache.
        """
        base = self.cache_dir or Path(tempfile.gettempdir()) / "stager-cache"
        resolved = Path(source_dir).expanduser().resolve()
        digest = hashlib.sha256(str(resolved).encode("utf-8")).hexdigest()[:12]
        return base / f"{resolved.name or 'app'}-{digest}"


def load_config(config_path: Path) -> StagingConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return StagingConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    buildpack_data = _as_dict(data.get("buildpacks"))
    buildpacks = BuildpackConfig()
    if buildpack_data:
        path_str = _as_str(buildpack_data.get("path"))
        buildpacks.path = _resolve_path(root, path_str) if path_str else None
        buildpacks.order = _as_str_list(buildpack_data.get("order"))

    cache_str = _as_str(data.get("cache_dir"))
    cache_dir = _resolve_path(root, cache_str) if cache_str else None

    git_data = _as_dict(data.get("git"))
    git = GitConfig()
    if git_data:
        git.executable = _as_str(git_data.get("executable")) or git.executable

    console_data = _as_dict(data.get("console"))
    console = ConsoleConfig()
    if console_data:
        enabled = _as_bool(console_data.get("enabled"))
        if enabled is not None:
            console.enabled = enabled

    return StagingConfig(
        root=root,
        buildpacks=buildpacks,
        cache_dir=cache_dir,
        git=git,
        console=console,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
