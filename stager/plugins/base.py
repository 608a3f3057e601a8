"""Staging plugin interface and droplet layout helpers shared by all plugins."""

from __future__ import annotations

import re
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..config import StagingConfig
from ..logging import get_logger
from ..models import StagedDroplet, StagingRequest, StartCommand
from ..process import ProcessRunner
from ..scripts import RUN_PID_FILE, EnvironmentScriptBuilder

EntryPattern = Tuple[str, Optional[re.Pattern[str]]]


class StagingPlugin(ABC):
    """Contract implemented by every way of turning an app into a droplet."""

    framework: str = ""

    def __init__(
        self,
        request: StagingRequest,
        config: StagingConfig,
        *,
        runner: ProcessRunner | None = None,
        script_builder: EnvironmentScriptBuilder | None = None,
    ) -> None:
        self.request = request
        self.config = config
        self.runner = runner
        self.script_builder = script_builder or EnvironmentScriptBuilder()
        self.logger = get_logger(f"plugins.{self.framework or type(self).__name__.lower()}")

    @property
    def destination_dir(self) -> Path:
        return self.request.destination_dir

    @property
    def app_dir(self) -> Path:
        return self.request.app_dir

    @abstractmethod
    def stage(self) -> StagedDroplet:
        """Build the droplet in the request's destination directory."""

    @abstractmethod
    def start_command(self) -> StartCommand:
        """Return the command the startup script launches."""

    @abstractmethod
    def startup_script(self) -> str:
        """Render the startup script text."""

    def stop_script(self) -> str:
        return self.script_builder.stop_script(self.pid_files())

    def pid_files(self) -> List[str]:
        return [RUN_PID_FILE]

    # ------------------------------------------------------------------
    # Droplet layout

    def create_app_directories(self) -> None:
        for name in ("logs", "tmp"):
            (self.destination_dir / name).mkdir(parents=True, exist_ok=True)

    def copy_source_files(self) -> None:
        self.logger.debug("Copying %s to %s", self.request.source_dir, self.app_dir)
        shutil.copytree(self.request.source_dir, self.app_dir, symlinks=True, dirs_exist_ok=True)

    def create_scripts(self, command: StartCommand) -> StagedDroplet:
        startup_path, stop_path = self.script_builder.write(
            self.destination_dir, self.startup_script(), self.stop_script()
        )
        self.logger.info("Wrote startup and stop scripts to %s", self.destination_dir)
        return StagedDroplet(
            droplet_dir=self.destination_dir,
            start_command=command,
            startup_script=startup_path,
            stop_script=stop_path,
        )


def app_files_matching_patterns(root: Path, patterns: Sequence[EntryPattern]) -> List[str]:
    """Return app-root files matching any ``(glob, content regex)`` pattern.

    Patterns are tried in order; within one glob, files are sorted by name.
    A ``None`` regex accepts any file the glob matches.
    """
    matches: List[str] = []
    for glob, content in patterns:
        for path in sorted(Path(root).glob(glob)):
            if not path.is_file() or path.name in matches:
                continue
            if content is not None and not content.search(_safe_read(path, max_chars=8000)):
                continue
            matches.append(path.name)
    return matches


def compile_content_pattern(expression: str) -> re.Pattern[str]:
    return re.compile(expression, re.MULTILINE)


def _safe_read(path: Path, *, max_chars: int) -> str:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""
    return text[:max_chars]


__all__ = [
    "EntryPattern",
    "StagingPlugin",
    "app_files_matching_patterns",
    "compile_content_pattern",
]
