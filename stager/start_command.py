"""Start command resolution across the override, Procfile and release metadata."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .errors import NoStartCommand
from .logging import get_logger
from .models import ReleaseMetadata, StartCommand
from .procfile import ProcfileResolver

logger = get_logger("start_command")


class StartCommandResolver:
    """Picks the launch command using a fixed precedence.

    1. explicit override on the staging request
    2. ``web`` entry of the Procfile
    3. ``default_process_types.web`` from the buildpack release phase

    The Procfile is only read when there is no override. There is no further
    fallback: if none of the sources yields a command, :class:`NoStartCommand`
    is raised.
    """

    def __init__(self, procfile_resolver: ProcfileResolver | None = None) -> None:
        self.procfile_resolver = procfile_resolver or ProcfileResolver()

    def resolve(
        self,
        app_dir: Path,
        *,
        override: Optional[str] = None,
        release: Optional[ReleaseMetadata] = None,
    ) -> StartCommand:
        if override:
            return self._chosen(override, "override")

        procfile = self.procfile_resolver.resolve(app_dir)
        if procfile is not None and procfile.web:
            return self._chosen(procfile.web, "procfile")

        if release is not None and release.web_command:
            return self._chosen(release.web_command, "release")

        raise NoStartCommand()

    @staticmethod
    def _chosen(command: str, source: str) -> StartCommand:
        logger.info("Using start command from %s: %s", source, command)
        return StartCommand(command=command, source=source)


__all__ = ["StartCommandResolver"]
