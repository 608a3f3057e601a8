"""Procfile parsing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml

from .errors import InvalidProcfileFormat

PROCFILE_NAME = "Procfile"


@dataclass(frozen=True)
class Procfile:
    """Process-type name to shell command mapping declared by the app."""

    processes: Dict[str, str]

    @property
    def web(self) -> Optional[str]:
        return self.processes.get("web") or None


class ProcfileResolver:
    """Reads the optional Procfile at an application root."""

    def resolve(self, app_dir: Path) -> Optional[Procfile]:
        """Return the parsed Procfile, or ``None`` when the app has none."""
        path = Path(app_dir) / PROCFILE_NAME
        if not path.is_file():
            return None
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidProcfileFormat() from exc
        return parse_procfile(text)


def parse_procfile(text: str) -> Procfile:
    """Parse Procfile text; anything but a string-to-string mapping is rejected."""
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidProcfileFormat() from exc

    if not isinstance(loaded, dict):
        raise InvalidProcfileFormat()

    processes: Dict[str, str] = {}
    for name, command in loaded.items():
        if not isinstance(name, str) or not isinstance(command, str):
            raise InvalidProcfileFormat()
        processes[name] = command
    return Procfile(processes=processes)


__all__ = ["PROCFILE_NAME", "Procfile", "ProcfileResolver", "parse_procfile"]
