"""Node.js applications, staged without a buildpack."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..errors import NoEntryPointDetected
from ..models import StagedDroplet, StartCommand
from .base import EntryPattern, StagingPlugin, app_files_matching_patterns

ENTRY_PATTERNS: List[EntryPattern] = [
    ("server.js", None),
    ("app.js", None),
    ("index.js", None),
    ("main.js", None),
    ("application.js", None),
]


class NodePlugin(StagingPlugin):
    framework = "node"

    _main_file: Optional[str] = None

    def stage(self) -> StagedDroplet:
        command = self.start_command()
        self.create_app_directories()
        self.copy_source_files()
        return self.create_scripts(command)

    def main_file(self) -> str:
        if self._main_file is None:
            matches = app_files_matching_patterns(self.request.source_dir, ENTRY_PATTERNS)
            if not matches:
                raise NoEntryPointDetected("Unable to determine Node.js startup command")
            self._main_file = matches[0]
        return self._main_file

    def start_command(self) -> StartCommand:
        node = self.request.runtime.executable or "node"
        return StartCommand(command=f"{node} {self.main_file()} $@", source="plugin")

    def environment_variables(self) -> Dict[str, str]:
        variables = {"NODE_ENV": "${NODE_ENV:-production}"}
        if (self.request.source_dir / "package.json").is_file():
            variables["NODE_PATH"] = "$PWD/app/node_modules"
        return variables

    def startup_script(self) -> str:
        return self.script_builder.startup_script(self.environment_variables(), self.start_command())


__all__ = ["ENTRY_PATTERNS", "NodePlugin"]
