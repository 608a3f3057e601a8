"""Startup and stop script generation for staged droplets."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence, Tuple, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import StartCommand

RUN_PID_FILE = "$DROPLET_BASE_DIR/run.pid"
STARTUP_SCRIPT = "startup"
STOP_SCRIPT = "stop"

_ENV_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

EnvVars = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


class EnvironmentScriptBuilder:
    """Renders the startup/stop shell scripts of a droplet.

    Output is a pure function of the inputs, so regenerating a script from the
    same environment and command yields byte-identical text.
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def startup_script(
        self,
        env_vars: EnvVars,
        command: StartCommand,
        *,
        pre_launch: str | None = None,
        post_profile: str | None = None,
        pid_file: str = RUN_PID_FILE,
    ) -> str:
        """Render the startup script.

        Exports come first, then ``pre_launch``, the ``app/.profile.d`` sourcing
        loop, ``post_profile`` and finally the backgrounded start command.
        """
        template = self._env.get_template("startup.sh.j2")
        return template.render(
            exports=_exports(env_vars),
            pre_launch=_block(pre_launch),
            post_profile=_block(post_profile),
            command=command,
            pid_file=pid_file,
        )

    def stop_script(self, pid_files: Sequence[str] = (RUN_PID_FILE,)) -> str:
        """Render a stop script terminating every pid recorded in ``pid_files``."""
        template = self._env.get_template("stop.sh.j2")
        return template.render(pid_files=list(pid_files))

    def write(self, droplet_dir: Path, startup: str, stop: str) -> Tuple[Path, Path]:
        """Write both scripts into ``droplet_dir`` with the executable bit set."""
        startup_path = _write_executable(Path(droplet_dir) / STARTUP_SCRIPT, startup)
        stop_path = _write_executable(Path(droplet_dir) / STOP_SCRIPT, stop)
        return startup_path, stop_path


def _exports(env_vars: EnvVars) -> List[Tuple[str, str]]:
    # Every pair is exported in the order given; the shell makes the last write win.
    items = env_vars.items() if isinstance(env_vars, Mapping) else env_vars
    exports: List[Tuple[str, str]] = []
    for name, value in items:
        if not _ENV_NAME.match(name):
            raise ValueError(f"Invalid environment variable name: {name!r}")
        exports.append((name, _quote(str(value))))
    return exports


def _quote(value: str) -> str:
    return value.replace('"', '\\"')


def _block(text: str | None) -> str:
    if not text:
        return ""
    return text.strip("\n")


def _write_executable(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    os.chmod(path, 0o755)
    return path


__all__ = [
    "EnvironmentScriptBuilder",
    "RUN_PID_FILE",
    "STARTUP_SCRIPT",
    "STOP_SCRIPT",
]
