"""Process runner used at the buildpack and git shelling-out boundary."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured output of a finished external process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


ProcessRunner = Callable[..., ProcessResult]


def run_process(
    args: Iterable[str],
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> ProcessResult:
    """Run ``args`` to completion and capture its exit code and output.

    A non-zero exit is reported through ``returncode``; it is up to the caller
    to decide whether that is a failure or a negative answer (detect).
    """
    completed = subprocess.run(
        list(args),
        cwd=str(cwd) if cwd is not None else None,
        env=env,
        check=False,
        text=True,
        capture_output=True,
    )
    return ProcessResult(
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


__all__ = ["ProcessResult", "ProcessRunner", "run_process"]
