"""Helper utilities for constructing throwaway apps and buildpacks in tests."""

from __future__ import annotations

import os
import textwrap
from pathlib import Path
from typing import Mapping

from stager.models import Buildpack


class AppBuilder:
    """Writes files into a throwaway application source tree."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "src" / "myapp"
        self.root.mkdir(parents=True)

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the application."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def path(self) -> Path:
        """Return the application root path."""
        return self.root


class BuildpackBuilder:
    """Creates fake buildpacks whose phases are small shell scripts."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "buildpacks"
        self.root.mkdir()

    def add(
        self,
        name: str,
        *,
        detect: bool = True,
        label: str = "",
        release: str = "--- {}\n",
        compile_exit: int = 0,
    ) -> Buildpack:
        bin_dir = self.root / name / "bin"
        bin_dir.mkdir(parents=True)
        detect_body = f"echo '{label}'\nexit 0" if detect else "exit 1"
        _script(bin_dir / "detect", detect_body)
        _script(
            bin_dir / "compile",
            f'echo "compiled by {name}" > "$1/compiled.txt"\nexit {compile_exit}',
        )
        _script(bin_dir / "release", f"cat <<'YAML'\n{release.rstrip()}\nYAML")
        return Buildpack(name=name, path=self.root / name)


def _script(path: Path, body: str) -> None:
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    os.chmod(path, 0o755)


__all__ = ["AppBuilder", "BuildpackBuilder"]
