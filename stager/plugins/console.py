"""Operational console layered onto Rails droplets."""

from __future__ import annotations

import secrets
import shutil
from pathlib import Path
from typing import Callable, Dict

import yaml

from ..models import SelectedBuildpack

RAILS_LABEL = "Ruby/Rails"
CONSOLE_DIR = "cf-rails-console"
CONSOLE_SCRIPT = "rails_console.rb"
ACCESS_FILE = ".consoleaccess"
CONSOLE_PID_FILE = "$DROPLET_BASE_DIR/console.pid"

_RESOURCE_DIR = Path(__file__).with_name("resources") / CONSOLE_DIR

_START_BLOCK = """\
if [ -n "$VCAP_CONSOLE_PORT" ]; then
  cd app
  bundle exec ruby cf-rails-console/rails_console.rb >> ../logs/console.log 2>> ../logs/console.log &
  CONSOLE_STARTED=$!
  echo "$CONSOLE_STARTED" >> ../console.pid
  cd ..
fi"""


def generate_credentials() -> Dict[str, str]:
    return {"username": secrets.token_hex(8), "password": secrets.token_hex(16)}


class RailsConsole:
    """Installs the remote Rails console and its launcher block."""

    def __init__(self, credentials: Callable[[], Dict[str, str]] = generate_credentials) -> None:
        self._credentials = credentials

    @staticmethod
    def applies(selected: SelectedBuildpack) -> bool:
        return selected.label == RAILS_LABEL

    def install(self, app_dir: Path) -> Path:
        """Copy the console into ``app_dir`` and write its access file."""
        target = Path(app_dir) / CONSOLE_DIR
        target.mkdir(parents=True, exist_ok=True)
        shutil.copy2(_RESOURCE_DIR / CONSOLE_SCRIPT, target / CONSOLE_SCRIPT)
        access = target / ACCESS_FILE
        access.write_text(
            yaml.safe_dump(self._credentials(), default_flow_style=False), encoding="utf-8"
        )
        access.chmod(0o600)
        return target

    @staticmethod
    def startup_block() -> str:
        return _START_BLOCK


__all__ = ["CONSOLE_PID_FILE", "RAILS_LABEL", "RailsConsole", "generate_credentials"]
