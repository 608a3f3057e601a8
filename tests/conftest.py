from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from tests._fixtures.builders import AppBuilder, BuildpackBuilder


@pytest.fixture
def app_builder(tmp_path: Path) -> AppBuilder:
    """Provide an application source tree rooted at the pytest tmp_path."""
    return AppBuilder(tmp_path)


@pytest.fixture
def buildpack_builder(tmp_path: Path) -> BuildpackBuilder:
    """Provide a directory of fake buildpacks rooted at the pytest tmp_path."""
    return BuildpackBuilder(tmp_path)


@pytest.fixture
def staging_env() -> Dict[str, Any]:
    """Staging environment for a plain buildpack push."""
    return {
        "runtime_info": {
            "name": "ruby18",
            "version": "1.8.7",
            "description": "Ruby 1.8.7",
            "executable": "/usr/bin/ruby",
            "environment": {"bundle_gemfile": None},
        },
        "framework_info": {
            "name": "buildpack",
            "runtimes": [{"ruby18": {"default": True}}, {"ruby19": {"default": False}}],
        },
        "services": [],
    }
