"""Buildpack discovery, selection and contract execution."""

from __future__ import annotations

from .contract import BuildpackContractRunner, parse_release_output
from .resolver import BUILDPACKS_SUBDIR, BuildpackResolver, discover_buildpacks

__all__ = [
    "BUILDPACKS_SUBDIR",
    "BuildpackContractRunner",
    "BuildpackResolver",
    "discover_buildpacks",
    "parse_release_output",
]
