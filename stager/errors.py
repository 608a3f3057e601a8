"""Error kinds raised while staging an application."""

from __future__ import annotations


class StagingError(RuntimeError):
    """Base class for staging failures that abort the run.

    Each subclass names a specific, user-actionable error kind so callers can
    map failures to messages or exit codes without parsing text.
    """

    kind = "StagingFailed"
    default_message = "Staging failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BuildpackFetchFailed(StagingError):
    kind = "BuildpackFetchFailed"
    default_message = "Failed to git clone buildpack"


class NoMatchingBuildpack(StagingError):
    kind = "NoMatchingBuildpack"
    default_message = "Unable to detect a supported application type"


class BuildpackCompileFailed(StagingError):
    kind = "BuildpackCompileFailed"
    default_message = "Buildpack compilation step failed"


class InvalidReleaseOutput(StagingError):
    kind = "InvalidReleaseOutput"
    default_message = "Invalid release output: expected a YAML mapping"


class InvalidProcfileFormat(StagingError):
    kind = "InvalidProcfileFormat"
    default_message = "Invalid Procfile format.  Please ensure it is a valid YAML hash"


class NoStartCommand(StagingError):
    kind = "NoStartCommand"
    default_message = "Please specify a web start command in your manifest.yml or Procfile"


class NoEntryPointDetected(StagingError):
    kind = "NoEntryPointDetected"
    default_message = "Unable to determine startup command"


class UnknownFramework(StagingError):
    kind = "UnknownFramework"
    default_message = "No staging plugin is registered for this framework"


__all__ = [
    "BuildpackCompileFailed",
    "BuildpackFetchFailed",
    "InvalidProcfileFormat",
    "InvalidReleaseOutput",
    "NoEntryPointDetected",
    "NoMatchingBuildpack",
    "NoStartCommand",
    "StagingError",
    "UnknownFramework",
]
