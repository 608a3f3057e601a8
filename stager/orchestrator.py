"""Top-level entry point for staging a single application."""

from __future__ import annotations

from pathlib import Path

from .config import StagingConfig
from .errors import StagingError
from .logging import get_logger, staging_log
from .models import StagedDroplet, StagingRequest
from .plugins import StagingPlugin, plugin_class_for
from .process import ProcessRunner
from .scripts import EnvironmentScriptBuilder


class Stager:
    """Dispatches a staging request to the plugin for its framework.

    A ``Stager`` holds no per-run state, so one instance can serve requests
    from several worker threads as long as each targets its own destination.
    """

    def __init__(
        self,
        config: StagingConfig | None = None,
        *,
        runner: ProcessRunner | None = None,
        script_builder: EnvironmentScriptBuilder | None = None,
    ) -> None:
        self.config = config or StagingConfig(root=Path.cwd())
        self._runner = runner
        self._script_builder = script_builder
        self.logger = get_logger("orchestrator")

    def plugin_for(self, request: StagingRequest) -> StagingPlugin:
        plugin_cls = plugin_class_for(request.framework)
        self.logger.debug("Using %s for framework %s", plugin_cls.__name__, request.framework)
        return plugin_cls(
            request,
            self.config,
            runner=self._runner,
            script_builder=self._script_builder,
        )

    def stage(self, request: StagingRequest) -> StagedDroplet:
        """Stage ``request`` and return the resulting droplet description."""
        plugin = self.plugin_for(request)
        with staging_log(request.destination_dir):
            try:
                droplet = plugin.stage()
            except StagingError as exc:
                self.logger.error("Staging failed [%s]: %s", exc.kind, exc)
                raise
            self.logger.info(
                "Staged %s (start command from %s)",
                droplet.droplet_dir,
                droplet.start_command.source,
            )
        return droplet


__all__ = ["Stager"]
