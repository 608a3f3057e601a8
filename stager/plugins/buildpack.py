"""Staging through the detect/compile/release buildpack contract."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from ..buildpacks import BuildpackContractRunner, BuildpackResolver
from ..config import StagingConfig
from ..models import ReleaseMetadata, SelectedBuildpack, StagedDroplet, StagingRequest, StartCommand
from ..process import ProcessRunner, run_process
from ..scripts import RUN_PID_FILE, EnvironmentScriptBuilder
from ..start_command import StartCommandResolver
from .base import StagingPlugin
from .console import CONSOLE_PID_FILE, RailsConsole

_PRE_LAUNCH = "unset GEM_PATH"
_DUMP_ENV = "env > logs/env.log"


class BuildpackPlugin(StagingPlugin):
    """Generic orchestrator: pick a buildpack, compile, release, emit scripts.

    Steps run strictly in sequence and any failure aborts the run with the
    error kind raised by the failing component.
    """

    framework = "buildpack"

    def __init__(
        self,
        request: StagingRequest,
        config: StagingConfig,
        *,
        runner: ProcessRunner | None = None,
        script_builder: EnvironmentScriptBuilder | None = None,
        resolver: BuildpackResolver | None = None,
        contract: BuildpackContractRunner | None = None,
        command_resolver: StartCommandResolver | None = None,
        console: RailsConsole | None = None,
    ) -> None:
        super().__init__(request, config, runner=runner, script_builder=script_builder)
        process_runner = runner or run_process
        self.contract = contract or BuildpackContractRunner(process_runner)
        self.resolver = resolver or BuildpackResolver(
            config, contract=self.contract, runner=process_runner
        )
        self.command_resolver = command_resolver or StartCommandResolver()
        self.console = console or RailsConsole()
        self._selected: Optional[SelectedBuildpack] = None
        self._release: Optional[ReleaseMetadata] = None
        self._command: Optional[StartCommand] = None

    def stage(self) -> StagedDroplet:
        self.logger.info("Staging %s into %s", self.request.source_dir, self.destination_dir)
        self.create_app_directories()
        self.copy_source_files()

        selected = self.build_pack()
        cache_dir = self.cache_dir
        cache_dir.mkdir(parents=True, exist_ok=True)
        self.contract.compile(selected.buildpack, self.app_dir, cache_dir)
        self._release = self.contract.release(selected.buildpack, self.app_dir)

        command = self.start_command()
        if self.console_enabled():
            self.console.install(self.app_dir)

        return replace(self.create_scripts(command), buildpack=selected)

    def build_pack(self) -> SelectedBuildpack:
        if self._selected is None:
            self._selected = self.resolver.resolve(self.app_dir, self.request.buildpack_url)
        return self._selected

    @property
    def release_info(self) -> Optional[ReleaseMetadata]:
        return self._release

    def start_command(self) -> StartCommand:
        if self._command is None:
            self._command = self.command_resolver.resolve(
                self.app_dir,
                override=self.request.command,
                release=self._release,
            )
        return self._command

    def console_enabled(self) -> bool:
        return (
            self.config.console.enabled
            and self._selected is not None
            and self.console.applies(self._selected)
        )

    def environment_variables(self) -> Dict[str, str]:
        variables: Dict[str, str] = {}
        if self._release is not None:
            for name, value in self._release.config_vars.items():
                variables[name] = f"${{{name}:-{value}}}"
        variables["HOME"] = "$PWD/app"
        variables["PORT"] = "$VCAP_APP_PORT"
        if self.request.memory_mb is not None:
            variables["MEMORY_LIMIT"] = f"{self.request.memory_mb}m"
        return variables

    def startup_script(self) -> str:
        post_profile: List[str] = [_DUMP_ENV]
        if self.console_enabled():
            post_profile.append(self.console.startup_block())
        return self.script_builder.startup_script(
            self.environment_variables(),
            self.start_command(),
            pre_launch=_PRE_LAUNCH,
            post_profile="\n".join(post_profile),
        )

    def pid_files(self) -> List[str]:
        if self.console_enabled():
            return [RUN_PID_FILE, CONSOLE_PID_FILE]
        return [RUN_PID_FILE]

    @property
    def cache_dir(self) -> Path:
        return self.request.cache_dir or self.config.cache_dir_for(self.request.source_dir)


__all__ = ["BuildpackPlugin"]
