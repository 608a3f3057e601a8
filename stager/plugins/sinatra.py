"""Sinatra applications, staged without a buildpack."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from ..errors import NoEntryPointDetected
from ..models import StagedDroplet, StartCommand
from .base import EntryPattern, StagingPlugin, app_files_matching_patterns, compile_content_pattern

# Sinatra has no conventional startup file; the app is whichever Ruby file
# requires the framework.
ENTRY_PATTERNS: List[EntryPattern] = [
    ("*.rb", compile_content_pattern(r"""^\s*require[\s(]*['"]sinatra(/base)?['"]""")),
]

AUTOCONFIG_OPT_OUT_GEM = "cf-runtime"

_STDSYNC_SETUP = "\n".join(
    [
        "mkdir -p ruby",
        "echo \"\\$stdout.sync = true\" >> ./ruby/stdsync.rb",
    ]
)


class SinatraPlugin(StagingPlugin):
    framework = "sinatra"

    _main_file: Optional[str] = None

    def stage(self) -> StagedDroplet:
        # Resolve the entry file first so a failure leaves no scripts behind.
        command = self.start_command()
        self.logger.info("Staging Sinatra app %s using %s", self.request.source_dir, self.main_file())
        self.create_app_directories()
        self.copy_source_files()
        return self.create_scripts(command)

    def main_file(self) -> str:
        if self._main_file is None:
            matches = app_files_matching_patterns(self.request.source_dir, ENTRY_PATTERNS)
            if not matches:
                raise NoEntryPointDetected("Unable to determine Sinatra startup command")
            self._main_file = matches[0]
        return self._main_file

    def uses_bundler(self) -> bool:
        return (self.request.source_dir / "Gemfile.lock").is_file()

    def autoconfig_enabled(self) -> bool:
        if not self.request.services or not self.uses_bundler():
            return False
        lockfile = (self.request.source_dir / "Gemfile.lock").read_text(
            encoding="utf-8", errors="replace"
        )
        return AUTOCONFIG_OPT_OUT_GEM not in lockfile

    @property
    def local_runtime(self) -> str:
        return self.request.runtime.executable or "ruby"

    @property
    def library_version(self) -> str:
        return self.request.runtime.library_version

    def start_command(self) -> StartCommand:
        main = self.main_file()
        ruby = self.local_runtime
        if self.uses_bundler():
            bundle = f"{ruby} ./rubygems/ruby/{self.library_version}/bin/bundle exec {ruby}"
            if self.autoconfig_enabled():
                command = f"{bundle} -rcfautoconfig ./{main} $@"
            else:
                command = f"{bundle} ./{main} $@"
        else:
            command = f"{ruby} {main} $@"
        return StartCommand(command=command, source="plugin")

    def environment_variables(self) -> Dict[str, str]:
        variables: Dict[str, str] = {}
        if self.uses_bundler():
            gem_dir = f"$PWD/app/rubygems/ruby/{self.library_version}"
            variables["PATH"] = f"{gem_dir}/bin:$PATH"
            variables["GEM_PATH"] = gem_dir
            variables["GEM_HOME"] = gem_dir
            rubyopt = ["-I$PWD/ruby"]
            if self.autoconfig_enabled():
                rubyopt.append(f"-I{gem_dir}/gems/cf-autoconfig/lib")
            rubyopt.append("-rstdsync")
            variables["RUBYOPT"] = " ".join(rubyopt)
        else:
            variables["RUBYOPT"] = "-rubygems -I$PWD/ruby -rstdsync"
        variables["RACK_ENV"] = "${RACK_ENV:-production}"
        return variables

    def startup_script(self) -> str:
        return self.script_builder.startup_script(
            self.environment_variables(),
            self.start_command(),
            pre_launch=_STDSYNC_SETUP,
        )


__all__ = ["ENTRY_PATTERNS", "SinatraPlugin"]
