"""CLI entrypoints for stager commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

import yaml

from .config import ConfigError, load_config
from .errors import StagingError
from .logging import configure_logging
from .models import StagingRequest
from .orchestrator import Stager
from .plugins import available_frameworks


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stager",
        description="Stage application source trees into runnable droplets.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    stage_parser = subparsers.add_parser(
        "stage",
        help="Stage an application into a droplet directory.",
    )
    _add_verbose_option(stage_parser, suppress_default=True)
    stage_parser.add_argument("source", help="Application source directory.")
    stage_parser.add_argument("destination", help="Droplet directory to create.")
    stage_parser.add_argument(
        "--env",
        dest="env_file",
        help="YAML or JSON staging environment (runtime_info, framework_info, services, ...).",
    )
    stage_parser.add_argument(
        "--config",
        default=".",
        help="Path to stager.yml or the directory containing it (defaults to current directory).",
    )
    stage_parser.add_argument(
        "--start-command",
        dest="start_command",
        help="Explicit start command; takes precedence over Procfile and buildpack defaults.",
    )
    stage_parser.add_argument(
        "--buildpack",
        help="Git URL of a buildpack to use instead of detecting a local one.",
    )
    stage_parser.add_argument(
        "--framework",
        choices=available_frameworks(),
        help="Override the framework named in the staging environment.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for stager commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "stage":
        try:
            config = load_config(Path(args.config))
            env = _load_environment(args)
            request = StagingRequest.from_environment(
                Path(args.source).expanduser().resolve(),
                Path(args.destination).expanduser().resolve(),
                env,
            )
            droplet = Stager(config).stage(request)
        except (ConfigError, StagingError) as exc:
            parser.exit(1, f"stager stage failed: {exc}\n")
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        print(f"Droplet staged at {droplet.droplet_dir}")
        print(f"Start command ({droplet.start_command.source}): {droplet.start_command.command}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _load_environment(args: argparse.Namespace) -> Dict[str, Any]:
    env: Dict[str, Any] = {}
    if args.env_file:
        text = Path(args.env_file).read_text(encoding="utf-8")
        try:
            loaded = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse {args.env_file}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"{args.env_file} must contain a mapping at the root")
        env.update(loaded)
    if args.start_command:
        meta = dict(env.get("meta") or {})
        meta["command"] = args.start_command
        env["meta"] = meta
    if args.buildpack:
        env["buildpack"] = args.buildpack
    if args.framework:
        env["framework_info"] = {**(env.get("framework_info") or {}), "name": args.framework}
    return env


if __name__ == "__main__":
    main(sys.argv[1:])
