"""``antler`` console entry point."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from antler import __version__
from antler.config import find_config, load_settings
from antler.engine import Project
from antler.errors import BuildError, format_error
from antler.framework import Registry
from antler.loader import load_project
from antler.model.project import ProjectDefinition
from antler.model.settings import Settings


def _configure_logging(level: str = "INFO") -> None:
    """Configure loguru for console output at *level*."""
    logger.remove()
    fmt = "{message}"
    if level.upper() in ("DEBUG", "TRACE"):
        fmt = "<level>{level: <8}</level> | {message}"
    logger.add(sys.stderr, level=level.upper(), format=fmt)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="antler",
        description="Run targets of an XML build file.",
    )
    parser.add_argument("targets", nargs="*", help="Targets to build (default: the project default)")
    parser.add_argument("-f", "--buildfile", help="Build file to use (default: default.build)")
    parser.add_argument(
        "-D",
        dest="defines",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Set a read-only property; repeatable (-D:name=value or -D name=value)",
    )
    parser.add_argument("-e", "--extension", dest="extensions", action="append", default=[],
                        help="Module or package to scan for tasks and functions; repeatable")
    parser.add_argument("--config", help="Configuration file (default: antler.yaml next to the build file)")
    parser.add_argument("-l", "--list-targets", action="store_true", help="List targets and exit")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show verbose messages")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Show warnings and errors only")
    verbosity.add_argument("--debug", action="store_true", help="Show debug output")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_defines(defines: list[str]) -> dict[str, str]:
    """Parse ``-D`` values (``name=value`` with an optional leading ``:``)."""
    properties: dict[str, str] = {}
    for define in defines:
        text = define[1:] if define.startswith(":") else define
        name, sep, value = text.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Invalid property definition '{define}', expected name=value")
        properties[name] = value
    return properties


def _log_level(args: argparse.Namespace, settings: Settings) -> str:
    if args.debug:
        return "TRACE"
    if args.verbose:
        return "DEBUG"
    if args.quiet:
        return "WARNING"
    return settings.log_level


def format_targets(definition: ProjectDefinition) -> str:
    """Target listing: described targets first, then the rest."""
    lines: list[str] = []
    if definition.default_target:
        lines.append(f"Default target: {definition.default_target}")
        lines.append("")

    described = [t for t in definition.targets.values() if t.description]
    others = [t for t in definition.targets.values() if not t.description]
    width = max((len(t.name) for t in definition.targets.values()), default=0)

    lines.append("Main targets:")
    for target in sorted(described, key=lambda t: t.name):
        marker = "*" if target.name == definition.default_target else " "
        lines.append(f" {marker}{target.name.ljust(width)}  {target.description}")
    if others:
        lines.append("")
        lines.append("Other targets:")
        for target in sorted(others, key=lambda t: t.name):
            marker = "*" if target.name == definition.default_target else " "
            lines.append(f" {marker}{target.name}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        defines = parse_defines(args.defines)
    except ValueError as exc:
        parser.error(str(exc))

    _configure_logging("DEBUG" if args.debug else "INFO")
    try:
        if args.config:
            config_path = Path(args.config)
        else:
            anchor = Path(args.buildfile).parent if args.buildfile else Path.cwd()
            config_path = find_config(anchor)
        settings = load_settings(config_path).merged(extensions=args.extensions)
        _configure_logging(_log_level(args, settings))

        buildfile = Path(args.buildfile or settings.buildfile)
        definition = load_project(buildfile)
        if args.list_targets:
            print(format_targets(definition))
            return 0

        registry = Registry.default()
        if settings.extensions:
            registry.load(*settings.extensions)

        logger.info("Buildfile: {}", buildfile.resolve())
        project = Project(
            definition,
            registry=registry,
            properties={**settings.properties, **defines},
        )
        project.execute(args.targets)
    except BuildError as exc:
        logger.error("\nBUILD FAILED\n\n{}", format_error(exc))
        return 1

    logger.info("\nBUILD SUCCEEDED")
    return 0


if __name__ == "__main__":
    sys.exit(main())
