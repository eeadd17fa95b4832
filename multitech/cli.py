"""Command-line front end for the multi-techs utility.

Usage::

    multitech create my-app -c web -t reactjs
    multitech guis:web:angular my-app
    multitech databases:mongodb my-mongo-db
    multitech list [category]
    multitech info <tech>
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from multitech import __version__
from multitech.config import Config
from multitech.errors import ContainerHealthTimeout, MultitechError, UnknownTechnologyError
from multitech.registry import Registry, load_registry, parse_category
from multitech.scaffolder import ProjectGenerator
from multitech.utils import console, print_error, print_info, print_warning

VERB_PREFIXES = ("guis:web:", "guis:mobile:", "backends:", "databases:")

_EPILOG = (
    "Examples:\n"
    "  multitech create my-app -c web -t reactjs\n"
    "  multitech create my-api -t springboot --start\n"
    "  multitech guis:web:angular my-app\n"
    "  multitech backends:expressjs my-api\n"
    "  multitech databases:postgresql my-db\n"
    "  multitech list web\n"
)


class UsageParser(argparse.ArgumentParser):
    """``ArgumentParser`` that reports usage errors with exit status 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        print_error(f"Error: {message}")
        sys.exit(1)


def build_parser() -> UsageParser:
    parser = UsageParser(
        prog="multitech",
        description="Multi-techs utility -- scaffold web, backend and database projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_EPILOG,
    )
    parser.add_argument(
        "--version", "-V",
        action="store_true",
        help="Print the version and exit",
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>", parser_class=UsageParser)

    create = commands.add_parser("create", help="Create a new project")
    create.add_argument("name", help="Project name (letters, digits, '-' and '_', at least 4 characters)")
    create.add_argument("--tech", "-t", required=True, help="Technology id (see 'multitech list')")
    create.add_argument(
        "--category", "-c",
        default=None,
        help="Technology category: web, mobile, backend or database",
    )
    create.add_argument(
        "--start",
        action="store_true",
        help="Start the development server once the project is ready",
    )
    create.add_argument(
        "--root",
        default=None,
        help="Directory that holds __GEN_PROJECTS (default: current directory)",
    )
    create.add_argument("--config", default=None, help="JSON configuration file")

    listing = commands.add_parser("list", help="List available technologies")
    listing.add_argument("category", nargs="?", default=None, help="Only show this category")

    info = commands.add_parser("info", help="Show details about a technology")
    info.add_argument("tech", help="Technology id")

    commands.add_parser("version", help="Print the version")

    help_cmd = commands.add_parser("help", help="Show help for a command")
    help_cmd.add_argument("topic", nargs="?", default=None, help="Command to describe")

    return parser


def rewrite_verb(argv: list[str], registry: Registry) -> list[str]:
    """Turn ``<namespace>:<tech> <name> [opts]`` into a ``create`` invocation.

    Raises:
        MultitechError: If the verb names no known technology.
    """
    if not argv or not argv[0].startswith(VERB_PREFIXES):
        return argv
    descriptor = registry.from_verb(argv[0])
    if descriptor is None:
        raise UnknownTechnologyError(f"Unknown command: {argv[0]}")
    return ["create", *argv[1:], "--tech", descriptor.id, "--category", descriptor.category.value]


def resolve_config(args: argparse.Namespace) -> Config:
    """Load the configuration and apply command-line overrides."""
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    updates: dict[str, object] = {}
    if args.root:
        updates["root_dir"] = Path(args.root).resolve()
    if args.start:
        updates["start_dev_server"] = True
    return config.model_copy(update=updates) if updates else config


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def show_list(registry: Registry, category: str | None) -> None:
    categories = [parse_category(category)] if category else registry.categories()
    for cat in categories:
        table = Table(title=cat.label, show_header=True, header_style="bold cyan")
        table.add_column("Tech", style="bold", no_wrap=True)
        table.add_column("Name")
        table.add_column("Command", style="dim")
        table.add_column("Description")
        for tech in registry.by_category(cat):
            name = tech.name if tech.generator != "planned" else f"{tech.name} [yellow](planned)[/yellow]"
            table.add_row(tech.id, name, tech.verb, tech.description)
        console.print(table)
        console.print()


def show_info(registry: Registry, tech_id: str) -> None:
    tech = registry.get(tech_id)
    lines = [
        f"[bold]{tech.name}[/bold] ({tech.id})",
        f"Category      : {tech.category.label}",
        f"Description   : {tech.description}",
        f"Documentation : {tech.documentation}",
        f"Command       : multitech {tech.verb} <name>",
    ]
    if tech.generator == "planned":
        lines.append("Status        : [yellow]planned, not available yet[/yellow]")
    if tech.dev_command:
        lines.append(f"Dev server    : {' '.join(tech.dev_command)}")
    if tech.container is not None:
        lines.append(f"Container     : {tech.container.name}")
    lines.extend(f"  - {note}" for note in tech.notes)
    console.print(Panel("\n".join(lines), title="[bold]Technology[/bold]", border_style="bright_cyan"))


def run_create(args: argparse.Namespace, registry: Registry) -> None:
    config = resolve_config(args)
    generator = ProjectGenerator(config, registry)
    request = generator.request(args.name, args.tech, args.category)
    try:
        asyncio.run(generator.generate(request))
    except KeyboardInterrupt:
        # Ctrl+C is how the foreground dev server is stopped
        if not generator.serving:
            raise
        print_info("Development server stopped.")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``multitech`` and ``python -m multitech``."""
    args_list = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    try:
        registry = load_registry()
        args = parser.parse_args(rewrite_verb(args_list, registry))

        if args.version or args.command == "version":
            console.print(f"multitech {__version__}")
        elif args.command is None:
            parser.print_help(sys.stderr)
            sys.exit(1)
        elif args.command == "help":
            if args.topic is None:
                parser.print_help()
            else:
                parser.parse_args([args.topic, "--help"])
        elif args.command == "list":
            show_list(registry, args.category)
        elif args.command == "info":
            show_info(registry, args.tech)
        elif args.command == "create":
            run_create(args, registry)
    except ContainerHealthTimeout as exc:
        print_error(f"Timeout: {exc}")
        sys.exit(1)
    except MultitechError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except ValidationError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)
    except OSError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("Interrupted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
