"""Command-line entry point: ``python -m projgen description.json``."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

from pydantic import ValidationError

from projgen.config import Config, FormatGeneration
from projgen.models import Project
from projgen.utils import console, print_error, print_summary_table, print_warning
from projgen.writer import ProjectCreationNotPossibleError, ProjectWriter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projgen",
        description="Generate a sample .NET project from a JSON description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m projgen calc.json\n"
            "  python -m projgen calc.json -o ./samples --format dotnet-add-package\n"
        ),
    )
    parser.add_argument("description", help="Path to the project description JSON file")
    parser.add_argument(
        "--output", "-o",
        default="./output",
        help="Parent directory; the project is created in OUTPUT/<name> (default: ./output)",
    )
    parser.add_argument(
        "--format",
        choices=[g.value for g in FormatGeneration],
        default=None,
        help="How NuGet packages are written (default: from PROJGEN_FORMAT or package-references)",
    )
    parser.add_argument(
        "--dotnet",
        default=None,
        help="dotnet executable to use (default: from PROJGEN_DOTNET or 'dotnet')",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file to use instead of PROJGEN_* environment variables",
    )
    parser.add_argument(
        "--save-config",
        default=None,
        metavar="PATH",
        help="Write the effective configuration to PATH as JSON",
    )
    return parser


def _load_config(config_path: str | None) -> Config:
    """Build the configuration from a JSON file or the environment.

    Exits with status 1 when the configuration is unreadable or invalid.
    """
    try:
        if config_path is None:
            return Config.from_env()
        ignored = sorted(name for name in os.environ if name.startswith("PROJGEN_"))
        if ignored:
            print_warning(f"Ignoring {', '.join(ignored)}: using {config_path}")
        return Config.load(Path(config_path))
    except OSError as exc:
        print_error(f"Error: Cannot read configuration file: {exc}")
    except (ValueError, ValidationError) as exc:
        print_error("Error: Invalid configuration")
        console.print(str(exc), markup=False)
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m projgen``."""
    args = build_parser().parse_args(argv)

    description_path = Path(args.description)
    if not description_path.exists():
        print_error(f"Error: Description file not found: {description_path}")
        sys.exit(1)

    try:
        project = Project.model_validate_json(description_path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        print_error(f"Error: Invalid project description {description_path}")
        console.print(str(exc), markup=False)
        sys.exit(1)

    config = _load_config(args.config)
    if args.format:
        config.format_generation = FormatGeneration(args.format)
    if args.dotnet:
        config.dotnet_executable = args.dotnet
    if args.save_config:
        try:
            saved = config.save(Path(args.save_config))
        except OSError as exc:
            print_error(f"Error: Cannot write configuration file: {exc}")
            sys.exit(1)
        console.print(f"Configuration written to {saved}", markup=False)

    project_root = Path(args.output) / project.name
    writer = ProjectWriter(config)
    try:
        descriptor = asyncio.run(writer.write_project(project, project_root))
    except ProjectCreationNotPossibleError as exc:
        print_error("Project creation failed.")
        console.print(exc.cause_chain(), markup=False)
        sys.exit(1)

    print_summary_table(
        {
            "Project": project.name,
            "Descriptor": str(descriptor),
            "Target frameworks": project.target_framework_moniker,
            "Packages": str(len(project.nuget_packages)),
            "Files": str(len(project.files)),
        },
        title="Generated project",
    )


if __name__ == "__main__":
    main()
