"""Command-line entry point for Function Forge.

Usage::

    forge function --name Billing
    forge function -n Billing --type layered
    python -m forge function -n Billing -t layered --verbose
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from forge.errors import ExternalToolError, ForgeError
from forge.process import ProcessRunner
from forge.scaffolder import ProjectSpec, ScaffoldOrchestrator, TemplateKind
from forge.utils import print_banner, print_error, print_error_details, print_success


def build_parser() -> argparse.ArgumentParser:
    """Build the ``forge`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="forge",
        description="A scaffolding tool for this repository.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  forge function -n MyNewBatch\n"
            "  forge function -n MyNewBatch --type layered\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    function = subparsers.add_parser("function", help="Create a new Lambda function project.")
    function.add_argument(
        "--name", "-n",
        required=True,
        help="The name of the new Lambda function (e.g., MyNewBatch).",
    )
    function.add_argument(
        "--type", "-t",
        dest="template_kind",
        default=TemplateKind.SIMPLE.value,
        choices=[kind.value for kind in TemplateKind],
        help="The type of project template to generate (default: simple).",
    )
    function.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Echo every external command before it runs.",
    )
    return parser


def run_function(
    name: str,
    template_kind: str,
    runner: ProcessRunner | None = None,
    start_dir: str | Path | None = None,
) -> int:
    """Scaffold one function project and translate failures into an exit code.

    Args:
        name: Logical project name.
        template_kind: ``simple`` or ``layered``.
        runner: Process runner to use.  Defaults to one built from the
            repository configuration.
        start_dir: Directory the repository search starts from.  Defaults
            to the current working directory.

    Returns:
        ``0`` on success, ``1`` on any failure.
    """
    try:
        spec = ProjectSpec(name=name, template_kind=TemplateKind(template_kind))
    except ValidationError as exc:
        print_error(f"An error occurred: invalid project name {name!r}")
        print_error_details("Validation", str(exc))
        return 1

    print_banner(spec.name, spec.template_kind.value)
    try:
        orchestrator = ScaffoldOrchestrator(spec, runner=runner, start_dir=start_dir)
        result = orchestrator.scaffold()
        result.raise_for_error()
    except ExternalToolError as exc:
        print_error(f"An error occurred: {exc}")
        print_error_details(exc.command_line, exc.details())
        return 1
    except ForgeError as exc:
        print_error(f"An error occurred: {exc}")
        return 1

    print_success(f"Successfully forged function '{spec.name}'.")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``forge`` and ``python -m forge``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    runner = ProcessRunner(echo_commands=True) if args.verbose else None
    return run_function(args.name, args.template_kind, runner=runner)
