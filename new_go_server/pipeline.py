"""new-go-server pipeline orchestrator.

Generates a Go backend project in a single linear pass:

COLLECTING_PARAMS -> VALIDATING_PATH -> MATERIALIZING -> BOOTSTRAPPING -> DONE

Any error moves the run to FAILED and stops it; nothing is retried and files
already written are left in place (unless the run is staged with
``--atomic``).

Usage::

    python -m new_go_server.pipeline --name acme --module github.com/acme/api
    new-go-server --name acme --module api --path /srv/projects/acme
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

from pydantic import ValidationError
from rich.panel import Panel

from new_go_server.builder.bootstrap import ModuleBootstrapper
from new_go_server.config import DEFAULT_PORT, Config, ParameterSet
from new_go_server.errors import GeneratorError, ParameterError
from new_go_server.paths import ValidatedPath, ensure_empty_destination, resolve_destination
from new_go_server.prompts import collect_parameters
from new_go_server.scaffolder.manifest import (
    DEFAULT_MANIFEST,
    ManifestEntry,
    TemplateSource,
    validate_manifest,
)
from new_go_server.scaffolder.materializer import FileMaterializer, StagingArea
from new_go_server.scaffolder.templates import TemplateRenderer
from new_go_server.utils import (
    console,
    format_duration,
    print_error,
    print_success,
    print_summary_table,
)

# ---------------------------------------------------------------------------
# Run state
# ---------------------------------------------------------------------------


class Stage(str, Enum):
    """States of a generation run."""

    COLLECTING_PARAMS = "collecting-params"
    VALIDATING_PATH = "validating-path"
    MATERIALIZING = "materializing"
    BOOTSTRAPPING = "bootstrapping"
    DONE = "done"
    FAILED = "failed"


@dataclass
class GenerationResult:
    """What a single run produced.

    ``written_files`` lists manifest targets in the order they were written
    and is only used for reporting; nothing is rolled back from it.  A failed
    atomic run leaves it empty, since the staged files never reach the
    destination.
    """

    root_path: Path | None = None
    written_files: list[str] = field(default_factory=list)
    bootstrap_output: str = ""
    stage: Stage = Stage.COLLECTING_PARAMS
    failed_stage: Stage | None = None
    error: GeneratorError | None = None
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.stage is Stage.DONE


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives one project generation from parameters to bootstrapped tree.

    Collaborators can be injected for testing; by default they are built
    from ``config``.  The manifest is validated on construction.
    """

    def __init__(
        self,
        config: Config | None = None,
        manifest: Iterable[ManifestEntry] = DEFAULT_MANIFEST,
        *,
        renderer: TemplateRenderer | None = None,
        source: TemplateSource | None = None,
        materializer: FileMaterializer | None = None,
        bootstrapper: ModuleBootstrapper | None = None,
    ) -> None:
        self.config = config or Config()
        self.manifest = validate_manifest(manifest)
        self.renderer = renderer or TemplateRenderer()
        self.source = source or TemplateSource(self.config.template_dir)
        self.materializer = materializer or FileMaterializer()
        self.bootstrapper = bootstrapper or ModuleBootstrapper(
            command=self.config.bootstrap.command,
            descriptor=self.config.bootstrap.descriptor,
            timeout=self.config.bootstrap.timeout,
        )

    async def run(self, params: ParameterSet) -> GenerationResult:
        """Generate the project described by ``params``.

        Never raises :class:`GeneratorError`; a failure is recorded on the
        returned result with ``stage`` set to :attr:`Stage.FAILED`.
        """
        started = time.monotonic()
        result = GenerationResult(stage=Stage.VALIDATING_PATH)

        try:
            destination = resolve_destination(params.destination_path, params.name)
            if self.config.atomic:
                ensure_empty_destination(destination)
            result.root_path = destination.root

            result.stage = Stage.MATERIALIZING
            if self.config.atomic:
                await self._materialize_staged(params, destination, result)
            else:
                await self._materialize_all(params, destination.root, result)

            result.stage = Stage.BOOTSTRAPPING
            with console.status(f"Running {self.bootstrapper.command_line}..."):
                result.bootstrap_output = await self.bootstrapper.bootstrap(destination.root)

            result.stage = Stage.DONE
        except GeneratorError as exc:
            result.failed_stage = result.stage
            result.stage = Stage.FAILED
            result.error = exc
        finally:
            result.duration_seconds = time.monotonic() - started

        return result

    # -- Materialization -----------------------------------------------------

    async def _materialize_all(self, params: ParameterSet, root: Path, result: GenerationResult) -> None:
        """Render and write every manifest entry in order, stopping at the first error."""
        for entry in self.manifest:
            body = self.source.read(entry.source_id)
            rendered = self.renderer.render(body, params, name=entry.source_id)
            await self.materializer.materialize(entry, rendered, root)
            result.written_files.append(entry.target)
            if self.config.verbose:
                console.print(f"  [green]+[/green] [dim]{entry.target}[/dim]")

    async def _materialize_staged(
        self, params: ParameterSet, destination: ValidatedPath, result: GenerationResult
    ) -> None:
        """Write the whole tree into a staging directory, then swap it into place."""
        staging = StagingArea(destination.root)
        staged_root = staging.create()
        try:
            await self._materialize_all(params, staged_root, result)
            staging.commit()
        except GeneratorError:
            # Staged files never reached the destination.
            result.written_files.clear()
            raise
        finally:
            staging.discard()


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def next_steps(destination: ValidatedPath) -> list[str]:
    """Return the shell commands shown after a successful run."""
    return [
        f"cd {destination.display}",
        "cp .env.local .env",
        "# Update .env with your configuration",
        "go mod tidy",
        "go run main.go",
    ]


def _print_banner() -> None:
    console.print(
        Panel(
            "[bold bright_cyan]Go Backend Project Generator[/bold bright_cyan]",
            border_style="bright_cyan",
        )
    )


def _print_success(params: ParameterSet, result: GenerationResult) -> None:
    destination = ValidatedPath(requested=params.destination_path, root=result.root_path)
    console.print()
    print_success(f"Project '{params.name}' created successfully!")
    print_summary_table(
        {
            "Module": params.module,
            "Port": params.port,
            "Location": destination.display,
            "Files": str(len(result.written_files)),
            "Duration": format_duration(result.duration_seconds),
        },
        title="Generated project",
    )
    console.print("\nNext steps:")
    for line in next_steps(destination):
        console.print(f"  {line}", highlight=False, markup=False)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="new-go-server",
        description="Generate a Go backend project from the built-in templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Omitted values are asked for interactively.\n\n"
            "Examples:\n"
            "  new-go-server --name acme --module github.com/acme/api\n"
            "  new-go-server --name acme --module api --path /srv/projects/acme --atomic\n"
        ),
    )
    parser.add_argument("--name", default=None, help="Project name")
    parser.add_argument(
        "--module",
        default=None,
        help="Go module name (e.g., github.com/username/project)",
    )
    parser.add_argument("--description", default=None, help="Project description")
    parser.add_argument("--port", default=DEFAULT_PORT, help=f"Server port, 1-65535 (default: {DEFAULT_PORT})")
    parser.add_argument(
        "--path",
        default=None,
        help="Project path (leave empty to create in current directory)",
    )
    parser.add_argument(
        "--atomic",
        action="store_true",
        help="Write into a staging directory and move it into place only if every file succeeds",
    )
    parser.add_argument(
        "--bootstrap-timeout",
        type=int,
        default=None,
        metavar="SECONDS",
        help="Kill the dependency step after SECONDS (0 waits forever)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="List every generated file")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``new-go-server``."""
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_env()
        config.atomic = args.atomic
        config.verbose = args.verbose
        if args.bootstrap_timeout is not None:
            config.bootstrap.timeout = args.bootstrap_timeout
        config = Config.model_validate(config.model_dump())
    except (ValueError, ValidationError) as exc:
        print_error(f"Error while loading configuration: {exc}")
        sys.exit(1)

    _print_banner()

    try:
        params = collect_parameters(args, base_dir=config.base_dir)
    except ParameterError as exc:
        print_error(exc.describe())
        sys.exit(1)

    console.print(f"\nCreating project '{params.name}'...")
    pipeline = Pipeline(config)
    result = asyncio.run(pipeline.run(params))

    if not result.success:
        print_error(result.error.describe())
        sys.exit(1)

    _print_success(params, result)


if __name__ == "__main__":
    main()
