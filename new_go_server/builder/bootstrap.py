"""Dependency bootstrap for a freshly generated project.

Runs the module tool (``go mod tidy`` by default) inside the generated tree
once every file has been written, and reports its combined output when it
fails.  The generated files are never removed.
"""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Sequence

from new_go_server.errors import BootstrapError, PreconditionError
from new_go_server.utils import run_command

DEFAULT_COMMAND: tuple[str, ...] = ("go", "mod", "tidy")


class ModuleBootstrapper:
    """Resolves the generated module's dependencies.

    Args:
        command: Program and arguments to run inside the project root.
        descriptor: File that must exist under the root before the command
            runs (the module descriptor produced by the manifest).
        timeout: Seconds before the command is killed; ``None`` or ``0``
            waits until it finishes.
    """

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        descriptor: str = "go.mod",
        timeout: float | None = 300,
    ) -> None:
        if not command:
            raise ValueError("bootstrap command must not be empty")
        self.command = list(command)
        self.descriptor = descriptor
        self.timeout = timeout or None

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)

    def check_preconditions(self, root: Path) -> None:
        """Raise :class:`PreconditionError` if the module descriptor is missing."""
        if not (Path(root) / self.descriptor).is_file():
            raise PreconditionError(f"{self.descriptor} file not found after template creation in {root}")

    async def bootstrap(self, root: Path) -> str:
        """Run the command inside ``root`` and return its combined output.

        Raises:
            PreconditionError: If the module descriptor was not generated.
            BootstrapError: If the command is missing, exits non-zero, or
                exceeds the timeout.
        """
        self.check_preconditions(root)

        try:
            result = await run_command(self.command, cwd=root, timeout=self.timeout)
        except FileNotFoundError as exc:
            raise BootstrapError(
                f"command not found: {self.command[0]}", command=self.command_line
            ) from exc
        except OSError as exc:
            raise BootstrapError(
                f"failed to start '{self.command_line}': {exc}", command=self.command_line
            ) from exc

        if result.timed_out:
            raise BootstrapError(
                f"'{self.command_line}' timed out after {self.timeout}s",
                output=result.output,
                command=self.command_line,
            )
        if not result.ok:
            raise BootstrapError(
                f"failed to download dependencies: '{self.command_line}' exited with {result.returncode}",
                output=result.output,
                command=self.command_line,
            )
        return result.output
