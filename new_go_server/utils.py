"""Shared utility functions for the project generator.

Provides async command execution, home-relative path display, duration
formatting, and the Rich-based console helpers every module reports through.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


@dataclass
class CommandResult:
    """Outcome of :func:`run_command`."""

    returncode: int | None
    output: str
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return not self.timed_out and self.returncode == 0


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = 120,
) -> CommandResult:
    """Run a command and capture its combined stdout/stderr.

    Args:
        cmd: Program and arguments; no shell is involved.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits indefinitely.

    Returns:
        A :class:`CommandResult`.  On timeout ``returncode`` is ``None`` and
        ``output`` holds whatever the process wrote before it was killed.

    Raises:
        FileNotFoundError: If the program does not exist.
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        cwd=str(cwd) if cwd else None,
    )

    assert process.stdout is not None  # guaranteed by PIPE
    chunks: list[bytes] = []

    async def _drain() -> None:
        while True:
            chunk = await process.stdout.read(65536)
            if not chunk:
                break
            chunks.append(chunk)
        await process.wait()

    timed_out = False
    try:
        await asyncio.wait_for(_drain(), timeout=timeout)
    except asyncio.TimeoutError:
        timed_out = True
        process.kill()
        await process.wait()

    output = b"".join(chunks).decode("utf-8", errors="replace").strip()
    return CommandResult(
        returncode=None if timed_out else process.returncode,
        output=output,
        timed_out=timed_out,
    )


# ---------------------------------------------------------------------------
# Path / formatting helpers
# ---------------------------------------------------------------------------


def abbreviate_home(path: str | Path, home: str | Path | None = None) -> str:
    """Return ``path`` with the user's home directory shown as ``~``.

    Paths outside the home directory are returned unchanged.

    Examples::

        abbreviate_home("/home/ada/src/acme", home="/home/ada") -> "~/src/acme"
        abbreviate_home("/srv/acme", home="/home/ada") -> "/srv/acme"
    """
    path = Path(path)
    home_path = Path(home) if home is not None else Path.home()
    try:
        relative = path.relative_to(home_path)
    except ValueError:
        return str(path)
    if relative == Path("."):
        return "~"
    return f"~/{relative.as_posix()}"


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)

