"""Destination path validation.

Checks that the requested destination can be used before anything is
written.  Nothing here touches the filesystem beyond ``stat`` calls; the
directories themselves are created by the materializer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from new_go_server.errors import PathError
from new_go_server.utils import abbreviate_home

CURRENT_DIR = "."


@dataclass(frozen=True)
class ValidatedPath:
    """A destination that passed validation."""

    requested: str
    root: Path

    @property
    def display(self) -> str:
        """The root as shown to the user, with ``~`` for the home directory."""
        return abbreviate_home(self.root)


def validate_path(path: str) -> None:
    """Check that ``path`` can be used as a destination.

    ``"."`` is always accepted.  Absolute paths need an existing parent
    directory; relative paths must be resolvable against the working
    directory.

    Raises:
        PathError: With ``reason`` set to ``"parent missing"``,
            ``"parent not a directory"`` or ``"unresolvable"``.
    """
    if path == CURRENT_DIR:
        return

    if "\x00" in path:
        raise PathError(path, "unresolvable")

    if os.path.isabs(path):
        parent = Path(path).parent
        if not parent.exists():
            raise PathError(str(parent), "parent missing")
        if not parent.is_dir():
            raise PathError(str(parent), "parent not a directory")
        return

    try:
        os.path.abspath(path)
    except OSError as exc:
        raise PathError(path, "unresolvable") from exc


def resolve_destination(path: str, name: str, cwd: str | Path | None = None) -> ValidatedPath:
    """Validate ``path`` and return the absolute project root.

    ``"."`` means "a directory named after the project inside the current
    directory"; every other path is used as the project root itself.
    """
    validate_path(path)

    base = Path(cwd) if cwd is not None else None
    target = Path(name) if path == CURRENT_DIR else Path(path)
    try:
        if base is not None and not target.is_absolute():
            root = Path(os.path.normpath(base / target))
        else:
            root = Path(os.path.abspath(target))
    except OSError as exc:
        raise PathError(path, "unresolvable") from exc

    return ValidatedPath(requested=path, root=root)


def ensure_empty_destination(destination: ValidatedPath) -> None:
    """Reject a destination that already holds files.

    Only used when the generation is staged and swapped into place, since a
    directory rename cannot replace a non-empty directory.
    """
    root = destination.root
    if not root.exists():
        return
    if not root.is_dir():
        raise PathError(str(root), "destination is not a directory")
    if any(root.iterdir()):
        raise PathError(str(root), "destination not empty")
