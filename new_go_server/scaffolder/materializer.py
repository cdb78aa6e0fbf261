"""Writing rendered payloads to disk.

:class:`FileMaterializer` writes one manifest entry at a time; there is no
cross-entry transaction, so files written before a failure stay where they
are.  :class:`StagingArea` provides the opt-in alternative: everything is
written into a sibling staging directory that is swapped into place with a
single rename once every entry has succeeded.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
from pathlib import Path

from new_go_server.errors import FileWriteError, PathError
from new_go_server.scaffolder.manifest import ManifestEntry


class FileMaterializer:
    """Writes rendered payloads below a project root."""

    def target_for(self, entry: ManifestEntry, root: Path) -> Path:
        """Return the absolute path ``entry`` is written to.

        Raises:
            PathError: If the target would land outside ``root``.
        """
        root = Path(os.path.normpath(root))
        target = Path(os.path.normpath(root / entry.target))
        if target == root or not target.is_relative_to(root):
            raise PathError(entry.target, "escapes destination")
        return target

    async def materialize(self, entry: ManifestEntry, rendered: bytes, root: Path) -> Path:
        """Create the parent directories of ``entry`` and write ``rendered``.

        An existing file at the target is truncated and overwritten.

        Raises:
            PathError: If the target would land outside ``root``.
            FileWriteError: If a directory or the file cannot be written.
        """
        target = self.target_for(entry, root)
        await asyncio.to_thread(_write_file, target, rendered)
        return target


class StagingArea:
    """A temporary sibling of the destination that is renamed into place.

    The staging directory is created next to the destination so the final
    rename stays on one filesystem.
    """

    def __init__(self, destination: Path) -> None:
        self.destination = Path(destination)
        self.path: Path | None = None

    def create(self) -> Path:
        """Create the staging directory and return its path."""
        parent = self.destination.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            self.path = Path(
                tempfile.mkdtemp(prefix=f".{self.destination.name}-staging-", dir=parent)
            )
        except OSError as exc:
            raise FileWriteError(str(parent), f"failed to create staging directory in {parent}: {exc}") from exc
        return self.path

    def commit(self) -> Path:
        """Move the staged tree onto the destination.

        The destination must be missing or an empty directory.
        """
        if self.path is None:
            raise RuntimeError("staging area was never created")
        try:
            if self.destination.is_dir():
                self.destination.rmdir()
            os.replace(self.path, self.destination)
        except OSError as exc:
            raise FileWriteError(
                str(self.destination), f"failed to move staged project into {self.destination}: {exc}"
            ) from exc
        self.path = None
        return self.destination

    def discard(self) -> None:
        """Delete the staging directory if it still exists."""
        if self.path is not None:
            shutil.rmtree(self.path, ignore_errors=True)
            self.path = None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _write_file(path: Path, content: bytes) -> None:
    """Synchronous helper: create parent dirs and write content."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileWriteError(str(path.parent), f"failed to create directory {path.parent}: {exc}") from exc
    try:
        path.write_bytes(content)
    except OSError as exc:
        raise FileWriteError(str(path), f"failed to write {path}: {exc}") from exc
