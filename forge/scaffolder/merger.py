"""Directory flattening helpers.

The function generator always introduces one extra directory level.
``merge_directory`` lifts the contents of such a nested directory into its
destination and removes the emptied source.  These helpers operate on paths
only and know nothing about external tools.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from forge.errors import FilesystemError


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def merge_directory(source: str | Path, destination: str | Path) -> None:
    """Move every direct entry of *source* into *destination*, then remove *source*.

    * A missing *source* is a no-op.
    * Same-named entries at the destination are overwritten.
    * Subdirectories move wholesale; they are not flattened further.
    * Only *source* itself is deleted, never its ancestors.

    *destination* may be an ancestor of *source*.  Merging a directory into
    itself is a no-op.

    Raises:
        FilesystemError: If *destination* lies inside *source*, or any move
            or delete fails.
    """
    source = Path(source)
    destination = Path(destination)
    if not source.is_dir():
        return
    if source.resolve() == destination.resolve():
        return
    if source.resolve() in destination.resolve().parents:
        raise FilesystemError("merge", source, f"destination {destination} lies inside the source")

    try:
        destination.mkdir(parents=True, exist_ok=True)
        if destination.resolve() in source.resolve().parents:
            # Overwriting an entry of the destination could delete the source
            # itself, so park it under a unique name first.
            parked = Path(tempfile.mkdtemp(prefix=".merge-", dir=destination))
            parked.rmdir()
            source.rename(parked)
            source = parked
        for entry in sorted(source.iterdir()):
            target = destination / entry.name
            if target.exists() or target.is_symlink():
                _remove(target)
            shutil.move(str(entry), str(target))
        source.rmdir()
    except OSError as exc:
        raise FilesystemError("merge", source, str(exc)) from exc


def move_directory(source: str | Path, destination: str | Path) -> None:
    """Move the whole *source* directory to *destination*, replacing it if present.

    Raises:
        FilesystemError: If *source* is missing or the move fails.
    """
    source = Path(source)
    destination = Path(destination)
    if not source.is_dir():
        raise FilesystemError("move", source, "source directory does not exist")
    try:
        if destination.exists():
            _remove(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))
    except OSError as exc:
        raise FilesystemError("move", source, str(exc)) from exc


def remove_tree(path: str | Path) -> None:
    """Delete *path* and everything below it; missing paths are ignored."""
    path = Path(path)
    if not path.exists():
        return
    try:
        _remove(path)
    except OSError as exc:
        raise FilesystemError("delete", path, str(exc)) from exc


def remove_if_empty(path: str | Path) -> bool:
    """Remove *path* if it is an empty directory.  Returns ``True`` if removed."""
    path = Path(path)
    if not path.is_dir():
        return False
    try:
        if any(path.iterdir()):
            return False
        path.rmdir()
    except OSError as exc:
        raise FilesystemError("delete", path, str(exc)) from exc
    return True
