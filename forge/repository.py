"""Repository root and manifest discovery.

``RepositoryLocator`` walks upward from a start directory until it finds the
repository marker directory.  ``RepositoryContext`` pins down the root and the
single manifest file that aggregates every buildable project of the
repository.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from forge.errors import (
    AmbiguousManifestError,
    ManifestNotFoundError,
    RepositoryNotFoundError,
)


class RepositoryLocator:
    """Finds the repository root by looking for a marker directory."""

    def __init__(self, marker: str = ".git") -> None:
        self.marker = marker

    def locate(self, start_dir: str | Path | None = None) -> Path:
        """Return the absolute path of the nearest ancestor holding the marker.

        Args:
            start_dir: Directory to start from.  Defaults to the current
                working directory.

        Raises:
            RepositoryNotFoundError: If the filesystem root is reached without
                finding the marker.
        """
        start = Path(start_dir or Path.cwd()).resolve()
        for candidate in (start, *start.parents):
            if (candidate / self.marker).is_dir():
                return candidate
        raise RepositoryNotFoundError(start, self.marker)


def find_manifest(root: Path, pattern: str) -> Path:
    """Return the single manifest file directly under *root*.

    Raises:
        ManifestNotFoundError: If no file matches *pattern*.
        AmbiguousManifestError: If more than one file matches.
    """
    matches = sorted(p for p in Path(root).glob(pattern) if p.is_file())
    if not matches:
        raise ManifestNotFoundError(root, pattern)
    if len(matches) > 1:
        raise AmbiguousManifestError(root, matches)
    return matches[0]


@dataclass(frozen=True)
class RepositoryContext:
    """The repository root and its single build manifest."""

    root_path: Path
    manifest_path: Path

    @classmethod
    def at_root(cls, root: Path, manifest_glob: str = "*.sln") -> "RepositoryContext":
        """Pin *root* together with its single manifest file."""
        return cls(root_path=root, manifest_path=find_manifest(root, manifest_glob))
