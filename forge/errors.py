"""Exception hierarchy for Function Forge.

Every failure the tool can report derives from ``ForgeError`` so the CLI
boundary can translate them into a single red error line and a non-zero exit
code.  Repository-level errors are raised at construction time, before any
external tool runs.  Errors raised while scaffolding derive from
``ScaffoldError`` and are carried back to the caller inside a
``ScaffoldResult``.
"""

from __future__ import annotations

from pathlib import Path


class ForgeError(Exception):
    """Base class for every error reported by Function Forge."""


class ConfigurationError(ForgeError):
    """Raised when ``forge.json`` or a ``FORGE_*`` variable holds an invalid setting."""

    def __init__(self, source: str | Path, reason: str) -> None:
        self.source = str(source)
        self.reason = reason
        super().__init__(f"Invalid configuration in {self.source}: {reason}")


# ---------------------------------------------------------------------------
# Repository discovery
# ---------------------------------------------------------------------------


class RepositoryNotFoundError(ForgeError):
    """Raised when no ancestor directory contains the repository marker."""

    def __init__(self, start_dir: str | Path, marker: str = ".git") -> None:
        self.start_dir = Path(start_dir)
        self.marker = marker
        super().__init__(
            f"Could not find the repository root from {self.start_dir}. "
            f"Make sure you are running this within a repository (no '{marker}' found)."
        )


class ManifestNotFoundError(ForgeError):
    """Raised when the repository root holds no manifest file."""

    def __init__(self, root: str | Path, pattern: str) -> None:
        self.root = Path(root)
        self.pattern = pattern
        super().__init__(f"No '{pattern}' manifest file found in the repository root {self.root}.")


class AmbiguousManifestError(ForgeError):
    """Raised when the repository root holds more than one manifest file."""

    def __init__(self, root: str | Path, candidates: list[Path]) -> None:
        self.root = Path(root)
        self.candidates = list(candidates)
        names = ", ".join(sorted(p.name for p in self.candidates))
        super().__init__(
            f"Multiple manifest files found in the repository root {self.root}: {names}"
        )


# ---------------------------------------------------------------------------
# Scaffolding
# ---------------------------------------------------------------------------


class ScaffoldError(ForgeError):
    """Raised when a scaffolding step fails irrecoverably."""


class ExternalToolError(ScaffoldError):
    """Raised when an external process exits with a non-zero code."""

    def __init__(
        self,
        command: str,
        arguments: list[str],
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.command = command
        self.arguments = list(arguments)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"Command `{self.command_line}` failed with exit code {exit_code}."
        )

    @property
    def command_line(self) -> str:
        """The failing command rendered as a single line."""
        return " ".join([self.command, *self.arguments])

    def details(self) -> str:
        """Full diagnostic text including the captured output."""
        parts = [str(self)]
        if self.stdout:
            parts.append(f"Output: {self.stdout}")
        if self.stderr:
            parts.append(f"Error: {self.stderr}")
        return "\n".join(parts)


class FilesystemError(ScaffoldError):
    """Raised when a merge, move, or delete operation fails."""

    def __init__(self, operation: str, path: str | Path, reason: str = "") -> None:
        self.operation = operation
        self.path = Path(path)
        self.reason = reason
        message = f"Filesystem operation '{operation}' failed for {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ReferenceGraphError(ScaffoldError):
    """Raised when a reference edge cannot be wired in a valid order."""
