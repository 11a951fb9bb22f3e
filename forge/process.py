"""Synchronous external process execution.

Every external tool (template generators, the reference linker, the manifest
tool) runs through ``ProcessRunner``.  Output is captured rather than
inherited; a non-zero exit code becomes an ``ExternalToolError`` carrying the
full captured output.  There is no timeout: the call blocks until the child
process exits.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from forge.errors import ExternalToolError
from forge.utils import print_command, print_tool_output

# Exit code reported when the executable itself cannot be started.
COMMAND_NOT_FOUND = 127


class ProcessRunner:
    """Runs external commands and converts failures into ``ExternalToolError``."""

    def __init__(self, echo_commands: bool = False, forward_output: bool = True) -> None:
        self.echo_commands = echo_commands
        self.forward_output = forward_output

    def run(
        self,
        command: str,
        arguments: list[str],
        working_directory: str | Path | None = None,
    ) -> str:
        """Run *command* with *arguments* and return its stdout.

        Raises:
            ExternalToolError: If the process exits non-zero or cannot start.
        """
        args = [str(a) for a in arguments]
        if self.echo_commands:
            print_command(" ".join([command, *args]))

        try:
            completed = subprocess.run(
                [command, *args],
                cwd=str(working_directory) if working_directory else None,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise ExternalToolError(
                command, args, COMMAND_NOT_FOUND, stderr=f"Executable not found: {exc}"
            ) from exc
        except PermissionError as exc:
            raise ExternalToolError(
                command, args, COMMAND_NOT_FOUND, stderr=f"Executable not runnable: {exc}"
            ) from exc

        stdout = completed.stdout or ""
        stderr = completed.stderr or ""
        if completed.returncode != 0:
            raise ExternalToolError(command, args, completed.returncode, stdout, stderr)

        if self.forward_output:
            print_tool_output(stdout)
        return stdout
