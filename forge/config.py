"""Function Forge configuration.

Centralised, typed configuration for the scaffolding tool.  Settings use a
Pydantic v2 model so they are validated at construction time and can be
loaded from a ``forge.json`` file at the repository root or overridden with
``FORGE_*`` environment variables.

The defaults drive the ``dotnet`` CLI: Lambda function templates, class
libraries, xUnit test projects, and ``.sln`` solution manifests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from forge.errors import ConfigurationError

CONFIG_FILENAME = "forge.json"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _summarise(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'file'}: {error['msg']}"
            for error in exc.errors()
        )
    return str(exc)


class ForgeConfig(BaseModel):
    """Global Function Forge configuration.

    Instances are typically created once by the CLI entry point and handed to
    the ``ScaffoldOrchestrator``.
    """

    tool: str = Field(default="dotnet", description="Executable that hosts every sub-command")
    function_template: str = Field(
        default="lambda.EmptyFunction",
        description="Template short name for function units (nests its output)",
    )
    library_template: str = Field(default="classlib", description="Template for library units")
    test_template: str = Field(default="xunit", description="Template for test units")
    project_extension: str = Field(default=".csproj", description="Project file extension")
    manifest_glob: str = Field(default="*.sln", description="Manifest file pattern at the root")
    repository_marker: str = Field(
        default=".git",
        description="Directory that marks the repository root (read from the environment only)",
    )
    functions_dir: str = Field(default="functions", description="Parent of all function roots")
    scratch_prefix: str = Field(
        default=".forge-", description="Prefix of the scratch directory used for layered runs"
    )
    batch_registration: bool = Field(
        default=True,
        description="Register all projects with one manifest call instead of one per project",
    )
    verbose: bool = Field(default=False, description="Echo every external command before it runs")

    @field_validator("project_extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        if not value:
            raise ValueError("project_extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("tool", "manifest_glob", "repository_marker", "functions_dir")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value must not be blank")
        return value

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ForgeConfig":
        """Load a previously-saved configuration from JSON.

        Raises:
            ConfigurationError: If the file cannot be read or holds invalid
                settings.
        """
        try:
            raw = Path(path).read_text(encoding="utf-8")
            return cls.model_validate_json(raw)
        except (OSError, ValidationError) as exc:
            raise ConfigurationError(path, _summarise(exc)) from exc

    @classmethod
    def from_env(cls, base: "ForgeConfig | None" = None) -> "ForgeConfig":
        """Build a ``ForgeConfig`` from environment variables.

        Recognised variables (all optional):
            FORGE_TOOL, FORGE_FUNCTION_TEMPLATE, FORGE_LIBRARY_TEMPLATE,
            FORGE_TEST_TEMPLATE, FORGE_PROJECT_EXTENSION, FORGE_MANIFEST_GLOB,
            FORGE_REPOSITORY_MARKER, FORGE_FUNCTIONS_DIR,
            FORGE_SCRATCH_PREFIX, FORGE_BATCH_REGISTRATION, FORGE_VERBOSE.

        Args:
            base: Configuration the overrides are applied to.  Defaults to
                the built-in defaults.

        Raises:
            ConfigurationError: If an override holds an invalid value.
        """
        values: dict[str, Any] = (base or cls()).model_dump()
        for field_name in (
            "tool",
            "function_template",
            "library_template",
            "test_template",
            "project_extension",
            "manifest_glob",
            "repository_marker",
            "functions_dir",
            "scratch_prefix",
        ):
            env_value = os.environ.get(f"FORGE_{field_name.upper()}")
            if env_value:
                values[field_name] = env_value

        for flag in ("batch_registration", "verbose"):
            env_value = os.environ.get(f"FORGE_{flag.upper()}")
            if env_value:
                values[flag] = env_value.strip().lower() in _TRUE_VALUES

        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError("environment", _summarise(exc)) from exc

    @classmethod
    def discover(cls, root: Path) -> "ForgeConfig":
        """Load ``<root>/forge.json`` when present, then apply env overrides.

        The root itself is located with the ``repository_marker`` from the
        environment or the defaults, so a marker set in ``forge.json`` has no
        effect on which directory is searched.
        """
        config_path = Path(root) / CONFIG_FILENAME
        base = cls.load(config_path) if config_path.is_file() else None
        return cls.from_env(base)
