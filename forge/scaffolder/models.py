"""Pydantic v2 models for the scaffolder.

Defines the caller-supplied ``ProjectSpec``, the ``GeneratedUnit`` values
produced as each generation step completes, the ``ReferenceEdge`` dependency
relation between units, and the ``ScaffoldResult`` returned by a run.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from forge.errors import ScaffoldError

_INVALID_NAME = re.compile(r"[\s/\\]")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TemplateKind(str, Enum):
    """Project template selected on the command line."""
    SIMPLE = "simple"
    LAYERED = "layered"


class UnitRole(str, Enum):
    """Role a generated unit plays inside a scaffolded function."""
    LAMBDA = "Lambda"
    LAMBDA_TESTS = "Lambda.Tests"
    APPLICATION = "Application"
    DOMAIN = "Domain"
    INFRASTRUCTURE = "Infrastructure"
    APPLICATION_TESTS = "Application.Tests"
    DOMAIN_TESTS = "Domain.Tests"

    @property
    def is_test(self) -> bool:
        return self.value.endswith(".Tests")

    def unit_name(self, project_name: str) -> str:
        """Full unit name, e.g. ``Billing.Domain.Tests``."""
        return f"{project_name}.{self.value}"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class ProjectSpec(BaseModel):
    """The validated ``{name, template_kind}`` pair handed over by the CLI."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Logical project name, used verbatim in unit names")
    template_kind: TemplateKind = Field(default=TemplateKind.SIMPLE)

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str) -> str:
        if not value:
            raise ValueError("name must not be empty")
        if _INVALID_NAME.search(value) or value in {".", ".."}:
            raise ValueError(f"name {value!r} must not contain whitespace or path separators")
        return value


# ---------------------------------------------------------------------------
# Produced values
# ---------------------------------------------------------------------------

class GeneratedUnit(BaseModel):
    """One buildable project produced during scaffolding."""
    model_config = ConfigDict(frozen=True)

    role: UnitRole
    unit_name: str = Field(..., description="Project name, e.g. 'Billing.Domain'")
    source_dir: Path = Field(..., description="Directory holding the project file")
    test_dir: Optional[Path] = Field(
        default=None, description="Test counterpart directory created alongside, if any"
    )
    project_file: Path = Field(..., description="Path registered with the manifest")


class ReferenceEdge(BaseModel):
    """A directed "depends on" relation between two unit roles."""
    model_config = ConfigDict(frozen=True)

    from_unit: UnitRole
    to_unit: UnitRole

    def __str__(self) -> str:
        return f"{self.from_unit.value} -> {self.to_unit.value}"


class ScaffoldResult(BaseModel):
    """Outcome of a scaffold run.

    A failed run keeps every unit, edge and step completed before the failure;
    nothing is rolled back.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    spec: ProjectSpec
    function_root: Path
    units: list[GeneratedUnit] = Field(default_factory=list)
    edges: list[ReferenceEdge] = Field(default_factory=list)
    steps_completed: list[str] = Field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[ScaffoldError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def project_files(self) -> list[Path]:
        return [unit.project_file for unit in self.units]

    def unit(self, role: UnitRole) -> GeneratedUnit:
        """Return the generated unit for *role*."""
        for unit in self.units:
            if unit.role == role:
                return unit
        raise KeyError(role.value)

    def raise_for_error(self) -> "ScaffoldResult":
        """Re-raise the captured error, if any; return ``self`` otherwise."""
        if self.error is not None:
            raise self.error
        return self
