"""Function Forge scaffolder -- generates function projects with external templates.

Quick usage::

    from forge.scaffolder import ProjectSpec, ScaffoldOrchestrator, TemplateKind

    spec = ProjectSpec(name="Billing", template_kind=TemplateKind.LAYERED)
    result = ScaffoldOrchestrator(spec).scaffold()
    result.raise_for_error()
"""

from forge.scaffolder.graph import LAYERED_EDGES, wiring_order
from forge.scaffolder.merger import merge_directory, move_directory
from forge.scaffolder.models import (
    GeneratedUnit,
    ProjectSpec,
    ReferenceEdge,
    ScaffoldResult,
    TemplateKind,
    UnitRole,
)
from forge.scaffolder.orchestrator import ScaffoldOrchestrator

__all__ = [
    "GeneratedUnit",
    "LAYERED_EDGES",
    "ProjectSpec",
    "ReferenceEdge",
    "ScaffoldOrchestrator",
    "ScaffoldResult",
    "TemplateKind",
    "UnitRole",
    "merge_directory",
    "move_directory",
    "wiring_order",
]
