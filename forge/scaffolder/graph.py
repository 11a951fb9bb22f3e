"""Static reference graph of the layered template.

The five-unit graph is fixed, so it is kept as an explicit edge list.
``wiring_order`` groups the edges by consuming unit and orders the groups so
every referenced unit is wired before anything that depends on it.
"""

from __future__ import annotations

from collections.abc import Iterable

from forge.errors import ReferenceGraphError
from forge.scaffolder.models import ReferenceEdge, UnitRole

LAYERED_EDGES: tuple[ReferenceEdge, ...] = (
    ReferenceEdge(from_unit=UnitRole.APPLICATION, to_unit=UnitRole.DOMAIN),
    ReferenceEdge(from_unit=UnitRole.APPLICATION, to_unit=UnitRole.INFRASTRUCTURE),
    ReferenceEdge(from_unit=UnitRole.INFRASTRUCTURE, to_unit=UnitRole.DOMAIN),
    ReferenceEdge(from_unit=UnitRole.DOMAIN_TESTS, to_unit=UnitRole.DOMAIN),
    ReferenceEdge(from_unit=UnitRole.APPLICATION_TESTS, to_unit=UnitRole.APPLICATION),
)


def wiring_order(
    edges: Iterable[ReferenceEdge],
    created: Iterable[UnitRole],
) -> list[tuple[UnitRole, list[UnitRole]]]:
    """Return ``(consumer, [dependencies...])`` groups in topological order.

    Units with no outgoing edges (Domain) come first implicitly; a consumer is
    emitted once all of its dependencies have been emitted or have no edges
    of their own.  Ties keep the order in which consumers first appear.

    Raises:
        ReferenceGraphError: If an edge names a unit that was not created,
            or the edges contain a cycle.
    """
    edges = list(edges)
    created_set = set(created)
    for edge in edges:
        missing = {edge.from_unit, edge.to_unit} - created_set
        if missing:
            names = ", ".join(sorted(role.value for role in missing))
            raise ReferenceGraphError(f"Edge {edge} references units not created: {names}")
        if edge.from_unit == edge.to_unit:
            raise ReferenceGraphError(f"Edge {edge} references itself")

    dependencies: dict[UnitRole, list[UnitRole]] = {}
    for edge in edges:
        targets = dependencies.setdefault(edge.from_unit, [])
        if edge.to_unit not in targets:
            targets.append(edge.to_unit)

    ordered: list[tuple[UnitRole, list[UnitRole]]] = []
    ready = {role for role in created_set if role not in dependencies}
    pending = list(dependencies)
    while pending:
        progress = [role for role in pending if all(dep in ready for dep in dependencies[role])]
        if not progress:
            names = ", ".join(role.value for role in pending)
            raise ReferenceGraphError(f"Reference graph contains a cycle among: {names}")
        for role in progress:
            ordered.append((role, dependencies[role]))
            ready.add(role)
            pending.remove(role)
    return ordered
