"""Validation of component build ordering.

Components may be sequenced either with integer ``buildorder`` batches or
with explicit ``buildafter`` dependencies on other components, but a stream
must pick one discipline.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..core.exceptions import BuildOrderError
from .components import Component


def validate_buildorder(*component_maps: Mapping[str, Component]) -> None:
    """Check the ordering hints of all components in one stream.

    Args:
        component_maps: Key -> component mappings (rpm and module components).

    Raises:
        BuildOrderError: If a component sets both hints, the stream mixes
            disciplines, a buildafter key is unknown, or buildafter forms a
            cycle.
    """
    components: dict[str, Component] = {}
    for mapping in component_maps:
        components.update(mapping)

    uses_buildorder: list[str] = []
    uses_buildafter: list[str] = []

    for key, component in sorted(components.items()):
        if component.buildorder and component.buildafter:
            raise BuildOrderError(
                f"Component '{key}' specifies both buildorder and buildafter"
            )
        if component.buildorder:
            uses_buildorder.append(key)
        if component.buildafter:
            uses_buildafter.append(key)

    if uses_buildorder and uses_buildafter:
        raise BuildOrderError(
            "Components mix buildorder and buildafter "
            f"(buildorder: {', '.join(uses_buildorder)}; "
            f"buildafter: {', '.join(uses_buildafter)})"
        )

    if not uses_buildafter:
        return

    for key in uses_buildafter:
        for dep in sorted(components[key].buildafter):
            if dep not in components:
                raise BuildOrderError(
                    f"Component '{key}' lists unknown key '{dep}' in buildafter"
                )

    cycle = _find_cycle({k: c.buildafter for k, c in components.items()})
    if cycle:
        raise BuildOrderError(f"buildafter cycle: {' -> '.join(cycle)}")


def _find_cycle(graph: Mapping[str, Iterable[str]]) -> list[str] | None:
    """Return one cycle in ``graph`` as a closed path, or None."""
    visiting: set[str] = set()
    done: set[str] = set()
    path: list[str] = []

    def visit(node: str) -> list[str] | None:
        visiting.add(node)
        path.append(node)
        for dep in sorted(graph.get(node, ())):
            if dep in visiting:
                return path[path.index(dep) :] + [dep]
            if dep not in done:
                found = visit(dep)
                if found:
                    return found
        path.pop()
        visiting.discard(node)
        done.add(node)
        return None

    for node in sorted(graph):
        if node not in done:
            found = visit(node)
            if found:
                return found
    return None
