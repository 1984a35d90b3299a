"""
Cross-Project Dependency Aggregator

Collapses every edge from one project's nodes into another project's nodes
into a single weighted CrossProjectDependency.

couplingStrength = mean of per-edge-type weights, clipped to 1.0
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping

from ..domain.models import CrossProjectDependency, Relationship, RelationshipType, SymbolNode
from ..ports import ProjectHandle

RELATIONSHIP_WEIGHTS: dict[RelationshipType, float] = {
    RelationshipType.INHERITANCE: 1.0,
    RelationshipType.IMPLEMENTATION: 0.9,
    RelationshipType.COMPOSITION: 0.8,
    RelationshipType.METHOD_CALL: 0.6,
    RelationshipType.PROPERTY_ACCESS: 0.5,
    RelationshipType.ASSOCIATION: 0.3,
}
DEFAULT_WEIGHT = 0.1

PROJECT_REFERENCE = "ProjectReference"


def calculate_coupling_strength(relationships: list[Relationship]) -> float:
    if not relationships:
        return 0.0
    total = sum(RELATIONSHIP_WEIGHTS.get(r.type, DEFAULT_WEIGHT) for r in relationships)
    return min(total / len(relationships), 1.0)


class CrossProjectDependencyAggregator:
    def aggregate(
        self,
        nodes: Mapping[str, SymbolNode],
        relationships: Iterable[Relationship],
        projects: list[ProjectHandle],
    ) -> list[CrossProjectDependency]:
        """
        One dependency per ordered (source, target) project pair with edges.

        Pairs are emitted in project order (source-major), which keeps the
        output stable across runs.
        """
        by_pair: dict[tuple[str, str], list[Relationship]] = defaultdict(list)
        for r in relationships:
            source = nodes.get(r.source_id)
            target = nodes.get(r.target_id)
            if source is None or target is None or source.project_id == target.project_id:
                continue
            by_pair[(source.project_id, target.project_id)].append(r)

        dependencies = []
        for source_project in projects:
            for target_project in projects:
                if source_project.project_id == target_project.project_id:
                    continue
                edges = by_pair.get((source_project.project_id, target_project.project_id))
                if not edges:
                    continue
                dependencies.append(
                    CrossProjectDependency(
                        source_project_id=source_project.project_id,
                        target_project_id=target_project.project_id,
                        dependency_type=PROJECT_REFERENCE,
                        shared_symbol_ids=sorted({r.target_id for r in edges}),
                        reference_count=len(edges),
                        coupling_strength=calculate_coupling_strength(edges),
                    )
                )
        return dependencies
