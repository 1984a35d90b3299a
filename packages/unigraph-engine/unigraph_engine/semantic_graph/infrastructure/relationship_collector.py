"""
Relationship Collector

Queries the resolution service for one node and emits typed edges:

1. References        referencing node → node  (MethodCall / PropertyAccess / Association)
2. Implementations   implementer → node       (Implementation / MethodImplementation)
3. Derived types     derived class → node     (Inheritance)
4. Structural edges  from the symbol's own declaration:
   - Type:     → base type (Inheritance), → interfaces (Implementation),
               → non-static field/property types (Composition)
   - Method:   → overridden method (MethodOverride),
               → parameter types and non-void return type (Association)
   - Property: → property type (Association)
   - Field:    → field type (Composition if read-only, else Aggregation)

Targets that do not map to a node (framework types, unresolved symbols) are
dropped without error.
"""

from unigraph_shared.common.exceptions import AnalysisCancelledError
from unigraph_shared.common.observability import get_logger

from ..domain.models import Relationship, RelationshipType, SourceLocation, SymbolKind, SymbolNode
from ..ports import ReferenceContext, ReferenceSite, SymbolHandle
from .locations import to_source_location

logger = get_logger(__name__)

REFERENCE_TYPES: dict[ReferenceContext, RelationshipType] = {
    ReferenceContext.CALL: RelationshipType.METHOD_CALL,
    ReferenceContext.PROPERTY_ACCESS: RelationshipType.PROPERTY_ACCESS,
}


class RelationshipCollector:
    """
    Collects edges for one node at a time.

    Safe to run concurrently for different nodes of the same context: each
    call keeps its own edge list and appends to the shared store.
    """

    async def collect_relationships(self, node: SymbolNode, context) -> list[Relationship]:
        """
        Collect all edges contributed by ``node``.

        Args:
            node: Node to analyze
            context: AnalysisContext (service, registry, nodes, store)

        Returns:
            Distinct edges found for this node (including ones another node
            already contributed to the shared store)

        A lookup failure is logged and recorded; edges gathered before the
        failure are kept. Cancellation propagates.
        """
        collected: dict[tuple, Relationship] = {}
        symbol = context.registry.symbol_for(node.id)
        if symbol is None:
            return []

        try:
            await self._collect_references(node, symbol, context, collected)
            await self._collect_implementations(node, symbol, context, collected)
            await self._collect_derived_types(node, symbol, context, collected)
            self._collect_structural(node, symbol, context, collected)
        except AnalysisCancelledError:
            raise
        except Exception as e:
            logger.warning(
                "relationship_collection_failed",
                node_id=node.id,
                error=str(e),
                partial_edges=len(collected),
            )
            context.record_error(f"Relationship collection failed for {node.id}: {e}")

        return list(collected.values())

    # ============================================================
    # Resolver-backed lookups
    # ============================================================

    async def _collect_references(self, node: SymbolNode, symbol: SymbolHandle, context, collected: dict) -> None:
        sites: list[ReferenceSite] = await context.call(context.service.find_references, symbol)
        for site in sites:
            referencing = site.referencing_symbol
            if referencing is None:
                referencing = await context.call(context.service.resolve_symbol_at_location, site.location)

            source_id = context.node_id_for(referencing)
            if source_id is None:
                continue

            relationship_type = REFERENCE_TYPES.get(site.context, RelationshipType.ASSOCIATION)
            self._emit(context, collected, source_id, node.id, relationship_type, to_source_location(site.location))

    async def _collect_implementations(
        self, node: SymbolNode, symbol: SymbolHandle, context, collected: dict
    ) -> None:
        # Abstract classes are covered by derived-type lookup
        is_abstract_member = symbol.is_abstract and symbol.kind != SymbolKind.TYPE
        if not (symbol.is_interface or is_abstract_member):
            return

        relationship_type = (
            RelationshipType.IMPLEMENTATION if symbol.is_interface else RelationshipType.METHOD_IMPLEMENTATION
        )
        implementations = await context.call(context.service.find_implementations, symbol)
        for implementation in implementations:
            source_id = context.node_id_for(implementation)
            if source_id is not None:
                self._emit(context, collected, source_id, node.id, relationship_type)

    async def _collect_derived_types(self, node: SymbolNode, symbol: SymbolHandle, context, collected: dict) -> None:
        if not symbol.is_class:
            return

        derived_types = await context.call(context.service.find_derived_types, symbol)
        for derived in derived_types:
            source_id = context.node_id_for(derived)
            if source_id is not None:
                self._emit(context, collected, source_id, node.id, RelationshipType.INHERITANCE)

    # ============================================================
    # Structural edges (no resolver calls)
    # ============================================================

    def _collect_structural(self, node: SymbolNode, symbol: SymbolHandle, context, collected: dict) -> None:
        if symbol.kind == SymbolKind.TYPE:
            self._emit_to(context, collected, node.id, symbol.base_type, RelationshipType.INHERITANCE)
            for interface in symbol.interfaces:
                self._emit_to(context, collected, node.id, interface, RelationshipType.IMPLEMENTATION)
            for member in symbol.members:
                if member.kind in (SymbolKind.FIELD, SymbolKind.PROPERTY) and not member.is_static:
                    self._emit_to(context, collected, node.id, member.declared_type, RelationshipType.COMPOSITION)

        elif symbol.kind == SymbolKind.METHOD:
            self._emit_to(context, collected, node.id, symbol.overridden, RelationshipType.METHOD_OVERRIDE)
            for parameter in symbol.parameters:
                self._emit_to(context, collected, node.id, parameter.declared_type, RelationshipType.ASSOCIATION)
            self._emit_to(context, collected, node.id, symbol.return_type, RelationshipType.ASSOCIATION)

        elif symbol.kind == SymbolKind.PROPERTY:
            self._emit_to(context, collected, node.id, symbol.declared_type, RelationshipType.ASSOCIATION)

        elif symbol.kind == SymbolKind.FIELD:
            relationship_type = RelationshipType.COMPOSITION if symbol.is_read_only else RelationshipType.AGGREGATION
            self._emit_to(context, collected, node.id, symbol.declared_type, relationship_type)

    # ============================================================
    # Helpers
    # ============================================================

    def _emit_to(
        self,
        context,
        collected: dict,
        source_id: str,
        target: SymbolHandle | None,
        relationship_type: RelationshipType,
    ) -> None:
        target_id = context.node_id_for(target)
        if target_id is not None:
            self._emit(context, collected, source_id, target_id, relationship_type)

    def _emit(
        self,
        context,
        collected: dict,
        source_id: str,
        target_id: str,
        relationship_type: RelationshipType,
        location: SourceLocation | None = None,
    ) -> None:
        relationship = context.build_relationship(source_id, target_id, relationship_type, location)
        if relationship is None or relationship.key in collected:
            return
        collected[relationship.key] = relationship
        context.relationships.add(relationship)
