"""
Node Builder

Converts a resolved symbol plus its owning project into a SymbolNode and
registers it in the shared node map.

Skipped symbols:
- compiler-synthesized (implicitly declared)
- namespaces
- symbols from excluded framework assemblies (prefix match)
"""

from unigraph_shared.common.observability import get_logger
from unigraph_shared.config import AnalysisConfig

from ..domain.models import MODIFIER_ORDER, SymbolKind, SymbolMetrics, SymbolNode
from ..ports import ProjectHandle, SymbolHandle
from .locations import to_source_location

logger = get_logger(__name__)

UNKNOWN_ASSEMBLY = "Unknown"


class NodeBuilder:
    """
    Builds SymbolNodes.

    Usage:
        builder = NodeBuilder(settings.analysis)
        node = builder.build_node(symbol, project, context)
    """

    def __init__(self, config: AnalysisConfig):
        self.config = config
        self._excluded_prefixes = tuple(config.excluded_assembly_prefixes)
        self._root_type_names = frozenset(config.root_type_names)

    def should_skip(self, symbol: SymbolHandle) -> bool:
        if symbol.is_implicitly_declared or symbol.kind == SymbolKind.NAMESPACE:
            return True
        assembly = symbol.containing_assembly
        return bool(assembly) and assembly.startswith(self._excluded_prefixes)

    def build_node(self, symbol: SymbolHandle, project: ProjectHandle, context) -> SymbolNode | None:
        """
        Build and register the node for ``symbol``.

        Args:
            symbol: Resolved symbol
            project: Project the symbol was discovered in
            context: AnalysisContext owning the registry and node map

        Returns:
            The registered node (the earlier one if the symbol was already
            built), or None when the symbol is skipped
        """
        if self.should_skip(symbol):
            context.skipped_symbols += 1
            return None

        symbol_id = context.registry.get_or_assign_id(symbol)
        existing = context.nodes.get(symbol_id)
        if existing is not None:
            return existing

        node = self.create_node(symbol_id, symbol, project)
        stored = context.register_node(node)
        if stored is not node:
            logger.debug("duplicate_symbol_ignored", symbol_id=symbol_id, project=project.project_id)
        return stored

    def create_node(self, symbol_id: str, symbol: SymbolHandle, project: ProjectHandle) -> SymbolNode:
        return SymbolNode(
            id=symbol_id,
            name=symbol.name,
            fully_qualified_name=symbol.display_name,
            kind=symbol.kind,
            declared_type_category=symbol.type_category if symbol.kind == SymbolKind.TYPE else None,
            containing_namespace=symbol.containing_namespace,
            location=to_source_location(symbol.location),
            accessibility=symbol.accessibility,
            modifiers=[m for m in MODIFIER_ORDER if m in symbol.modifiers],
            project_id=project.project_id,
            assembly_name=project.assembly_name or UNKNOWN_ASSEMBLY,
            interfaces=[i.display_name for i in symbol.interfaces],
            base_type=symbol.base_type.display_name if symbol.base_type else None,
            generic_parameters=list(symbol.generic_parameters),
            metrics=self.calculate_metrics(symbol),
        )

    def calculate_metrics(self, symbol: SymbolHandle) -> SymbolMetrics:
        if symbol.kind == SymbolKind.TYPE:
            members = symbol.members
            return SymbolMetrics(
                method_count=sum(1 for m in members if m.kind == SymbolKind.METHOD),
                property_count=sum(1 for m in members if m.kind == SymbolKind.PROPERTY),
                field_count=sum(1 for m in members if m.kind == SymbolKind.FIELD),
                inheritance_depth=self.inheritance_depth(symbol),
            )
        if symbol.kind == SymbolKind.METHOD:
            return SymbolMetrics(
                parameter_count=len(symbol.parameters),
                cyclomatic_complexity=symbol.cyclomatic_complexity,
            )
        return SymbolMetrics()

    def inheritance_depth(self, symbol: SymbolHandle) -> int:
        """Number of base types above ``symbol``, not counting the root object type."""
        depth = 0
        seen = {symbol}
        current = symbol.base_type
        while current is not None and current.display_name not in self._root_type_names and current not in seen:
            depth += 1
            seen.add(current)
            current = current.base_type
        return depth
