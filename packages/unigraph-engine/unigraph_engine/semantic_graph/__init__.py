"""
Unified Semantic Graph

Layers:
- domain/: graph models (nodes, relationships, project info, metadata)
- ports.py: SymbolResolutionService protocol and handle types
- infrastructure/: identity registry, node builder, relationship collector,
  role classifier, feature boundary detector, cross-project aggregator
- application/: analysis context and the SemanticSolutionAnalyzer orchestrator
- adapters/: in-memory snapshot and threaded (sync resolver) services
"""

from .adapters import InMemorySymbolResolutionService, ThreadedResolverAdapter
from .application import AnalysisContext, CancellationToken, SemanticSolutionAnalyzer, analyze_solution
from .domain import (
    ArchitecturalRole,
    CrossProjectDependency,
    ProjectInfo,
    Relationship,
    RelationshipType,
    SymbolKind,
    SymbolNode,
    UnifiedSemanticGraph,
)
from .ports import (
    ProjectHandle,
    ReferenceContext,
    ReferenceSite,
    SourceSpan,
    SymbolHandle,
    SymbolResolutionService,
    Workspace,
)

__all__ = [
    # Orchestration
    "SemanticSolutionAnalyzer",
    "analyze_solution",
    "AnalysisContext",
    "CancellationToken",
    # Models
    "ArchitecturalRole",
    "CrossProjectDependency",
    "ProjectInfo",
    "Relationship",
    "RelationshipType",
    "SymbolKind",
    "SymbolNode",
    "UnifiedSemanticGraph",
    # Port
    "ProjectHandle",
    "ReferenceContext",
    "ReferenceSite",
    "SourceSpan",
    "SymbolHandle",
    "SymbolResolutionService",
    "Workspace",
    # Adapters
    "InMemorySymbolResolutionService",
    "ThreadedResolverAdapter",
]
