"""Semantic graph domain models."""

from .languages import file_extension, language_from_path
from .models import (
    UNKNOWN_FEATURE,
    Accessibility,
    ArchitecturalRole,
    CrossProjectDependency,
    GraphMetadata,
    Modifier,
    ProjectInfo,
    ProjectMetrics,
    Relationship,
    RelationshipType,
    SourceLocation,
    SymbolKind,
    SymbolMetrics,
    SymbolNode,
    TypeCategory,
    UnifiedSemanticGraph,
)

__all__ = [
    # Enums
    "Accessibility",
    "ArchitecturalRole",
    "Modifier",
    "RelationshipType",
    "SymbolKind",
    "TypeCategory",
    "UNKNOWN_FEATURE",
    # Models
    "CrossProjectDependency",
    "GraphMetadata",
    "ProjectInfo",
    "ProjectMetrics",
    "Relationship",
    "SourceLocation",
    "SymbolMetrics",
    "SymbolNode",
    "UnifiedSemanticGraph",
    # Helpers
    "file_extension",
    "language_from_path",
]
