"""Graph construction components."""

from .cross_project import CrossProjectDependencyAggregator
from .feature_boundaries import FeatureBoundaryDetector
from .identity_registry import SymbolIdentityRegistry, generate_symbol_id
from .node_builder import NodeBuilder
from .relationship_collector import RelationshipCollector
from .relationship_store import RelationshipStore
from .role_classifier import ArchitecturalRoleClassifier

__all__ = [
    "ArchitecturalRoleClassifier",
    "CrossProjectDependencyAggregator",
    "FeatureBoundaryDetector",
    "NodeBuilder",
    "RelationshipCollector",
    "RelationshipStore",
    "SymbolIdentityRegistry",
    "generate_symbol_id",
]
