"""
Unified Semantic Graph Models

Typed graph of program entities and their relationships, enriched with
architectural roles, feature boundaries and cross-project coupling.

Serialized field names are camelCase (``fullyQualifiedName``); Python
attributes stay snake_case.
"""

from collections import deque
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ============================================================
# Enums
# ============================================================


class SymbolKind(str, Enum):
    """Kinds of declared program entities"""

    TYPE = "Type"
    METHOD = "Method"
    PROPERTY = "Property"
    FIELD = "Field"
    EVENT = "Event"
    PARAMETER = "Parameter"
    LOCAL = "Local"
    NAMESPACE = "Namespace"  # Reported by resolvers, never becomes a node


class TypeCategory(str, Enum):
    """Declared category of a Type symbol"""

    CLASS = "Class"
    INTERFACE = "Interface"
    STRUCT = "Struct"
    ENUM = "Enum"
    DELEGATE = "Delegate"
    RECORD = "Record"


class Accessibility(str, Enum):
    PUBLIC = "Public"
    PRIVATE = "Private"
    PROTECTED = "Protected"
    INTERNAL = "Internal"
    PROTECTED_INTERNAL = "ProtectedInternal"


class Modifier(str, Enum):
    """Declaration modifiers, in canonical output order"""

    STATIC = "static"
    ABSTRACT = "abstract"
    VIRTUAL = "virtual"
    OVERRIDE = "override"
    SEALED = "sealed"
    EXTERN = "extern"


MODIFIER_ORDER: tuple[Modifier, ...] = tuple(Modifier)


class RelationshipType(str, Enum):
    """Edge types"""

    # Type relationships
    INHERITANCE = "Inheritance"
    IMPLEMENTATION = "Implementation"
    COMPOSITION = "Composition"
    AGGREGATION = "Aggregation"
    ASSOCIATION = "Association"

    # Member relationships
    METHOD_OVERRIDE = "MethodOverride"
    METHOD_IMPLEMENTATION = "MethodImplementation"
    METHOD_CALL = "MethodCall"
    PROPERTY_ACCESS = "PropertyAccess"


class ArchitecturalRole(str, Enum):
    """Closed taxonomy of architectural roles"""

    # UI layer
    VIEW = "View"
    VIEW_MODEL = "ViewModel"
    CODE_BEHIND = "CodeBehind"
    USER_CONTROL = "UserControl"
    WINDOW = "Window"
    PAGE = "Page"

    # Business layer
    SERVICE = "Service"
    BUSINESS_LOGIC = "BusinessLogic"
    DOMAIN = "Domain"
    ENTITY = "Entity"
    VALUE_OBJECT = "ValueObject"

    # Data layer
    REPOSITORY = "Repository"
    DATA_ACCESS = "DataAccess"
    DB_CONTEXT = "DbContext"
    DATA_MODEL = "DataModel"

    # Infrastructure
    CONTROLLER = "Controller"
    API_CONTROLLER = "ApiController"
    MIDDLEWARE = "Middleware"
    CONFIGURATION = "Configuration"

    # Cross-cutting
    UTILITY = "Utility"
    HELPER = "Helper"
    EXTENSION = "Extension"
    ATTRIBUTE = "Attribute"

    # Structural
    INTERFACE = "Interface"
    ABSTRACT_CLASS = "AbstractClass"
    FACTORY = "Factory"
    BUILDER = "Builder"

    UNKNOWN = "Unknown"


UNKNOWN_FEATURE = "Unknown"


# ============================================================
# Value objects
# ============================================================


class GraphModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceLocation(GraphModel):
    """Source span of a declaration or reference (1-indexed lines)"""

    model_config = ConfigDict(frozen=True)

    file: str
    start_line: int
    start_column: int = 0
    end_line: int
    end_column: int = 0


class SymbolMetrics(GraphModel):
    """
    Per-symbol metrics.

    Each value is populated only where it applies to the node kind:
    member counts and inheritance depth for types, parameter count for methods.
    """

    method_count: int | None = None
    property_count: int | None = None
    field_count: int | None = None
    parameter_count: int | None = None
    inheritance_depth: int | None = None
    cyclomatic_complexity: int | None = None


# ============================================================
# Graph entities
# ============================================================


class SymbolNode(GraphModel):
    """
    One declared symbol in the graph.

    ID format: {assembly_name}::{fully_qualified_name}

    Created once during discovery; only ``role``, ``feature_boundary`` and the
    reference counts are written afterwards.
    """

    id: str
    name: str
    fully_qualified_name: str
    kind: SymbolKind
    declared_type_category: TypeCategory | None = None
    containing_namespace: str | None = None
    location: SourceLocation | None = None
    accessibility: Accessibility = Accessibility.PUBLIC
    modifiers: list[Modifier] = Field(default_factory=list)
    project_id: str
    assembly_name: str
    interfaces: list[str] = Field(default_factory=list)
    base_type: str | None = None
    generic_parameters: list[str] = Field(default_factory=list)
    role: ArchitecturalRole = ArchitecturalRole.UNKNOWN
    feature_boundary: str | None = None
    metrics: SymbolMetrics = Field(default_factory=SymbolMetrics)
    incoming_reference_count: int = 0
    outgoing_reference_count: int = 0

    @property
    def is_abstract(self) -> bool:
        return Modifier.ABSTRACT in self.modifiers

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers


class Relationship(GraphModel):
    """
    Directed, typed edge between two node ids.

    Two relationships describe the same fact when their ``key`` matches;
    the location of the first discovery is kept.
    """

    model_config = ConfigDict(frozen=True)

    source_id: str
    target_id: str
    type: RelationshipType
    location: SourceLocation | None = None
    is_cross_project: bool = False
    is_cross_language: bool = False

    @property
    def key(self) -> tuple[str, str, RelationshipType]:
        return (self.source_id, self.target_id, self.type)


class CrossProjectDependency(GraphModel):
    """All edges from one project into another, collapsed into one record"""

    source_project_id: str
    target_project_id: str
    dependency_type: str = "ProjectReference"
    shared_symbol_ids: list[str] = Field(default_factory=list)
    reference_count: int = 0
    coupling_strength: float = Field(default=0.0, ge=0.0, le=1.0)


class ProjectMetrics(GraphModel):
    total_symbols: int = 0
    total_relationships: int = 0
    cross_project_reference_count: int = 0
    average_complexity: float = 0.0
    language_distribution: dict[str, int] = Field(default_factory=dict)


class ProjectInfo(GraphModel):
    """Project-level summary"""

    project_id: str
    name: str
    path: str = "Unknown"
    target_framework: str = "Unknown"
    languages: list[str] = Field(default_factory=list)
    project_references: list[str] = Field(default_factory=list)
    role_distribution: dict[ArchitecturalRole, int] = Field(default_factory=dict)
    feature_boundaries: list[str] = Field(default_factory=list)
    metrics: ProjectMetrics = Field(default_factory=ProjectMetrics)


class GraphMetadata(GraphModel):
    """Summary statistics of one analysis run"""

    workspace_path: str = "Unknown"
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    analysis_duration_ms: float = 0.0
    resolver_name: str = "Unknown"
    total_projects: int = 0
    total_symbols: int = 0
    total_relationships: int = 0
    cross_project_relationships: int = 0
    cross_language_relationships: int = 0
    skipped_symbols: int = 0
    symbol_distribution: dict[SymbolKind, int] = Field(default_factory=dict)
    relationship_distribution: dict[RelationshipType, int] = Field(default_factory=dict)
    role_distribution: dict[ArchitecturalRole, int] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)


# ============================================================
# Graph document
# ============================================================


class UnifiedSemanticGraph(GraphModel):
    """
    Result document of one analysis run.

    Query helpers walk ``relationships`` directly; they are meant for
    inspection of a finished graph, not for hot loops.
    """

    nodes: dict[str, SymbolNode] = Field(default_factory=dict)
    relationships: list[Relationship] = Field(default_factory=list)
    project_info: dict[str, ProjectInfo] = Field(default_factory=dict)
    cross_project_dependencies: list[CrossProjectDependency] = Field(default_factory=list)
    metadata: GraphMetadata = Field(default_factory=GraphMetadata)

    # ------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------

    def get_dependents(self, symbol_id: str) -> list[SymbolNode]:
        """Nodes with an edge pointing at ``symbol_id``."""
        return [
            self.nodes[r.source_id]
            for r in self.relationships
            if r.target_id == symbol_id and r.source_id in self.nodes
        ]

    def get_dependencies(self, symbol_id: str) -> list[SymbolNode]:
        """Nodes that ``symbol_id`` has an edge to."""
        return [
            self.nodes[r.target_id]
            for r in self.relationships
            if r.source_id == symbol_id and r.target_id in self.nodes
        ]

    def get_feature_symbols(self, feature_name: str) -> list[SymbolNode]:
        return [n for n in self.nodes.values() if n.feature_boundary == feature_name]

    def find_dependency_path(self, from_id: str, to_id: str) -> list[SymbolNode] | None:
        """
        Shortest path along outgoing edges (BFS).

        Returns:
            Nodes from ``from_id`` to ``to_id`` inclusive, or None if unreachable
        """
        if from_id not in self.nodes or to_id not in self.nodes:
            return None

        adjacency: dict[str, list[str]] = {}
        for r in self.relationships:
            adjacency.setdefault(r.source_id, []).append(r.target_id)

        parents: dict[str, str | None] = {from_id: None}
        queue = deque([from_id])
        while queue:
            current = queue.popleft()
            if current == to_id:
                path = []
                cursor: str | None = current
                while cursor is not None:
                    path.append(self.nodes[cursor])
                    cursor = parents[cursor]
                return list(reversed(path))

            for neighbor in adjacency.get(current, []):
                if neighbor not in parents and neighbor in self.nodes:
                    parents[neighbor] = current
                    queue.append(neighbor)

        return None

    # ------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_json(cls, payload: str | bytes) -> "UnifiedSemanticGraph":
        return cls.model_validate_json(payload)
