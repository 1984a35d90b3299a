"""
Symbol Resolution Service Port

Protocol and handle types for the external semantic engine (a compiler's
semantic-analysis front end). The graph core never talks to a concrete
compiler; adapters implement this port per language/runtime.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from .domain.models import Accessibility, Modifier, SymbolKind, TypeCategory


@dataclass(frozen=True)
class SourceSpan:
    """
    Source code location reported by the resolver.

    Attributes:
        file_path: File path as reported by the resolver
        line: Start line (1-indexed)
        column: Start column (0-indexed)
        end_line: End line (defaults to ``line``)
        end_column: End column (defaults to ``column``)
    """

    file_path: str
    line: int
    column: int = 0
    end_line: int | None = None
    end_column: int | None = None

    def contains(self, other: "SourceSpan") -> bool:
        """Check if ``other`` lies inside this span (same file)."""
        if self.file_path != other.file_path:
            return False
        start = (self.line, self.column)
        end = (self.end_line or self.line, self.end_column if self.end_column is not None else self.column)
        return start <= (other.line, other.column) <= end

    @property
    def extent(self) -> tuple[int, int]:
        """(lines, columns) covered; smaller means tighter."""
        end_line = self.end_line or self.line
        end_column = self.end_column if self.end_column is not None else self.column
        return (end_line - self.line, end_column - self.column)


@dataclass(eq=False)
class SymbolHandle:
    """
    Opaque handle to a declared program entity.

    Two handles denote the same symbol when their containing assembly and
    display form match, so handles from separate lookups compare equal.

    Attributes:
        name: Simple name ("OrderService")
        display_name: Fully qualified display form ("Shop.Core.OrderService")
        kind: Symbol kind
        containing_assembly: Assembly / module name, None when unknown
        containing_namespace: Namespace display form
        type_category: Class/Interface/... (Type kind only)
        accessibility: Declared accessibility
        modifiers: Declared modifiers
        location: Declaration site, None for metadata-only symbols
        is_implicitly_declared: Compiler-synthesized symbol
        base_type: Direct base type (Type kind)
        interfaces: Directly implemented interfaces (Type kind)
        generic_parameters: Type parameter names, in declaration order
        members: Declared members (Type kind)
        declared_type: Type of a field/property/parameter/event
        return_type: Return type of a method, None for void
        parameters: Parameter symbols of a method
        overridden: Overridden member (method with ``override``)
        is_read_only: Read-only field
        cyclomatic_complexity: Reported complexity, when the resolver computes it
    """

    name: str
    display_name: str
    kind: SymbolKind
    containing_assembly: str | None = None
    containing_namespace: str | None = None
    type_category: TypeCategory | None = None
    accessibility: Accessibility = Accessibility.PUBLIC
    modifiers: frozenset[Modifier] = frozenset()
    location: SourceSpan | None = None
    is_implicitly_declared: bool = False
    base_type: "SymbolHandle | None" = None
    interfaces: tuple["SymbolHandle", ...] = ()
    generic_parameters: tuple[str, ...] = ()
    members: tuple["SymbolHandle", ...] = ()
    declared_type: "SymbolHandle | None" = None
    return_type: "SymbolHandle | None" = None
    parameters: tuple["SymbolHandle", ...] = ()
    overridden: "SymbolHandle | None" = None
    is_read_only: bool = False
    cyclomatic_complexity: int | None = None

    @property
    def identity(self) -> tuple[str | None, str]:
        return (self.containing_assembly, self.display_name)

    @property
    def is_abstract(self) -> bool:
        return Modifier.ABSTRACT in self.modifiers

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers

    @property
    def is_interface(self) -> bool:
        return self.kind == SymbolKind.TYPE and self.type_category == TypeCategory.INTERFACE

    @property
    def is_class(self) -> bool:
        return self.kind == SymbolKind.TYPE and self.type_category in (TypeCategory.CLASS, TypeCategory.RECORD)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymbolHandle):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def __repr__(self) -> str:
        return f"SymbolHandle({self.kind.value}:{self.containing_assembly}::{self.display_name})"


@dataclass(frozen=True)
class ProjectHandle:
    """One project (compilation unit) in the workspace"""

    project_id: str
    name: str
    assembly_name: str | None = None
    path: str | None = None
    target_framework: str | None = None
    languages: tuple[str, ...] = ()
    project_references: tuple[str, ...] = ()


class ReferenceContext(str, Enum):
    """Syntactic context of a reference site, when the resolver knows it"""

    CALL = "call"
    PROPERTY_ACCESS = "property_access"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ReferenceSite:
    """
    One place that references a symbol.

    Attributes:
        location: Reference location
        referencing_symbol: Enclosing symbol of the site; when None the
            collector asks the resolver via ``resolve_symbol_at_location``
        context: Call / access context, UNKNOWN when not determined
    """

    location: SourceSpan
    referencing_symbol: SymbolHandle | None = None
    context: ReferenceContext = ReferenceContext.UNKNOWN


@dataclass
class Workspace:
    """Handle passed to ``enumerate_projects`` (a solution, a build root, ...)"""

    path: str
    options: dict[str, Any] = field(default_factory=dict)


class SymbolResolutionService(Protocol):
    """
    External symbol resolution interface.

    All calls may suspend (I/O-bound); results are assumed deterministic
    for a fixed input snapshot.
    """

    name: str

    async def enumerate_projects(self, workspace: Workspace) -> list[ProjectHandle]:
        """List projects of the workspace."""
        ...

    async def enumerate_declared_symbols(self, project: ProjectHandle) -> list[SymbolHandle]:
        """List symbols declared in the project's sources."""
        ...

    async def find_references(self, symbol: SymbolHandle) -> list[ReferenceSite]:
        """All places referencing ``symbol``."""
        ...

    async def find_implementations(self, symbol: SymbolHandle) -> list[SymbolHandle]:
        """Implementers of an interface or abstract member."""
        ...

    async def find_derived_types(self, symbol: SymbolHandle) -> list[SymbolHandle]:
        """Classes deriving from ``symbol`` (transitively, as the resolver reports them)."""
        ...

    async def resolve_symbol_at_location(self, location: SourceSpan) -> SymbolHandle | None:
        """Innermost declared symbol enclosing ``location``."""
        ...
