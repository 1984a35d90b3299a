"""
In-Memory Symbol Resolution Service

Answers resolver queries from a pre-computed snapshot of projects, declared
symbols and reference sites. Used by callers that already extracted facts
(e.g. from a build server dump) and by the test suite.

Implementations and derived types are derived from the declared handles:
- implementations of an interface: types listing it in ``interfaces``
- implementations of an abstract member: members whose ``overridden`` is it
- derived types: types with the symbol anywhere in their base-type chain
"""

from collections.abc import Iterable, Mapping

from unigraph_shared.common.exceptions import WorkspaceLoadError

from ..domain.models import SymbolKind
from ..ports import ProjectHandle, ReferenceSite, SourceSpan, SymbolHandle, Workspace


class InMemorySymbolResolutionService:
    """
    Snapshot-backed SymbolResolutionService.

    Example:
        service = InMemorySymbolResolutionService(
            projects=[core, web],
            symbols={"core": [order_service, *order_service.members], "web": [...]},
            references={order_service: [ReferenceSite(location=span, referencing_symbol=controller)]},
        )
    """

    name = "in-memory"

    def __init__(
        self,
        projects: Iterable[ProjectHandle],
        symbols: Mapping[str, Iterable[SymbolHandle]] | None = None,
        references: Mapping[SymbolHandle, Iterable[ReferenceSite]] | None = None,
        workspace_path: str | None = None,
    ):
        self.projects = list(projects)
        self.symbols = {project_id: list(handles) for project_id, handles in (symbols or {}).items()}
        self.references: dict[SymbolHandle, list[ReferenceSite]] = {}
        for target, sites in (references or {}).items():
            self.references.setdefault(target, []).extend(sites)
        self.workspace_path = workspace_path

    def add_reference(self, target: SymbolHandle, site: ReferenceSite) -> None:
        self.references.setdefault(target, []).append(site)

    @property
    def all_symbols(self) -> list[SymbolHandle]:
        return [s for project in self.projects for s in self.symbols.get(project.project_id, [])]

    # ============================================================
    # SymbolResolutionService
    # ============================================================

    async def enumerate_projects(self, workspace: Workspace) -> list[ProjectHandle]:
        if self.workspace_path is not None and workspace.path != self.workspace_path:
            raise WorkspaceLoadError(
                f"Unknown workspace: {workspace.path}",
                {"expected": self.workspace_path},
            )
        return list(self.projects)

    async def enumerate_declared_symbols(self, project: ProjectHandle) -> list[SymbolHandle]:
        return list(self.symbols.get(project.project_id, []))

    async def find_references(self, symbol: SymbolHandle) -> list[ReferenceSite]:
        return list(self.references.get(symbol, []))

    async def find_implementations(self, symbol: SymbolHandle) -> list[SymbolHandle]:
        if symbol.is_interface:
            return [s for s in self.all_symbols if s.kind == SymbolKind.TYPE and symbol in s.interfaces]
        return [s for s in self.all_symbols if s.overridden == symbol]

    async def find_derived_types(self, symbol: SymbolHandle) -> list[SymbolHandle]:
        return [s for s in self.all_symbols if s.kind == SymbolKind.TYPE and _derives_from(s, symbol)]

    async def resolve_symbol_at_location(self, location: SourceSpan) -> SymbolHandle | None:
        enclosing = [s for s in self.all_symbols if s.location is not None and s.location.contains(location)]
        if not enclosing:
            return None
        return min(enclosing, key=lambda s: s.location.extent)


def _derives_from(candidate: SymbolHandle, base: SymbolHandle) -> bool:
    seen = {candidate}
    current = candidate.base_type
    while current is not None and current not in seen:
        if current == base:
            return True
        seen.add(current)
        current = current.base_type
    return False
