"""
Threaded Resolver Adapter

Lifts a synchronous resolver onto the event loop.

Most compiler front ends expose blocking APIs. This adapter provides the
async SymbolResolutionService interface by running each blocking call in a
worker thread with asyncio.to_thread(), so the analyzer can keep many
lookups in flight without blocking the loop.

Failures are re-raised as SymbolResolutionError with the original error
chained.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol, TypeVar

from unigraph_shared.common.exceptions import SymbolResolutionError
from unigraph_shared.common.observability import get_logger

from ..ports import ProjectHandle, ReferenceSite, SourceSpan, SymbolHandle, Workspace

logger = get_logger(__name__)

T = TypeVar("T")


class SyncSymbolResolver(Protocol):
    """Blocking counterpart of SymbolResolutionService."""

    def enumerate_projects(self, workspace: Workspace) -> list[ProjectHandle]: ...

    def enumerate_declared_symbols(self, project: ProjectHandle) -> list[SymbolHandle]: ...

    def find_references(self, symbol: SymbolHandle) -> list[ReferenceSite]: ...

    def find_implementations(self, symbol: SymbolHandle) -> list[SymbolHandle]: ...

    def find_derived_types(self, symbol: SymbolHandle) -> list[SymbolHandle]: ...

    def resolve_symbol_at_location(self, location: SourceSpan) -> SymbolHandle | None: ...


class ThreadedResolverAdapter:
    """
    Async facade over a SyncSymbolResolver.

    Usage:
        service = ThreadedResolverAdapter(MyBlockingResolver())
        graph = await SemanticSolutionAnalyzer(service).analyze_solution(workspace)
    """

    def __init__(self, resolver: SyncSymbolResolver, name: str | None = None):
        self.resolver = resolver
        self.name = name or type(resolver).__name__

    # ==================== Async Methods ====================

    async def enumerate_projects(self, workspace: Workspace) -> list[ProjectHandle]:
        return await self._run("enumerate_projects", self.resolver.enumerate_projects, workspace)

    async def enumerate_declared_symbols(self, project: ProjectHandle) -> list[SymbolHandle]:
        return await self._run("enumerate_declared_symbols", self.resolver.enumerate_declared_symbols, project)

    async def find_references(self, symbol: SymbolHandle) -> list[ReferenceSite]:
        return await self._run("find_references", self.resolver.find_references, symbol)

    async def find_implementations(self, symbol: SymbolHandle) -> list[SymbolHandle]:
        return await self._run("find_implementations", self.resolver.find_implementations, symbol)

    async def find_derived_types(self, symbol: SymbolHandle) -> list[SymbolHandle]:
        return await self._run("find_derived_types", self.resolver.find_derived_types, symbol)

    async def resolve_symbol_at_location(self, location: SourceSpan) -> SymbolHandle | None:
        return await self._run("resolve_symbol_at_location", self.resolver.resolve_symbol_at_location, location)

    # ==================== Helpers ====================

    async def _run(self, operation: str, func: Callable[..., T], argument) -> T:
        try:
            return await asyncio.to_thread(func, argument)
        except Exception as e:
            logger.debug("resolver_call_failed", resolver=self.name, operation=operation, error=str(e))
            raise SymbolResolutionError(
                f"{operation} failed: {e}",
                {"resolver": self.name, "operation": operation},
            ) from e
