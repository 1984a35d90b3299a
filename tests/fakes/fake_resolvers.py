"""
Fake resolution services for failure, concurrency and cancellation tests.

All of them delegate to an InMemorySymbolResolutionService.
"""

import asyncio

from unigraph_engine.semantic_graph.adapters import InMemorySymbolResolutionService
from unigraph_engine.semantic_graph.application import CancellationToken
from unigraph_engine.semantic_graph.ports import ProjectHandle, SymbolHandle, Workspace


class DelegatingResolver:
    """Forwards every call to ``inner``; subclasses override what they fake."""

    def __init__(self, inner: InMemorySymbolResolutionService):
        self.inner = inner
        self.name = f"fake({inner.name})"

    async def enumerate_projects(self, workspace: Workspace):
        return await self.inner.enumerate_projects(workspace)

    async def enumerate_declared_symbols(self, project: ProjectHandle):
        return await self.inner.enumerate_declared_symbols(project)

    async def find_references(self, symbol: SymbolHandle):
        return await self.inner.find_references(symbol)

    async def find_implementations(self, symbol: SymbolHandle):
        return await self.inner.find_implementations(symbol)

    async def find_derived_types(self, symbol: SymbolHandle):
        return await self.inner.find_derived_types(symbol)

    async def resolve_symbol_at_location(self, location):
        return await self.inner.resolve_symbol_at_location(location)


class FailingResolver(DelegatingResolver):
    """
    Raises for selected calls.

    Args:
        fail_enumeration: enumerate_projects raises
        failing_projects: project ids whose symbol enumeration raises
        failing_references: display names whose find_references raises
    """

    def __init__(
        self,
        inner: InMemorySymbolResolutionService,
        fail_enumeration: bool = False,
        failing_projects: set[str] | None = None,
        failing_references: set[str] | None = None,
    ):
        super().__init__(inner)
        self.fail_enumeration = fail_enumeration
        self.failing_projects = failing_projects or set()
        self.failing_references = failing_references or set()

    async def enumerate_projects(self, workspace: Workspace):
        if self.fail_enumeration:
            raise ConnectionError("solution could not be opened")
        return await super().enumerate_projects(workspace)

    async def enumerate_declared_symbols(self, project: ProjectHandle):
        if project.project_id in self.failing_projects:
            raise RuntimeError(f"compilation failed for {project.project_id}")
        return await super().enumerate_declared_symbols(project)

    async def find_references(self, symbol: SymbolHandle):
        if symbol.display_name in self.failing_references:
            raise TimeoutError(f"reference search timed out for {symbol.display_name}")
        return await super().find_references(symbol)


class CountingResolver(DelegatingResolver):
    """Tracks calls per operation and the peak number of in-flight calls."""

    def __init__(self, inner: InMemorySymbolResolutionService):
        super().__init__(inner)
        self.calls: dict[str, int] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    async def _track(self, operation: str, coro):
        self.calls[operation] = self.calls.get(operation, 0) + 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            return await coro
        finally:
            self.in_flight -= 1

    async def enumerate_declared_symbols(self, project: ProjectHandle):
        return await self._track("enumerate_declared_symbols", super().enumerate_declared_symbols(project))

    async def find_references(self, symbol: SymbolHandle):
        return await self._track("find_references", super().find_references(symbol))

    async def find_implementations(self, symbol: SymbolHandle):
        return await self._track("find_implementations", super().find_implementations(symbol))

    async def find_derived_types(self, symbol: SymbolHandle):
        return await self._track("find_derived_types", super().find_derived_types(symbol))


class CancellingResolver(DelegatingResolver):
    """Cancels ``token`` on the first reference lookup."""

    def __init__(self, inner: InMemorySymbolResolutionService, token: CancellationToken):
        super().__init__(inner)
        self.token = token

    async def find_references(self, symbol: SymbolHandle):
        self.token.cancel("user requested stop")
        return await super().find_references(symbol)
