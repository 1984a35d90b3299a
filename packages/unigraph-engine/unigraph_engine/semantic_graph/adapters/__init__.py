"""SymbolResolutionService implementations."""

from .in_memory import InMemorySymbolResolutionService
from .thread_adapter import SyncSymbolResolver, ThreadedResolverAdapter

__all__ = ["InMemorySymbolResolutionService", "SyncSymbolResolver", "ThreadedResolverAdapter"]
