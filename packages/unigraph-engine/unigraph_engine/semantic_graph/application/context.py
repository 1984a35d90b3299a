"""
Analysis Context

Per-call state of one ``analyze_solution`` run: the resolution service, the
identity registry, the node map and the relationship store. Built fresh for
every call and dropped with it; nothing here is process-wide.
"""

import asyncio
import threading
from collections.abc import Awaitable, Callable
from typing import TypeVar

from unigraph_shared.common.exceptions import AnalysisCancelledError
from unigraph_shared.config import Settings

from ..domain.languages import file_extension
from ..domain.models import Relationship, RelationshipType, SourceLocation, SymbolNode
from ..infrastructure.identity_registry import SymbolIdentityRegistry
from ..infrastructure.relationship_store import RelationshipStore
from ..ports import SymbolHandle, SymbolResolutionService

T = TypeVar("T")


class CancellationToken:
    """
    Cooperative cancellation signal.

    Thread-safe, so a caller on another thread (or a sync resolver running
    in a worker thread) can cancel a running analysis.
    """

    def __init__(self):
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "cancelled") -> None:
        self.reason = reason
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise AnalysisCancelledError("Analysis cancelled", {"reason": self.reason})


class AnalysisContext:
    """
    Shared state of one analysis.

    The node map and relationship store are the only shared mutable state.
    Writes are ``setdefault``-style inserts: the first writer wins and later
    writers observe its value.
    """

    def __init__(
        self,
        service: SymbolResolutionService,
        settings: Settings,
        cancellation: CancellationToken | None = None,
    ):
        self.service = service
        self.settings = settings
        self.cancellation = cancellation or CancellationToken()
        self.registry = SymbolIdentityRegistry()
        self.nodes: dict[str, SymbolNode] = {}
        self.relationships = RelationshipStore()
        self.errors: list[str] = []
        self.skipped_symbols = 0
        self._semaphore = asyncio.Semaphore(settings.analysis.max_concurrency)

    # ------------------------------------------------------------
    # External calls
    # ------------------------------------------------------------

    async def call(self, func: Callable[..., Awaitable[T]], *args) -> T:
        """
        Run one resolution service call under the concurrency bound.

        Cancellation is checked before the call and again after it; an
        in-flight call always completes.
        """
        self.cancellation.raise_if_cancelled()
        async with self._semaphore:
            result = await func(*args)
        self.cancellation.raise_if_cancelled()
        return result

    # ------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------

    def register_node(self, node: SymbolNode) -> SymbolNode:
        """Insert ``node`` unless its id is taken; return the stored node."""
        return self.nodes.setdefault(node.id, node)

    def node_id_for(self, symbol: SymbolHandle | None) -> str | None:
        """Id of the node built for ``symbol``, None if it has no node."""
        symbol_id = self.registry.resolve(symbol)
        if symbol_id is None or symbol_id not in self.nodes:
            return None
        return symbol_id

    # ------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------

    def build_relationship(
        self,
        source_id: str,
        target_id: str,
        relationship_type: RelationshipType,
        location: SourceLocation | None = None,
    ) -> Relationship | None:
        """
        Create an edge between two existing nodes.

        Returns:
            The relationship, or None for self edges and dangling endpoints
        """
        if source_id == target_id:
            return None
        source = self.nodes.get(source_id)
        target = self.nodes.get(target_id)
        if source is None or target is None:
            return None

        return Relationship(
            source_id=source_id,
            target_id=target_id,
            type=relationship_type,
            location=location,
            is_cross_project=source.project_id != target.project_id,
            is_cross_language=_is_cross_language(source, target),
        )

    def record_error(self, message: str) -> None:
        self.errors.append(message)


def _is_cross_language(source: SymbolNode, target: SymbolNode) -> bool:
    if source.location is None or target.location is None:
        return False
    return file_extension(source.location.file) != file_extension(target.location.file)
