"""
Unigraph Engine - semantic graph construction.

Usage:
    from unigraph_engine import SemanticSolutionAnalyzer, Workspace

    graph = await SemanticSolutionAnalyzer(service).analyze_solution(Workspace(path="Shop.sln"))
"""

from unigraph_engine.semantic_graph import (
    CancellationToken,
    SemanticSolutionAnalyzer,
    UnifiedSemanticGraph,
    Workspace,
    analyze_solution,
)

__all__ = [
    "CancellationToken",
    "SemanticSolutionAnalyzer",
    "UnifiedSemanticGraph",
    "Workspace",
    "analyze_solution",
]
