"""Analysis orchestration."""

from .analyzer import SemanticSolutionAnalyzer, analyze_solution
from .context import AnalysisContext, CancellationToken

__all__ = ["AnalysisContext", "CancellationToken", "SemanticSolutionAnalyzer", "analyze_solution"]
