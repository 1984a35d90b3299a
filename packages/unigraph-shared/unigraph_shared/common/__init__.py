"""
Common cross-cutting utilities.

Logging and exceptions may be imported by every layer, including domain code.
"""

from unigraph_shared.common.exceptions import (
    AnalysisCancelledError,
    AnalysisError,
    ExternalServiceError,
    InvalidConfigurationError,
    SymbolResolutionError,
    UnigraphError,
    WorkspaceLoadError,
)
from unigraph_shared.common.observability import (
    BatchLogger,
    bind_context,
    clear_context,
    get_logger,
    setup_logging,
)

__all__ = [
    # Exceptions
    "UnigraphError",
    "AnalysisError",
    "WorkspaceLoadError",
    "AnalysisCancelledError",
    "ExternalServiceError",
    "SymbolResolutionError",
    "InvalidConfigurationError",
    # Observability
    "BatchLogger",
    "bind_context",
    "clear_context",
    "get_logger",
    "setup_logging",
]
