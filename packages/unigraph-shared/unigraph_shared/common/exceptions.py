"""
Unigraph Exception Hierarchy

Standardized exceptions for consistent error handling.

Usage guide:
    1. Recoverable error (one project, one node) → log, record, continue
    2. Unrecoverable error (workspace cannot be opened) → log, re-raise
    3. External error → wrap in a package exception

Example:
    try:
        projects = await service.enumerate_projects(workspace)
    except Exception as e:
        raise WorkspaceLoadError("Cannot enumerate projects") from e
"""

from typing import Any


class UnigraphError(Exception):
    """Base exception for all Unigraph errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize Unigraph error.

        Args:
            message: Human-readable error message
            details: Optional additional details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================
# Analysis Errors
# ============================================================


class AnalysisError(UnigraphError):
    """Semantic analysis failures."""

    pass


class WorkspaceLoadError(AnalysisError):
    """The workspace cannot be opened or its projects cannot be enumerated."""

    pass


class AnalysisCancelledError(AnalysisError):
    """Analysis was cancelled through its cancellation token."""

    pass


# ============================================================
# External Service Errors
# ============================================================


class ExternalServiceError(UnigraphError):
    """External collaborator failures."""

    pass


class SymbolResolutionError(ExternalServiceError):
    """The symbol resolution service failed to answer a query."""

    pass


# ============================================================
# Validation Errors
# ============================================================


class InvalidConfigurationError(UnigraphError):
    """Invalid configuration."""

    pass
