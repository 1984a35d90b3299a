"""Configuration (pydantic-settings, UNIGRAPH_ prefix)."""

from unigraph_shared.config.groups import AnalysisConfig, BoundaryConfig, ObservabilityConfig
from unigraph_shared.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "AnalysisConfig",
    "BoundaryConfig",
    "ObservabilityConfig",
]
