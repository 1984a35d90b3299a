"""
Unigraph Shared - cross-cutting infrastructure.

This package contains:
- common/: exceptions and structured logging
- config/: pydantic-settings configuration groups
"""

from unigraph_shared.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
